"""Pydantic models for formatted response content."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class TextBlock(BaseModel):
    """A span of prose or markdown between fenced code regions."""

    type: Literal["text"] = Field(
        default="text",
        description="Block type identifier"
    )

    text: str = Field(..., description="Literal text content")

    model_config = {"frozen": True}


class CodeBlock(BaseModel):
    """
    A fenced code region.

    The source keeps the trailing newline that precedes the closing fence,
    so renderers can show it exactly as the model produced it.
    """

    type: Literal["code"] = Field(
        default="code",
        description="Block type identifier"
    )

    language: str = Field(
        default="text",
        description="Language tag from the opening fence ('text' when absent)"
    )

    source: str = Field(..., description="Code between the fences")

    model_config = {"frozen": True}


ContentBlock = Annotated[Union[TextBlock, CodeBlock], Field(discriminator="type")]
