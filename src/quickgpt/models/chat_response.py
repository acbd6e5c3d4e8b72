"""Pydantic schema for chat-completion response bodies."""

from pydantic import BaseModel, Field


class ChoiceMessage(BaseModel):
    """Assistant message inside a completion choice."""

    content: str = Field(..., description="Assistant reply text")


class Choice(BaseModel):
    """A single completion choice."""

    message: ChoiceMessage


class ChatCompletionResponse(BaseModel):
    """
    Success body of an OpenAI-compatible chat-completions call.

    Only `choices[].message.content` is read; other fields (id, usage,
    finish_reason, ...) are ignored.
    """

    choices: list[Choice] = Field(..., description="Completion choices (may be empty)")

    @property
    def first_content(self) -> str | None:
        """Content of the first choice, or None when there are no choices."""
        if not self.choices:
            return None
        return self.choices[0].message.content
