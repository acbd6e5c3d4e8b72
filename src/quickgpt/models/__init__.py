"""Pydantic data models for quickgpt."""

from quickgpt.models.content import CodeBlock, ContentBlock, TextBlock
from quickgpt.models.config import ChatRequestConfig, Config, LLMConfig
from quickgpt.models.outcome import ChatOutcome, OutcomeKind, TransportErrorKind

__all__ = [
    "ChatOutcome",
    "ChatRequestConfig",
    "CodeBlock",
    "Config",
    "ContentBlock",
    "LLMConfig",
    "OutcomeKind",
    "TextBlock",
    "TransportErrorKind",
]
