"""Conversation history models."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


TITLE_LENGTH = 50


class Message(BaseModel):
    """One message of a stored conversation."""

    role: Literal["system", "user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ConversationEntry(BaseModel):
    """
    A stored conversation: the system prompt followed by user/assistant turns.

    Entries are mutable so the history store can append turns in place;
    `timestamp` tracks the most recent interaction.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    messages: list[Message] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)
    model: str
    title: str = ""

    @classmethod
    def create(
        cls,
        system_prompt: str,
        user_prompt: str,
        response: str,
        model: str,
    ) -> "ConversationEntry":
        """
        Start a conversation from a first prompt/response pair.

        The title is the first 50 characters of the prompt, stripped.
        """
        return cls(
            model=model,
            title=user_prompt[:TITLE_LENGTH].strip(),
            messages=[
                Message(role="system", content=system_prompt),
                Message(role="user", content=user_prompt),
                Message(role="assistant", content=response),
            ],
        )

    def add_message(self, role: Literal["system", "user", "assistant"], content: str) -> None:
        """Append a message and mark the conversation as most recently used."""
        self.messages.append(Message(role=role, content=content))
        self.timestamp = datetime.now()

    @property
    def last_user_prompt(self) -> Optional[str]:
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return None

    @property
    def last_assistant_response(self) -> Optional[str]:
        for message in reversed(self.messages):
            if message.role == "assistant":
                return message.content
        return None


class HistoryDocument(BaseModel):
    """On-disk layout of the history file."""

    last_prompt: Optional[str] = None
    recent_prompts: list[str] = Field(default_factory=list)
    conversations: list[ConversationEntry] = Field(default_factory=list)
