"""Prompt and conversation history kept in a single JSON document."""

import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from quickgpt.models.history import ConversationEntry, HistoryDocument
from quickgpt.utils.logging import get_logger


logger = get_logger(__name__)

MAX_RECENT_PROMPTS = 15


def default_history_path() -> Path:
    return Path.home() / ".local" / "share" / "quickgpt" / "history.json"


def atomic_write(path: Path, content: str) -> None:
    """
    Atomically write content to file with temp-file-rename pattern.

    Args:
        path: Target file path
        content: Content to write

    Raises:
        OSError: On file I/O errors
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.parent / f".{path.name}.tmp.{os.getpid()}"

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        temp_path.replace(path)

    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


class HistoryStore:
    """
    Stores the last prompt, recent prompts and past conversations.

    Every operation reads the document from disk and writes it back, so
    several processes see each other's updates. The store also tracks the
    conversation started or continued most recently in this process, which
    add_interaction() extends.

    Example:
        >>> store = HistoryStore()
        >>> store.record_prompt("What is BFS?")
        >>> store.recent_prompts()
        ['What is BFS?']
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize history store.

        Args:
            path: History file location (defaults to ~/.local/share/quickgpt/history.json)
        """
        self.path = path or default_history_path()
        self._current_id: Optional[str] = None

    def _load(self) -> HistoryDocument:
        if not self.path.exists():
            return HistoryDocument()

        try:
            return HistoryDocument.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError, OSError) as e:
            logger.warning("history_load_failed", path=str(self.path), error=str(e))
            return HistoryDocument()

    def _save(self, document: HistoryDocument) -> None:
        atomic_write(self.path, document.model_dump_json(indent=2))

    # Prompts

    def record_prompt(self, prompt: str) -> None:
        """
        Remember a prompt as the last one and move it to the front of the recent list.

        Duplicates are removed and the list is capped at 15 entries.
        """
        document = self._load()
        document.last_prompt = prompt

        recent = [p for p in document.recent_prompts if p != prompt]
        recent.insert(0, prompt)
        document.recent_prompts = recent[:MAX_RECENT_PROMPTS]

        self._save(document)
        logger.debug("prompt_recorded", recent_count=len(document.recent_prompts))

    def last_prompt(self) -> Optional[str]:
        return self._load().last_prompt

    def recent_prompts(self) -> list[str]:
        return self._load().recent_prompts

    # Conversations

    @property
    def current_conversation(self) -> Optional[ConversationEntry]:
        if self._current_id is None:
            return None
        return self.get_conversation(self._current_id)

    def conversations(self) -> list[ConversationEntry]:
        """All conversations, most recent first."""
        return self._load().conversations

    def get_conversation(self, conversation_id: str) -> Optional[ConversationEntry]:
        for entry in self._load().conversations:
            if entry.id == conversation_id:
                return entry
        return None

    def start_conversation(
        self,
        system_prompt: str,
        user_prompt: str,
        response: str,
        model: str,
    ) -> ConversationEntry:
        """
        Create a conversation, make it current and put it at the top of the history.

        Returns:
            The new conversation entry
        """
        entry = ConversationEntry.create(system_prompt, user_prompt, response, model)

        document = self._load()
        document.conversations.insert(0, entry)
        self._save(document)

        self._current_id = entry.id
        logger.info("conversation_started", conversation_id=entry.id, model=model)
        return entry

    def continue_conversation(
        self,
        conversation_id: str,
        user_prompt: str,
        response: str,
    ) -> Optional[ConversationEntry]:
        """
        Append a prompt/response pair and move the conversation to the top.

        Returns:
            The updated entry, or None if no conversation has that ID
        """
        document = self._load()

        for index, entry in enumerate(document.conversations):
            if entry.id == conversation_id:
                break
        else:
            logger.warning("conversation_not_found", conversation_id=conversation_id)
            return None

        entry = document.conversations.pop(index)
        entry.add_message("user", user_prompt)
        entry.add_message("assistant", response)
        document.conversations.insert(0, entry)
        self._save(document)

        self._current_id = entry.id
        logger.info(
            "conversation_continued",
            conversation_id=entry.id,
            message_count=len(entry.messages),
        )
        return entry

    def add_interaction(
        self,
        system_prompt: str,
        user_prompt: str,
        response: str,
        model: str,
    ) -> ConversationEntry:
        """Extend the current conversation, or start one if there is none."""
        if self._current_id is not None:
            entry = self.continue_conversation(self._current_id, user_prompt, response)
            if entry is not None:
                return entry
        return self.start_conversation(system_prompt, user_prompt, response, model)

    def delete_conversation(self, conversation_id: str) -> bool:
        """
        Remove a conversation.

        Returns:
            True if a conversation was removed
        """
        document = self._load()
        remaining = [c for c in document.conversations if c.id != conversation_id]
        if len(remaining) == len(document.conversations):
            return False

        document.conversations = remaining
        self._save(document)

        if self._current_id == conversation_id:
            self._current_id = None

        logger.info("conversation_deleted", conversation_id=conversation_id)
        return True

    def clear_history(self) -> None:
        """Remove all conversations. Prompts are kept."""
        document = self._load()
        document.conversations = []
        self._save(document)
        self._current_id = None
        logger.info("history_cleared")
