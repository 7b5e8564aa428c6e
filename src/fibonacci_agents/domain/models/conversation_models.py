"""Transcript model owned by the group conversation driver."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field, PrivateAttr

from .agent_models import Message


class Transcript(BaseModel):
    """Append-only message history for one conversational exchange."""

    transcript_id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    _messages: list[Message] = PrivateAttr(default_factory=list)

    def add_message(self, message: Message) -> None:
        """Append a single message."""
        self._messages.append(message)
        self.updated_at = datetime.now(UTC)

    @property
    def messages(self) -> list[Message]:
        """Copy of the messages in order."""
        return self._messages.copy()

    @property
    def agent_messages(self) -> list[Message]:
        """Messages authored by agents, in order."""
        return [message for message in self._messages if message.is_agent_message]

    @property
    def last_message(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def clear(self) -> None:
        """Drop the whole history. Individual messages are never removed."""
        self._messages.clear()
        self.updated_at = datetime.now(UTC)

    def __len__(self) -> int:
        return len(self._messages)
