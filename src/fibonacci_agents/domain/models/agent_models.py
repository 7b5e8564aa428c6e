"""Domain models for agents and conversation turns."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(Enum):
    """Message roles in the group conversation."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """
    Immutable conversation turn.

    ``metadata`` is stored as a read-only copy of the mapping it was built from.
    """

    role: MessageRole
    content: str
    author_name: str | None = None
    timestamp: datetime = None
    metadata: Mapping[str, Any] | None = None

    def __post_init__(self):
        if self.timestamp is None:
            object.__setattr__(self, "timestamp", datetime.now(UTC))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @property
    def is_agent_message(self) -> bool:
        """Whether the turn was produced by an agent."""
        return self.role == MessageRole.ASSISTANT


class AgentDefinition(BaseModel):
    """A named conversational role: identity, instructions and allowed tools."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    instructions: str
    description: str = ""
    tools: tuple[str, ...] = ()

    def can_use(self, tool_name: str) -> bool:
        """Check whether the agent is allowed to call ``tool_name``."""
        return tool_name in self.tools
