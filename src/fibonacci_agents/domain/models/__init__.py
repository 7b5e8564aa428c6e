"""Domain models."""

from .agent_models import AgentDefinition, Message, MessageRole
from .conversation_models import Transcript
from .tool_models import SequenceValidationResult

__all__ = [
    "AgentDefinition",
    "Message",
    "MessageRole",
    "SequenceValidationResult",
    "Transcript",
]
