"""Domain interfaces and abstract base classes."""

from .chat_completion_interface import IChatCompletionService
from .service_interface import IService
from .tool_interface import ITool, IToolProvider

__all__ = [
    "IChatCompletionService",
    "IService",
    "ITool",
    "IToolProvider",
]
