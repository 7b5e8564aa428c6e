"""Domain exceptions and error handling."""

import time
from typing import Any


class FibonacciAgentsError(Exception):
    """Base exception for all Fibonacci agents errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        is_retryable: bool = False,
        retry_after: float | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.is_retryable = is_retryable
        self.retry_after = retry_after
        self.timestamp = time.time()

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "is_retryable": self.is_retryable,
            "retry_after": self.retry_after,
            "timestamp": self.timestamp,
        }


class ConfigurationError(FibonacciAgentsError):
    """Raised when there's a configuration issue."""

    pass


class ConfigurationValidationError(ConfigurationError):
    """Raised when required configuration values are missing or malformed."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        missing_keys: list[str] | None = None,
        **kwargs,
    ):
        super().__init__(message, is_retryable=False, **kwargs)
        self.config_key = config_key
        self.missing_keys = missing_keys or []
        if config_key:
            self.details["config_key"] = config_key
        if self.missing_keys:
            self.details["missing_keys"] = self.missing_keys


class AgentError(FibonacciAgentsError):
    """Base exception for agent-related errors."""

    pass


class AgentNotFoundError(AgentError):
    """Raised when an agent is not part of the roster."""

    pass


class AgentInitializationError(AgentError):
    """Raised when the completion backend for agents cannot be set up."""

    pass


class AgentExecutionError(AgentError):
    """Raised when producing an agent reply fails."""

    def __init__(
        self,
        message: str,
        agent_name: str | None = None,
        execution_time: float | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.agent_name = agent_name
        self.execution_time = execution_time
        if agent_name:
            self.details["agent_name"] = agent_name


class AgentTimeoutError(AgentError):
    """Raised when an agent reply takes too long."""

    def __init__(self, message: str, timeout_duration: float | None = None, **kwargs):
        super().__init__(message, is_retryable=True, **kwargs)
        self.timeout_duration = timeout_duration
        if timeout_duration:
            self.details["timeout_duration"] = timeout_duration


class AgentConnectionError(AgentError):
    """Raised when the completion backend cannot be reached."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, is_retryable=True, **kwargs)


class ToolError(FibonacciAgentsError):
    """Base exception for tool-related errors."""

    pass


class ToolNotFoundError(ToolError):
    """Raised when a tool is not registered."""

    pass


class ToolExecutionError(ToolError):
    """Raised when a tool is invoked with unusable arguments."""

    def __init__(self, message: str, tool_name: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.tool_name = tool_name
        if tool_name:
            self.details["tool_name"] = tool_name


class SequenceParseError(ToolError):
    """Raised when textual input cannot be parsed into a sequence of integers."""

    def __init__(self, message: str, token: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.token = token
        if token is not None:
            self.details["token"] = token


class APIError(FibonacciAgentsError):
    """Base exception for errors reported by the completion API."""

    def __init__(self, message: str, status_code: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        if status_code is not None:
            self.details["status_code"] = status_code


class AuthenticationError(APIError):
    """Raised when authentication against the completion API fails."""

    pass


class RateLimitError(APIError):
    """Raised when the completion API rate limit is exceeded."""

    def __init__(self, message: str, retry_after: float | None = None, **kwargs):
        super().__init__(message, is_retryable=True, retry_after=retry_after, **kwargs)

