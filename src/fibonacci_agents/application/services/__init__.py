"""Application services."""

from .fibonacci_app import FibonacciApp
from .group_chat import AgentGroupChat

__all__ = [
    "AgentGroupChat",
    "FibonacciApp",
]
