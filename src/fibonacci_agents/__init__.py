"""Fibonacci Agents - multi-agent Fibonacci assistant."""

from fibonacci_agents.observability import setup_logging

from .config import settings

__all__ = ["settings", "setup_logging"]
