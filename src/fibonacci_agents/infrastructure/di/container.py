"""Dependency injection container for wiring the application together."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fibonacci_agents.application.services import FibonacciApp
from fibonacci_agents.config import Settings
from fibonacci_agents.domain.interfaces import IChatCompletionService
from fibonacci_agents.domain.tools import FibonacciToolProvider
from fibonacci_agents.infrastructure.completion.mock_chat_completion import MockChatCompletionService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DIContainer:
    """Simple dependency injection container."""

    def __init__(self):
        self._factories: dict[type, Callable[[], Any]] = {}
        self._singletons: dict[type, Any] = {}

    def register_singleton(self, service_type: type[T], instance: T) -> None:
        """Register a singleton instance."""
        self._singletons[service_type] = instance

    def register_transient(self, service_type: type[T], factory: Callable[[], T]) -> None:
        """Register a transient service factory."""
        self._factories[service_type] = factory

    def is_registered(self, service_type: type) -> bool:
        return service_type in self._singletons or service_type in self._factories

    def get(self, service_type: type[T]) -> T:
        """
        Get a service instance.

        Raises:
            KeyError: If nothing is registered for ``service_type``
        """
        if service_type in self._singletons:
            return self._singletons[service_type]

        if service_type in self._factories:
            return self._factories[service_type]()

        raise KeyError(f"Service {service_type.__name__} is not registered")


def create_completion_service(settings: Settings, tool_provider: FibonacciToolProvider) -> IChatCompletionService:
    """
    Pick the completion backend from configuration.

    Raises:
        ConfigurationValidationError: If Azure OpenAI is selected but not configured
    """
    if settings.app.use_mock_completion:
        logger.info("Using the offline mock chat completion service")
        return MockChatCompletionService(tool_provider, latency=settings.app.mock_latency)

    settings.azure.require()

    # Imported lazily so the offline mode never touches the Azure SDKs
    from fibonacci_agents.infrastructure.completion.azure_chat_completion import (
        AzureOpenAIChatCompletionService,
    )

    return AzureOpenAIChatCompletionService(settings.azure, tool_provider, settings.resilience)


def build_container(settings: Settings) -> DIContainer:
    """Register the tool provider, completion backend and a ``FibonacciApp`` factory."""
    container = DIContainer()
    tool_provider = FibonacciToolProvider()
    container.register_singleton(FibonacciToolProvider, tool_provider)
    container.register_singleton(IChatCompletionService, create_completion_service(settings, tool_provider))
    container.register_transient(
        FibonacciApp,
        lambda: FibonacciApp.create(container.get(IChatCompletionService), settings.group_chat),
    )
    return container
