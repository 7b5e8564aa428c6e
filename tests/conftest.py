"""Pytest configuration and fixtures for the Fibonacci agents tests."""

from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest

from fibonacci_agents.application.agents.roster import create_agent_roster
from fibonacci_agents.application.services import AgentGroupChat
from fibonacci_agents.application.strategies import FibonacciTerminationStrategy
from fibonacci_agents.config import settings
from fibonacci_agents.domain.interfaces import IChatCompletionService
from fibonacci_agents.domain.models import AgentDefinition, Message, MessageRole
from fibonacci_agents.domain.tools import FibonacciToolProvider
from fibonacci_agents.infrastructure.completion.mock_chat_completion import MockChatCompletionService


@pytest.fixture
def sample_message():
    """Create a sample message for testing."""
    return Message(
        role=MessageRole.USER,
        content="What are the first 8 Fibonacci numbers?",
        timestamp=datetime(2023, 1, 1, 12, 0, 0),
        metadata={"test": True},
    )


@pytest.fixture
def generator_agent():
    return AgentDefinition(
        name="FibonacciGenerator",
        instructions="Generate sequences",
        tools=("GenerateFibonacci", "GetFibonacciString"),
    )


@pytest.fixture
def validator_agent():
    return AgentDefinition(
        name="FibonacciValidator",
        instructions="Validate sequences",
        tools=("ValidateFibonacci", "IsFibonacciNumber"),
    )


@pytest.fixture
def roster():
    """The standard three-agent roster."""
    return create_agent_roster()


@pytest.fixture
def tool_provider():
    return FibonacciToolProvider()


@pytest.fixture
def mock_completion_service(tool_provider):
    """Offline completion service without simulated latency."""
    return MockChatCompletionService(tool_provider, latency=0)


@pytest.fixture
def scripted_completion_service():
    """Completion service double whose replies are set per test via ``get_reply.side_effect``."""
    service = AsyncMock(spec=IChatCompletionService)
    service.is_initialized = True
    return service


@pytest.fixture
def group_chat(roster, mock_completion_service):
    """Group chat over the standard roster and the offline completion service."""
    return AgentGroupChat(
        agents=roster,
        completion_service=mock_completion_service,
        termination_strategy=FibonacciTerminationStrategy(),
    )


@pytest.fixture
def mock_azure_client():
    """Create a mock Azure OpenAI chat client for testing."""
    client = Mock()
    mock_agent = Mock()
    mock_agent.run = AsyncMock()
    client.create_agent.return_value = mock_agent
    return client


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Reset the global settings and isolate them from the developer's environment."""
    for key in (
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_ENDPOINT",
        "AZURE_OPENAI_CHAT_DEPLOYMENT_NAME",
        "AZURE_OPENAI_USE_AZURE_CREDENTIAL",
        "AZURE_OPENAI_API_VERSION",
        "ENVIRONMENT",
        "DEBUG",
        "USE_MOCK_COMPLETION",
        "MOCK_LATENCY",
        "LOG_LEVEL",
        "LOG_FILE",
        "GROUP_CHAT_MAXIMUM_ITERATIONS",
        "GROUP_CHAT_AUTOMATIC_RESET",
        "RESILIENCE_COMPLETION_RETRY_STRATEGY",
        "RESILIENCE_COMPLETION_JITTER",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    settings.reload()
    yield settings
    settings.reload()


# Test configuration
pytest_plugins = []


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "azure: mark test as exercising the Azure OpenAI backend")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test names."""
    for item in items:
        # Mark integration tests
        if "integration" in item.name.lower() or "TestIntegration" in str(item.cls):
            item.add_marker(pytest.mark.integration)

        # Mark slow tests
        if "slow" in item.name.lower() or any(keyword in item.name.lower() for keyword in ["timeout", "large"]):
            item.add_marker(pytest.mark.slow)

        # Mark Azure tests
        if "azure" in item.name.lower() or "azure" in item.nodeid.lower():
            item.add_marker(pytest.mark.azure)
