"""Tests for the Azure OpenAI chat completion service."""

from unittest.mock import Mock, patch

import pytest
from agent_framework import Role

from fibonacci_agents.config import AzureOpenAIConfig, ResilienceConfig
from fibonacci_agents.domain.exceptions import (
    AgentExecutionError,
    AgentInitializationError,
    AgentTimeoutError,
    AuthenticationError,
    ConfigurationValidationError,
    RateLimitError,
)
from fibonacci_agents.domain.retry import RetryStrategy
from fibonacci_agents.domain.models import Message, MessageRole
from fibonacci_agents.infrastructure.completion.azure_chat_completion import AzureOpenAIChatCompletionService

CLIENT_PATH = "fibonacci_agents.infrastructure.completion.azure_chat_completion.AzureOpenAIChatClient"
CREDENTIAL_PATH = "fibonacci_agents.infrastructure.completion.azure_chat_completion.DefaultAzureCredential"


class TextContent:
    def __init__(self, text):
        self.text = text


class FunctionCallContent:
    def __init__(self, name):
        self.name = name
        self.text = None


class FunctionResultContent:
    def __init__(self, result):
        self.result = result


class StatusError(Exception):
    """An HTTP error as raised by the OpenAI SDK."""

    def __init__(self, message, status_code, headers=None):
        super().__init__(message)
        self.status_code = status_code
        self.response = Mock(headers=headers or {})


def agent_response(*contents, text=None):
    """Shape of an agent run response: messages holding typed contents."""
    return Mock(messages=[Mock(contents=list(contents))], text=text)


@pytest.fixture
def azure_config(clean_settings):
    return AzureOpenAIConfig(
        api_key="test-key",
        endpoint="https://example.openai.azure.com",
        deployment_name="gpt-4o",
    )


@pytest.fixture
def fast_resilience(clean_settings):
    return ResilienceConfig(
        completion_max_attempts=2,
        completion_base_delay=0.01,
        completion_max_delay=0.01,
        completion_timeout=5.0,
    )


@pytest.fixture
def service(azure_config, tool_provider, fast_resilience):
    return AzureOpenAIChatCompletionService(azure_config, tool_provider, fast_resilience)


class TestAzureInitialization:
    """Test cases for client creation."""

    @pytest.mark.asyncio
    async def test_initialize_with_api_key(self, service, mock_azure_client):
        with patch(CLIENT_PATH, return_value=mock_azure_client) as client_class:
            await service.initialize()

        client_class.assert_called_once_with(
            endpoint="https://example.openai.azure.com/",
            deployment_name="gpt-4o",
            api_version="2024-10-21",
            api_key="test-key",
        )
        assert service.is_initialized

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, service, mock_azure_client):
        with patch(CLIENT_PATH, return_value=mock_azure_client) as client_class:
            await service.initialize()
            await service.initialize()

        assert client_class.call_count == 1

    @pytest.mark.asyncio
    async def test_initialize_with_azure_credential(self, clean_settings, tool_provider, mock_azure_client):
        config = AzureOpenAIConfig(
            endpoint="https://example.openai.azure.com/",
            deployment_name="gpt-4o",
            use_azure_credential=True,
        )
        service = AzureOpenAIChatCompletionService(config, tool_provider)

        with patch(CREDENTIAL_PATH) as credential_class, patch(CLIENT_PATH, return_value=mock_azure_client) as client_class:
            await service.initialize()

        assert client_class.call_args.kwargs["credential"] is credential_class.return_value
        assert "api_key" not in client_class.call_args.kwargs

    @pytest.mark.asyncio
    async def test_missing_configuration(self, clean_settings, tool_provider):
        service = AzureOpenAIChatCompletionService(AzureOpenAIConfig(_env_file=None), tool_provider)

        with pytest.raises(ConfigurationValidationError) as exc_info:
            await service.initialize()

        assert "AZURE_OPENAI_ENDPOINT" in exc_info.value.missing_keys
        assert not service.is_initialized

    @pytest.mark.asyncio
    async def test_client_failure(self, service):
        with patch(CLIENT_PATH, side_effect=RuntimeError("bad endpoint")):
            with pytest.raises(AgentInitializationError, match="bad endpoint"):
                await service.initialize()

    @pytest.mark.asyncio
    async def test_cleanup(self, service, mock_azure_client):
        with patch(CLIENT_PATH, return_value=mock_azure_client):
            await service.initialize()
        await service.cleanup()

        assert not service.is_initialized


class TestAzureGetReply:
    """Test cases for producing agent replies."""

    @pytest.mark.asyncio
    async def test_reply_with_tool_result(self, service, mock_azure_client, roster):
        generator = roster[0]
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.return_value = agent_response(
            FunctionCallContent("GenerateFibonacci"),
            FunctionResultContent([0, 1, 1, 2, 3]),
            TextContent("Here are the first 5 Fibonacci numbers: 0, 1, 1, 2, 3"),
        )
        history = [Message(role=MessageRole.USER, content="first 5 please")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            reply = await service.get_reply(generator, history)

        assert reply.content == "Here are the first 5 Fibonacci numbers: 0, 1, 1, 2, 3"
        assert reply.author_name == "FibonacciGenerator"
        assert reply.role == MessageRole.ASSISTANT
        assert reply.metadata["sequence"] == [0, 1, 1, 2, 3]
        assert "execution_time" in reply.metadata

    @pytest.mark.asyncio
    async def test_agent_created_once_with_its_tools(self, service, mock_azure_client, roster):
        validator = roster[1]
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.return_value = agent_response(TextContent("✅ VALID"))
        history = [Message(role=MessageRole.USER, content="validate: 0, 1")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            await service.get_reply(validator, history)
            await service.get_reply(validator, history)

        mock_azure_client.create_agent.assert_called_once()
        kwargs = mock_azure_client.create_agent.call_args.kwargs
        assert kwargs["name"] == "FibonacciValidator"
        assert kwargs["instructions"] == validator.instructions
        assert [tool.name for tool in kwargs["tools"]] == ["ValidateFibonacci", "IsFibonacciNumber"]

    @pytest.mark.asyncio
    async def test_history_conversion(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.return_value = agent_response(TextContent("Confirmed"))
        history = [
            Message(role=MessageRole.USER, content="first 3"),
            Message(
                role=MessageRole.ASSISTANT,
                content="0, 1, 1",
                author_name="FibonacciGenerator",
                metadata={"sequence": [0, 1, 1]},
            ),
        ]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            await service.get_reply(roster[1], history, current_sequence=[0, 1, 1])

        messages = chat_agent.run.call_args.args[0]
        assert [message.role for message in messages] == [Role.USER, Role.ASSISTANT]
        assert messages[1].text == "0, 1, 1"
        assert messages[1].author_name == "FibonacciGenerator"

    @pytest.mark.asyncio
    async def test_current_sequence_added_as_context(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.return_value = agent_response(TextContent("✅ VALID"))
        history = [Message(role=MessageRole.USER, content="Is that correct?")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            await service.get_reply(roster[1], history, current_sequence=[0, 1, 1, 2])

        messages = chat_agent.run.call_args.args[0]
        assert messages[0].role == Role.SYSTEM
        assert "0, 1, 1, 2" in messages[0].text

    @pytest.mark.asyncio
    async def test_fallback_to_response_text(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.return_value = agent_response(text="plain answer")
        history = [Message(role=MessageRole.USER, content="hello")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            reply = await service.get_reply(roster[2], history)

        assert reply.content == "plain answer"
        assert "sequence" not in reply.metadata

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = [
            OSError("connection reset by peer"),
            agent_response(TextContent("Confirmed")),
        ]
        history = [Message(role=MessageRole.USER, content="Is 8 a Fibonacci number?")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            reply = await service.get_reply(roster[1], history)

        assert reply.content == "Confirmed"
        assert chat_agent.run.call_count == 2

    @pytest.mark.asyncio
    async def test_persistent_failure_raises_execution_error(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = OSError("network unreachable")
        history = [Message(role=MessageRole.USER, content="hi")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            with pytest.raises(AgentExecutionError) as exc_info:
                await service.get_reply(roster[0], history)

        assert exc_info.value.agent_name == "FibonacciGenerator"
        assert chat_agent.run.call_count == 2

    @pytest.mark.asyncio
    async def test_timeout_is_reported(self, azure_config, tool_provider, mock_azure_client, roster):
        resilience = ResilienceConfig(enable_retries=False, completion_timeout=1.0)
        service = AzureOpenAIChatCompletionService(azure_config, tool_provider, resilience)
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = TimeoutError()
        history = [Message(role=MessageRole.USER, content="hi")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            with pytest.raises(AgentExecutionError) as exc_info:
                await service.get_reply(roster[0], history)

        assert isinstance(exc_info.value.__cause__, AgentTimeoutError)


class TestAzureFailureMapping:
    """Test cases for mapping API failures onto domain errors."""

    @pytest.mark.asyncio
    async def test_authentication_failure_is_not_retried(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = StatusError("Access denied due to invalid subscription key", 401)
        history = [Message(role=MessageRole.USER, content="hi")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            with pytest.raises(AgentExecutionError) as exc_info:
                await service.get_reply(roster[0], history)

        cause = exc_info.value.__cause__
        assert isinstance(cause, AuthenticationError)
        assert cause.status_code == 401
        assert chat_agent.run.call_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self, service, mock_azure_client, roster):
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = [
            StatusError("Too many requests", 429),
            agent_response(TextContent("Confirmed")),
        ]
        history = [Message(role=MessageRole.USER, content="Is 8 a Fibonacci number?")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            reply = await service.get_reply(roster[1], history)

        assert reply.content == "Confirmed"
        assert chat_agent.run.call_count == 2

    @pytest.mark.asyncio
    async def test_rate_limit_reads_retry_after_header(self, azure_config, tool_provider, mock_azure_client, roster):
        service = AzureOpenAIChatCompletionService(azure_config, tool_provider, ResilienceConfig(enable_retries=False))
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = StatusError("Too many requests", 429, headers={"retry-after": "7"})
        history = [Message(role=MessageRole.USER, content="hi")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            with pytest.raises(AgentExecutionError) as exc_info:
                await service.get_reply(roster[0], history)

        cause = exc_info.value.__cause__
        assert isinstance(cause, RateLimitError)
        assert cause.retry_after == 7.0
        assert cause.status_code == 429

    @pytest.mark.asyncio
    async def test_status_code_found_on_wrapped_error(self, azure_config, tool_provider, mock_azure_client, roster):
        service = AzureOpenAIChatCompletionService(azure_config, tool_provider, ResilienceConfig(enable_retries=False))
        wrapped = RuntimeError("Service failed to complete the prompt")
        wrapped.__cause__ = StatusError("Forbidden", 403)
        chat_agent = mock_azure_client.create_agent.return_value
        chat_agent.run.side_effect = wrapped
        history = [Message(role=MessageRole.USER, content="hi")]

        with patch(CLIENT_PATH, return_value=mock_azure_client):
            with pytest.raises(AgentExecutionError) as exc_info:
                await service.get_reply(roster[0], history)

        assert isinstance(exc_info.value.__cause__, AuthenticationError)

    def test_retry_policy_follows_resilience_settings(self, azure_config, tool_provider):
        resilience = ResilienceConfig(completion_retry_strategy=RetryStrategy.LINEAR, completion_jitter=False)

        service = AzureOpenAIChatCompletionService(azure_config, tool_provider, resilience)

        policy = service._retry_policy
        assert policy.strategy == RetryStrategy.LINEAR
        assert policy.jitter is False
        assert RateLimitError in policy.retryable_exceptions
        assert AuthenticationError in policy.non_retryable_exceptions
