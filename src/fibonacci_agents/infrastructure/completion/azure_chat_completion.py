"""Azure OpenAI chat completion service built on the Microsoft Agent Framework."""

import asyncio
import logging
import time
from typing import Any

from agent_framework import ChatAgent, ChatMessage, Role, ai_function
from agent_framework.azure import AzureOpenAIChatClient
from azure.identity import DefaultAzureCredential

from fibonacci_agents.config import AzureOpenAIConfig, ResilienceConfig
from fibonacci_agents.domain.exceptions import (
    AgentConnectionError,
    AgentExecutionError,
    AgentInitializationError,
    AgentTimeoutError,
    APIError,
    AuthenticationError,
    ConfigurationError,
    RateLimitError,
)
from fibonacci_agents.domain.interfaces import IChatCompletionService
from fibonacci_agents.domain.models import AgentDefinition, Message, MessageRole
from fibonacci_agents.domain.retry import LoggingRetryCallbacks, RetryPolicy, retry_async
from fibonacci_agents.domain.tools import FibonacciTool, FibonacciToolProvider

logger = logging.getLogger(__name__)


class AzureOpenAIChatCompletionService(IChatCompletionService):
    """Produces agent replies with Azure OpenAI, letting the model call Fibonacci tools."""

    def __init__(
        self,
        config: AzureOpenAIConfig,
        tool_provider: FibonacciToolProvider,
        resilience: ResilienceConfig | None = None,
    ):
        self._config = config
        self._tools = tool_provider
        self._resilience = resilience or ResilienceConfig()
        self._client: AzureOpenAIChatClient | None = None
        self._chat_agents: dict[str, ChatAgent] = {}
        self._is_initialized = False
        self._retry_policy = self._create_retry_policy()
        self._retry_callbacks = LoggingRetryCallbacks("azure_chat_completion")

    def _create_retry_policy(self) -> RetryPolicy:
        """Create retry policy for completion calls."""
        return RetryPolicy(
            max_attempts=self._resilience.completion_max_attempts,
            base_delay=self._resilience.completion_base_delay,
            max_delay=self._resilience.completion_max_delay,
            strategy=self._resilience.completion_retry_strategy,
            jitter=self._resilience.completion_jitter,
            retryable_exceptions={
                AgentConnectionError,
                AgentTimeoutError,
                RateLimitError,
                OSError,
            },
            non_retryable_exceptions={
                AgentInitializationError,
                AuthenticationError,
                ConfigurationError,
                ValueError,
                TypeError,
            },
        )

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    async def initialize(self) -> None:
        """Create the Azure OpenAI chat client."""
        if self._is_initialized:
            return

        self._config.require()

        try:
            client_kwargs: dict[str, Any] = {
                "endpoint": self._config.endpoint,
                "deployment_name": self._config.deployment_name,
                "api_version": self._config.api_version,
            }
            if self._config.use_azure_credential:
                client_kwargs["credential"] = DefaultAzureCredential()
            else:
                client_kwargs["api_key"] = self._config.api_key

            self._client = AzureOpenAIChatClient(**client_kwargs)
            self._is_initialized = True
            logger.info(f"Azure OpenAI chat client ready for deployment {self._config.deployment_name}")

        except Exception as e:
            raise AgentInitializationError(f"Failed to initialize Azure OpenAI chat client: {e}") from e

    async def cleanup(self) -> None:
        self._chat_agents.clear()
        self._client = None
        self._is_initialized = False

    async def get_reply(
        self,
        agent: AgentDefinition,
        history: list[Message],
        current_sequence: list[int] | None = None,
    ) -> Message:
        """Run ``agent`` over the transcript and return its reply."""
        if not self._is_initialized:
            await self.initialize()

        chat_agent = self._get_chat_agent(agent)
        messages = [self._to_chat_message(message) for message in history]
        if current_sequence and not any(message.metadata.get("sequence") for message in history):
            rendered = ", ".join(str(n) for n in current_sequence)
            context = ChatMessage(role=Role.SYSTEM, text=f"Sequence produced earlier in this session: {rendered}")
            messages.insert(0, context)
        start_time = time.time()

        async def _execute_completion():
            """Single completion attempt, with failures mapped for the retry policy."""
            try:
                return await asyncio.wait_for(
                    chat_agent.run(messages),
                    timeout=self._resilience.completion_timeout,
                )
            except TimeoutError as e:
                raise AgentTimeoutError(
                    f"{agent.name} did not answer within {self._resilience.completion_timeout} seconds",
                    timeout_duration=self._resilience.completion_timeout,
                ) from e
            except Exception as e:
                logger.error(f"{agent.name} completion failed: {e}")
                api_error = self._to_api_error(agent, e)
                if api_error is not None:
                    raise api_error from e
                if "timeout" in str(e).lower():
                    raise AgentTimeoutError(f"{agent.name} completion timed out: {e}") from e
                elif "connection" in str(e).lower() or "network" in str(e).lower():
                    raise AgentConnectionError(f"{agent.name} could not reach Azure OpenAI: {e}") from e
                raise AgentExecutionError(f"{agent.name} completion failed: {e}", agent_name=agent.name) from e

        try:
            if self._resilience.enable_retries:
                response = await retry_async(_execute_completion, self._retry_policy, self._retry_callbacks)
            else:
                response = await _execute_completion()
        except AgentExecutionError:
            raise
        except Exception as e:
            raise AgentExecutionError(
                f"{agent.name} completion failed: {e}",
                agent_name=agent.name,
                execution_time=time.time() - start_time,
            ) from e

        text, sequence = self._extract_reply(response)
        metadata: dict[str, Any] = {"execution_time": time.time() - start_time}
        if sequence is not None:
            metadata["sequence"] = sequence

        return Message(
            role=MessageRole.ASSISTANT,
            content=text,
            author_name=agent.name,
            metadata=metadata,
        )

    def _get_chat_agent(self, agent: AgentDefinition) -> ChatAgent:
        """One framework agent per roster entry, created on first use."""
        if agent.name not in self._chat_agents:
            tools = [self._to_ai_function(tool) for tool in self._tools.get_tools(agent.tools)]
            self._chat_agents[agent.name] = self._client.create_agent(
                name=agent.name,
                instructions=agent.instructions,
                tools=tools,
            )
            logger.debug(f"Created chat agent {agent.name} with tools {list(agent.tools)}")
        return self._chat_agents[agent.name]

    @staticmethod
    def _to_api_error(agent: AgentDefinition, error: Exception) -> APIError | None:
        """Map authentication and rate limit responses to their domain errors."""
        status_code = None
        response = None
        cause: BaseException | None = error
        while cause is not None and status_code is None:
            status_code = getattr(cause, "status_code", None)
            response = getattr(cause, "response", None)
            cause = cause.__cause__

        text = str(error).lower()
        if status_code in (401, 403) or "unauthorized" in text or "authentication" in text:
            return AuthenticationError(
                f"Azure OpenAI rejected the credentials for {agent.name}: {error}",
                status_code=status_code,
            )
        if status_code == 429 or "rate limit" in text:
            headers = getattr(response, "headers", None) or {}
            header = str(headers.get("retry-after", ""))
            retry_after = float(header) if header.isdigit() else None
            return RateLimitError(
                f"Azure OpenAI rate limit hit for {agent.name}: {error}",
                retry_after=retry_after,
                status_code=status_code,
            )
        return None

    @staticmethod
    def _to_ai_function(tool: FibonacciTool):
        return ai_function(tool.func, name=tool.name, description=tool.description)

    @staticmethod
    def _to_chat_message(message: Message) -> ChatMessage:
        role = Role.USER if message.role == MessageRole.USER else Role.ASSISTANT
        return ChatMessage(role=role, text=message.content, author_name=message.author_name)

    @staticmethod
    def _extract_reply(response: Any) -> tuple[str, list[int] | None]:
        """Reply text plus the last sequence returned by a generation tool, if any."""
        texts: list[str] = []
        sequence = None

        for msg in getattr(response, "messages", None) or []:
            for content in getattr(msg, "contents", None) or []:
                content_type = type(content).__name__
                if "FunctionResult" in content_type:
                    result = getattr(content, "result", None)
                    if isinstance(result, list) and all(isinstance(n, int) for n in result):
                        sequence = result
                elif "FunctionCall" in content_type:
                    continue
                elif getattr(content, "text", None):
                    texts.append(content.text)

        if not texts:
            texts.append(getattr(response, "text", None) or str(response))

        return "\n".join(texts), sequence
