"""Question-level orchestration of the Fibonacci group chat."""

import logging
from collections.abc import AsyncIterator

from fibonacci_agents.application.agents.roster import create_agent_roster
from fibonacci_agents.application.services.group_chat import AgentGroupChat
from fibonacci_agents.application.strategies import (
    FibonacciTerminationStrategy,
    SequentialSelectionStrategy,
)
from fibonacci_agents.config import GroupChatConfig
from fibonacci_agents.domain.interfaces import IChatCompletionService
from fibonacci_agents.domain.models import Message, MessageRole

logger = logging.getLogger(__name__)

ERROR_AUTHOR = "System"


class FibonacciApp:
    """
    Answers user questions with the multi-agent group chat.

    Each call to ``ask`` is one question. Failures inside a question are
    logged and reported as an error notice; they never escape ``ask``, so
    the session can carry on with the next question.
    """

    def __init__(self, group_chat: AgentGroupChat, completion_service: IChatCompletionService):
        self._group_chat = group_chat
        self._completion_service = completion_service

    @classmethod
    def create(
        cls,
        completion_service: IChatCompletionService,
        config: GroupChatConfig | None = None,
    ) -> "FibonacciApp":
        """Build the standard roster, strategies and driver around ``completion_service``."""
        config = config or GroupChatConfig()
        group_chat = AgentGroupChat(
            agents=create_agent_roster(),
            completion_service=completion_service,
            termination_strategy=FibonacciTerminationStrategy(
                maximum_iterations=config.maximum_iterations,
                automatic_reset=config.automatic_reset,
            ),
            selection_strategy=SequentialSelectionStrategy(),
        )
        return cls(group_chat, completion_service)

    @property
    def group_chat(self) -> AgentGroupChat:
        return self._group_chat

    async def start(self) -> None:
        """Prepare the completion backend."""
        await self._completion_service.initialize()
        logger.info("Agents created successfully.")
        for agent in self._group_chat.agents:
            logger.info(f"Agent ready: {agent.name} (tools: {', '.join(agent.tools) or 'none'})")

    async def shutdown(self) -> None:
        await self._completion_service.cleanup()

    async def ask(self, question: str) -> AsyncIterator[Message]:
        """
        Let the agents collaborate on one question.

        Yields:
            Agent replies as they arrive, or a single error notice authored by
            ``ERROR_AUTHOR`` (with ``metadata["error"]`` set) if the exchange fails
        """
        try:
            self._group_chat.add_user_message(question)
            async for reply in self._group_chat.invoke():
                yield reply
        except Exception as e:
            logger.error(f"Error processing user question: {question}", exc_info=True)
            self._group_chat.abort_exchange()
            yield Message(
                role=MessageRole.ASSISTANT,
                content=f"Sorry, I encountered an error: {getattr(e, 'message', None) or e}",
                author_name=ERROR_AUTHOR,
                metadata={"error": True, "error_type": type(e).__name__},
            )
