"""Group conversation driver that runs agents in turn over a shared transcript."""

import logging
from collections.abc import AsyncIterator

from fibonacci_agents.application.strategies import (
    SelectionStrategy,
    SequentialSelectionStrategy,
    TerminationStrategy,
)
from fibonacci_agents.domain.exceptions import AgentExecutionError
from fibonacci_agents.domain.interfaces import IChatCompletionService
from fibonacci_agents.domain.models import (
    AgentDefinition,
    Message,
    MessageRole,
    Transcript,
)

logger = logging.getLogger(__name__)


class AgentGroupChat:
    """
    Drives a multi-agent exchange for one user question at a time.

    The chat owns the transcript. Each turn it asks the selection strategy
    for a speaker, obtains that agent's reply from the completion service,
    appends it, yields it to the caller and then asks the termination
    strategy whether to stop. Only one completion call is in flight at a time.
    """

    def __init__(
        self,
        agents: list[AgentDefinition],
        completion_service: IChatCompletionService,
        termination_strategy: TerminationStrategy,
        selection_strategy: SelectionStrategy | None = None,
    ):
        if not agents:
            raise ValueError("A group chat needs at least one agent")
        names = [agent.name for agent in agents]
        if len(set(names)) != len(names):
            raise ValueError(f"Agent names must be unique: {names}")

        self._agents = list(agents)
        self._completion_service = completion_service
        self._termination_strategy = termination_strategy
        self._selection_strategy = selection_strategy or SequentialSelectionStrategy()
        self._transcript = Transcript()
        self._current_sequence: list[int] | None = None
        self._is_complete = False

    @property
    def agents(self) -> list[AgentDefinition]:
        return self._agents.copy()

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def history(self) -> list[Message]:
        """The transcript messages, oldest first."""
        return self._transcript.messages

    @property
    def current_sequence(self) -> list[int] | None:
        """The most recent sequence an agent produced with a tool, if any."""
        return self._current_sequence

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    @property
    def termination_strategy(self) -> TerminationStrategy:
        return self._termination_strategy

    def add_user_message(self, content: str) -> Message:
        """
        Start a new exchange with a user question.

        With automatic reset enabled the previous exchange's transcript,
        termination state and speaker order are dropped first, so every
        question opens with the first agent of the roster.
        """
        if self._termination_strategy.automatic_reset:
            self._start_new_exchange()
        elif self._is_complete:
            self._termination_strategy.reset()

        self._is_complete = False
        message = Message(role=MessageRole.USER, content=content)
        self._transcript.add_message(message)
        return message

    async def invoke(self) -> AsyncIterator[Message]:
        """
        Run agent turns until the termination strategy says stop.

        Yields:
            Each agent reply as soon as it has been appended to the transcript

        Raises:
            AgentExecutionError: If the completion service fails; the
                transcript keeps every reply appended before the failure
        """
        if self._is_complete:
            return

        while True:
            history = self._transcript.messages
            agent = self._selection_strategy.next(self._agents, history)
            logger.debug(f"Turn {self._termination_strategy.iteration_count + 1}: {agent.name}")

            try:
                reply = await self._completion_service.get_reply(
                    agent, history, current_sequence=self._current_sequence
                )
            except AgentExecutionError:
                raise
            except Exception as e:
                raise AgentExecutionError(f"{agent.name} failed to reply: {e}", agent_name=agent.name) from e

            reply = self._attribute(agent, reply)
            self._transcript.add_message(reply)
            self._remember_sequence(reply)
            yield reply

            if self._termination_strategy.should_terminate(agent, self._transcript.messages):
                self._is_complete = True
                logger.info(
                    f"Conversation complete after {self._termination_strategy.iteration_count} agent turn(s)"
                )
                return

    def abort_exchange(self) -> None:
        """Drop a failed exchange so the next question starts from an empty transcript."""
        logger.debug(f"Discarding exchange with {len(self._transcript)} message(s)")
        self._start_new_exchange()

    def reset(self) -> None:
        """Clear the transcript, all strategy state and the current sequence."""
        self._start_new_exchange()
        self._current_sequence = None

    def _start_new_exchange(self) -> None:
        self._transcript.clear()
        self._termination_strategy.reset()
        self._selection_strategy.reset()
        self._is_complete = False

    def _remember_sequence(self, reply: Message) -> None:
        sequence = reply.metadata.get("sequence")
        if sequence:
            self._current_sequence = list(sequence)

    @staticmethod
    def _attribute(agent: AgentDefinition, reply: Message) -> Message:
        """Ensure the stored reply is an assistant turn authored by ``agent``."""
        if reply.role == MessageRole.ASSISTANT and reply.author_name == agent.name:
            return reply
        return Message(
            role=MessageRole.ASSISTANT,
            content=reply.content,
            author_name=agent.name,
            timestamp=reply.timestamp,
            metadata=reply.metadata,
        )
