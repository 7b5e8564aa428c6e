"""Speaker selection strategies."""

from fibonacci_agents.domain.exceptions import AgentNotFoundError
from fibonacci_agents.domain.models import AgentDefinition, Message

from .base import SelectionStrategy


class SequentialSelectionStrategy(SelectionStrategy):
    """
    Round-robin over the roster.

    The position only moves back to the first agent on ``reset``; the group
    chat resets it whenever it starts a fresh exchange.
    """

    def __init__(self):
        self._index = 0

    def next(self, agents: list[AgentDefinition], history: list[Message]) -> AgentDefinition:
        if not agents:
            raise AgentNotFoundError("No agents available to select from")

        agent = agents[self._index % len(agents)]
        self._index = (self._index + 1) % len(agents)
        return agent

    def reset(self) -> None:
        self._index = 0
