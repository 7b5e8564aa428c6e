"""
Base Strategies
===============

Abstract strategies consulted by the group conversation driver.

A selection strategy decides which agent speaks next. A termination
strategy decides, after every agent turn, whether the exchange is over.
Both are plain objects injected into ``AgentGroupChat`` so the driver
itself carries no policy.
"""

import logging
from abc import ABC, abstractmethod

from fibonacci_agents.domain.models import AgentDefinition, Message

logger = logging.getLogger(__name__)

DEFAULT_MAXIMUM_ITERATIONS = 10


class SelectionStrategy(ABC):
    """Chooses the next speaker."""

    @abstractmethod
    def next(self, agents: list[AgentDefinition], history: list[Message]) -> AgentDefinition:
        """
        Pick the agent that takes the next turn.

        Args:
            agents: The roster, in its configured order
            history: The transcript so far

        Returns:
            One of ``agents``
        """
        ...  # pragma: no cover

    def reset(self) -> None:
        """Forget any selection state."""


class TerminationStrategy(ABC):
    """
    Decides when a group conversation stops.

    Every call to ``should_terminate`` counts as one agent turn. The
    conversation always ends once ``maximum_iterations`` turns have been
    taken, whatever ``should_agent_terminate`` says.

    Attributes:
        maximum_iterations: Hard ceiling on agent turns per exchange
        automatic_reset: Whether the driver clears the transcript and this
            strategy before each new user question
    """

    def __init__(self, maximum_iterations: int = DEFAULT_MAXIMUM_ITERATIONS, automatic_reset: bool = False):
        if maximum_iterations < 1:
            raise ValueError("maximum_iterations must be at least 1")
        self.maximum_iterations = maximum_iterations
        self.automatic_reset = automatic_reset
        self._iteration_count = 0

    @property
    def iteration_count(self) -> int:
        """Agent turns evaluated since the last reset."""
        return self._iteration_count

    def should_terminate(self, agent: AgentDefinition, history: list[Message]) -> bool:
        """Record one agent turn and decide whether the conversation is over."""
        self._iteration_count += 1

        if self.should_agent_terminate(agent, history):
            logger.debug(f"Termination requested after {agent.name} (turn {self._iteration_count})")
            return True

        if self._iteration_count >= self.maximum_iterations:
            logger.warning(f"Reached maximum iterations ({self.maximum_iterations}); stopping the conversation")
            return True

        return False

    @abstractmethod
    def should_agent_terminate(self, agent: AgentDefinition, history: list[Message]) -> bool:
        """Policy-specific decision, evaluated after ``agent`` has replied."""
        ...  # pragma: no cover

    def reset(self) -> None:
        """Start counting turns from zero."""
        self._iteration_count = 0
