"""Termination strategies for the Fibonacci group conversation."""

import logging
from enum import Enum

from fibonacci_agents.domain.models import AgentDefinition, Message

from .base import DEFAULT_MAXIMUM_ITERATIONS, TerminationStrategy

logger = logging.getLogger(__name__)

# Matched as plain lower-case substrings of the latest agent reply. Loose by
# nature: "incomplete" contains "complete" and "invalid" contains "valid".
COMPLETION_INDICATORS = (
    "✅ valid",
    "❌ invalid",
    "correct fibonacci sequence",
    "incorrect sequence",
    "here are the",
    "the fibonacci numbers are",
    "approved",
    "confirmed",
    "complete",
)

GENERATOR_BUCKET = "Generator"
VALIDATOR_BUCKET = "Validator"
REQUIRED_DISTINCT_RESPONDERS = 2


class TerminationState(str, Enum):
    """Where an exchange stands with respect to termination."""

    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    AWAITING_SECOND_DISTINCT_RESPONDER = "awaiting_second_distinct_responder"
    READY_TO_TERMINATE = "ready_to_terminate"


def classify_author(author_name: str | None) -> str | None:
    """Map an author name to its role bucket; unknown names are their own bucket."""
    if not author_name:
        return None
    if GENERATOR_BUCKET in author_name:
        return GENERATOR_BUCKET
    if VALIDATOR_BUCKET in author_name:
        return VALIDATOR_BUCKET
    return author_name


def has_completion_indicator(content: str | None) -> bool:
    """Whether the text looks like a conclusive answer."""
    text = (content or "").lower()
    return any(indicator in text for indicator in COMPLETION_INDICATORS)


class FibonacciTerminationStrategy(TerminationStrategy):
    """
    Stops once the specialists have been heard from.

    The exchange ends as soon as the latest agent reply contains a completion
    indicator, or once agents from two distinct role buckets have replied.
    """

    def __init__(self, maximum_iterations: int = DEFAULT_MAXIMUM_ITERATIONS, automatic_reset: bool = True):
        super().__init__(maximum_iterations=maximum_iterations, automatic_reset=automatic_reset)

    def evaluate_state(self, history: list[Message]) -> TerminationState:
        """Classify the transcript without counting a turn."""
        agent_messages = [message for message in history if message.is_agent_message]
        if not agent_messages:
            return TerminationState.AWAITING_FIRST_RESPONSE

        last_message = history[-1]
        if last_message.is_agent_message and has_completion_indicator(last_message.content):
            return TerminationState.READY_TO_TERMINATE

        responders = {classify_author(message.author_name) for message in agent_messages}
        responders.discard(None)
        if len(responders) >= REQUIRED_DISTINCT_RESPONDERS:
            return TerminationState.READY_TO_TERMINATE

        return TerminationState.AWAITING_SECOND_DISTINCT_RESPONDER

    def should_agent_terminate(self, agent: AgentDefinition, history: list[Message]) -> bool:
        state = self.evaluate_state(history)
        logger.debug(f"Termination state after {agent.name}: {state.value}")
        return state == TerminationState.READY_TO_TERMINATE


class MaximumIterationsTerminationStrategy(TerminationStrategy):
    """Runs until the iteration ceiling and nothing else."""

    def should_agent_terminate(self, agent: AgentDefinition, history: list[Message]) -> bool:
        return False
