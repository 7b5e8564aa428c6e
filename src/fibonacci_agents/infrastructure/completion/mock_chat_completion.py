"""Offline chat completion service for demonstrations and tests."""

import asyncio
import logging
import re

from fibonacci_agents.domain.interfaces import IChatCompletionService, IToolProvider
from fibonacci_agents.domain.models import AgentDefinition, Message, MessageRole
from fibonacci_agents.domain.tools import (
    GENERATE_FIBONACCI,
    GET_FIBONACCI_STRING,
    IS_FIBONACCI_NUMBER,
    MAX_REQUESTED_COUNT,
    VALIDATE_FIBONACCI,
)

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 10
DEFAULT_SEQUENCE = "0, 1, 1, 2, 3, 5, 8, 13, 21, 34"

READY_REPLY = "I'm ready to help with Fibonacci sequences!"
HELP_REPLY = "I'm a Fibonacci specialist. I can generate or validate Fibonacci sequences. How can I help you?"
GENERAL_HELP_REPLY = (
    "I'm the general assistant. I can explain how the Fibonacci sequence works or check single numbers; "
    "ask the specialists to generate or verify whole sequences."
)
DEFER_VALIDATION_REPLY = "I'll leave checking this sequence to FibonacciValidator."
VALIDATE_PROMPT_REPLY = "I'll validate the sequence for you. Please provide the sequence to validate."

_COUNT_PATTERNS = (
    re.compile(r"\b(?:first|generate)\s+(\d+)"),
    re.compile(r"\b(\d+)\s+fibonacci"),
)
_MEMBERSHIP_PATTERN = re.compile(r"\bis\s+(-?\d+)\s+(?:a\s+)?fibonacci")


def extract_sequence(text: str) -> str | None:
    """
    Find a comma separated sequence following a colon, e.g. ``"validate: 0, 1, 1"``.

    The sequence runs until the next sentence terminator.
    """
    for part in text.split(":")[1:]:
        part = part.strip()
        if "," in part or part[:1].isdigit():
            end = re.search(r"[.?!\n]", part)
            if end and end.start() > 0:
                part = part[: end.start()]
            return part.strip()
    return None


def extract_count(text: str, default: int = DEFAULT_COUNT) -> int:
    """Number of Fibonacci numbers a question asks for, capped at ``MAX_REQUESTED_COUNT``."""
    for pattern in _COUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            return min(int(match.group(1)), MAX_REQUESTED_COUNT)
    return default


class MockChatCompletionService(IChatCompletionService):
    """
    Pattern-matching stand-in for a language model.

    Each agent answers the latest user question using only its own tools:
    the generator generates, the validator validates either a sequence
    quoted in the question or one produced earlier in the conversation, and
    membership questions are answered by any agent allowed to check numbers.
    """

    def __init__(self, tool_provider: IToolProvider, latency: float = 0.1):
        self._tools = tool_provider
        self._latency = latency
        self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    async def initialize(self) -> None:
        self._is_initialized = True

    async def cleanup(self) -> None:
        self._is_initialized = False

    async def get_reply(
        self,
        agent: AgentDefinition,
        history: list[Message],
        current_sequence: list[int] | None = None,
    ) -> Message:
        if self._latency:
            await asyncio.sleep(self._latency)

        question = self._latest_question(history)
        if question is None:
            return self._reply(agent, READY_REPLY)

        text = question.lower()
        logger.debug(f"Mock completion for {agent.name}: {text!r}")

        if agent.can_use(GENERATE_FIBONACCI) and self._asks_for_generation(text):
            count = extract_count(text)
            sequence = await self._tools.get_tool(GENERATE_FIBONACCI).execute({"count": count})
            rendered = ", ".join(str(n) for n in sequence)
            return self._reply(
                agent,
                f"The first {count} Fibonacci numbers are: {rendered}",
                sequence=sequence,
            )

        asks_for_validation = self._asks_for_validation(text)
        if asks_for_validation and not agent.can_use(VALIDATE_FIBONACCI) and agent.can_use(GENERATE_FIBONACCI):
            return self._reply(agent, DEFER_VALIDATION_REPLY)

        if agent.can_use(VALIDATE_FIBONACCI) and asks_for_validation:
            candidate = extract_sequence(text) or self._earlier_sequence(history)
            if candidate is None and current_sequence:
                candidate = ", ".join(str(n) for n in current_sequence)
            if candidate is None and "validate" in text:
                candidate = DEFAULT_SEQUENCE
            if candidate is not None:
                verdict = await self._tools.get_tool(VALIDATE_FIBONACCI).execute({"sequence": candidate})
                return self._reply(agent, verdict)
            return self._reply(agent, VALIDATE_PROMPT_REPLY)

        if agent.can_use(VALIDATE_FIBONACCI):
            earlier = self._earlier_sequence(history)
            if earlier is not None:
                verdict = await self._tools.get_tool(VALIDATE_FIBONACCI).execute({"sequence": earlier})
                return self._reply(agent, verdict)

        membership = _MEMBERSHIP_PATTERN.search(text)
        if membership and agent.can_use(IS_FIBONACCI_NUMBER):
            number = int(membership.group(1))
            is_member = await self._tools.get_tool(IS_FIBONACCI_NUMBER).execute({"number": number})
            if is_member:
                return self._reply(agent, f"Confirmed: {number} is a Fibonacci number.")
            return self._reply(agent, f"{number} is not a Fibonacci number.")

        if "fibonacci" in text and agent.can_use(GET_FIBONACCI_STRING):
            numbers = await self._tools.get_tool(GET_FIBONACCI_STRING).execute({"count": DEFAULT_COUNT})
            return self._reply(
                agent,
                "The Fibonacci sequence starts with 0 and 1, and each subsequent number is the sum of "
                f"the two preceding ones: {numbers}, ...",
            )

        if agent.can_use(GENERATE_FIBONACCI) or agent.can_use(VALIDATE_FIBONACCI):
            return self._reply(agent, HELP_REPLY)
        return self._reply(agent, GENERAL_HELP_REPLY)

    @staticmethod
    def _asks_for_generation(text: str) -> bool:
        return "fibonacci" in text and ("generate" in text or "first" in text)

    @staticmethod
    def _asks_for_validation(text: str) -> bool:
        return "validate" in text or "correct" in text or extract_sequence(text) is not None

    @staticmethod
    def _latest_question(history: list[Message]) -> str | None:
        for message in reversed(history):
            if message.role == MessageRole.USER:
                return message.content
        return None

    @staticmethod
    def _earlier_sequence(history: list[Message]) -> str | None:
        """The most recent sequence an agent produced in this conversation."""
        for message in reversed(history):
            sequence = message.metadata.get("sequence")
            if message.is_agent_message and sequence:
                return ", ".join(str(n) for n in sequence)
        return None

    @staticmethod
    def _reply(agent: AgentDefinition, content: str, sequence: list[int] | None = None) -> Message:
        metadata = {"sequence": sequence} if sequence is not None else {}
        return Message(
            role=MessageRole.ASSISTANT,
            content=content,
            author_name=agent.name,
            metadata=metadata,
        )
