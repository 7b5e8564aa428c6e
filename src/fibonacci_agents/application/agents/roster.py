"""The fixed roster of Fibonacci conversation agents."""

from fibonacci_agents.domain.models import AgentDefinition
from fibonacci_agents.domain.prompts.general_assistant_prompt import GENERAL_ASSISTANT_PROMPT
from fibonacci_agents.domain.prompts.generator_prompt import GENERATOR_PROMPT
from fibonacci_agents.domain.prompts.validator_prompt import VALIDATOR_PROMPT
from fibonacci_agents.domain.tools import (
    GENERATE_FIBONACCI,
    GET_FIBONACCI_STRING,
    IS_FIBONACCI_NUMBER,
    VALIDATE_FIBONACCI,
)

GENERATOR_AGENT_NAME = "FibonacciGenerator"
VALIDATOR_AGENT_NAME = "FibonacciValidator"
GENERAL_ASSISTANT_AGENT_NAME = "GeneralAssistant"


def create_generator_agent() -> AgentDefinition:
    """Specialist that produces Fibonacci sequences."""
    return AgentDefinition(
        name=GENERATOR_AGENT_NAME,
        description="Specialist agent for generating Fibonacci sequences",
        instructions=GENERATOR_PROMPT,
        tools=(GENERATE_FIBONACCI, GET_FIBONACCI_STRING),
    )


def create_validator_agent() -> AgentDefinition:
    """Specialist that checks candidate sequences."""
    return AgentDefinition(
        name=VALIDATOR_AGENT_NAME,
        description="Specialist agent for validating Fibonacci sequences",
        instructions=VALIDATOR_PROMPT,
        tools=(VALIDATE_FIBONACCI, IS_FIBONACCI_NUMBER),
    )


def create_general_assistant_agent() -> AgentDefinition:
    """Generalist for explanations and non-Fibonacci questions."""
    return AgentDefinition(
        name=GENERAL_ASSISTANT_AGENT_NAME,
        description="General assistant for explanations and other topics",
        instructions=GENERAL_ASSISTANT_PROMPT,
        tools=(IS_FIBONACCI_NUMBER, GET_FIBONACCI_STRING),
    )


def create_agent_roster() -> list[AgentDefinition]:
    """Generator, Validator and GeneralAssistant, in speaking order."""
    return [
        create_generator_agent(),
        create_validator_agent(),
        create_general_assistant_agent(),
    ]
