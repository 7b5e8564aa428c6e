"""Registry exposing the Fibonacci tool set to agents."""

import inspect
import logging
from collections.abc import Callable
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from fibonacci_agents.domain.exceptions import ToolExecutionError, ToolNotFoundError
from fibonacci_agents.domain.interfaces.tool_interface import ITool, IToolProvider
from fibonacci_agents.domain.tools.fibonacci_tools import (
    generate_sequence,
    is_fibonacci_number,
    render_sequence,
    validate_sequence_text,
)

logger = logging.getLogger(__name__)

GENERATE_FIBONACCI = "GenerateFibonacci"
VALIDATE_FIBONACCI = "ValidateFibonacci"
GET_FIBONACCI_STRING = "GetFibonacciString"
IS_FIBONACCI_NUMBER = "IsFibonacciNumber"

_JSON_TYPES = {int: "integer", str: "string", bool: "boolean", float: "number"}


def generate_fibonacci(
    count: Annotated[int, "The number of Fibonacci numbers to generate"],
) -> list[int]:
    """Generates the first N numbers of the Fibonacci sequence"""
    return generate_sequence(count)


def validate_fibonacci(
    sequence: Annotated[str, "The sequence to validate (comma-separated numbers)"],
) -> str:
    """Validates if a sequence is a correct Fibonacci sequence"""
    return validate_sequence_text(sequence)


def get_fibonacci_string(
    count: Annotated[int, "The number of Fibonacci numbers to get"],
) -> str:
    """Gets the first N Fibonacci numbers as a formatted string"""
    return render_sequence(count)


def check_fibonacci_number(
    number: Annotated[int, "The number to check"],
) -> bool:
    """Checks if a number is a Fibonacci number"""
    return is_fibonacci_number(number)


class FibonacciTool(ITool):
    """A named, described wrapper around one tool function."""

    def __init__(self, name: str, func: Callable[..., Any]):
        self._name = name
        self._func = func
        self._hints = get_type_hints(func, include_extras=True)

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return inspect.getdoc(self._func) or ""

    @property
    def func(self) -> Callable[..., Any]:
        """The underlying callable, for frameworks that build their own schema."""
        return self._func

    async def execute(self, parameters: dict[str, Any]) -> Any:
        return self.invoke(parameters)

    def invoke(self, parameters: dict[str, Any]) -> Any:
        """Call the tool synchronously, coercing arguments to their declared types."""
        kwargs = {}
        for param_name, (param_type, _) in self._parameters().items():
            if param_name not in parameters:
                raise ToolExecutionError(f"Missing argument '{param_name}'", tool_name=self._name)
            try:
                kwargs[param_name] = param_type(parameters[param_name])
            except (TypeError, ValueError) as e:
                raise ToolExecutionError(
                    f"Invalid value for '{param_name}': {parameters[param_name]!r}",
                    tool_name=self._name,
                ) from e

        logger.debug(f"Invoking tool {self._name} with {kwargs}")
        return self._func(**kwargs)

    def get_schema(self) -> dict[str, Any]:
        properties = {
            param_name: {"type": _JSON_TYPES.get(param_type, "string"), "description": description}
            for param_name, (param_type, description) in self._parameters().items()
        }
        return {
            "name": self._name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": list(properties),
            },
        }

    def _parameters(self) -> dict[str, tuple[type, str]]:
        parameters = {}
        for param_name, hint in self._hints.items():
            if param_name == "return":
                continue
            if get_origin(hint) is Annotated:
                param_type, description = get_args(hint)[:2]
            else:
                param_type, description = hint, ""
            parameters[param_name] = (param_type, description)
        return parameters


class FibonacciToolProvider(IToolProvider):
    """Holds the Fibonacci tool set, keyed by tool name."""

    def __init__(self, register_defaults: bool = True):
        self._tools: dict[str, ITool] = {}
        if register_defaults:
            self.register_tool(FibonacciTool(GENERATE_FIBONACCI, generate_fibonacci))
            self.register_tool(FibonacciTool(VALIDATE_FIBONACCI, validate_fibonacci))
            self.register_tool(FibonacciTool(GET_FIBONACCI_STRING, get_fibonacci_string))
            self.register_tool(FibonacciTool(IS_FIBONACCI_NUMBER, check_fibonacci_number))

    def get_tool(self, name: str) -> ITool:
        if name not in self._tools:
            raise ToolNotFoundError(f"Tool '{name}' not found")
        return self._tools[name]

    def get_available_tools(self) -> list[str]:
        return list(self._tools)

    def register_tool(self, tool: ITool) -> None:
        self._tools[tool.name] = tool

    def get_tools(self, names: tuple[str, ...] | list[str]) -> list[ITool]:
        """Resolve an agent's tool subset, in the order given."""
        return [self.get_tool(name) for name in names]
