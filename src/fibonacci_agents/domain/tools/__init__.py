"""Fibonacci tool set."""

from .fibonacci_tools import (
    MAX_REQUESTED_COUNT,
    generate_sequence,
    is_fibonacci_number,
    parse_sequence,
    render_sequence,
    validate_sequence,
    validate_sequence_text,
)
from .registry import (
    GENERATE_FIBONACCI,
    GET_FIBONACCI_STRING,
    IS_FIBONACCI_NUMBER,
    VALIDATE_FIBONACCI,
    FibonacciTool,
    FibonacciToolProvider,
)

__all__ = [
    "MAX_REQUESTED_COUNT",
    "GENERATE_FIBONACCI",
    "GET_FIBONACCI_STRING",
    "IS_FIBONACCI_NUMBER",
    "VALIDATE_FIBONACCI",
    "FibonacciTool",
    "FibonacciToolProvider",
    "generate_sequence",
    "is_fibonacci_number",
    "parse_sequence",
    "render_sequence",
    "validate_sequence",
    "validate_sequence_text",
]
