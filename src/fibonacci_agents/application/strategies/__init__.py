"""Group conversation strategies."""

from .base import SelectionStrategy, TerminationStrategy
from .selection import SequentialSelectionStrategy
from .termination import (
    COMPLETION_INDICATORS,
    FibonacciTerminationStrategy,
    MaximumIterationsTerminationStrategy,
    TerminationState,
    classify_author,
    has_completion_indicator,
)

__all__ = [
    "COMPLETION_INDICATORS",
    "FibonacciTerminationStrategy",
    "MaximumIterationsTerminationStrategy",
    "SelectionStrategy",
    "SequentialSelectionStrategy",
    "TerminationState",
    "TerminationStrategy",
    "classify_author",
    "has_completion_indicator",
]
