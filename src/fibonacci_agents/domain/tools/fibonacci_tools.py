"""Deterministic Fibonacci computations callable by agents."""

from collections.abc import Sequence

from fibonacci_agents.domain.exceptions import SequenceParseError
from fibonacci_agents.domain.models import SequenceValidationResult

EMPTY_SEQUENCE_REASON = "Empty sequence provided."

# Upper bound for counts taken from user input
MAX_REQUESTED_COUNT = 1000


def generate_sequence(count: int) -> list[int]:
    """Return the first ``count`` Fibonacci numbers, starting at 0, 1."""
    if count <= 0:
        return []

    sequence = [0] * count
    if count >= 2:
        sequence[1] = 1

    for i in range(2, count):
        sequence[i] = sequence[i - 1] + sequence[i - 2]

    return sequence


def validate_sequence(candidate: Sequence[int], expected_length: int | None = None) -> SequenceValidationResult:
    """
    Compare a candidate sequence element-wise with the canonical one.

    Args:
        candidate: The sequence to check
        expected_length: Length the candidate should have; defaults to its own length

    Returns:
        A validation result. Invalid input is a normal negative result, never an exception.
    """
    provided = list(candidate)
    if not provided:
        return SequenceValidationResult(valid=False, reason=EMPTY_SEQUENCE_REASON)

    length = len(provided) if expected_length is None else expected_length
    expected = generate_sequence(length)

    mismatches = [i for i, (actual, wanted) in enumerate(zip(provided, expected)) if actual != wanted]
    length_mismatch = len(provided) != len(expected)

    return SequenceValidationResult(
        valid=not mismatches and not length_mismatch,
        provided=provided,
        expected=expected,
        mismatch_positions=mismatches,
        length_mismatch=length_mismatch,
    )


def render_sequence(count: int) -> str:
    """Comma separated rendering of ``generate_sequence(count)``."""
    return ", ".join(str(n) for n in generate_sequence(count))


def is_fibonacci_number(number: int) -> bool:
    """Check membership by walking the sequence until it reaches ``number``."""
    if number < 0:
        return False

    a, b = 0, 1
    if number in (a, b):
        return True

    while b < number:
        a, b = b, a + b

    return b == number


def parse_sequence(text: str) -> list[int]:
    """
    Parse comma separated integers, ignoring empty entries.

    Raises:
        SequenceParseError: If a token is not an integer
    """
    numbers = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            numbers.append(int(token))
        except ValueError as e:
            raise SequenceParseError(f"'{token}' is not an integer", token=token) from e
    return numbers


def validate_sequence_text(text: str) -> str:
    """Parse and validate a textual sequence, reporting every outcome as text."""
    try:
        numbers = parse_sequence(text)
    except SequenceParseError as e:
        return f"❌ ERROR: Failed to validate sequence. {e.message}"

    return validate_sequence(numbers).summary()
