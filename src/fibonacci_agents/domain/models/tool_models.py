"""Result models returned by the Fibonacci tool set."""

from pydantic import BaseModel, Field


class SequenceValidationResult(BaseModel):
    """Structured outcome of validating a candidate Fibonacci sequence."""

    valid: bool
    provided: list[int] = Field(default_factory=list)
    expected: list[int] = Field(default_factory=list)
    mismatch_positions: list[int] = Field(default_factory=list)
    length_mismatch: bool = False
    reason: str | None = None

    def describe_differences(self) -> str:
        """Render mismatch positions the way the validator reports them."""
        if not self.mismatch_positions and not self.length_mismatch:
            return "none"
        positions = ", ".join(str(position) for position in self.mismatch_positions)
        if self.length_mismatch:
            return f"{positions} (length mismatch)" if positions else "(length mismatch)"
        return positions

    def summary(self) -> str:
        """Human readable verdict used as the validation tool's reply text."""
        if self.reason and not self.provided:
            return f"❌ INVALID: {self.reason}"

        provided = ", ".join(str(n) for n in self.provided)
        if self.valid:
            return f"✅ VALID: The sequence [{provided}] is a correct Fibonacci sequence."

        expected = ", ".join(str(n) for n in self.expected)
        return (
            "❌ INVALID: The sequence contains errors.\n"
            f"Expected: [{expected}]\n"
            f"Provided: [{provided}]\n"
            f"Differences found at positions: {self.describe_differences()}"
        )
