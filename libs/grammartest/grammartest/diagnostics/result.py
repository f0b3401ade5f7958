"""Per-file outcome of a conformance parse."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=False)
class Result:
    """Outcome of parsing one source file.

    A result either passed, or failed with the captured rejection.  The
    error is present if and only if the result failed.
    """

    tested_file: str
    failed: bool = False
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if self.failed and self.error is None:
            raise ValueError(f"Failed result for '{self.tested_file}' requires an error")
        if not self.failed and self.error is not None:
            raise ValueError(f"Passed result for '{self.tested_file}' must not carry an error")

    @classmethod
    def passed(cls, tested_file: str) -> Result:
        """Create a passed result."""
        return cls(tested_file)

    @classmethod
    def failed_with(cls, tested_file: str, error: BaseException) -> Result:
        """Create a failed result capturing *error*."""
        return cls(tested_file, failed=True, error=error)

    @property
    def message(self) -> str | None:
        """The rejection message, or None for passed results."""
        if self.error is None:
            return None
        return str(self.error)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return (
            self.tested_file == other.tested_file
            and self.failed == other.failed
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.tested_file, self.failed, self.message))

    def __str__(self) -> str:
        if self.failed:
            return f"{self.tested_file}: FAILED: {self.message}"
        return f"{self.tested_file}: passed"
