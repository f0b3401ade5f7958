"""Result collector for accumulating per-file outcomes during a run."""

from __future__ import annotations

from collections.abc import Iterator

from grammartest.diagnostics.result import Result


class ResultCollector:
    """Accumulates results in insertion order.

    Append-only while a run is in progress and read-only afterwards.  There
    is exactly one writer (the run loop), so no locking is done here.
    """

    def __init__(self) -> None:
        self._results: list[Result] = []

    def add(self, result: Result) -> None:
        """Record the outcome of one file."""
        self._results.append(result)

    def count(self) -> int:
        """Return the number of recorded results."""
        return len(self._results)

    def count_failed(self) -> int:
        """Return the number of failed results."""
        return sum(1 for r in self._results if r.failed)

    def has_failed(self) -> bool:
        """Return True if any recorded result failed."""
        return any(r.failed for r in self._results)

    def results(self) -> list[Result]:
        """Return a copy of all results in insertion order."""
        return list(self._results)

    def failed(self) -> list[Result]:
        """Return the failed results in insertion order."""
        return [r for r in self._results if r.failed]

    def __iter__(self) -> Iterator[Result]:
        return iter(list(self._results))

    def __len__(self) -> int:
        return len(self._results)
