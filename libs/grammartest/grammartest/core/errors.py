"""Error taxonomy for the grammar conformance harness.

Every :class:`GrammarTestError` is fatal to a run: it means the harness or
its environment is broken, not that a tested source is malformed.
:class:`ParseRejected` is the only expected per-file outcome and is recorded
as a failed result instead of aborting the run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from antlr4.error.Errors import ParseCancellationException

if TYPE_CHECKING:
    from grammartest.diagnostics.collector import ResultCollector


class GrammarTestError(Exception):
    """Base class for errors that abort a harness run."""


class ResolutionError(GrammarTestError):
    """A generated lexer or parser could not be resolved by name."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class SourceReadError(GrammarTestError):
    """A source file could not be read or decoded."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConstructionError(GrammarTestError):
    """Instantiating a resolved lexer or parser raised."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class InvocationError(GrammarTestError):
    """The start rule could not be located or invoked on the parser."""

    def __init__(self, message: str, rule_name: str | None = None) -> None:
        super().__init__(message)
        self.rule_name = rule_name


class ConfigError(GrammarTestError):
    """The harness configuration could not be loaded or is invalid."""


class ParseRejected(ParseCancellationException):
    """Raised on the first malformed input of a tested source.

    Not a ``RecognitionException``: generated rule bodies catch those to run
    error recovery, and this signal must reach the rule invoker untouched.
    """

    def __init__(
        self,
        reason: str,
        source_name: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.reason = reason
        self.source_name = source_name
        self.line = line
        self.column = column
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return self.reason
        return f"line {self.line}:{self.column} {self.reason}"

    def __str__(self) -> str:
        return self._render()


class ConformanceFailure(Exception):
    """The run completed but at least one source was rejected."""

    def __init__(self, collector: ResultCollector) -> None:
        self.collector = collector
        super().__init__(
            f"{collector.count_failed()} of {collector.count()} sources failed to parse"
        )
