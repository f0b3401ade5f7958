"""Invocation of a grammar's start rule by name."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from antlr4 import Parser
from antlr4.error.Errors import ParseCancellationException

from grammartest.core.errors import InvocationError
from grammartest.diagnostics.result import Result
from grammartest.harness.pipeline import ParserHandle

logger = logging.getLogger(__name__)


def rejected(source_name: str, error: ParseCancellationException) -> Result:
    """Log a rejected source and return its failed result."""
    logger.error("Rejected '%s': %s", source_name, error)
    return Result.failed_with(source_name, error)


def _find_rule(parser_type: type, rule_name: str) -> str | None:
    """Return the attribute name implementing *rule_name*, if any.

    Only attributes defined by the generated class (or its own bases) count;
    runtime methods inherited from ``antlr4.Parser`` are not rules.  The
    Python target appends ``_`` to rule names that clash with reserved
    words, so that spelling is tried second.
    """
    for candidate in (rule_name, rule_name + "_"):
        for klass in parser_type.__mro__:
            if klass is Parser:
                break
            if candidate in vars(klass):
                return candidate
    return None


class RuleInvoker:
    """Call a parser's start rule and classify the outcome.

    A normal return passes the file.  A parse cancellation fails it.  Every
    other problem is a misconfiguration and raises :class:`InvocationError`.
    """

    def __init__(self, rule_name: str) -> None:
        if not rule_name:
            raise ValueError("Rule name must not be empty")
        self.rule_name = rule_name

    def invoke(self, handle: ParserHandle) -> Result:
        entry = self._locate(handle.parser)

        try:
            entry()
        except ParseCancellationException as exc:
            return rejected(handle.source_name, exc)
        except Exception as exc:
            raise InvocationError(
                f"Can't invoke method '{self.rule_name}' on target parser ({exc!r})!",
                self.rule_name,
            ) from exc

        return Result.passed(handle.source_name)

    def _locate(self, parser: Any) -> Callable[[], Any]:
        name = self.rule_name
        parser_type = type(parser)

        if name.startswith("_"):
            raise InvocationError(
                f"Can't access method '{name}' on parser "
                f"({parser_type.__qualname__}.{name} is private)!",
                name,
            )

        attribute = _find_rule(parser_type, name)
        if attribute is None:
            raise InvocationError(
                f"Given parser has no method with name '{name}' "
                f"({parser_type.__module__}.{parser_type.__qualname__}.{name}())",
                name,
            )

        entry = getattr(parser, attribute)
        if not callable(entry):
            raise InvocationError(
                f"Can't invoke method '{name}' on target parser (not callable)!", name
            )

        try:
            inspect.signature(entry).bind()
        except (TypeError, ValueError) as exc:
            raise InvocationError(
                f"Can't invoke method '{name}' on target parser (not a zero-argument rule: {exc})!",
                name,
            ) from exc

        return entry


def invoke(handle: ParserHandle, rule_name: str) -> Result:
    """Invoke *rule_name* on *handle*; see :meth:`RuleInvoker.invoke`."""
    return RuleInvoker(rule_name).invoke(handle)
