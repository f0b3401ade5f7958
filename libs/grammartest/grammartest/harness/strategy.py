"""Fail-fast error handling for parsers and lexers under test.

A conformance run must surface the first deviation from the grammar.  ANTLR's
default strategy recovers and resynchronises, which lets a parser reach the
end of a rule despite bad input, so it is replaced here.
"""

from __future__ import annotations

from antlr4 import Parser, Token
from antlr4.error.ErrorListener import ErrorListener
from antlr4.error.ErrorStrategy import BailErrorStrategy
from antlr4.error.Errors import (
    FailedPredicateException,
    InputMismatchException,
    NoViableAltException,
    RecognitionException,
)

from grammartest.core.errors import ParseRejected


class FailFastErrorStrategy(BailErrorStrategy):
    """Abort the parse with :class:`ParseRejected` on the first error."""

    def __init__(self, source_name: str | None = None) -> None:
        super().__init__()
        self.source_name = source_name

    def reportError(self, recognizer: Parser, e: RecognitionException) -> None:
        # The rejection raised by recover() carries the message.
        pass

    def recover(self, recognizer: Parser, e: RecognitionException) -> None:
        context = recognizer._ctx
        while context is not None:
            context.exception = e
            context = context.parentCtx

        token = e.offendingToken or recognizer.getCurrentToken()
        line = getattr(token, "line", None)
        column = getattr(token, "column", None)
        raise ParseRejected(self.describe(recognizer, e), self.source_name, line, column) from e

    def describe(self, recognizer: Parser, e: RecognitionException) -> str:
        """Render *e* the way ANTLR's console listener words it."""
        if isinstance(e, NoViableAltException):
            tokens = recognizer.getTokenStream()
            if tokens is None:
                text = "<unknown input>"
            elif e.startToken.type == Token.EOF:
                text = "<EOF>"
            else:
                text = _buffered_text(tokens, e.startToken, e.offendingToken)
            return "no viable alternative at input " + self.escapeWSAndQuote(text)

        if isinstance(e, InputMismatchException):
            msg = "mismatched input " + self.getTokenErrorDisplay(e.offendingToken)
            expected = _expected_tokens(recognizer, e)
            if expected:
                msg += " expecting " + expected
            return msg

        if isinstance(e, FailedPredicateException):
            rule_name = recognizer.ruleNames[recognizer._ctx.getRuleIndex()]
            return f"rule {rule_name} {e.message}"

        return e.message or type(e).__name__


def _buffered_text(tokens, start: Token, stop: Token) -> str:
    # Only tokens already buffered; getText() fills the stream and lexes ahead.
    buffered = getattr(tokens, "tokens", None)
    if buffered is None or not 0 <= start.tokenIndex <= stop.tokenIndex < len(buffered):
        return start.text
    text = []
    for token in buffered[start.tokenIndex:stop.tokenIndex + 1]:
        if token.type == Token.EOF:
            break
        text.append(token.text)
    return "".join(text)


def _expected_tokens(recognizer: Parser, e: RecognitionException) -> str | None:
    # Hand-written parsers have no ATN to compute the expected set from.
    if getattr(recognizer, "atn", None) is None:
        return None
    expected = e.getExpectedTokens()
    if expected is None:
        return None
    return expected.toString(recognizer.literalNames, recognizer.symbolicNames)


class FailFastErrorListener(ErrorListener):
    """Turn the first lexer error into :class:`ParseRejected`.

    Lexers do not use an error strategy; without this listener a token
    recognition error is printed and the offending characters skipped.
    """

    def __init__(self, source_name: str | None = None) -> None:
        super().__init__()
        self.source_name = source_name

    def syntaxError(self, recognizer, offendingSymbol, line, column, msg, e):
        raise ParseRejected(msg, self.source_name, line, column)
