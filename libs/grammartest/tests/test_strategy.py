"""Tests for the fail-fast error strategy and lexer listener."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from antlr4 import ParserRuleContext
from antlr4.IntervalSet import IntervalSet
from antlr4.error.Errors import (
    FailedPredicateException,
    InputMismatchException,
    NoViableAltException,
    RecognitionException,
)

from grammartest.core.errors import ParseRejected
from grammartest.core.naming import Role
from grammartest.core.symbols import ImportSymbolSpace, resolve
from grammartest.harness.pipeline import PipelineBuilder, SourceFile
from grammartest.harness.strategy import FailFastErrorListener, FailFastErrorStrategy

REPO_ROOT = Path(__file__).resolve().parents[3]
GENERATED = REPO_ROOT / "tests" / "conformance" / "fixtures" / "generated"


class ExpectedTokensATN:
    """Answers expected-token queries the way a deserialized ATN does."""

    def __init__(self, *token_types: int) -> None:
        self.expected = IntervalSet()
        for token_type in token_types:
            self.expected.addOne(token_type)
        self.queries: list[int] = []

    def getExpectedTokens(self, state: int, ctx) -> IntervalSet:
        self.queries.append(state)
        return self.expected


class StatementContext(ParserRuleContext):
    def getRuleIndex(self) -> int:
        return 1


def build_parser(tmp_path: Path, text: str):
    space = ImportSymbolSpace(GENERATED)
    builder = PipelineBuilder(
        resolve(space, "foo.bar.baz", "Snafu", Role.LEXER),
        resolve(space, "foo.bar.baz", "Snafu", Role.PARSER),
    )
    path = tmp_path / "input.snf"
    path.write_text(text, encoding="utf-8")
    return builder.build(SourceFile(str(path))).parser


@pytest.fixture
def parser(tmp_path: Path):
    return build_parser(tmp_path, "hello world;\n")


class TestFailFastErrorStrategy:
    def test_no_viable_alternative(self, parser) -> None:
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, NoViableAltException(parser))
        assert exc.value.reason == "no viable alternative at input 'hello'"
        assert (exc.value.line, exc.value.column) == (1, 0)
        assert str(exc.value) == "line 1:0 no viable alternative at input 'hello'"

    def test_no_viable_alternative_does_not_lex_ahead(self, tmp_path: Path) -> None:
        parser = build_parser(tmp_path, "hello;\n" * 5 + "late # error;\n")
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, NoViableAltException(parser))
        assert str(exc.value) == "line 1:0 no viable alternative at input 'hello'"

    def test_no_viable_alternative_spans_buffered_tokens(self, tmp_path: Path) -> None:
        parser = build_parser(tmp_path, "hello world 42;\n")
        start = parser.getCurrentToken()
        offending = parser.getTokenStream().LT(3)
        error = NoViableAltException(parser, startToken=start, offendingToken=offending)
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, error)
        assert exc.value.reason == "no viable alternative at input 'helloworld42'"
        assert (exc.value.line, exc.value.column) == (1, 12)

    def test_mismatched_input_with_expected_token(self, parser) -> None:
        parser.atn = ExpectedTokensATN(parser.SEMI)
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, InputMismatchException(parser))
        assert str(exc.value) == "line 1:0 mismatched input 'hello' expecting ';'"

    def test_mismatched_input_with_expected_set(self, parser) -> None:
        parser.atn = ExpectedTokensATN(parser.WORD, parser.SEMI)
        parser.state = 7
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, InputMismatchException(parser))
        assert exc.value.reason == "mismatched input 'hello' expecting {WORD, ';'}"
        assert parser.atn.queries == [7]

    def test_mismatched_input_without_atn(self, parser) -> None:
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, InputMismatchException(parser))
        assert exc.value.reason == "mismatched input 'hello'"

    def test_failed_predicate(self, parser) -> None:
        parser.state = 4
        parser._interp = SimpleNamespace(atn=SimpleNamespace(states={4: SimpleNamespace(transitions=[None])}))
        parser._ctx = StatementContext()
        error = FailedPredicateException(parser, "self.depth > 0")
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, error)
        assert str(exc.value) == "line 1:0 rule statement failed predicate: {self.depth > 0}?"
        assert parser._ctx.exception is error

    def test_generic_recognition_error(self, parser) -> None:
        error = RecognitionException("custom failure", parser, parser.getInputStream(), None)
        with pytest.raises(ParseRejected, match="custom failure") as exc:
            parser._errHandler.recover(parser, error)
        assert exc.value.__cause__ is error

    def test_carries_source_name(self, parser) -> None:
        with pytest.raises(ParseRejected) as exc:
            parser._errHandler.recover(parser, NoViableAltException(parser))
        assert exc.value.source_name.endswith("input.snf")

    def test_report_error_is_silent(self, parser, capsys: pytest.CaptureFixture[str]) -> None:
        parser._errHandler.reportError(parser, NoViableAltException(parser))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_is_not_a_recognition_exception(self) -> None:
        assert not issubclass(ParseRejected, RecognitionException)

    def test_default_source_name(self) -> None:
        assert FailFastErrorStrategy().source_name is None


class TestFailFastErrorListener:
    def test_syntax_error_raises(self) -> None:
        listener = FailFastErrorListener("some.snf")
        with pytest.raises(ParseRejected) as exc:
            listener.syntaxError(None, None, 3, 7, "token recognition error at: '#'", None)
        assert exc.value.source_name == "some.snf"
        assert str(exc.value) == "line 3:7 token recognition error at: '#'"


class TestParseRejected:
    def test_without_position(self) -> None:
        assert str(ParseRejected("snafu")) == "snafu"

    def test_with_position(self) -> None:
        error = ParseRejected("mismatched input 'x'", "a.snf", 4, 2)
        assert str(error) == "line 4:2 mismatched input 'x'"
        assert error.reason == "mismatched input 'x'"
