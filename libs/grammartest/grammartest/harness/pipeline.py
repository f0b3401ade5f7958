"""Construction of the source -> lexer -> tokens -> parser pipeline."""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from antlr4 import CommonTokenStream, InputStream

from grammartest.core.errors import ConstructionError, ParseRejected, SourceReadError
from grammartest.core.naming import Role
from grammartest.core.symbols import ImplementationSymbol
from grammartest.harness.strategy import FailFastErrorListener, FailFastErrorStrategy

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class SourceFile:
    """One candidate conformance input."""

    path: str
    encoding: str = DEFAULT_ENCODING


@dataclass
class ParserHandle:
    """A freshly built parser bound to one source file's tokens."""

    parser: Any
    source_name: str


def read_source(source: SourceFile) -> str:
    """Read and decode *source*.

    Raises:
        SourceReadError: if the file is missing or unreadable, the encoding
            is unknown, or the bytes do not decode.
    """
    try:
        codec = codecs.lookup(source.encoding)
    except LookupError as exc:
        raise SourceReadError(
            f"Unsupported encoding '{source.encoding}' for '{source.path}'!", source.path
        ) from exc

    try:
        data = Path(source.path).read_bytes()
    except OSError as exc:
        raise SourceReadError(f"Can not read '{source.path}' ({exc})!", source.path) from exc

    try:
        return codec.decode(data)[0]
    except UnicodeDecodeError as exc:
        raise SourceReadError(
            f"Can not decode '{source.path}' as {codec.name} ({exc})!", source.path
        ) from exc


class PipelineBuilder:
    """Build per-file parsers from resolved lexer and parser classes.

    The symbols are resolved once per run and reused for every file; each
    call to :meth:`build` returns a new, independent parser.
    """

    def __init__(self, lexer_symbol: ImplementationSymbol, parser_symbol: ImplementationSymbol) -> None:
        if lexer_symbol.role is not Role.LEXER:
            raise ValueError(f"'{lexer_symbol.name}' is not a lexer symbol")
        if parser_symbol.role is not Role.PARSER:
            raise ValueError(f"'{parser_symbol.name}' is not a parser symbol")
        self._lexer_symbol = lexer_symbol
        self._parser_symbol = parser_symbol

    def build(self, source: SourceFile) -> ParserHandle:
        """Build a fail-fast parser over *source*.

        Raises:
            SourceReadError: if the source can not be read or decoded.
            ConstructionError: if the lexer or parser constructor raises.
            ParseRejected: if the lexer rejects input while the parser is
                being constructed.
        """
        logger.info("Parse file '%s'...", Path(source.path).absolute())

        stream = InputStream(read_source(source))
        stream.name = source.path

        lexer = self._construct(self._lexer_symbol, stream)
        lexer.removeErrorListeners()
        lexer.addErrorListener(FailFastErrorListener(source.path))

        tokens = CommonTokenStream(lexer)
        parser = self._construct(self._parser_symbol, tokens)
        parser.removeErrorListeners()
        parser._errHandler = FailFastErrorStrategy(source.path)

        return ParserHandle(parser, source.path)

    @staticmethod
    def _construct(symbol: ImplementationSymbol, stream: Any) -> Any:
        try:
            return symbol.construct(stream)
        except ParseRejected:
            # A parser may pull tokens while it is constructed, so a lexer
            # rejection can surface here; it is still a per-file outcome.
            raise
        except Exception as exc:
            raise ConstructionError(
                f"Can not instantiate {symbol.role} '{symbol.name}' ({exc})!", symbol.name
            ) from exc


def build(lexer_symbol: ImplementationSymbol, parser_symbol: ImplementationSymbol, source: SourceFile) -> ParserHandle:
    """Build a parser for *source*; see :meth:`PipelineBuilder.build`."""
    return PipelineBuilder(lexer_symbol, parser_symbol).build(source)
