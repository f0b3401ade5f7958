"""The harness run loop: resolve once, parse every file, report."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from grammartest.core.errors import ConformanceFailure, ParseRejected
from grammartest.core.naming import Role
from grammartest.core.symbols import ImplementationSymbol, ImportSymbolSpace, SymbolResolver, SymbolSpace
from grammartest.diagnostics.collector import ResultCollector
from grammartest.diagnostics.formatter import HEADER_LINES, ResultFormatter
from grammartest.diagnostics.result import Result
from grammartest.harness.config import HarnessConfig
from grammartest.harness.invoker import RuleInvoker, rejected
from grammartest.harness.pipeline import PipelineBuilder, SourceFile

logger = logging.getLogger(__name__)


class Harness:
    """Run one grammar's conformance sources through its generated parser.

    Files are processed one at a time in discovery order.  A rejected source
    is recorded and the loop moves on; any :class:`GrammarTestError` aborts
    the run immediately and propagates to the caller.
    """

    def __init__(self, config: HarnessConfig, symbol_space: SymbolSpace | None = None) -> None:
        self.config = config
        if symbol_space is None:
            symbol_space = ImportSymbolSpace(config.output_directory)
        self._resolver = SymbolResolver(symbol_space)

    def print_start_info(self) -> None:
        for line in HEADER_LINES:
            logger.info(line)

    def create_lexer_symbol(self) -> ImplementationSymbol:
        return self._resolver.resolve(self.config.identity, Role.LEXER)

    def create_parser_symbol(self) -> ImplementationSymbol:
        return self._resolver.resolve(self.config.identity, Role.PARSER)

    def parse_files(self, source_files: Iterable[SourceFile] | None = None) -> ResultCollector:
        """Parse every source file and collect the results.

        Both classes are resolved before the first file is touched, so a
        misconfigured grammar fails the run without partial results.
        """
        builder = PipelineBuilder(self.create_lexer_symbol(), self.create_parser_symbol())
        invoker = RuleInvoker(self.config.start_rule)
        if source_files is None:
            source_files = self.config.source_files()

        tested = ResultCollector()
        for source in source_files:
            tested.add(self._parse_file(builder, invoker, source))
        return tested

    @staticmethod
    def _parse_file(builder: PipelineBuilder, invoker: RuleInvoker, source: SourceFile) -> Result:
        try:
            handle = builder.build(source)
        except ParseRejected as exc:
            return rejected(source.path, exc)
        return invoker.invoke(handle)

    def execute(self, source_files: Iterable[SourceFile] | None = None) -> ResultCollector | None:
        """Run the harness.

        Returns the collector, or None when the run is skipped.

        Raises:
            GrammarTestError: on any fatal resolution, read, construction or
                invocation problem.
            ConformanceFailure: if at least one source was rejected.
        """
        if self.config.skip:
            logger.info("Execution skipped.")
            return None

        self.print_start_info()
        tested = self.parse_files(source_files)
        logger.info(ResultFormatter().format(tested))

        if tested.has_failed():
            raise ConformanceFailure(tested)
        return tested


def run(
    config: HarnessConfig,
    symbol_space: SymbolSpace | None = None,
    source_files: Iterable[SourceFile] | None = None,
) -> ResultCollector | None:
    """Convenience wrapper around :meth:`Harness.execute`."""
    return Harness(config, symbol_space).execute(source_files)
