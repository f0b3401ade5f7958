"""Conformance test harness for ANTLR4-generated Python parsers."""

from grammartest.core import (
    ConfigError,
    ConformanceFailure,
    ConstructionError,
    GrammarTestError,
    InvocationError,
    ParseRejected,
    ResolutionError,
    SourceReadError,
)
from grammartest.diagnostics import Result, ResultCollector, ResultFormatter
from grammartest.harness import Harness, HarnessConfig, SourceFile, load_config, run

__all__ = [
    "GrammarTestError",
    "ResolutionError",
    "SourceReadError",
    "ConstructionError",
    "InvocationError",
    "ConfigError",
    "ParseRejected",
    "ConformanceFailure",
    "Result",
    "ResultCollector",
    "ResultFormatter",
    "HarnessConfig",
    "SourceFile",
    "load_config",
    "Harness",
    "run",
]

__version__ = "1.0.0"
