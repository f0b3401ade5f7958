"""Harness subpackage (Layer 2: depends on core and diagnostics)."""

from grammartest.harness.config import HarnessConfig, load_config
from grammartest.harness.discovery import FileSet, files_to_test
from grammartest.harness.invoker import RuleInvoker, invoke
from grammartest.harness.pipeline import ParserHandle, PipelineBuilder, SourceFile, build
from grammartest.harness.runner import Harness, run
from grammartest.harness.strategy import FailFastErrorListener, FailFastErrorStrategy

__all__ = [
    "FailFastErrorStrategy",
    "FailFastErrorListener",
    "SourceFile",
    "ParserHandle",
    "PipelineBuilder",
    "build",
    "RuleInvoker",
    "invoke",
    "FileSet",
    "files_to_test",
    "HarnessConfig",
    "load_config",
    "Harness",
    "run",
]
