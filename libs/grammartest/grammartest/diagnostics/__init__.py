"""Result diagnostics subpackage (Layer 0: zero internal dependencies)."""

from grammartest.diagnostics.collector import ResultCollector
from grammartest.diagnostics.formatter import HEADER_LINES, ResultFormatter
from grammartest.diagnostics.result import Result

__all__ = ["Result", "ResultCollector", "ResultFormatter", "HEADER_LINES"]
