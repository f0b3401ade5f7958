"""Human readable rendering of a finished run."""

from __future__ import annotations

from grammartest.diagnostics.collector import ResultCollector

RULE = "-" * 55

HEADER_LINES: tuple[str, ...] = (RULE, "ANTLR4 Grammar Test", RULE)


class ResultFormatter:
    """Render collector state as a report.

    The report holds a header, every failed file with its rejection
    message, and a summary line with the total and failed counts.
    """

    def format(self, collector: ResultCollector) -> str:
        lines: list[str] = ["", RULE, "Results:", RULE]

        failed = collector.failed()
        if failed:
            lines.append("")
            lines.append("Failed sources:")
            for result in failed:
                lines.append(f"  {result.tested_file}")
                lines.append(f"    {result.message}")

        lines.append("")
        lines.append(self.format_summary(collector))
        lines.append("")
        return "\n".join(lines)

    @staticmethod
    def format_summary(collector: ResultCollector) -> str:
        return f"Sources parsed: {collector.count()}, Failed: {collector.count_failed()}"
