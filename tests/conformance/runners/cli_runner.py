"""Conformance runner that drives the harness through its command line."""

from __future__ import annotations

import contextlib
import io
import logging
import re
from pathlib import Path

from grammartest.cli import EXIT_ERROR, EXIT_FAILED, EXIT_OK, main
from tests.conformance.runner import CONFIG_PATH, RunOutcome

_SUMMARY = re.compile(r"Sources parsed: (\d+), Failed: (\d+)")


class _Capture(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def _parse_failures(report: str) -> list[tuple[str, str]]:
    """Read (file, message) pairs back out of the formatted report."""
    failures: list[tuple[str, str]] = []
    in_section = False
    for line in report.splitlines():
        if line == "Failed sources:":
            in_section = True
        elif in_section and line.startswith("    "):
            failures[-1] = (failures[-1][0], line.strip())
        elif in_section and line.startswith("  "):
            failures.append((line.strip(), ""))
        elif in_section:
            in_section = False
    return failures


class CliRunner:
    """Runs ``grammartest.cli.main`` and reads the logged report."""

    name = "cli"

    def run(self, config_path: Path = CONFIG_PATH, files: list[str] | None = None, **overrides: object) -> RunOutcome:
        argv = ["--config", str(config_path)]
        for key, value in overrides.items():
            if value is None:
                continue
            flag = "--" + key.replace("_", "-")
            if value is True:
                argv.append(flag)
            else:
                argv.extend([flag, str(value)])
        argv.extend(files or [])

        capture = _Capture()
        logger = logging.getLogger("grammartest")
        previous_level = logger.level
        logger.addHandler(capture)
        logger.setLevel(logging.INFO)
        stderr = io.StringIO()
        try:
            with contextlib.redirect_stderr(stderr):
                status = main(argv)
        finally:
            logger.removeHandler(capture)
            logger.setLevel(previous_level)

        if status == EXIT_ERROR:
            errors = [line for line in stderr.getvalue().splitlines() if line.startswith("ERROR: ")]
            return RunOutcome(status="error", error=errors[-1].removeprefix("ERROR: "))

        reports = [m for m in capture.messages if _SUMMARY.search(m)]
        if not reports:
            assert status == EXIT_OK
            return RunOutcome(status="skipped")

        report = reports[-1]
        count, count_failed = (int(g) for g in _SUMMARY.search(report).groups())
        return RunOutcome(
            status="failed" if status == EXIT_FAILED else "passed",
            count=count,
            count_failed=count_failed,
            failures=_parse_failures(report),
        )
