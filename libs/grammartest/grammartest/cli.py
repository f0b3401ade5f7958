"""Command line entry point for the grammar conformance harness.

Exit status: 0 when every source parsed (or the run was skipped), 1 when at
least one source was rejected, 2 on any fatal harness error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from grammartest.core.errors import ConformanceFailure, GrammarTestError
from grammartest.harness.config import DEFAULT_CONFIG_NAME, load_config
from grammartest.harness.runner import Harness

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

LOG_FORMAT = "%(levelname)s %(message)s"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grammartest",
        description="Parse conformance sources with an ANTLR4-generated parser.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  grammartest --config grammartest.yaml\n"
            "  grammartest --grammar-name Snafu --package-name foo.bar \\\n"
            "      --start-rule startRule --output-directory build/gen src/*.snf\n"
        ),
    )
    parser.add_argument("files", nargs="*", help="Sources to test (default: configured file sets)")
    parser.add_argument("--config", "-c", default=None,
                        help=f"YAML configuration file (default: ./{DEFAULT_CONFIG_NAME} if present)")
    parser.add_argument("--start-rule", default=None, help="Parser rule every source must match")
    parser.add_argument("--grammar-name", default=None, help="Grammar name, e.g. Snafu")
    parser.add_argument("--package-name", default=None, help="Package the classes were generated into")
    parser.add_argument("--encoding", default=None, help="Source encoding (default: utf-8)")
    parser.add_argument("--output-directory", default=None,
                        help="Directory holding the generated lexer and parser modules")
    parser.add_argument("--skip", action="store_true", default=None, help="Skip the run")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def _config_path(explicit: str | None) -> str | None:
    if explicit is not None:
        return explicit
    default = Path(DEFAULT_CONFIG_NAME)
    return str(default) if default.is_file() else None


def _setup_logging(raw_level: str) -> None:
    level = getattr(logging, raw_level.strip().upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    _setup_logging(args.log_level)

    output_directory = args.output_directory
    if output_directory is not None:
        output_directory = str(Path(output_directory).absolute())

    try:
        config = load_config(
            _config_path(args.config),
            start_rule=args.start_rule,
            grammar_name=args.grammar_name,
            package_name=args.package_name,
            encoding=args.encoding,
            output_directory=output_directory,
            skip=args.skip,
        )
        source_files = config.source_files(args.files) if args.files else None
        Harness(config).execute(source_files)
    except ConformanceFailure as e:
        print(f"FAILED: {e}", file=sys.stderr)
        return EXIT_FAILED
    except GrammarTestError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
