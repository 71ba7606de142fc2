"""CLI entrypoint for the gendoc command."""

from __future__ import annotations

import argparse
import sys
import textwrap
from pathlib import Path

from ..logging import configure_logging
from .assembly import generate
from .config import load_config
from .errors import GendocError

_EXAMPLES = textwrap.dedent(
    """\
    Example:
      gendoc -o stdout
      gendoc -o stdout -l zh-CN
      gendoc -o README.md
      gendoc -o README.zh-CN.md -l zh-CN
    """
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gendoc",
        description="Collect and dump all exported functions of the sub-packages.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Root directory whose sub-packages are scanned (defaults to current directory).",
    )
    parser.add_argument(
        "-l",
        "--lang",
        default=None,
        help="Package desc message language. allow: en, zh-CN (default: en).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="The result output file. If is 'stdout', will direct print it (default: ./metadata.log).",
    )
    parser.add_argument(
        "-t",
        "--template-dir",
        default=None,
        help=(
            "The template file dir, will inject metadata to the README template "
            "(default: ./internal/template). Pass an empty string to skip the template."
        ),
    )
    parser.add_argument(
        "-b",
        "--base-pkg",
        default=None,
        help="Import path prefix shown for each package (defaults to the root directory name).",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a config file (defaults to <path>/.gendoc.yml).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gendoc."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.path), args.config).with_overrides(
            lang=args.lang,
            output=args.output,
            template_dir=args.template_dir,
            base_pkg=args.base_pkg,
        )
        result = generate(config)
    except GendocError as exc:
        parser.exit(1, f"gendoc failed: {exc}\n")

    if not config.to_stdout:
        print(f"OK. write result to the {result.output}")


if __name__ == "__main__":
    main(sys.argv[1:])
