"""
Repo Insight - command line entry point
Recovers structured values and renderable diagrams from saved model responses
"""
import argparse
import json
import sys
from typing import List, Optional

from loguru import logger

from recovery.diagram import normalize_diagram
from recovery.json_repair import RecoveryFailure, recover_structured_value
from utils.config import settings, setup_logging


def _read_input(path: Optional[str]) -> str:
    """Read the whole response from ``path`` or stdin when no path is given."""
    if not path or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_recover(args: argparse.Namespace) -> int:
    """Print the recovered value as JSON; exit status 1 when recovery fails."""
    result = recover_structured_value(
        _read_input(args.file), excerpt_limit=settings.recovery_excerpt_chars
    )
    if isinstance(result, RecoveryFailure):
        logger.error(
            f"Could not interpret AI response: {result.kind.value} at "
            f"'{result.stage}': {result.message}"
        )
        if result.excerpt:
            logger.debug(f"Offending text:\n{result.excerpt}")
        return 1

    print(json.dumps(result, indent=args.indent, ensure_ascii=False))
    return 0


def cmd_diagram(args: argparse.Namespace) -> int:
    """Print the normalized diagram."""
    print(normalize_diagram(_read_input(args.file)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-insight",
        description="Recover structured output from raw AI model responses.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    recover = subparsers.add_parser("recover", help="recover a JSON value from a response")
    recover.add_argument("file", nargs="?", help="response file (default: stdin)")
    recover.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    recover.set_defaults(handler=cmd_recover)

    diagram = subparsers.add_parser("diagram", help="normalize a mermaid diagram")
    diagram.add_argument("file", nargs="?", help="diagram file (default: stdin)")
    diagram.set_defaults(handler=cmd_diagram)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    log_file = setup_logging(log_file_prefix="repo_insight")
    if log_file:
        logger.debug(f"Logging to: {log_file}")

    try:
        return args.handler(args)
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
