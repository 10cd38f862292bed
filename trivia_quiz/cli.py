"""
Command line checks for trivia question banks.

Usage:
    python -m trivia_quiz check
    python -m trivia_quiz check --path my_questions.csv --strict-answers
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import config
from .quiz import QuestionBank


def cmd_check(args: argparse.Namespace) -> int:
    settings = config.get_settings()
    path = Path(args.path) if args.path else settings.questions_path
    bank = QuestionBank(
        path,
        delimiter=args.delimiter or settings.delimiter,
        strict_answers=args.strict_answers or settings.strict_answers,
    )
    ok = bank.load_sync()

    for line in bank.logs:
        print(line)

    if bank.fault is not None:
        print(f"{bank.fault.message} {bank.fault.detail}", file=sys.stderr)
        return 1
    if not ok:
        for idx, step in enumerate(config.REMEDIATION_STEPS, 1):
            print(f"{idx}) {step}", file=sys.stderr)
        return 1

    if args.verbose:
        for idx, question in enumerate(bank.questions, 1):
            print(f"[{idx}] {question.text} -> {question.answer}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trivia quiz question bank tools")
    parser.add_argument("--debug", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Load a question bank and print the load log")
    check_parser.add_argument("--path", help=f"Question file (default: {config.QUESTIONS_PATH.name})")
    check_parser.add_argument("--delimiter", help="Field delimiter for raw lines (default: ',')")
    check_parser.add_argument("--strict-answers", action="store_true", help="Reject rows without a valid A-D answer")
    check_parser.add_argument("-v", "--verbose", action="store_true", help="List the loaded questions")
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
