#!/usr/bin/env python3
"""Print the parsed content record of a post as JSON.

Usage:
    python scripts/dump_record.py content/2014-03-02-lambdas-and-effectively-final.md
    python scripts/dump_record.py post.md --strict --indent 0
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from postrecord.main import configure_logging
from postrecord.pipeline import parse_file
from postrecord.settings import get_settings


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse a post and dump its content record.")
    parser.add_argument("path", type=Path, help="Post file to parse.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when required metadata keys are missing.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact).")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    result = parse_file(args.path, settings=settings)
    json.dump(result.asdict(), sys.stdout, indent=args.indent or None, ensure_ascii=False)
    sys.stdout.write("\n")

    if args.strict and result.missing_keys:
        print(f"missing required metadata keys: {', '.join(result.missing_keys)}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
