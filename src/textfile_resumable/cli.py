"""Command-line interface for textfile-resumable."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import NoReturn

from .exceptions import ReaderError
from .reader import TextFileReader


def _positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _open_reader(args: argparse.Namespace, save_every: int = 10) -> TextFileReader:
    reader = TextFileReader(save_every, encoding=args.encoding)
    reader.open(args.file)
    return reader


def cmd_read(args: argparse.Namespace) -> int:
    """Handle the 'read' subcommand."""
    reader = _open_reader(args, args.save_every)
    if args.reset:
        reader.reset_checkpoint()

    delivered = 0

    def handle(line: str, line_number: int) -> None:
        nonlocal delivered
        print(f"{line_number} : {line}")
        delivered += 1
        if args.stop_after is not None and delivered >= args.stop_after:
            reader.stop()

    result = asyncio.run(reader.read(handle))
    print(
        f"Checkpoint at line {result.line} ({result.delivered} delivered, "
        f"{result.skipped} skipped)",
        file=sys.stderr,
    )
    return 0


def cmd_count(args: argparse.Namespace) -> int:
    """Handle the 'count' subcommand."""
    reader = _open_reader(args)
    print(asyncio.run(reader.count_lines()))
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Handle the 'status' subcommand."""
    reader = _open_reader(args)
    total = asyncio.run(reader.count_lines())
    line = reader.checkpoint.line

    if args.json:
        info = {
            "file": str(reader.path.resolve()),
            "checkpoint_file": str(reader.checkpoint_path.resolve()),
            "checkpoint_exists": reader.checkpoint_path.exists(),
            "line": line,
            "total_lines": total,
        }
        print(json.dumps(info, indent=2))
    else:
        print(f"File: {reader.path.resolve()}")
        print(f"Checkpoint: {reader.checkpoint_path.resolve()}")
        print(f"Line: {line:,} of {total:,}")

    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    """Handle the 'reset' subcommand."""
    reader = _open_reader(args)
    reader.reset_checkpoint()
    print(f"Checkpoint reset: {reader.checkpoint_path}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="textfile-resume",
        description="Resumable line-by-line reading of large text files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log checkpoint activity"
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", help="Path to text file")
    common.add_argument(
        "--encoding", default="utf-8", help="Text encoding (default: utf-8)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # read subcommand
    read_parser = subparsers.add_parser(
        "read",
        parents=[common],
        help="Print lines, resuming from the checkpoint",
        description="Print each remaining line as '<number> : <line>'",
    )
    read_parser.add_argument(
        "--stop-after", type=_positive_int, help="Stop after delivering N lines"
    )
    read_parser.add_argument(
        "--save-every",
        type=_positive_int,
        default=10,
        help="Save the checkpoint every N lines (default: 10)",
    )
    read_parser.add_argument(
        "--reset", action="store_true", help="Start from the first line"
    )
    read_parser.set_defaults(func=cmd_read)

    # count subcommand
    count_parser = subparsers.add_parser(
        "count",
        parents=[common],
        help="Count lines",
        description="Print the total number of lines in the file",
    )
    count_parser.set_defaults(func=cmd_count)

    # status subcommand
    status_parser = subparsers.add_parser(
        "status",
        parents=[common],
        help="Show checkpoint status",
        description="Display checkpoint location, stored line and total lines",
    )
    status_parser.add_argument(
        "--json", action="store_true", help="Output as JSON for scripting"
    )
    status_parser.set_defaults(func=cmd_status)

    # reset subcommand
    reset_parser = subparsers.add_parser(
        "reset",
        parents=[common],
        help="Reset the checkpoint",
        description="Set the checkpoint back to the first line",
    )
    reset_parser.set_defaults(func=cmd_reset)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        code = args.func(args)
    except (ReaderError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
