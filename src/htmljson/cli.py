from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO

from htmljson.escaper import StreamEscaper
from htmljson.helpers import is_plausibly_escaped

DEFAULT_CHUNK_SIZE = 64 * 1024

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="htmljson",
        description="htmljson CLI for making serialized JSON safe to embed in HTML",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    escape_parser = subparsers.add_parser(
        "escape",
        help="Stream JSON from a file or stdin and write the HTML-safe result",
    )
    escape_parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="JSON file to read (default: stdin)",
    )
    escape_parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help="Number of bytes read per chunk",
    )
    escape_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="File to write to (default: stdout)",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Report whether a piece of text looks HTML escaped",
    )
    check_parser.add_argument("text", help="Text to check")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    command: str | None = args.command

    if command is None:
        parser.print_help()
        sys.exit(1)

    if command == "escape":
        if args.chunk_size < 1:
            parser.error("--chunk-size must be a positive integer")
        sys.exit(escape_command(args.input, args.output, args.chunk_size))

    if command == "check":
        sys.exit(check_command(args.text))


def escape_command(
    input_path: Path | None, output_path: Path | None, chunk_size: int
) -> int:
    if input_path is not None and not input_path.is_file():
        print(f"No such file: {input_path}", file=sys.stderr)
        return 1

    with ExitStack() as stack:
        try:
            source: BinaryIO = (
                stack.enter_context(open(input_path, "rb"))
                if input_path is not None
                else sys.stdin.buffer
            )
            target: BinaryIO = (
                stack.enter_context(open(output_path, "wb"))
                if output_path is not None
                else sys.stdout.buffer
            )
        except OSError as exc:
            print(f"Cannot open file: {exc}", file=sys.stderr)
            return 1
        total = stream(source, target, chunk_size)
        if output_path is None:
            target.flush()

    logger.debug("Escaped %d bytes in chunks of %d", total, chunk_size)
    return 0


def stream(source: BinaryIO, target: BinaryIO, chunk_size: int) -> int:
    total = 0
    with StreamEscaper(target) as escaper:
        while chunk := source.read(chunk_size):
            total += escaper.process(chunk)
    return total


def check_command(text: str) -> int:
    if is_plausibly_escaped(text):
        print("escaped")
        return 0
    print("not escaped")
    return 1


if __name__ == "__main__":
    main()
