from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .api import MachineOptions, load_machine, read_source
from .errors import ParseError
from .machine import MEM_SIZE
from .state import Status
from .view import DisplaySpec, render

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_READ_FAILED = 1
EXIT_PARSE_FAILED = 2
EXIT_TAPE_FAULT = 3
EXIT_OUTPUT_FAILED = 4
EXIT_USAGE = 64


def init_logging(debug: bool = False) -> None:
    """Send log records to stderr so they never mix with program output."""
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    lvl = logging.DEBUG if debug else logging.WARNING
    root.setLevel(lvl)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(lvl)
    if debug:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s:%(lineno)d %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    root.addHandler(handler)


class _ArgumentParser(argparse.ArgumentParser):
    """Report bad flags with EXIT_USAGE so they never look like a parse failure."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="bfstep",
        description="Step-by-step interpreter for the eight-instruction tape language.",
    )
    parser.add_argument("file", help="Path to the program source")
    parser.add_argument("--tape-size", type=int, default=MEM_SIZE, help=f"Number of tape cells (default {MEM_SIZE})")
    parser.add_argument("--trace", action="store_true", help="Render the machine state to stderr after every step")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI highlighting in --trace output")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_logging(debug=args.debug)

    if args.tape_size <= 0:
        parser.error("--tape-size must be positive")

    try:
        source = read_source(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"File read failed: {e}", file=sys.stderr)
        return EXIT_READ_FAILED

    try:
        machine = load_machine(
            source,
            options=MachineOptions(tape_size=args.tape_size),
            input_stream=sys.stdin.buffer,
            output_stream=sys.stdout.buffer,
        )
    except ParseError as e:
        print(f"Failed to parse program!\n{e}", file=sys.stderr)
        return EXIT_PARSE_FAILED

    try:
        if args.trace:
            spec = DisplaySpec(color=not args.no_color)
            while not machine.status.terminal:
                machine.step()
                print(render(machine.snapshot(), machine.source_lines, spec), file=sys.stderr)
        else:
            machine.run_to_completion()
    except OSError as e:
        print(f"Output failed: {e}", file=sys.stderr)
        return EXIT_OUTPUT_FAILED

    if machine.status is Status.FAILED:
        print(str(machine.fault), file=sys.stderr)
        return EXIT_TAPE_FAULT

    logger.debug("output: %d bytes", len(machine.output))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
