from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Optional

from tape_vm.parser import ParseError
from tape_vm.program import Program
from tape_vm.vm_errors import VMRuntimeError

from .debug import format_parse_error, format_runtime_error
from .modes import MODE_HELP, ParseMode, UnsupportedModeError
from .runtime import compile_source

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_STEP_LIMIT = 2


def _build_parser() -> argparse.ArgumentParser:
    mode_lines = "\n".join(f"  {mode.value:<4} {text}" for mode, text in MODE_HELP.items())
    parser = argparse.ArgumentParser(
        prog="brfk",
        description=(
            "A Brainfuck interpreter. Supports basic and Extended Type I Brainfuck."
        ),
        epilog=f"modes:\n{mode_lines}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-p", "--path", dest="path", metavar="FILE", help="Path to the Brainfuck source code")
    source.add_argument("-e", "--execute", dest="inline", metavar="CODE", help="Execute a source string")
    parser.add_argument(
        "--mode",
        default=ParseMode.BASIC.value,
        choices=[mode.value for mode in ParseMode],
        metavar="MODE",
        help="The mode that the source should be parsed in (default: b)",
    )
    parser.add_argument("--trace", action="store_true", help="Write an execution trace to stderr")
    parser.add_argument("--dump", action="store_true", help="Print pointer, storage and tape after execution")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        metavar="N",
        help="Stop after N instructions (exit status 2 if the program is still running)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.max_steps is not None and args.max_steps < 0:
        parser.error("--max-steps must be non-negative")

    if args.inline is not None:
        source = args.inline
        source_name = "<inline>"
    else:
        source_name = args.path
        try:
            source = pathlib.Path(args.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"brfk: cannot read {args.path}: {exc}", file=sys.stderr)
            return EXIT_ERROR

    try:
        instructions = compile_source(source, ParseMode.from_flag(args.mode))
    except UnsupportedModeError as exc:
        print(f"brfk: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except ParseError as exc:
        print(format_parse_error(exc, source_name), file=sys.stderr)
        return EXIT_ERROR

    program = Program(instructions, trace=sys.stderr)
    try:
        status = _execute(program, args.trace, args.max_steps)
    except VMRuntimeError as exc:
        print(format_runtime_error(exc, program), file=sys.stderr)
        return EXIT_ERROR

    if args.dump:
        sys.stdout.write("\n" + str(program))
        sys.stdout.flush()
    return status


def _execute(program: Program, trace: bool, max_steps: Optional[int]) -> int:
    if max_steps is None:
        program.run(debug=trace)
        return EXIT_OK
    while not program.is_done:
        if program.steps >= max_steps:
            print(f"brfk: stopped after {program.steps} steps", file=sys.stderr)
            return EXIT_STEP_LIMIT
        if trace:
            program.trace_step()
        program.step()
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
