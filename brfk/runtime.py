from __future__ import annotations

import pathlib
from typing import BinaryIO, List, Optional, TextIO

from tape_vm.bytecode import Instruction
from tape_vm.parser import parse
from tape_vm.program import Program

from .modes import ParseMode


def compile_source(source: str, mode: ParseMode = ParseMode.BASIC) -> List[Instruction]:
    return parse(source, extended=mode.extended)


def run_source(
    source: str,
    mode: ParseMode = ParseMode.BASIC,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    debug: bool = False,
    trace: Optional[TextIO] = None,
) -> Program:
    instructions = compile_source(source, mode)
    program = Program(instructions, stdin=stdin, stdout=stdout, trace=trace)
    return program.run(debug=debug)


def run_script(
    path: str,
    mode: ParseMode = ParseMode.BASIC,
    *,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> Program:
    data = pathlib.Path(path).read_text(encoding="utf-8")
    return run_source(data, mode, stdin=stdin, stdout=stdout)


__all__ = ["compile_source", "run_source", "run_script"]
