from .bytecode import (
    BASIC_SYMBOLS,
    EXTENDED_SYMBOLS,
    TAPE_LENGTH,
    Instruction,
    Opcode,
    render_program,
)
from .parser import ParseError, UnmatchedJumpError, parse
from .program import Program
from .tape_format import format_program, format_snapshot, format_window
from .vm_errors import TapeIOError, VMRuntimeError
from .vm_events import TapeSnapshot

__all__ = [
    "BASIC_SYMBOLS",
    "EXTENDED_SYMBOLS",
    "Instruction",
    "Opcode",
    "ParseError",
    "Program",
    "TAPE_LENGTH",
    "TapeIOError",
    "TapeSnapshot",
    "UnmatchedJumpError",
    "VMRuntimeError",
    "format_program",
    "format_snapshot",
    "format_window",
    "parse",
    "render_program",
]
