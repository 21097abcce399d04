from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, Optional

TAPE_LENGTH = 30000
CELL_MASK = 0xFF


class Opcode(Enum):
    MOVE_RIGHT = auto()     # >
    MOVE_LEFT = auto()      # <
    INCREMENT = auto()      # +
    DECREMENT = auto()      # -
    OUTPUT = auto()         # .
    INPUT = auto()          # ,
    JUMP_FORWARD = auto()   # [ target -> index of matching ]
    JUMP_BACKWARD = auto()  # ] target -> index of matching [

    # Extended Type I
    HALT = auto()           # @
    STORE = auto()          # $ register = cell
    RECALL = auto()         # ! cell = register
    SHIFT_RIGHT = auto()    # }
    SHIFT_LEFT = auto()     # {
    NOT = auto()            # ~
    XOR = auto()            # ^ cell ^= register
    AND = auto()            # & cell &= register
    OR = auto()             # | cell |= register

    # Reserved for debugger tooling, no source symbol
    BREAKPOINT = auto()


JUMP_OPCODES = frozenset({Opcode.JUMP_FORWARD, Opcode.JUMP_BACKWARD})

BASIC_SYMBOLS: Dict[str, Opcode] = {
    ">": Opcode.MOVE_RIGHT,
    "<": Opcode.MOVE_LEFT,
    "+": Opcode.INCREMENT,
    "-": Opcode.DECREMENT,
    ".": Opcode.OUTPUT,
    ",": Opcode.INPUT,
    "[": Opcode.JUMP_FORWARD,
    "]": Opcode.JUMP_BACKWARD,
}

EXTENDED_SYMBOLS: Dict[str, Opcode] = {
    "@": Opcode.HALT,
    "$": Opcode.STORE,
    "!": Opcode.RECALL,
    "}": Opcode.SHIFT_RIGHT,
    "{": Opcode.SHIFT_LEFT,
    "~": Opcode.NOT,
    "^": Opcode.XOR,
    "&": Opcode.AND,
    "|": Opcode.OR,
}

OPCODE_SYMBOLS: Dict[Opcode, str] = {
    op: symbol for symbol, op in {**BASIC_SYMBOLS, **EXTENDED_SYMBOLS}.items()
}
OPCODE_SYMBOLS[Opcode.BREAKPOINT] = "#"


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    target: Optional[int] = None  # resolved jump index, jumps only

    def __post_init__(self) -> None:
        if self.opcode in JUMP_OPCODES:
            if self.target is None:
                raise ValueError(f"{self.opcode.name} requires a jump target")
        elif self.target is not None:
            raise ValueError(f"{self.opcode.name} does not take a target")

    @property
    def is_jump(self) -> bool:
        return self.opcode in JUMP_OPCODES

    @property
    def symbol(self) -> str:
        return OPCODE_SYMBOLS[self.opcode]

    def __str__(self):
        return self.symbol

    def __repr__(self) -> str:
        if self.target is None:
            return f"Instruction({self.opcode.name})"
        return f"Instruction({self.opcode.name}, {self.target})"


def render_program(instructions: Iterable[Instruction]) -> str:
    """Turn an instruction sequence back into canonical source text."""
    return "".join(str(inst) for inst in instructions)


__all__ = [
    "BASIC_SYMBOLS",
    "CELL_MASK",
    "EXTENDED_SYMBOLS",
    "Instruction",
    "JUMP_OPCODES",
    "OPCODE_SYMBOLS",
    "Opcode",
    "TAPE_LENGTH",
    "render_program",
]
