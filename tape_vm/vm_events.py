from __future__ import annotations

from dataclasses import dataclass

from .bytecode import Instruction


@dataclass(frozen=True)
class TapeSnapshot:
    """Point-in-time view of a Program, detached from the live tape."""

    instruction_pointer: int
    data_pointer: int
    register: int
    current_value: int
    next_instruction: Instruction | None
    steps: int
    done: bool


__all__ = ["TapeSnapshot"]
