from __future__ import annotations

from typing import TYPE_CHECKING

from .bytecode import TAPE_LENGTH
from .vm_events import TapeSnapshot

if TYPE_CHECKING:  # pragma: no cover
    from .program import Program

ROW_WIDTH = 150


def format_program(program: "Program") -> str:
    lines = [
        f"Pointer: {program.data_pointer}",
        f"Storage: {program.register_value}",
        "Data:",
    ]
    tape = program.tape
    for start in range(0, len(tape), ROW_WIDTH):
        lines.append(", ".join(f"{value:>3}" for value in tape[start:start + ROW_WIDTH]))
    return "\n".join(lines) + "\n"


def format_window(program: "Program", radius: int = 8) -> str:
    """Render the cells around the data pointer, current cell in brackets."""
    tape = program.tape
    pointer = program.data_pointer
    cells = []
    for offset in range(-radius, radius + 1):
        index = (pointer + offset) % TAPE_LENGTH
        value = tape[index]
        cells.append(f"[{value:>3}]" if offset == 0 else f"{value:>3}")
    first = (pointer - radius) % TAPE_LENGTH
    return f"@{first}: " + " ".join(cells)


def format_snapshot(snapshot: TapeSnapshot) -> str:
    pending = str(snapshot.next_instruction) if snapshot.next_instruction is not None else "<end>"
    return (
        f"pc={snapshot.instruction_pointer} ({pending}) dp={snapshot.data_pointer} "
        f"value={snapshot.current_value} register={snapshot.register} steps={snapshot.steps}"
    )


__all__ = ["ROW_WIDTH", "format_program", "format_snapshot", "format_window"]
