from __future__ import annotations

from .vm_events import TapeSnapshot


class VMRuntimeError(RuntimeError):
    """Runtime error raised by the tape VM with the state at the point of failure."""

    def __init__(self, message: str, snapshot: TapeSnapshot):
        super().__init__(message)
        self.snapshot = snapshot

    @property
    def instruction_index(self) -> int:
        return self.snapshot.instruction_pointer

    @property
    def data_pointer(self) -> int:
        return self.snapshot.data_pointer


class TapeIOError(VMRuntimeError):
    """Input exhausted or the output sink rejected a write."""


__all__ = ["TapeIOError", "VMRuntimeError"]
