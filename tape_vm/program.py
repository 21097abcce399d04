from __future__ import annotations

import sys
from typing import BinaryIO, Callable, Dict, Iterable, Optional, TextIO, Tuple

from .bytecode import CELL_MASK, TAPE_LENGTH, Instruction, Opcode
from .tape_format import format_program
from .vm_errors import TapeIOError, VMRuntimeError
from .vm_events import TapeSnapshot


class Program:
    """Tape machine executing a jump-resolved instruction sequence.

    The machine owns a fixed tape of ``TAPE_LENGTH`` byte cells and a single
    byte register. All mutation happens inside :meth:`step`, which applies one
    instruction and then advances the instruction pointer by one. Pointer
    motion wraps around the tape and cell arithmetic wraps modulo 256.

    ``stdin`` is read one byte at a time (``read(1)``). A text stream is also
    accepted; each character is served as its UTF-8 bytes, one per input
    instruction. ``stdout`` is a binary sink that receives the UTF-8 rendering
    of each output cell and is flushed after every write. Either left as
    ``None`` resolves to the process streams when the I/O happens.
    """

    def __init__(
        self,
        instructions: Iterable[Instruction],
        *,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        trace: Optional[TextIO] = None,
    ):
        self.instructions: Tuple[Instruction, ...] = tuple(instructions)
        self.stdin = stdin
        self.stdout = stdout
        self.trace = trace
        self.pc = 0
        self.steps = 0
        self._tape = bytearray(TAPE_LENGTH)
        self._register = 0
        self._data_ptr = 0
        self._pending_input = bytearray()
        self._handlers: Dict[Opcode, Callable[[Instruction], None]] = {
            Opcode.MOVE_RIGHT: self._op_MOVE_RIGHT,
            Opcode.MOVE_LEFT: self._op_MOVE_LEFT,
            Opcode.INCREMENT: self._op_INCREMENT,
            Opcode.DECREMENT: self._op_DECREMENT,
            Opcode.OUTPUT: self._op_OUTPUT,
            Opcode.INPUT: self._op_INPUT,
            Opcode.JUMP_FORWARD: self._op_JUMP_FORWARD,
            Opcode.JUMP_BACKWARD: self._op_JUMP_BACKWARD,
            # Extended Type I
            Opcode.HALT: self._op_HALT,
            Opcode.STORE: self._op_STORE,
            Opcode.RECALL: self._op_RECALL,
            Opcode.SHIFT_RIGHT: self._op_SHIFT_RIGHT,
            Opcode.SHIFT_LEFT: self._op_SHIFT_LEFT,
            Opcode.NOT: self._op_NOT,
            Opcode.XOR: self._op_XOR,
            Opcode.AND: self._op_AND,
            Opcode.OR: self._op_OR,
            Opcode.BREAKPOINT: self._op_BREAKPOINT,
        }

    # -------------------- Introspection --------------------
    @property
    def is_done(self) -> bool:
        return self.pc >= len(self.instructions)

    @property
    def instruction_pointer(self) -> int:
        return self.pc

    @property
    def next_instruction(self) -> Optional[Instruction]:
        if self.is_done:
            return None
        return self.instructions[self.pc]

    @property
    def register_value(self) -> int:
        return self._register

    @property
    def data_pointer(self) -> int:
        return self._data_ptr

    @property
    def current_value(self) -> int:
        return self._tape[self._data_ptr]

    @property
    def tape(self) -> bytes:
        return bytes(self._tape)

    def snapshot(self) -> TapeSnapshot:
        return TapeSnapshot(
            instruction_pointer=self.pc,
            data_pointer=self._data_ptr,
            register=self._register,
            current_value=self.current_value,
            next_instruction=self.next_instruction,
            steps=self.steps,
            done=self.is_done,
        )

    def __str__(self) -> str:
        return format_program(self)

    # -------------------- Execution --------------------
    def step(self) -> bool:
        """Executes a single instruction. Returns False once the program is done."""
        if self.is_done:
            return False

        inst = self.instructions[self.pc]
        handler = self._handlers[inst.opcode]

        try:
            handler(inst)
        except VMRuntimeError:
            raise
        except Exception as exc:
            raise self._wrap_runtime_error(exc) from exc

        self.pc += 1
        self.steps += 1
        return not self.is_done

    def run(self, debug: bool = False) -> "Program":
        while not self.is_done:
            if debug:
                self.trace_step()
            self.step()
        return self

    def trace_step(self) -> None:
        stream = self.trace if self.trace is not None else sys.stderr
        inst = self.instructions[self.pc]
        target = f" -> {inst.target}" if inst.target is not None else ""
        stream.write(
            f"[PC={self.pc}] EXEC: {inst}{target}"
            f"  DP={self._data_ptr} VAL={self.current_value} REG={self._register}\n"
        )

    def _wrap_runtime_error(self, exc: Exception) -> VMRuntimeError:
        message = str(exc) or exc.__class__.__name__
        return VMRuntimeError(message, self.snapshot())

    # -------------------- Opcode handlers --------------------
    def _op_MOVE_RIGHT(self, inst: Instruction) -> None:
        self._data_ptr = (self._data_ptr + 1) % TAPE_LENGTH

    def _op_MOVE_LEFT(self, inst: Instruction) -> None:
        self._data_ptr = (self._data_ptr - 1 + TAPE_LENGTH) % TAPE_LENGTH

    def _op_INCREMENT(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] = (self._tape[self._data_ptr] + 1) & CELL_MASK

    def _op_DECREMENT(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] = (self._tape[self._data_ptr] - 1) & CELL_MASK

    def _op_OUTPUT(self, inst: Instruction) -> None:
        stream = self.stdout if self.stdout is not None else sys.stdout.buffer
        try:
            stream.write(chr(self._tape[self._data_ptr]).encode("utf-8"))
            stream.flush()
        except (OSError, ValueError) as exc:
            raise TapeIOError(f"cannot write output: {exc}", self.snapshot()) from exc

    def _op_INPUT(self, inst: Instruction) -> None:
        if not self._pending_input:
            self._pending_input.extend(self._read_input())
        self._tape[self._data_ptr] = self._pending_input.pop(0)

    def _read_input(self) -> bytes:
        stream = self.stdin if self.stdin is not None else sys.stdin.buffer
        try:
            data = stream.read(1)
        except (OSError, ValueError) as exc:
            raise TapeIOError(f"cannot read input: {exc}", self.snapshot()) from exc
        if not data:
            raise TapeIOError("unexpected end of input", self.snapshot())
        if isinstance(data, str):
            # one character from a text stream, possibly several bytes
            return data.encode("utf-8")
        return bytes(data)

    # Jumps land on their target; the advance in step() moves one past it.
    def _op_JUMP_FORWARD(self, inst: Instruction) -> None:
        if self._tape[self._data_ptr] == 0:
            self.pc = inst.target

    def _op_JUMP_BACKWARD(self, inst: Instruction) -> None:
        if self._tape[self._data_ptr] != 0:
            self.pc = inst.target

    def _op_HALT(self, inst: Instruction) -> None:
        self.pc = len(self.instructions) - 1

    def _op_STORE(self, inst: Instruction) -> None:
        self._register = self._tape[self._data_ptr]

    def _op_RECALL(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] = self._register

    def _op_SHIFT_RIGHT(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] >>= 1

    def _op_SHIFT_LEFT(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] = (self._tape[self._data_ptr] << 1) & CELL_MASK

    def _op_NOT(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] = ~self._tape[self._data_ptr] & CELL_MASK

    def _op_XOR(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] ^= self._register

    def _op_AND(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] &= self._register

    def _op_OR(self, inst: Instruction) -> None:
        self._tape[self._data_ptr] |= self._register

    def _op_BREAKPOINT(self, inst: Instruction) -> None:
        # Reserved; pausing is left to tooling that drives step() itself.
        return None


__all__ = ["Program"]
