from __future__ import annotations

from typing import Dict, List, Tuple

from .bytecode import BASIC_SYMBOLS, EXTENDED_SYMBOLS, Instruction, Opcode


class ParseError(SyntaxError):
    """Raised when source text cannot be turned into a runnable program."""

    def __init__(self, message: str, position: int, line: int, column: int):
        super().__init__(message, (None, line, column, None))
        self.position = position
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.msg} at {self.line}:{self.column}"


class UnmatchedJumpError(ParseError):
    pass


class Parser:
    """Single pass scanner that resolves jump targets with an explicit stack.

    Characters outside the active vocabulary are comments. Each ``[`` pushes
    the index its instruction will occupy; each ``]`` pops it, patches the
    forward jump to point at the backward jump and emits the backward jump
    pointing at the forward one.
    """

    def __init__(self, source: str, extended: bool = False):
        self.source = source
        self.extended = extended
        self.symbols: Dict[str, Opcode] = dict(BASIC_SYMBOLS)
        if extended:
            self.symbols.update(EXTENDED_SYMBOLS)
        self.instructions: List[Instruction] = []
        # (instruction index, source offset, line, column) per open bracket
        self._pending: List[Tuple[int, int, int, int]] = []
        self.line = 1
        self.column = 1

    def parse(self) -> List[Instruction]:
        for pos, ch in enumerate(self.source):
            opcode = self.symbols.get(ch)
            if opcode is Opcode.JUMP_FORWARD:
                self._pending.append((len(self.instructions), pos, self.line, self.column))
                self.instructions.append(Instruction(Opcode.JUMP_FORWARD, 0))
            elif opcode is Opcode.JUMP_BACKWARD:
                self._close_jump(pos)
            elif opcode is not None:
                self.instructions.append(Instruction(opcode))
            self._advance(ch)

        if self._pending:
            _, pos, line, column = self._pending[-1]
            raise UnmatchedJumpError("unclosed '['", pos, line, column)
        return self.instructions

    # ------------------------------- internals ---------------------------- #
    def _close_jump(self, pos: int) -> None:
        if not self._pending:
            raise UnmatchedJumpError("unmatched ']'", pos, self.line, self.column)
        index = self._pending.pop()[0]
        self.instructions[index] = Instruction(Opcode.JUMP_FORWARD, len(self.instructions))
        self.instructions.append(Instruction(Opcode.JUMP_BACKWARD, index))

    def _advance(self, ch: str) -> None:
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1


def parse(source: str, extended: bool = False) -> List[Instruction]:
    return Parser(source, extended).parse()


__all__ = ["ParseError", "Parser", "UnmatchedJumpError", "parse"]
