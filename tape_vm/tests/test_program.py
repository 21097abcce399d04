from __future__ import annotations

import io
import sys

import pytest

from tape_vm.bytecode import TAPE_LENGTH, Instruction, Opcode
from tape_vm.parser import parse
from tape_vm.program import Program
from tape_vm.vm_errors import TapeIOError, VMRuntimeError

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def run(source: str, extended: bool = False, **kwargs) -> Program:
    return Program(parse(source, extended), **kwargs).run()


def test_empty_program_is_done() -> None:
    program = Program([])
    assert program.is_done
    assert program.next_instruction is None
    assert program.step() is False
    assert program.steps == 0


def test_initial_state() -> None:
    program = Program(parse("+"))
    assert not program.is_done
    assert program.data_pointer == 0
    assert program.register_value == 0
    assert program.current_value == 0
    assert len(program.tape) == TAPE_LENGTH
    assert not any(program.tape)
    assert program.next_instruction == Instruction(Opcode.INCREMENT)


def test_step_reports_whether_execution_can_continue() -> None:
    program = Program(parse("++"))
    assert program.step() is True
    assert program.instruction_pointer == 1
    assert program.step() is False
    assert program.is_done
    assert program.step() is False
    assert program.current_value == 2
    assert program.steps == 2


def test_pointer_wraps_left_from_zero() -> None:
    assert run("<").data_pointer == TAPE_LENGTH - 1


def test_pointer_wraps_right_from_end() -> None:
    program = Program(parse("<>"))
    program.step()
    assert program.data_pointer == 29999
    program.step()
    assert program.data_pointer == 0


def test_value_wraps_on_increment_and_decrement() -> None:
    assert run("-").current_value == 255
    assert run("+" * 256).current_value == 0
    assert run("-+").current_value == 0


def test_forward_jump_over_zero_cell_lands_after_match() -> None:
    program = Program(parse("[+]>"))
    assert program.step() is True
    assert program.instruction_pointer == 3
    assert program.current_value == 0
    program.run()
    assert program.data_pointer == 1


def test_backward_jump_repeats_while_nonzero() -> None:
    program = run("+++[>++<-]")
    assert program.tape[:2] == bytes([0, 6])


def test_add_via_loop_idiom() -> None:
    tape = run("+[>+<-]").tape
    assert tape[0] == 0
    assert tape[1] == 1


def test_output_writes_character_and_flushes() -> None:
    class Sink(io.BytesIO):
        flushes = 0

        def flush(self) -> None:
            self.flushes += 1
            super().flush()

    sink = Sink()
    run("++.+.", stdout=sink)
    assert sink.getvalue() == b"\x02\x03"
    assert sink.flushes == 2


def test_hello_world() -> None:
    out = io.BytesIO()
    run(HELLO_WORLD, stdout=out)
    assert out.getvalue() == b"Hello World!\n"


def test_input_reads_one_byte_per_instruction() -> None:
    out = io.BytesIO()
    program = run(",.>,.", stdin=io.BytesIO(b"hi!"), stdout=out)
    assert out.getvalue() == b"hi"
    assert program.tape[:2] == b"hi"


def test_input_accepts_text_streams() -> None:
    program = run(",", stdin=io.StringIO("z"))
    assert program.current_value == ord("z")


def test_input_serves_multibyte_characters_one_byte_at_a_time() -> None:
    program = run(",>,>,", stdin=io.StringIO("€"))
    assert program.tape[:3] == "€".encode("utf-8")


def test_input_keeps_remaining_bytes_of_a_character_for_later_reads() -> None:
    program = Program(parse(",>,"), stdin=io.StringIO("é!"))
    program.step()
    assert program.current_value == 0xC3
    program.run()
    assert program.current_value == 0xA9
    assert program.tape[:2] == "é".encode("utf-8")


def test_high_cells_are_written_as_utf8_regardless_of_locale(monkeypatch) -> None:
    out = io.BytesIO()
    run("-.", stdout=out)
    assert out.getvalue() == b"\xc3\xbf"

    ascii_stdout = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
    monkeypatch.setattr(sys, "stdout", ascii_stdout)
    run("-.")
    assert ascii_stdout.buffer.getvalue() == b"\xc3\xbf"


def test_input_exhaustion_is_fatal_and_state_stays_inspectable() -> None:
    program = Program(parse("+>,"), stdin=io.BytesIO(b""))
    with pytest.raises(TapeIOError) as info:
        program.run()
    err = info.value
    assert err.instruction_index == 2
    assert err.data_pointer == 1
    assert err.snapshot.next_instruction == Instruction(Opcode.INPUT)
    assert program.instruction_pointer == 2
    assert program.tape[0] == 1


def test_output_failure_is_io_error() -> None:
    class BrokenSink:
        def write(self, data: bytes) -> int:
            raise OSError("sink closed")

        def flush(self) -> None:
            pass

    with pytest.raises(TapeIOError, match="sink closed"):
        run(".", stdout=BrokenSink())


def test_unexpected_handler_failure_is_wrapped() -> None:
    program = Program(parse("+"))

    def explode(inst: Instruction) -> None:
        raise KeyError("boom")

    program._handlers[Opcode.INCREMENT] = explode
    with pytest.raises(VMRuntimeError) as info:
        program.step()
    assert isinstance(info.value.__cause__, KeyError)
    assert info.value.instruction_index == 0
    assert not program.is_done


def test_halt_stops_before_following_instructions() -> None:
    program = run("@+", extended=True)
    assert program.is_done
    assert program.current_value == 0
    assert program.steps == 1


def test_halt_as_last_instruction() -> None:
    program = run("+@", extended=True)
    assert program.is_done
    assert program.current_value == 1


def test_halt_inside_loop() -> None:
    program = run("+[>+@<-]", extended=True)
    assert program.tape[:2] == bytes([1, 1])
    assert program.data_pointer == 1


def test_halt_symbol_is_a_comment_in_basic_mode() -> None:
    assert run("@+").current_value == 1


def test_not_twice_restores_value() -> None:
    assert run("+++~", extended=True).current_value == 252
    assert run("+++~~", extended=True).current_value == 3


def test_register_round_trip() -> None:
    program = run("+++++$---!", extended=True)
    assert program.register_value == 5
    assert program.current_value == 5


def test_store_and_recall_across_cells() -> None:
    program = run("++++$>!", extended=True)
    assert program.tape[:2] == bytes([4, 4])


@pytest.mark.parametrize(
    "source, expected",
    [
        ("+++}", 1),
        ("+++{", 6),
        ("+" * 128 + "{", 0),
        ("-{", 254),
        ("-}", 127),
    ],
)
def test_shifts_are_logical_and_truncated(source: str, expected: int) -> None:
    assert run(source, extended=True).current_value == expected


@pytest.mark.parametrize("op, expected", [("^", 12 ^ 10), ("&", 12 & 10), ("|", 12 | 10)])
def test_bitwise_ops_with_register(op: str, expected: int) -> None:
    source = "+" * 12 + "$>" + "+" * 10 + op
    program = run(source, extended=True)
    assert program.current_value == expected
    assert program.register_value == 12


def test_breakpoint_is_a_no_op() -> None:
    program = Program([Instruction(Opcode.BREAKPOINT), Instruction(Opcode.INCREMENT)])
    program.run()
    assert program.current_value == 1


def test_debug_trace_lists_each_step() -> None:
    trace = io.StringIO()
    Program(parse("+[-]"), trace=trace).run(debug=True)
    lines = trace.getvalue().splitlines()
    assert lines[0] == "[PC=0] EXEC: +  DP=0 VAL=0 REG=0"
    assert lines[1] == "[PC=1] EXEC: [ -> 3  DP=0 VAL=1 REG=0"
    assert len(lines) == 4


def test_snapshot_is_detached() -> None:
    program = Program(parse("+>"))
    program.step()
    snap = program.snapshot()
    program.step()
    assert snap.instruction_pointer == 1
    assert snap.data_pointer == 0
    assert snap.current_value == 1
    assert snap.next_instruction == Instruction(Opcode.MOVE_RIGHT)
    assert not snap.done
    assert program.snapshot().done


def test_tape_accessor_returns_copy() -> None:
    program = Program(parse("+"))
    tape = program.tape
    program.run()
    assert tape[0] == 0
    assert program.tape[0] == 1


def test_every_opcode_has_a_handler() -> None:
    program = Program([])
    assert set(program._handlers) == set(Opcode)
