from tape_vm.parser import ParseError
from tape_vm.tape_format import format_snapshot, format_window
from tape_vm.program import Program
from tape_vm.vm_errors import VMRuntimeError


def format_parse_error(error: ParseError, source_name: str = "<string>") -> str:
    return f"{source_name}:{error.line}:{error.column}: {error.msg}"


def format_runtime_error(error: VMRuntimeError, program: Program | None = None) -> str:
    snapshot = error.snapshot
    pending = snapshot.next_instruction
    symbol = f" ({pending})" if pending is not None else ""
    lines = [
        str(error),
        f"execution failed at instruction {snapshot.instruction_pointer}{symbol} "
        f"with data pointer {snapshot.data_pointer}",
        f"  state: {format_snapshot(snapshot)}",
    ]
    if program is not None:
        lines.append(f"  tape: {format_window(program)}")
    return "\n".join(lines)


__all__ = ["format_parse_error", "format_runtime_error"]
