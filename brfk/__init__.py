from .modes import ParseMode, UnsupportedModeError
from .runtime import compile_source, run_script, run_source

__all__ = [
    "ParseMode",
    "UnsupportedModeError",
    "compile_source",
    "run_script",
    "run_source",
]
