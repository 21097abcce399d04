from __future__ import annotations

from enum import Enum


class UnsupportedModeError(ValueError):
    pass


class ParseMode(Enum):
    BASIC = "b"
    EXTENDED_1 = "x1"
    # Named by the mode selector, no semantics defined yet
    EXTENDED_2 = "x2"
    EXTENDED_3 = "x3"
    BRAIN_PLUS = "bp"

    @classmethod
    def from_flag(cls, flag: str) -> "ParseMode":
        try:
            return cls(flag.strip().lower())
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise UnsupportedModeError(f"Invalid mode: {flag!r} (expected one of {choices})") from None

    @property
    def supported(self) -> bool:
        return self in (ParseMode.BASIC, ParseMode.EXTENDED_1)

    @property
    def extended(self) -> bool:
        if not self.supported:
            raise UnsupportedModeError(f"mode {self.value!r} is not implemented")
        return self is ParseMode.EXTENDED_1


MODE_HELP = {
    ParseMode.BASIC: "Basic mode (default)",
    ParseMode.EXTENDED_1: "Extended Type I mode",
    ParseMode.EXTENDED_2: "Extended Type II mode (not implemented)",
    ParseMode.EXTENDED_3: "Extended Type III mode (not implemented)",
    ParseMode.BRAIN_PLUS: "BrainPlus mode (not implemented)",
}

__all__ = ["MODE_HELP", "ParseMode", "UnsupportedModeError"]
