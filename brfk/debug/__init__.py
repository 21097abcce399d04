from .traceback import format_parse_error, format_runtime_error

__all__ = ["format_parse_error", "format_runtime_error"]
