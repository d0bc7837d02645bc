"""Error codes of the clock service."""

from __future__ import annotations

from enum import IntEnum

ERROR_MODULE = 388


class ErrorCode(IntEnum):
    """Error descriptions reported by the service."""

    GENERIC = 0
    CONFIG_NOT_LOADED = 1
    CONFIG_SAVE_FAILED = 2
    INTERNAL_FREQUENCY_TABLE_ERROR = 3


def result_code(error: ErrorCode | int) -> int:
    """Encode an error description as a service result code."""
    return (ERROR_MODULE & 0x1FF) | ((int(error) & 0x1FFF) << 9)


class SysClkError(Exception):
    """An error reported by the clock service."""

    def __init__(self, code: ErrorCode | int, message: str | None = None) -> None:
        self.code = ErrorCode(code)
        super().__init__(message or self.code.name.lower().replace("_", " "))

    @property
    def result(self) -> int:
        """The encoded result code of this error."""
        return result_code(self.code)