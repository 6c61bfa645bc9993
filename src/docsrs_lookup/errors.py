from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    DECODE_ERROR = "DECODE_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    CACHE_ERROR = "CACHE_ERROR"


class DocsRsError(Exception):
    """Raised for every expected failure of a lookup.

    Caught once by cli.main, which logs it to stderr and exits non-zero.
    Never catch this inside business logic: a failed lookup produces no
    items at all, and the user simply retries from the launcher.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str = "",
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
