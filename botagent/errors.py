"""
Error hierarchy for botagent.

BotAgentError is the base for all typed errors. Every failure while loading,
compiling or evaluating a pattern source surfaces as one of its subclasses;
nothing is swallowed and no query falls back to a default answer.
"""

from __future__ import annotations

from typing import Any, Optional


class BotAgentError(Exception):
    """Base botagent error. All typed errors inherit from this."""

    error_code: str = "botagent_error"

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.source is not None:
            payload["source"] = self.source
        if self.details is not None:
            payload["details"] = self.details
        return payload


class IoError(BotAgentError):
    """The pattern source could not be read."""

    error_code = "io_error"


class _IndexedError(BotAgentError):
    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        details: Optional[Any] = None,
        index: Optional[int] = None,
    ) -> None:
        super().__init__(message, source=source, details=details)
        self.index = index

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.index is not None:
            payload["index"] = self.index
        return payload


class ParseError(_IndexedError):
    """The pattern source is not a JSON array of non-empty strings."""

    error_code = "parse_error"


class CompileError(_IndexedError):
    """A fragment, or the joined alternation, failed to compile."""

    error_code = "compile_error"


class MatchTimeoutError(BotAgentError):
    error_code = "match_timeout"
