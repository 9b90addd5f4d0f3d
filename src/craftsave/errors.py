from __future__ import annotations

from typing import Iterable, List, Optional


class SavefileError(Exception):
    """Base error for save file encode/decode failures."""


class UnsupportedFormatError(SavefileError):
    """Raised when a recognized format has no codec implementation."""


class MalformedPayloadError(SavefileError):
    """Raised when a payload cannot be parsed (bad JSON, truncated stream, bad compression)."""


class SchemaValidationError(MalformedPayloadError):
    def __init__(self, fmt: str, errors: Iterable, message: Optional[str] = None) -> None:
        self.format = fmt
        self.errors: List = list(errors)
        super().__init__(message or f"{fmt} save file failed schema validation")
