"""Exception types raised while translating VM code."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TranslationError(Exception):
    """Base class for every translation failure.

    ``path`` and ``line`` are filled in by the driver once it knows which
    unit and source line were being processed.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.line = line

    def locate(self, path: Union[str, Path], line: Optional[int]) -> "TranslationError":
        if self.path is None:
            self.path = str(path)
        if self.line is None:
            self.line = line
        return self

    def __str__(self) -> str:
        if self.path is not None and self.line is not None:
            return f"{self.path}:{self.line}: {self.message}"
        if self.path is not None:
            return f"{self.path}: {self.message}"
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class ParseError(TranslationError):
    pass


class SegmentRangeError(TranslationError):
    pass


class SourceError(TranslationError):
    pass


class GeneratorError(TranslationError):
    pass


__all__ = [
    "TranslationError",
    "ParseError",
    "SegmentRangeError",
    "SourceError",
    "GeneratorError",
]
