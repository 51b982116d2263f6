# cob_scenes/core/domain/exceptions.py
from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
    """
    Base class for every structural-syntax violation found while parsing a
    scene document. A parse never returns a partial result: the first error
    aborts the whole load.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.source = source
        super().__init__(self._format())

    def _format(self) -> str:
        where = self.source or "<string>"
        if self.line is not None:
            where = f"{where}:{self.line}"
            if self.column is not None:
                where = f"{where}:{self.column}"
        return f"{where}: {self.message}"


class InvalidValue(ParseError):
    """A value literal could not be parsed (bad color, unit, state map...)."""


class BadIndentation(ParseError):
    """A line's indentation does not match any open scope."""


class DuplicateScene(ParseError):
    """Two top-level scenes share the same name."""


class UnknownAttributeTag(ParseError):
    """An attribute block uses a tag outside the known vocabulary."""


class SceneLookupError(KeyError):
    """Raised when a scene name or node path is not present in a document."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "scene lookup failed"


__all__ = [
    "ParseError",
    "InvalidValue",
    "BadIndentation",
    "DuplicateScene",
    "UnknownAttributeTag",
    "SceneLookupError",
]
