# cob_scenes/core/parsing/values.py
"""
Value-literal reader for attribute block bodies.

A body is everything between a tag's `{` and its matching `}`. It may span
several lines. Fields are `key:value` pairs separated by whitespace, commas
or newlines; `//` comments are allowed between fields.

Literal disambiguation (first match wins):

    "..."            -> Text
    <num>%           -> Percent
    <num>px          -> Pixels
    #RRGGBB[AA]      -> HexColor
    <num>            -> Number
    Hsla{...}        -> HslaColor
    Name{...}        -> StructValue
    {...}            -> StateValues if every key is idle/hover/press, else MapValue
    identifier       -> Token
"""

from __future__ import annotations

import bisect
import math
import re
from typing import Dict, List, Optional, Tuple, Union

from cob_scenes.core.domain.exceptions import InvalidValue, ParseError
from cob_scenes.core.domain.values import (
    INTERACTION_STATES,
    HexColor,
    HslaColor,
    MapValue,
    Number,
    Percent,
    Pixels,
    StructValue,
    Text,
    Token,
    Value,
    state_values_from_fields,
)

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"
_NUMBER_RE = re.compile(rf"^{_NUMBER}$")
_PERCENT_RE = re.compile(rf"^({_NUMBER})%$")
_PIXELS_RE = re.compile(rf"^({_NUMBER})px$")
_HEX_RE = re.compile(r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")
IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Characters that end a bare atom.
_ATOM_STOP = frozenset(' \t\r\n{}:,"')

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}

HSLA_STRUCT = "Hsla"
_HSLA_REQUIRED = ("hue", "saturation", "lightness")
_HSLA_FIELDS = _HSLA_REQUIRED + ("alpha",)


def to_number(raw: str) -> Union[int, float]:
    """'120' -> 120, '0.5' -> 0.5. Integers stay integers."""
    if re.fullmatch(r"[-+]?\d+", raw):
        return int(raw)
    return float(raw)


class SourceCursor:
    """
    Position tracker over a whole document.

    Both the structural parser and the value reader advance the same cursor,
    so every error carries the real line/column even inside multi-line
    blocks.
    """

    def __init__(self, text: str, source: Optional[str] = None) -> None:
        self.text = text
        self.source = source
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    # --- Location ---

    def location(self, pos: Optional[int] = None) -> Tuple[int, int]:
        """1-based (line, column) of a position (default: current)."""
        p = self.pos if pos is None else pos
        idx = bisect.bisect_right(self._line_starts, p) - 1
        return idx + 1, p - self._line_starts[idx] + 1

    def error(self, cls: type, message: str, pos: Optional[int] = None) -> ParseError:
        line, column = self.location(pos)
        return cls(message, line=line, column=column, source=self.source)

    # --- Reading ---

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        p = self.pos + offset
        return self.text[p] if p < len(self.text) else ""

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    def skip_inline_space(self) -> None:
        while self.peek() in (" ", "\t", "\r"):
            self.pos += 1

    def skip_to_line_end(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end < 0 else end

    def skip_separators(self) -> None:
        """Skip whitespace, newlines, commas and // comments (inside a body)."""
        while not self.at_end:
            ch = self.peek()
            if ch in " \t\r\n,":
                self.pos += 1
            elif self.startswith("//"):
                self.skip_to_line_end()
            else:
                return

    def read_identifier(self) -> Optional[str]:
        m = IDENTIFIER_RE.match(self.text, self.pos)
        if not m:
            return None
        self.pos = m.end()
        return m.group(0)

    def read_string(self) -> str:
        """Read a double-quoted string starting at the cursor."""
        start = self.pos
        if self.peek() != '"':
            raise self.error(ParseError, "expected '\"'")
        self.pos += 1
        out: List[str] = []
        while True:
            ch = self.peek()
            if ch == "" or ch == "\n":
                raise self.error(ParseError, "unterminated string", start)
            self.pos += 1
            if ch == '"':
                return "".join(out)
            if ch == "\\":
                esc = self.peek()
                if esc not in _ESCAPES:
                    raise self.error(InvalidValue, f"unknown escape sequence '\\{esc}'", self.pos - 1)
                out.append(_ESCAPES[esc])
                self.pos += 1
            else:
                out.append(ch)

    def read_atom(self) -> str:
        start = self.pos
        while not self.at_end and self.peek() not in _ATOM_STOP and not self.startswith("//"):
            self.pos += 1
        return self.text[start:self.pos]


class ValueReader:
    """Parses block bodies and value literals from a SourceCursor."""

    def __init__(self, cursor: SourceCursor, *, strict_states: bool = False) -> None:
        self.cursor = cursor
        self.strict_states = strict_states

    def read_body(self) -> Dict[str, Value]:
        """Read `{ key:value ... }`; the cursor must sit on the `{`."""
        c = self.cursor
        open_pos = c.pos
        if c.peek() != "{":
            raise c.error(ParseError, "expected '{'")
        c.pos += 1

        fields: Dict[str, Value] = {}
        while True:
            c.skip_separators()
            if c.at_end:
                raise c.error(ParseError, "unbalanced '{': block is never closed", open_pos)
            if c.peek() == "}":
                c.pos += 1
                return fields

            key_pos = c.pos
            key = c.read_identifier()
            if key is None:
                raise c.error(InvalidValue, f"expected a field name, found {c.peek()!r}")
            c.skip_inline_space()
            if c.peek() != ":":
                raise c.error(InvalidValue, f"expected ':' after field {key!r}")
            c.pos += 1
            c.skip_inline_space()
            if key in fields:
                raise c.error(InvalidValue, f"duplicate field {key!r}", key_pos)
            fields[key] = self.read_value()

    def read_value(self) -> Value:
        c = self.cursor
        start = c.pos
        ch = c.peek()
        if ch == "":
            raise c.error(InvalidValue, "missing value at end of input")
        if ch == '"':
            return Text(text=c.read_string())
        if ch == "{":
            return self._mapping(self.read_body(), start)
        if ch in "}:,\n":
            raise c.error(InvalidValue, f"missing value before {ch!r}")

        atom = c.read_atom()
        if c.peek() == "{":
            if not IDENTIFIER_RE.fullmatch(atom):
                raise c.error(InvalidValue, f"invalid struct name {atom!r}", start)
            body = self.read_body()
            if atom == HSLA_STRUCT:
                return self._hsla(body, start)
            return StructValue(name=atom, fields=body)
        return self.literal(atom, start)

    def literal(self, atom: str, pos: int) -> Value:
        """Classify a bare atom."""
        c = self.cursor
        if not atom:
            raise c.error(InvalidValue, "empty value", pos)

        if atom.endswith("%"):
            m = _PERCENT_RE.match(atom)
            if not m:
                raise c.error(InvalidValue, f"malformed percentage {atom!r}", pos)
            return Percent(value=self._number(m.group(1), atom, pos))

        if atom.startswith("#"):
            m = _HEX_RE.match(atom)
            if not m:
                raise c.error(InvalidValue, f"malformed color {atom!r}: expected 6 or 8 hex digits", pos)
            return HexColor(hex=m.group(1).upper())

        if atom[0] in "+-.0123456789":
            if atom.endswith("px"):
                m = _PIXELS_RE.match(atom)
                if not m:
                    raise c.error(InvalidValue, f"malformed pixel length {atom!r}", pos)
                return Pixels(value=self._number(m.group(1), atom, pos))
            if not _NUMBER_RE.match(atom):
                raise c.error(InvalidValue, f"malformed number {atom!r}", pos)
            return Number(value=self._number(atom, atom, pos))

        if IDENTIFIER_RE.fullmatch(atom):
            return Token(name=atom)

        raise c.error(InvalidValue, f"unparsable value {atom!r}", pos)

    def _number(self, raw: str, atom: str, pos: int) -> Union[int, float]:
        value = to_number(raw)
        if isinstance(value, float) and not math.isfinite(value):
            raise self.cursor.error(InvalidValue, f"number out of range {atom!r}", pos)
        return value

    def state_values(self, fields: Dict[str, Value], pos: int) -> Value:
        try:
            return state_values_from_fields(fields, strict=self.strict_states)
        except ValueError as e:
            raise self.cursor.error(InvalidValue, str(e), pos) from None

    def _mapping(self, fields: Dict[str, Value], pos: int) -> Value:
        if fields and all(k in INTERACTION_STATES for k in fields):
            return self.state_values(fields, pos)
        return MapValue(fields=fields)

    def _hsla(self, fields: Dict[str, Value], pos: int) -> HslaColor:
        c = self.cursor
        unknown = [k for k in fields if k not in _HSLA_FIELDS]
        if unknown:
            raise c.error(InvalidValue, f"unknown Hsla field(s): {', '.join(unknown)}", pos)
        missing = [k for k in _HSLA_REQUIRED if k not in fields]
        if missing:
            raise c.error(InvalidValue, f"Hsla is missing {', '.join(missing)}", pos)
        numbers: Dict[str, Union[int, float]] = {}
        for k, v in fields.items():
            if not isinstance(v, Number):
                raise c.error(InvalidValue, f"Hsla field {k!r} must be a number", pos)
            numbers[k] = v.value
        return HslaColor(**numbers)


__all__ = ["SourceCursor", "ValueReader", "IDENTIFIER_RE", "to_number"]
