# cob_scenes/core/serializer.py
"""
Canonical text form of a SceneDocument.

`dump_document()` writes one statement per line, with the given indentation
step, one-line block bodies and `//` comments dropped. Parsing the output
again yields a document with the same scenes, nodes, blocks and values
(source line numbers aside).
"""

from __future__ import annotations

from typing import Dict, List, Union

from cob_scenes.core.domain.models import AttributeBlock, Node, SceneDocument
from cob_scenes.core.domain.values import (
    INTERACTION_STATES,
    HexColor,
    HslaColor,
    MapValue,
    Number,
    Percent,
    Pixels,
    StateValues,
    StructValue,
    Text,
    Token,
    Value,
)
from cob_scenes.core.parsing.document import SCENES_SECTION

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t"}


def quote(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'


def format_number(value: Union[int, float]) -> str:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers in scene markup")
    return str(value) if isinstance(value, int) else repr(float(value))


def format_fields(fields: Dict[str, Value]) -> str:
    return "{" + " ".join(f"{k}:{format_value(v)}" for k, v in fields.items()) + "}"


def format_value(value: Value) -> str:
    if isinstance(value, Percent):
        return f"{format_number(value.value)}%"
    if isinstance(value, Pixels):
        return f"{format_number(value.value)}px"
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, HexColor):
        return f"#{value.hex}"
    if isinstance(value, HslaColor):
        parts = {
            "hue": value.hue,
            "saturation": value.saturation,
            "lightness": value.lightness,
            "alpha": value.alpha,
        }
        return "Hsla{" + " ".join(f"{k}:{format_number(v)}" for k, v in parts.items()) + "}"
    if isinstance(value, Token):
        return value.name
    if isinstance(value, Text):
        return quote(value.text)
    if isinstance(value, StateValues):
        declared = {s: getattr(value, s) for s in INTERACTION_STATES if getattr(value, s) is not None}
        return format_fields(declared)
    if isinstance(value, MapValue):
        return format_fields(value.fields)
    if isinstance(value, StructValue):
        return value.name + format_fields(value.fields)
    raise TypeError(f"cannot serialize {type(value).__name__}")


def format_block(block: AttributeBlock) -> str:
    if not block.fields:
        return block.tag
    return block.tag + format_fields(block.fields)


def dump_document(doc: SceneDocument, *, indent: int = 4) -> str:
    """Serialize a document to scene markup text."""
    if indent < 1:
        raise ValueError("indent must be at least 1")

    lines: List[str] = [f"#{SCENES_SECTION}"]

    def emit(node: Node) -> None:
        pad = " " * (indent * node.depth)
        lines.append(pad + quote(node.name))
        inner = " " * (indent * (node.depth + 1))
        for block in node.blocks:
            lines.append(inner + format_block(block))
        for child in doc.children(node):
            emit(child)

    for scene in doc.scenes:
        emit(doc.root(scene))

    return "\n".join(lines) + "\n"


__all__ = ["dump_document", "format_value", "format_block", "quote"]
