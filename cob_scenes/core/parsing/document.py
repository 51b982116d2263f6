# cob_scenes/core/parsing/document.py
"""
Structural parser for scene documents.

Line-oriented and indentation-driven:

- Blank lines and `//` comment lines are skipped.
- `#scenes` opens the scene section; nothing else may appear before it.
- A quoted name at column 0 starts a scene; a deeper quoted name starts a
  child node of the closest open node with a smaller indentation.
- A tag (optionally followed by a `{...}` body, which may span lines) is an
  attribute block of that same node.
- The first line under a node fixes the indentation of all its content;
  later siblings must use exactly the same column.

Nodes are collected into a flat arena and linked by index. The result is an
immutable SceneDocument; any violation raises a ParseError subclass and no
partial document is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from cob_scenes.core.domain.exceptions import (
    BadIndentation,
    DuplicateScene,
    ParseError,
    UnknownAttributeTag,
)
from cob_scenes.core.domain.models import (
    AttributeBlock,
    Node,
    Scene,
    SceneDocument,
    STATEFUL_KINDS,
    classify_tag,
)
from cob_scenes.core.parsing.values import IDENTIFIER_RE, SourceCursor, ValueReader
from cob_scenes.shared.config import settings

logger = structlog.get_logger()

SCENES_SECTION = "scenes"


@dataclass
class _NodeDraft:
    name: str
    parent: Optional[int]
    depth: int
    line: int
    blocks: List[AttributeBlock] = field(default_factory=list)
    children: List[int] = field(default_factory=list)


@dataclass
class _Scope:
    """An open node on the indentation stack."""
    indent: int
    node: int
    child_indent: Optional[int] = None


class _DocumentParser:
    def __init__(self, text: str, source: Optional[str], strict_states: bool) -> None:
        # A leading BOM is an encoding artifact, not content.
        if text.startswith("\ufeff"):
            text = text[1:]
        self.cursor = SourceCursor(text, source)
        self.values = ValueReader(self.cursor, strict_states=strict_states)
        self.drafts: List[_NodeDraft] = []
        self.scenes: Dict[str, int] = {}
        self.stack: List[_Scope] = []
        self.in_scenes = False

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def parse(self) -> SceneDocument:
        c = self.cursor
        while not c.at_end:
            line_start = c.pos
            indent = self._read_indent()
            if c.at_end or c.peek() == "\n" or c.startswith("//"):
                c.skip_to_line_end()
                self._next_line()
                continue
            if "\t" in c.text[line_start:c.pos]:
                raise c.error(BadIndentation, "tabs are not allowed in indentation", line_start)
            self._statement(indent)
            self._end_of_line()
        return self._build()

    def _read_indent(self) -> int:
        c = self.cursor
        start = c.pos
        c.skip_inline_space()
        return c.pos - start

    def _next_line(self) -> None:
        if self.cursor.peek() == "\n":
            self.cursor.pos += 1

    def _end_of_line(self) -> None:
        c = self.cursor
        c.skip_inline_space()
        if c.startswith("//"):
            c.skip_to_line_end()
        if not c.at_end and c.peek() != "\n":
            raise c.error(ParseError, f"unexpected content {c.peek()!r} after statement")
        self._next_line()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _statement(self, indent: int) -> None:
        c = self.cursor
        ch = c.peek()

        if ch == "#":
            self._section(indent)
            return

        if not self.in_scenes:
            raise c.error(ParseError, "content before the '#scenes' section")

        if ch == '"':
            self._node(indent)
        elif IDENTIFIER_RE.match(ch):
            self._block(indent)
        else:
            raise c.error(ParseError, f"expected a quoted node name or an attribute tag, found {ch!r}")

    def _section(self, indent: int) -> None:
        c = self.cursor
        pos = c.pos
        if indent:
            raise c.error(BadIndentation, "section markers must start at column 1", pos)
        c.pos += 1
        name = c.read_identifier()
        if name != SCENES_SECTION:
            raise c.error(ParseError, f"unknown section '#{name or ''}'", pos)
        if self.in_scenes:
            raise c.error(ParseError, "'#scenes' section declared twice", pos)
        self.in_scenes = True
        self.stack.clear()

    def _node(self, indent: int) -> None:
        c = self.cursor
        pos = c.pos
        line, _ = c.location()
        name = c.read_string()
        if not name:
            raise c.error(ParseError, "node names must not be empty", pos)

        parent = self._open_parent(indent, pos)
        index = len(self.drafts)
        if parent is None:
            if name in self.scenes:
                first = self.drafts[self.scenes[name]].line
                raise c.error(DuplicateScene, f"scene {name!r} already defined on line {first}", pos)
            self.scenes[name] = index
            self.drafts.append(_NodeDraft(name=name, parent=None, depth=0, line=line))
        else:
            owner = self.drafts[parent.node]
            owner.children.append(index)
            self.drafts.append(_NodeDraft(name=name, parent=parent.node, depth=owner.depth + 1, line=line))
        self.stack.append(_Scope(indent=indent, node=index))

    def _block(self, indent: int) -> None:
        c = self.cursor
        pos = c.pos
        line, _ = c.location()
        tag = self._read_tag()
        kind = classify_tag(tag)
        if kind is None:
            raise c.error(UnknownAttributeTag, f"unknown attribute tag {tag!r}", pos)

        parent = self._open_parent(indent, pos)
        if parent is None:
            raise c.error(BadIndentation, f"attribute block {tag!r} must be indented under a node", pos)

        c.skip_inline_space()
        fields = self.values.read_body() if c.peek() == "{" else {}
        if kind in STATEFUL_KINDS:
            # Validates the state keys; the block keeps the individual entries.
            self.values.state_values(fields, pos)
        self.drafts[parent.node].blocks.append(
            AttributeBlock(tag=tag, kind=kind, fields=fields, line=line)
        )

    def _read_tag(self) -> str:
        c = self.cursor
        name = c.read_identifier() or ""
        if c.peek() == "<":
            start = c.pos
            close = c.text.find(">", start)
            newline = c.text.find("\n", start)
            if close < 0 or (0 <= newline < close):
                raise c.error(ParseError, "unterminated '<' in attribute tag", start)
            c.pos = close + 1
            name += c.text[start:c.pos].replace(" ", "")
        return name

    # ------------------------------------------------------------------
    # Indentation
    # ------------------------------------------------------------------

    def _open_parent(self, indent: int, pos: int) -> Optional[_Scope]:
        """
        Close every scope at or deeper than `indent` and return the scope that
        owns a line at this indentation (None for column 0).
        """
        while self.stack and indent <= self.stack[-1].indent:
            self.stack.pop()
        if not self.stack:
            if indent != 0:
                raise self.cursor.error(
                    BadIndentation, f"indentation of {indent} does not match any open scope", pos
                )
            return None
        scope = self.stack[-1]
        if scope.child_indent is None:
            scope.child_indent = indent
        elif indent != scope.child_indent:
            raise self.cursor.error(
                BadIndentation,
                f"indentation of {indent} does not match any open scope "
                f"(content of {self.drafts[scope.node].name!r} is at {scope.child_indent})",
                pos,
            )
        return scope

    # ------------------------------------------------------------------
    # Freeze
    # ------------------------------------------------------------------

    def _build(self) -> SceneDocument:
        nodes = tuple(
            Node(
                index=i,
                name=d.name,
                parent=d.parent,
                depth=d.depth,
                blocks=tuple(d.blocks),
                children=tuple(d.children),
                line=d.line,
            )
            for i, d in enumerate(self.drafts)
        )
        scenes = tuple(Scene(name=name, root=idx) for name, idx in self.scenes.items())
        doc = SceneDocument(scenes=scenes, nodes=nodes, source=self.cursor.source)
        logger.debug(
            "scene_document_parsed",
            source=self.cursor.source,
            scenes=len(scenes),
            nodes=len(nodes),
        )
        return doc


def parse_document(
    text: str,
    *,
    source: Optional[str] = None,
    strict_states: Optional[bool] = None,
) -> SceneDocument:
    """
    Parse scene markup into a SceneDocument.

    Args:
        text: Full document content.
        source: Name used in error messages (usually the asset path).
        strict_states: Require idle/hover/press on every state-keyed value.
            Defaults to settings.STRICT_STATES.

    Raises:
        InvalidValue, BadIndentation, DuplicateScene, UnknownAttributeTag,
        or ParseError for other structural violations.
    """
    if strict_states is None:
        strict_states = settings.STRICT_STATES
    return _DocumentParser(text, source, strict_states).parse()


__all__ = ["parse_document", "SCENES_SECTION"]
