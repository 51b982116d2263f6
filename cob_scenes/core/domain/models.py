# cob_scenes/core/domain/models.py
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cob_scenes.core.domain.exceptions import SceneLookupError
from cob_scenes.core.domain.values import (
    StateValues,
    Text,
    Value,
    state_values_from_fields,
)

# Separator used by hosts to address nested nodes, e.g. "cell::text".
PATH_SEPARATOR = "::"


# --- Attribute Tag Vocabulary ---

class BlockKind(str, Enum):
    """What an attribute block configures on its node."""
    LAYOUT = "layout"
    COLOR = "color"
    SHADOW = "shadow"
    TEXT = "text"
    BEHAVIOR = "behavior"
    ANIMATED = "animated"      # per-state values, interpolated by the host
    RESPONSIVE = "responsive"  # per-state values, switched instantly


PLAIN_TAGS: Dict[str, BlockKind] = {
    "FlexNode": BlockKind.LAYOUT,
    "AbsoluteNode": BlockKind.LAYOUT,
    "DisplayControl": BlockKind.LAYOUT,
    "BackgroundColor": BlockKind.COLOR,
    "BorderColor": BlockKind.COLOR,
    "TextLineColor": BlockKind.COLOR,
    "NodeShadow": BlockKind.SHADOW,
    "TextLine": BlockKind.TEXT,
    "TextLineSize": BlockKind.TEXT,
    "Interactive": BlockKind.BEHAVIOR,
    "Picking": BlockKind.BEHAVIOR,
    "FocusPolicy": BlockKind.BEHAVIOR,
}

# Wrappers taking a color tag as parameter: Animated<BackgroundColor>
WRAPPER_TAGS: Dict[str, BlockKind] = {
    "Animated": BlockKind.ANIMATED,
    "Responsive": BlockKind.RESPONSIVE,
}

STATEFUL_KINDS = frozenset({BlockKind.ANIMATED, BlockKind.RESPONSIVE})

_WRAPPED_TAG_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)<([A-Za-z_][A-Za-z0-9_]*)>$")


def classify_tag(tag: str) -> Optional[BlockKind]:
    """Return the BlockKind for a tag, or None if the tag is not in the vocabulary."""
    if tag in PLAIN_TAGS:
        return PLAIN_TAGS[tag]
    m = _WRAPPED_TAG_RE.match(tag)
    if not m:
        return None
    wrapper, inner = m.groups()
    if wrapper in WRAPPER_TAGS and PLAIN_TAGS.get(inner) == BlockKind.COLOR:
        return WRAPPER_TAGS[wrapper]
    return None


def known_tags() -> List[str]:
    """Every accepted tag, wrappers expanded, in a stable order."""
    tags = list(PLAIN_TAGS)
    colors = [t for t, k in PLAIN_TAGS.items() if k == BlockKind.COLOR]
    for wrapper in WRAPPER_TAGS:
        tags.extend(f"{wrapper}<{c}>" for c in colors)
    return tags


# --- Tree Entities ---

class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class AttributeBlock(_FrozenModel):
    """A typed, tagged set of key/value directives attached to a node."""
    tag: str
    kind: BlockKind
    fields: Dict[str, Value] = Field(default_factory=dict)
    line: Optional[int] = None

    @property
    def is_stateful(self) -> bool:
        return self.kind in STATEFUL_KINDS

    @property
    def states(self) -> Optional[StateValues]:
        """Per-state values of an Animated/Responsive block, None for other kinds."""
        if not self.is_stateful:
            return None
        return state_values_from_fields(dict(self.fields), strict=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)


class Node(_FrozenModel):
    """
    A single element of a scene tree.

    Nodes live in the document's arena and refer to their parent and
    children by arena index only.
    """
    index: int = Field(..., ge=0)
    name: str
    parent: Optional[int] = None
    depth: int = Field(0, ge=0)
    blocks: Tuple[AttributeBlock, ...] = ()
    children: Tuple[int, ...] = ()
    line: Optional[int] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def block(self, tag: str) -> Optional[AttributeBlock]:
        """First block with the given tag, or None."""
        for b in self.blocks:
            if b.tag == tag:
                return b
        return None

    def has_block(self, tag: str) -> bool:
        return self.block(tag) is not None

    @property
    def text(self) -> Optional[str]:
        """Content of the node's TextLine block, if it has one."""
        b = self.block("TextLine")
        if b is None:
            return None
        value = b.fields.get("text")
        return value.text if isinstance(value, Text) else None


class Scene(_FrozenModel):
    """A named top-level tree; `root` indexes the document arena."""
    name: str
    root: int = Field(..., ge=0)


class SceneDocument(_FrozenModel):
    """
    Parsed contents of one scene asset.

    `scenes` keeps source order. `nodes` is the arena every Scene and Node
    index points into.
    """
    scenes: Tuple[Scene, ...] = ()
    nodes: Tuple[Node, ...] = ()
    source: Optional[str] = None

    @model_validator(mode="after")
    def _check_arena(self) -> "SceneDocument":
        count = len(self.nodes)
        for pos, node in enumerate(self.nodes):
            if node.index != pos:
                raise ValueError(f"node {node.name!r} has index {node.index}, expected {pos}")
            for child in node.children:
                if not 0 <= child < count:
                    raise ValueError(f"node {node.name!r} references missing child {child}")
                if self.nodes[child].parent != pos:
                    raise ValueError(f"node {self.nodes[child].name!r} is not owned by {node.name!r}")
                if self.nodes[child].depth != node.depth + 1:
                    raise ValueError(f"node {self.nodes[child].name!r} is not one level below its parent")
        seen = set()
        for scene in self.scenes:
            if scene.name in seen:
                raise ValueError(f"duplicate scene {scene.name!r}")
            seen.add(scene.name)
            if not 0 <= scene.root < count or self.nodes[scene.root].parent is not None:
                raise ValueError(f"scene {scene.name!r} does not point at a root node")
        return self

    # --- Lookups ---

    @property
    def scene_names(self) -> List[str]:
        return [s.name for s in self.scenes]

    def __contains__(self, name: object) -> bool:
        return any(s.name == name for s in self.scenes)

    def __len__(self) -> int:
        return len(self.scenes)

    def scene(self, name: str) -> Scene:
        for s in self.scenes:
            if s.name == name:
                return s
        raise SceneLookupError(f"scene {name!r} not found")

    def node(self, index: int) -> Node:
        try:
            return self.nodes[index]
        except IndexError:
            raise SceneLookupError(f"node index {index} out of range") from None

    def root(self, scene: Union[Scene, str]) -> Node:
        s = self.scene(scene) if isinstance(scene, str) else scene
        return self.nodes[s.root]

    def children(self, node: Union[Node, int]) -> List[Node]:
        n = self.node(node) if isinstance(node, int) else node
        return [self.nodes[i] for i in n.children]

    def parent(self, node: Union[Node, int]) -> Optional[Node]:
        n = self.node(node) if isinstance(node, int) else node
        return None if n.parent is None else self.nodes[n.parent]

    def walk(self, scene: Union[Scene, str]) -> Iterator[Node]:
        """Depth-first pre-order over one scene's nodes, root first."""
        stack = [self.root(scene).index]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def find(self, scene: Union[Scene, str], path: str = "") -> Node:
        """
        Resolve a `::`-separated child path below a scene root.

        `find("main_scene", "cell::text")` returns the first child named
        "text" of the first child named "cell". An empty path is the root.
        """
        current = self.root(scene)
        if not path:
            return current
        for part in path.split(PATH_SEPARATOR):
            match = next((c for c in self.children(current) if c.name == part), None)
            if match is None:
                raise SceneLookupError(f"no node {part!r} under {current.name!r} (path {path!r})")
            current = match
        return current

    def path_of(self, node: Union[Node, int]) -> str:
        """Inverse of find(): the `::` path of a node below its scene root."""
        n = self.node(node) if isinstance(node, int) else node
        parts: List[str] = []
        while n.parent is not None:
            parts.append(n.name)
            n = self.nodes[n.parent]
        return PATH_SEPARATOR.join(reversed(parts))

    # --- Export ---

    def to_tree(self, scene: Union[Scene, str]) -> Dict[str, Any]:
        """Nested plain-data view of one scene (no arena indices or line numbers)."""

        def build(node: Node) -> Dict[str, Any]:
            return {
                "name": node.name,
                "blocks": [
                    {
                        "tag": b.tag,
                        "kind": b.kind.value,
                        "fields": {k: v.model_dump(mode="json") for k, v in b.fields.items()},
                    }
                    for b in node.blocks
                ],
                "children": [build(c) for c in self.children(node)],
            }

        return build(self.root(scene))

    def to_trees(self) -> List[Dict[str, Any]]:
        return [self.to_tree(s) for s in self.scenes]


__all__ = [
    "PATH_SEPARATOR",
    "BlockKind",
    "PLAIN_TAGS",
    "WRAPPER_TAGS",
    "STATEFUL_KINDS",
    "classify_tag",
    "known_tags",
    "AttributeBlock",
    "Node",
    "Scene",
    "SceneDocument",
]
