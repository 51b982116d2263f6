# tests/test_models.py
"""
SceneDocument lookups (scene, find, walk, path_of), the tag vocabulary and
the arena consistency checks.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cob_scenes.core.domain.exceptions import SceneLookupError
from cob_scenes.core.domain.models import (
    BlockKind,
    Node,
    Scene,
    SceneDocument,
    classify_tag,
    known_tags,
)
from cob_scenes.core.parsing.document import parse_document


@pytest.fixture
def doc(main_text) -> SceneDocument:
    return parse_document(main_text)


def test_classify_tag() -> None:
    assert classify_tag("FlexNode") == BlockKind.LAYOUT
    assert classify_tag("TextLine") == BlockKind.TEXT
    assert classify_tag("Animated<BackgroundColor>") == BlockKind.ANIMATED
    assert classify_tag("Responsive<BorderColor>") == BlockKind.RESPONSIVE
    assert classify_tag("Animated<TextLine>") is None
    assert classify_tag("Glow") is None


def test_known_tags_are_all_classified() -> None:
    tags = known_tags()
    assert "Animated<TextLineColor>" in tags
    assert len(tags) == len(set(tags))
    assert all(classify_tag(t) is not None for t in tags)


def test_find_root_and_nested(doc) -> None:
    assert doc.find("main_scene").name == "main_scene"
    assert doc.find("main_scene", "cell::text").text == "Hello, World!"


def test_find_unknown_path_raises(doc) -> None:
    with pytest.raises(SceneLookupError):
        doc.find("main_scene", "cell::label")
    with pytest.raises(SceneLookupError):
        doc.scene("nope")
    with pytest.raises(KeyError):
        doc.root("nope")


def test_path_of_inverts_find(doc) -> None:
    for scene in doc.scenes:
        for node in doc.walk(scene):
            assert doc.find(scene, doc.path_of(node)).index == node.index


def test_walk_is_preorder(doc) -> None:
    names = [n.name for n in doc.walk("main_scene")]
    assert names == ["main_scene", "cell", "text"]


def test_parent_links(doc) -> None:
    text = doc.find("despawn_button", "label")
    assert doc.parent(text).name == "despawn_button"
    assert doc.parent(doc.root("despawn_button")) is None


def test_to_tree_shape(doc) -> None:
    tree = doc.to_tree("exit_button")
    assert tree == {
        "name": "exit_button",
        "blocks": [
            {
                "tag": "TextLine",
                "kind": "text",
                "fields": {"text": {"kind": "text", "text": "Exit"}},
            }
        ],
        "children": [],
    }


def test_document_is_immutable(doc) -> None:
    with pytest.raises(ValidationError):
        doc.scenes = ()
    with pytest.raises(ValidationError):
        doc.root("exit_button").name = "other"


def test_arena_must_be_consistent() -> None:
    root = Node(index=0, name="a", children=(1,))
    orphan = Node(index=1, name="b", parent=None, depth=1)
    with pytest.raises(ValidationError):
        SceneDocument(scenes=(Scene(name="a", root=0),), nodes=(root, orphan))


def test_arena_rejects_skipped_levels() -> None:
    root = Node(index=0, name="a", children=(1,))
    child = Node(index=1, name="b", parent=0, depth=2)
    with pytest.raises(ValidationError):
        SceneDocument(scenes=(Scene(name="a", root=0),), nodes=(root, child))
