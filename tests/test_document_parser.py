# tests/test_document_parser.py
"""
Structural parsing: scenes, node nesting, attribute blocks and the error
taxonomy (BadIndentation, DuplicateScene, UnknownAttributeTag).
"""

from __future__ import annotations

import pytest

from cob_scenes.core.domain.exceptions import (
    BadIndentation,
    DuplicateScene,
    ParseError,
    UnknownAttributeTag,
)
from cob_scenes.core.domain.models import BlockKind, SceneDocument
from cob_scenes.core.domain.values import HexColor, HslaColor, Pixels, StateValues, Text
from cob_scenes.core.parsing.document import parse_document


@pytest.fixture
def doc(main_text) -> SceneDocument:
    return parse_document(main_text, source="ui/main.cob")


def test_scenes_keep_source_order(doc) -> None:
    assert doc.scene_names == [
        "main_scene",
        "number_text",
        "despawn_button",
        "exit_button",
        "respawn_scene",
    ]
    assert "exit_button" in doc
    assert "missing" not in doc


def test_main_scene_tree(doc) -> None:
    root = doc.root("main_scene")
    assert root.name == "main_scene"
    assert root.is_root
    assert [c.name for c in doc.children(root)] == ["cell"]

    cell = doc.find("main_scene", "cell")
    animated = cell.block("Animated<BackgroundColor>")
    assert animated is not None
    assert animated.kind == BlockKind.ANIMATED
    assert list(animated.fields) == ["idle", "hover", "press"]
    assert animated.fields["idle"] == HexColor(hex="FF0000")
    assert animated.fields["hover"] == HslaColor(hue=120, saturation=1.0, lightness=0.5, alpha=1.0)
    assert animated.fields["press"] == HexColor(hex="0000FFFF")

    shadow = cell.block("NodeShadow")
    assert shadow is not None
    assert shadow.kind == BlockKind.SHADOW
    assert shadow.fields == {"spread_radius": Pixels(value=10), "blur_radius": Pixels(value=5)}

    text = doc.find("main_scene", "cell::text")
    assert text.depth == 2
    assert text.block("TextLine").fields["text"] == Text(text="Hello, World!")
    assert text.text == "Hello, World!"
    assert doc.children(text) == []


def test_exit_button_is_a_single_text_node(doc) -> None:
    root = doc.root("exit_button")
    assert len(root.blocks) == 1
    assert root.blocks[0].tag == "TextLine"
    assert root.text == "Exit"
    assert root.children == ()


def test_bare_tag_has_no_fields(doc) -> None:
    button = doc.root("despawn_button")
    interactive = button.block("Interactive")
    assert interactive is not None
    assert interactive.kind == BlockKind.BEHAVIOR
    assert interactive.fields == {}


def test_block_lines_are_recorded(doc) -> None:
    cell = doc.find("main_scene", "cell")
    assert cell.line == 5
    assert cell.block("Animated<BackgroundColor>").line == 7
    assert cell.block("NodeShadow").line == 12


def test_children_are_exactly_one_level_deeper(doc) -> None:
    for scene in doc.scenes:
        for node in doc.walk(scene):
            for child in doc.children(node):
                assert child.depth == node.depth + 1
                assert child.parent == node.index


def test_same_node_name_in_different_scopes(doc) -> None:
    first = doc.find("main_scene", "cell::text")
    second = doc.find("number_text", "cell::text")
    assert first.index != second.index
    assert second.text == "0"


def test_responsive_block_with_partial_states(doc) -> None:
    cell = doc.find("number_text", "cell")
    block = cell.block("Responsive<TextLineColor>")
    assert block.kind == BlockKind.RESPONSIVE
    states = block.states
    assert isinstance(states, StateValues)
    assert states.declared == ("idle", "hover")


def test_empty_text_gives_empty_document() -> None:
    doc = parse_document("")
    assert doc.scenes == ()
    assert doc.nodes == ()
    doc = parse_document("// nothing yet\n\n#scenes\n")
    assert len(doc) == 0


def test_crlf_and_bom_are_tolerated() -> None:
    text = '\ufeff#scenes\r\n"s"\r\n    TextLine{text:"x"}\r\n'
    doc = parse_document(text)
    assert doc.root("s").text == "x"


def test_blocks_and_children_can_interleave() -> None:
    text = (
        "#scenes\n"
        '"s"\n'
        '  "a"\n'
        "  FlexNode{width:10px}\n"
        '  "b"\n'
    )
    doc = parse_document(text)
    root = doc.root("s")
    assert [c.name for c in doc.children(root)] == ["a", "b"]
    assert root.block("FlexNode") is not None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_duplicate_scene_fails() -> None:
    text = '#scenes\n"a"\n    TextLine{text:"1"}\n"a"\n'
    with pytest.raises(DuplicateScene) as exc:
        parse_document(text)
    assert exc.value.line == 4
    assert "line 2" in str(exc.value)


def test_duplicate_child_names_are_not_scene_duplicates() -> None:
    doc = parse_document('#scenes\n"a"\n    "x"\n    "x"\n')
    assert len(doc.children(doc.root("a"))) == 2


def test_unknown_tag_fails() -> None:
    with pytest.raises(UnknownAttributeTag) as exc:
        parse_document('#scenes\n"a"\n    Sparkles{amount:3}\n')
    assert exc.value.line == 3


def test_wrapper_of_non_color_tag_fails() -> None:
    with pytest.raises(UnknownAttributeTag):
        parse_document('#scenes\n"a"\n    Animated<FlexNode>{idle:1}\n')


def test_dedent_to_unknown_level_fails() -> None:
    text = (
        "#scenes\n"
        '"a"\n'
        '    "b"\n'
        '        "c"\n'
        '      "d"\n'
    )
    with pytest.raises(BadIndentation) as exc:
        parse_document(text)
    assert exc.value.line == 5


def test_sibling_with_different_indent_fails() -> None:
    text = '#scenes\n"a"\n    "b"\n  "c"\n'
    with pytest.raises(BadIndentation):
        parse_document(text)


def test_first_scene_must_start_at_column_one() -> None:
    with pytest.raises(BadIndentation):
        parse_document('#scenes\n  "a"\n')


def test_block_at_top_level_fails() -> None:
    with pytest.raises(BadIndentation):
        parse_document('#scenes\nTextLine{text:"x"}\n')


def test_content_under_a_block_fails() -> None:
    text = '#scenes\n"a"\n    FlexNode\n        "b"\n'
    with pytest.raises(BadIndentation):
        parse_document(text)


def test_tabs_in_indentation_fail() -> None:
    with pytest.raises(BadIndentation):
        parse_document('#scenes\n"a"\n\tTextLine{text:"x"}\n')


def test_content_before_section_fails() -> None:
    with pytest.raises(ParseError):
        parse_document('"a"\n')


def test_unknown_section_fails() -> None:
    with pytest.raises(ParseError):
        parse_document("#defs\n")


def test_trailing_garbage_fails() -> None:
    with pytest.raises(ParseError):
        parse_document('#scenes\n"a" "b"\n')


def test_error_carries_source_name() -> None:
    with pytest.raises(ParseError) as exc:
        parse_document('#scenes\n"a"\n    Nope\n', source="ui/x.cob")
    assert exc.value.source == "ui/x.cob"
    assert "ui/x.cob:3" in str(exc.value)
