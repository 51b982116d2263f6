"""
cob_scenes
==========

Loader for `.cob` UI scene assets: named scenes made of node trees carrying
typed attribute blocks (layout, colors, state-keyed colors, shadows, text).

    from cob_scenes import parse_document

    doc = parse_document(text)
    doc.find("main_scene", "cell::text").text
"""

from cob_scenes.adapters.persistence.cache import clear_cache, get_or_load
from cob_scenes.adapters.persistence.scene_loader import load_scene_file
from cob_scenes.core.domain.exceptions import (
    BadIndentation,
    DuplicateScene,
    InvalidValue,
    ParseError,
    SceneLookupError,
    UnknownAttributeTag,
)
from cob_scenes.core.domain.models import (
    AttributeBlock,
    BlockKind,
    Node,
    Scene,
    SceneDocument,
)
from cob_scenes.core.domain.values import InteractionState, StateValues, Value
from cob_scenes.core.parsing.document import parse_document
from cob_scenes.core.serializer import dump_document
from cob_scenes.shared.logging_setup import get_logger, init_logging

__version__ = "0.1.0"

__all__ = [
    "parse_document",
    "dump_document",
    "load_scene_file",
    "get_or_load",
    "clear_cache",
    "SceneDocument",
    "Scene",
    "Node",
    "AttributeBlock",
    "BlockKind",
    "Value",
    "StateValues",
    "InteractionState",
    "ParseError",
    "InvalidValue",
    "BadIndentation",
    "DuplicateScene",
    "UnknownAttributeTag",
    "SceneLookupError",
    "init_logging",
    "get_logger",
]
