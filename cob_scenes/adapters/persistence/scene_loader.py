# cob_scenes/adapters/persistence/scene_loader.py
"""
Loader for scene assets on disk.

Assets are plain text files (default suffix `.cob`) under a configured root:

    ui/
      main.cob
      hud/
        overlay.cob

Relative names are resolved against `settings.ASSET_ROOT`; a missing suffix
is added, so "ui/main", "ui/main.cob" and an absolute path all work.

Error behaviour
---------------
- A missing file raises FileNotFoundError.
- A malformed file raises the ParseError from the parser; nothing is
  returned for it. The error is logged once here with the asset path.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

import structlog

from cob_scenes.core.domain.exceptions import ParseError
from cob_scenes.core.domain.models import SceneDocument
from cob_scenes.core.parsing.document import parse_document
from cob_scenes.shared.config import settings

logger = structlog.get_logger()

PathLike = Union[str, Path]


def asset_root() -> Path:
    return Path(settings.ASSET_DIR)


def resolve_asset_path(name: PathLike) -> Path:
    """Map an asset name or path to an absolute file path."""
    raw = str(name).strip() if isinstance(name, str) else name
    if not raw:
        raise ValueError("Asset name must be a non-empty string.")

    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = asset_root() / path
    if not path.suffix:
        path = path.with_suffix(settings.ASSET_SUFFIX)
    return path.resolve()


def read_asset_text(path: PathLike) -> str:
    resolved = resolve_asset_path(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"Scene asset not found: {resolved}")
    with resolved.open("r", encoding=settings.ENCODING) as f:
        return f.read()


def load_scene_file(path: PathLike, *, strict_states: Optional[bool] = None) -> SceneDocument:
    """
    Read and parse one scene asset.

    Returns:
        The parsed SceneDocument, with `source` set to the resolved path.
    """
    resolved = resolve_asset_path(path)
    text = read_asset_text(resolved)
    try:
        doc = parse_document(text, source=str(resolved), strict_states=strict_states)
    except ParseError as e:
        logger.warning(
            "scene_asset_invalid",
            path=str(resolved),
            error=type(e).__name__,
            line=e.line,
            detail=e.message,
        )
        raise

    logger.info(
        "scene_asset_loaded",
        path=str(resolved),
        scenes=len(doc.scenes),
        nodes=len(doc.nodes),
    )
    return doc


def available_assets() -> List[str]:
    """Asset names (relative to the root, POSIX separators) found under the root."""
    root = asset_root()
    if not root.is_dir():
        return []
    suffix = settings.ASSET_SUFFIX
    return sorted(
        p.relative_to(root).as_posix()
        for p in root.rglob(f"*{suffix}")
        if p.is_file()
    )


__all__ = [
    "asset_root",
    "resolve_asset_path",
    "read_asset_text",
    "load_scene_file",
    "available_assets",
]
