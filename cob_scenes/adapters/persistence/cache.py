# cob_scenes/adapters/persistence/cache.py
"""
cob_scenes/adapters/persistence/cache.py
----------------------------------------

In-memory cache of parsed scene documents.

Goals
=====
- Parse each asset once; hosts spawn the same scenes many times.
- Small, testable API to get/load, preload, inject, clear and inspect.
- Thread-safe for hosts that load from worker threads.

Documents are immutable, so a cached instance can be shared freely.
Reloading is explicit: `clear_cache(name)` then `get_or_load(name)`.

Implementation notes
====================
- Keys are resolved absolute asset paths, so "ui/main" and "ui/main.cob"
  share one entry.
- A lock protects cache mutations (double-checked build).
- Load errors propagate and nothing is cached for the failing asset.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

import structlog

from cob_scenes.core.domain.models import SceneDocument

from .scene_loader import PathLike, load_scene_file, resolve_asset_path

logger = structlog.get_logger()

# Map: resolved asset path -> SceneDocument
_DOCUMENT_CACHE: Dict[str, SceneDocument] = {}

# Lock for cache mutations / double-checked creation
_CACHE_LOCK = threading.RLock()


def _cache_key(name: PathLike) -> str:
    return str(resolve_asset_path(name))


def get_or_load(name: PathLike) -> SceneDocument:
    """
    Get the parsed document for an asset, loading and caching it if needed.

    Raises:
        ValueError: empty asset name.
        FileNotFoundError / ParseError: bubbled from the loader.
    """
    key = _cache_key(name)

    # Fast path (no lock) for already-cached entries.
    existing = _DOCUMENT_CACHE.get(key)
    if existing is not None:
        logger.debug("scene_cache_hit", path=key)
        return existing

    with _CACHE_LOCK:
        existing = _DOCUMENT_CACHE.get(key)
        if existing is not None:
            return existing

        doc = load_scene_file(key)
        _DOCUMENT_CACHE[key] = doc
        return doc


def set_document(name: PathLike, doc: SceneDocument) -> None:
    """
    Manually insert or override a cached document.
    Useful for tests or for hosts that build documents from strings.
    """
    if doc is None:
        raise ValueError("Document must be non-null.")
    key = _cache_key(name)
    with _CACHE_LOCK:
        _DOCUMENT_CACHE[key] = doc


def clear_cache(name: Optional[PathLike] = None) -> None:
    """
    Clear the in-memory cache.

    Args:
        name: if provided, clears only that asset; otherwise clears all.
    """
    with _CACHE_LOCK:
        if name is None:
            _DOCUMENT_CACHE.clear()
            return
        _DOCUMENT_CACHE.pop(_cache_key(name), None)


def cached_assets() -> List[str]:
    """Return cached asset paths (resolved)."""
    with _CACHE_LOCK:
        return sorted(_DOCUMENT_CACHE.keys())


def preload_assets(names: Iterable[PathLike]) -> None:
    """
    Load a list of assets up front.

    Errors are propagated; the caller decides whether to catch and continue.
    """
    for name in names:
        if not str(name).strip():
            continue
        get_or_load(name)



__all__ = [
    "get_or_load",
    "set_document",
    "clear_cache",
    "cached_assets",
    "preload_assets",
]
