# tests/conftest.py
import shutil
from pathlib import Path

import pytest

from cob_scenes.adapters.persistence import cache
from cob_scenes.shared.config import settings

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
MAIN_ASSET = FIXTURES_DIR / "main.cob"


@pytest.fixture
def main_text() -> str:
    """Raw text of the sample UI asset."""
    return MAIN_ASSET.read_text(encoding="utf-8")


@pytest.fixture
def asset_dir(tmp_path, monkeypatch):
    """
    A temporary asset root holding ui/main.cob, with settings pointed at it.
    """
    ui = tmp_path / "ui"
    ui.mkdir()
    shutil.copy(MAIN_ASSET, ui / "main.cob")
    monkeypatch.setattr(settings, "ASSET_ROOT", str(tmp_path))
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch):
    """Each test starts with an empty document cache and lenient state policy."""
    monkeypatch.setattr(settings, "STRICT_STATES", False)
    cache.clear_cache()
    yield
    cache.clear_cache()
