from __future__ import annotations

import pytest

from steady.minibuffer.frame import Buffer, Frame
from steady.minibuffer.height import HeightProviderRegistry, set_height_providers


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point settings at an empty directory and reset global providers."""
    monkeypatch.setenv("STEADY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("STEADY_MINIBUFFER_HEIGHT", raising=False)
    monkeypatch.delenv("STEADY_POINT_OFFSET", raising=False)
    set_height_providers(HeightProviderRegistry())
    yield tmp_path / "config"
    set_height_providers(HeightProviderRegistry())


@pytest.fixture
def frame():
    """A 50x80 frame showing a 200-line buffer in one window."""
    return Frame(rows=50, columns=80, buffer=Buffer.numbered("main", 200))
