"""
Shared fixtures: every test runs against default config, isolated from the
user's config file and RICHCONTENT_* environment.
"""

import os

import pytest

from richcontent.config import reset_config
from richcontent.render import RenderOptions


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for key in list(os.environ):
        if key.startswith("RICHCONTENT_"):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def options():
    return RenderOptions(viewport_width=400)
