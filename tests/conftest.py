"""Pytest hooks and fixtures."""

import os

import pytest

from jsonwire.config import access


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep tests away from ~/.jsonwire/config.json and JSONWIRE_* variables."""
    monkeypatch.setattr("jsonwire.config.loader.get_config_path", lambda: tmp_path / "config.json")
    monkeypatch.setattr("jsonwire.config.access.get_config_path", lambda: tmp_path / "config.json")
    for key in list(os.environ):
        if key.startswith("JSONWIRE_"):
            monkeypatch.delenv(key)
    access.clear_config_cache()
    yield
    access.clear_config_cache()
