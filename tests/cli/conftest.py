"""Pytest fixtures for CLI tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each test without user config files or PEOPLEFILTER_ variables."""
    for key in list(os.environ):
        if key.startswith("PEOPLEFILTER_"):
            monkeypatch.delenv(key)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path
