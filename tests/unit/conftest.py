"""Shared fixtures for unit tests."""

import pytest


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config directory at an empty temp dir."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAYOUT_CALC_CONFIG_PATH", str(config_dir))
    return config_dir
