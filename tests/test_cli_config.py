"""Tests for configuration loading and overrides."""

import argparse
import logging

from cli_config import apply_cli_overrides, apply_config, load_config
from constants import Constants


def test_load_config_reads_yaml(tmp_path):
    """YAML mappings are loaded as dicts."""
    path = tmp_path / "devrange.yml"
    path.write_text("release_history:\n  api: 7.x\n", encoding="utf-8")
    assert load_config(str(path)) == {"release_history": {"api": "7.x"}}


def test_load_config_missing_file(tmp_path, caplog):
    """A missing config file is a warning, not an error."""
    with caplog.at_level(logging.WARNING):
        assert load_config(str(tmp_path / "nope.yml")) == {}
    assert "Config file not found" in caplog.text


def test_load_config_none():
    """No path means no config."""
    assert load_config(None) == {}


def test_load_config_non_mapping(tmp_path):
    """A YAML list is ignored."""
    path = tmp_path / "devrange.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert load_config(str(path)) == {}


def test_apply_config_overrides_constants():
    """Known keys update Constants."""
    apply_config({
        "release_history": {"url": "https://mirror.example/rh/", "api": "7.x", "prefix": "7.x-"},
        "http": {"timeout": 5, "retries": 1, "cache_ttl": 60},
        "manifest": {"rules": [{"pattern": "acme/*", "mode": "leading"}]},
    })
    assert Constants.RELEASE_HISTORY_URL == "https://mirror.example/rh"
    assert Constants.RELEASE_HISTORY_API == "7.x"
    assert Constants.RELEASE_CHANNEL_PREFIX == "7.x-"
    assert Constants.REQUEST_TIMEOUT == 5
    assert Constants.HTTP_RETRY_MAX == 1
    assert Constants.HTTP_CACHE_TTL_SEC == 60
    assert Constants.DEFAULT_MANIFEST_RULES == [("acme/*", "leading")]


def test_apply_config_skips_invalid_values(caplog):
    """Bad values are logged and the defaults kept."""
    timeout = Constants.REQUEST_TIMEOUT
    rules = Constants.DEFAULT_MANIFEST_RULES
    with caplog.at_level(logging.WARNING):
        apply_config({
            "http": {"timeout": "soon"},
            "manifest": {"rules": [{"pattern": "acme/*", "mode": "sideways"}, "junk"]},
        })
    assert Constants.REQUEST_TIMEOUT == timeout
    assert Constants.DEFAULT_MANIFEST_RULES == rules
    assert "non-integer" in caplog.text


def test_empty_prefix_is_allowed():
    """An empty prefix disables prefix stripping."""
    apply_config({"release_history": {"prefix": ""}})
    assert Constants.RELEASE_CHANNEL_PREFIX == ""


def test_cli_overrides_win():
    """CLI flags are applied on top of config."""
    args = argparse.Namespace(BASE_URL="https://cli.example/", API_VERSION="9.x", PREFIX=None, TIMEOUT=3)
    apply_cli_overrides(args)
    assert Constants.RELEASE_HISTORY_URL == "https://cli.example"
    assert Constants.RELEASE_HISTORY_API == "9.x"
    assert Constants.REQUEST_TIMEOUT == 3
