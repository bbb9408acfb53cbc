"""Tests for the config module."""
import json
from pathlib import Path

import pytest

from pointrank.config import (
    DEFAULT_STRATEGY,
    get_leaderboard_path,
    get_strategy,
    load_config,
    save_config,
    set_leaderboard_path,
    set_strategy,
)


class TestLoadConfig:
    def test_missing_file_returns_empty(self, tmp_path):
        assert load_config(tmp_path / "nonexistent.json") == {}

    def test_invalid_json_returns_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")
        assert load_config(path) == {}

    def test_non_object_returns_empty(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_config(path) == {}

    def test_loads_valid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"key": "value"}', encoding="utf-8")
        assert load_config(path) == {"key": "value"}


class TestSaveConfig:
    def test_creates_file(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"hello": "world"}, path)
        assert json.loads(path.read_text()) == {"hello": "world"}

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "sub" / "dir" / "config.json"
        save_config({"nested": True}, path)
        assert path.exists()

    def test_overwrites_existing(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"v": 1}, path)
        save_config({"v": 2}, path)
        assert json.loads(path.read_text()) == {"v": 2}


class TestLeaderboardPath:
    def test_not_set_returns_none(self, tmp_path):
        assert get_leaderboard_path(tmp_path / "config.json") is None

    def test_set_and_get(self, tmp_path):
        config_path = tmp_path / "config.json"
        target = tmp_path / "shared" / "leaderboard.json"
        set_leaderboard_path(target, config_path)
        assert get_leaderboard_path(config_path) == target

    def test_preserves_other_config_keys(self, tmp_path):
        config_path = tmp_path / "config.json"
        save_config({"other_key": "keep_me"}, config_path)
        set_leaderboard_path(Path("/some/lb.json"), config_path)
        config = load_config(config_path)
        assert config["other_key"] == "keep_me"
        assert config["leaderboard_path"] == "/some/lb.json"


class TestStrategy:
    def test_default(self, tmp_path):
        assert get_strategy(tmp_path / "config.json") == DEFAULT_STRATEGY

    def test_set_and_get(self, tmp_path):
        config_path = tmp_path / "config.json"
        set_strategy("buckets", config_path)
        assert get_strategy(config_path) == "buckets"

    def test_unknown_stored_value_falls_back(self, tmp_path):
        config_path = tmp_path / "config.json"
        save_config({"strategy": "random"}, config_path)
        assert get_strategy(config_path) == DEFAULT_STRATEGY

    def test_set_unknown_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown strategy"):
            set_strategy("random", tmp_path / "config.json")
