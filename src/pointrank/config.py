"""Configuration file management for pointrank.

Reads and writes ~/.pointrank/config.json for CLI defaults (the stored
leaderboard path and ranking strategy). The aggregator itself takes no config.
"""
from __future__ import annotations

import json
from pathlib import Path

DEFAULT_CONFIG_PATH: Path = Path.home() / ".pointrank" / "config.json"

STRATEGIES = ("latest-date", "buckets")
DEFAULT_STRATEGY = "latest-date"


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def get_leaderboard_path(config_path: Path | None = None) -> Path | None:
    """Return the configured leaderboard file, or None if not set."""
    raw = load_config(config_path).get("leaderboard_path")
    if raw:
        return Path(raw)
    return None


def set_leaderboard_path(path: Path, config_path: Path | None = None) -> None:
    """Persist the leaderboard file path to config."""
    config = load_config(config_path)
    config["leaderboard_path"] = str(path)
    save_config(config, config_path)


def get_strategy(config_path: Path | None = None) -> str:
    strategy = load_config(config_path).get("strategy")
    return strategy if strategy in STRATEGIES else DEFAULT_STRATEGY


def set_strategy(strategy: str, config_path: Path | None = None) -> None:
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy {strategy!r}; choose from {', '.join(STRATEGIES)}")
    config = load_config(config_path)
    config["strategy"] = strategy
    save_config(config, config_path)
