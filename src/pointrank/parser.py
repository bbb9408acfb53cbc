"""Read achievement batches and stored leaderboards from JSON files."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pointrank.errors import InvalidInputShape
from pointrank.leaderboard import Achievement, LeaderboardEntry, validate_entry

logger = logging.getLogger(__name__)

LEADERBOARD_SCHEMA_VERSION = 1


def parse_date(raw: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds into an aware datetime.

    Returns None for anything unparseable; validation rejects it later.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(raw, str):
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None


def parse_achievement(record: dict) -> Achievement:
    """Build an Achievement from a {userId, points, date} record.

    user_id is accepted as an alias for userId. Nothing is validated here.
    """
    user_id = record.get("userId", record.get("user_id"))
    if user_id is not None and not isinstance(user_id, str):
        user_id = str(user_id)
    return Achievement(
        user_id=user_id,
        points=record.get("points"),
        date=parse_date(record.get("date")),
    )


def _records_from_text(text: str, jsonl: bool) -> list:
    if jsonl:
        return [json.loads(line) for line in text.splitlines() if line.strip()]
    data = json.loads(text)
    if isinstance(data, dict):
        data = data.get("achievements")
    if not isinstance(data, list):
        raise InvalidInputShape("Invalid input: expected a JSON array of achievements")
    return data


def load_achievements(path: Path) -> list[Achievement]:
    """Load achievements from a .json array (or {"achievements": [...]}) or a .jsonl file.

    Raises json.JSONDecodeError for bad JSON and InvalidInputShape when the
    file or one of its records has the wrong shape.
    """
    text = path.read_text(encoding="utf-8")
    records = _records_from_text(text, jsonl=path.suffix == ".jsonl")
    achievements = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise InvalidInputShape(f"Invalid input: record {i} in {path} is not an object")
        achievements.append(parse_achievement(record))
    logger.debug("Loaded %d achievements from %s", len(achievements), path)
    return achievements


def read_leaderboard(path: Path) -> list[LeaderboardEntry] | None:
    """Read and validate a stored leaderboard file.

    Returns None if the file is missing, unreadable, or fails validation.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            return None
        if data.get("schema_version") != LEADERBOARD_SCHEMA_VERSION:
            return None
        raw_entries = data.get("entries")
        if not isinstance(raw_entries, list):
            return None
        entries = [LeaderboardEntry.from_dict(e) for e in raw_entries]
        if not all(validate_entry(e) for e in entries):
            return None
        return entries
    except Exception:
        logger.debug("Could not read leaderboard from %s", path, exc_info=True)
        return None


def write_leaderboard(entries: list[LeaderboardEntry], output_path: Path) -> None:
    """Write a leaderboard JSON to output_path using atomic write."""
    payload = {
        "schema_version": LEADERBOARD_SCHEMA_VERSION,
        "updated_at": datetime.now(tz=timezone.utc).isoformat(),
        "entries": [e.to_dict() for e in entries],
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(dir=output_path.parent, suffix=".tmp")
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, output_path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    logger.debug("Wrote %d entries to %s", len(entries), output_path)
