"""MCP server for pointrank.

Exposes leaderboard calculation and the stored leaderboard as MCP tools.
Run via: python3 -m pointrank.mcp_server
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from pointrank.errors import LeaderboardError

mcp = FastMCP(name="pointrank")


@mcp.tool()
def calculate(
    achievements: list[dict],
    previous: list[dict] | None = None,
    strategy: str = "latest-date",
) -> dict[str, Any]:
    """Rank users from achievements ({userId, points, date}) and an optional previous leaderboard.

    date is an ISO-8601 string or epoch milliseconds. strategy is
    "latest-date" (ties go to the earliest latest achievement) or "buckets"
    (ties go to whoever reached the total first in input order).
    """
    from pointrank.buckets import STRATEGY_FUNCS
    from pointrank.leaderboard import LeaderboardEntry
    from pointrank.parser import parse_achievement

    func = STRATEGY_FUNCS.get(strategy)
    if func is None:
        return {"error": f"Unknown strategy {strategy!r}. Use one of: {', '.join(STRATEGY_FUNCS)}"}
    try:
        batch = [parse_achievement(a) if isinstance(a, dict) else a for a in achievements]
        seed = None
        if previous is not None:
            seed = [LeaderboardEntry.from_dict(e) if isinstance(e, dict) else e for e in previous]
        entries = func(batch, seed)
    except LeaderboardError as exc:
        return {"error": str(exc)}
    return {"entries": [e.to_dict() for e in entries], "count": len(entries)}


@mcp.tool()
def get_leaderboard(path: str = "", user_id: str = "") -> dict[str, Any]:
    """Read the stored leaderboard.

    path: leaderboard JSON file. If empty, uses the configured path.
    user_id: if given, your_rank is that user's 1-based rank.
    """
    from pointrank.config import get_leaderboard_path
    from pointrank.parser import read_leaderboard

    lb_path = Path(path) if path else get_leaderboard_path()
    if lb_path is None or not lb_path.is_file():
        return {
            "error": "No leaderboard found. "
            "Run: pointrank config --leaderboard /path/to/leaderboard.json"
        }

    entries = read_leaderboard(lb_path)
    if entries is None:
        return {"error": f"Leaderboard at {lb_path} is unreadable"}

    ranked = [{"rank": i + 1, **e.to_dict()} for i, e in enumerate(entries)]
    your_rank = None
    if user_id:
        your_rank = next((e["rank"] for e in ranked if e["userId"] == user_id), None)
    return {"entries": ranked, "count": len(ranked), "your_rank": your_rank}


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
