"""CLI commands for pointrank."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from rich.logging import RichHandler
from rich.markup import escape

from pointrank.buckets import STRATEGY_FUNCS
from pointrank.config import (
    STRATEGIES,
    get_leaderboard_path,
    get_strategy,
    set_leaderboard_path,
    set_strategy,
)
from pointrank.display import (
    console,
    print_error,
    print_leaderboard,
    print_update_result,
)
from pointrank.errors import LeaderboardError
from pointrank.leaderboard import Achievement, LeaderboardEntry
from pointrank.parser import load_achievements, read_leaderboard, write_leaderboard

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pointrank",
        description="Rank users by the points they earn from achievements",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    calc_p = subparsers.add_parser("calculate", help="Calculate a leaderboard from achievement files")
    calc_p.add_argument("files", nargs="+", help="Achievement files (.json or .jsonl)")
    calc_p.add_argument("--previous", "-p", default=None, help="Previous leaderboard to fold into")
    calc_p.add_argument("--output", "-o", default=None, help="Write the result to this path")
    calc_p.add_argument("--strategy", "-s", choices=STRATEGIES, default=None)
    calc_p.add_argument("--json", action="store_true", dest="as_json", help="Print JSON instead of a table")

    update_p = subparsers.add_parser("update", help="Fold achievements into the stored leaderboard")
    update_p.add_argument("files", nargs="+", help="Achievement files (.json or .jsonl)")
    update_p.add_argument("--leaderboard", "-l", default=None, help="Override stored leaderboard path")
    update_p.add_argument("--strategy", "-s", choices=STRATEGIES, default=None)

    show_p = subparsers.add_parser("show", help="Show the stored leaderboard")
    show_p.add_argument("--leaderboard", "-l", default=None, help="Override stored leaderboard path")
    show_p.add_argument("--highlight", "-u", default=None, help="User id to highlight")

    config_p = subparsers.add_parser("config", help="Set stored leaderboard path and default strategy")
    config_p.add_argument("--leaderboard", "-l", default=None, help="Path to the stored leaderboard file")
    config_p.add_argument("--strategy", "-s", choices=STRATEGIES, default=None)
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "calculate":
        result = do_calculate(
            args.files,
            previous=args.previous,
            output=args.output,
            strategy=args.strategy,
            as_json=args.as_json,
        )
    elif args.command == "update":
        result = do_update(args.files, leaderboard=args.leaderboard, strategy=args.strategy)
    elif args.command == "config":
        result = do_config(leaderboard=args.leaderboard, strategy=args.strategy)
    else:
        result = do_show(
            leaderboard=getattr(args, "leaderboard", None),
            highlight=getattr(args, "highlight", None),
        )

    if not result.get("ok"):
        raise SystemExit(1)


def _load_batches(files: list[str]) -> list[Achievement]:
    """Concatenate achievement files in argument order."""
    achievements: list[Achievement] = []
    for name in files:
        achievements.extend(load_achievements(Path(name).expanduser()))
    return achievements


def _run(
    achievements: list[Achievement],
    previous: list[LeaderboardEntry] | None,
    strategy: str | None,
) -> tuple[str, list[LeaderboardEntry]]:
    strategy = strategy or get_strategy()
    logger.info("Ranking %d achievements with %s strategy", len(achievements), strategy)
    return strategy, STRATEGY_FUNCS[strategy](achievements, previous)


def do_calculate(
    files: list[str],
    previous: str | None = None,
    output: str | None = None,
    strategy: str | None = None,
    as_json: bool = False,
) -> dict:
    """Calculate a leaderboard from files, optionally seeded and saved."""
    previous_entries = None
    if previous:
        previous_path = Path(previous).expanduser()
        previous_entries = read_leaderboard(previous_path)
        if previous_entries is None:
            print_error(f"Could not read previous leaderboard: {previous_path}")
            return {"ok": False, "reason": "bad_previous"}

    try:
        achievements = _load_batches(files)
        strategy, entries = _run(achievements, previous_entries, strategy)
    except (LeaderboardError, json.JSONDecodeError, OSError) as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "invalid_input", "error": str(exc)}

    result: dict = {"ok": True, "strategy": strategy, "entries": entries, "count": len(entries)}
    if output:
        output_path = Path(output).expanduser()
        try:
            write_leaderboard(entries, output_path)
        except OSError as exc:
            print_error(f"Could not write leaderboard to {output_path}: {exc}")
            return {"ok": False, "reason": "write_failed", "error": str(exc)}
        result["output"] = str(output_path)

    if as_json:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
    else:
        print_leaderboard(entries)
    return result


def _stored_path(leaderboard: str | None) -> Path | None:
    if leaderboard:
        return Path(leaderboard).expanduser()
    return get_leaderboard_path()


def do_update(files: list[str], leaderboard: str | None = None, strategy: str | None = None) -> dict:
    """Fold new achievements into the stored leaderboard and write it back."""
    lb_path = _stored_path(leaderboard)
    if lb_path is None:
        print_error("No leaderboard path set. Use --leaderboard or run: pointrank config --leaderboard <path>")
        return {"ok": False, "reason": "no_path"}

    previous_entries: list[LeaderboardEntry] = []
    if lb_path.exists():
        stored = read_leaderboard(lb_path)
        if stored is None:
            print_error(f"Stored leaderboard is unreadable: {lb_path}")
            return {"ok": False, "reason": "bad_previous"}
        previous_entries = stored

    try:
        achievements = _load_batches(files)
        strategy, entries = _run(achievements, previous_entries, strategy)
    except (LeaderboardError, json.JSONDecodeError, OSError) as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "invalid_input", "error": str(exc)}

    try:
        write_leaderboard(entries, lb_path)
    except OSError as exc:
        print_error(f"Could not write leaderboard to {lb_path}: {exc}")
        return {"ok": False, "reason": "write_failed", "error": str(exc)}
    result = {
        "ok": True,
        "output": str(lb_path),
        "strategy": strategy,
        "achievements": len(achievements),
        "entries": entries,
        "count": len(entries),
    }
    print_update_result(result)
    return result


def do_show(leaderboard: str | None = None, highlight: str | None = None) -> dict:
    """Show the stored leaderboard."""
    lb_path = _stored_path(leaderboard)
    if lb_path is None:
        print_error("No leaderboard path set. Run: pointrank config --leaderboard <path>")
        return {"ok": False, "reason": "no_path"}
    if not lb_path.exists():
        print_error(f"Leaderboard not found: {lb_path}")
        return {"ok": False, "reason": "not_found"}

    entries = read_leaderboard(lb_path)
    if entries is None:
        print_error(f"Stored leaderboard is unreadable: {lb_path}")
        return {"ok": False, "reason": "bad_previous"}

    print_leaderboard(entries, highlight_user=highlight)
    return {"ok": True, "entries": entries, "count": len(entries)}


def do_config(leaderboard: str | None = None, strategy: str | None = None) -> dict:
    """Persist CLI defaults."""
    result: dict = {"ok": True}
    if leaderboard:
        expanded = Path(leaderboard).expanduser().resolve()
        set_leaderboard_path(expanded)
        result["leaderboard_path"] = str(expanded)
    if strategy:
        set_strategy(strategy)
        result["strategy"] = strategy

    current = get_leaderboard_path()
    console.print(f"  Leaderboard: [bold]{escape(str(current or '(not set)'))}[/]")
    console.print(f"  Strategy:    [bold]{get_strategy()}[/]")
    return result
