"""Rich terminal display for pointrank."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pointrank.leaderboard import LeaderboardEntry

console = Console()

_MEDALS = {1: "gold1", 2: "grey70", 3: "dark_orange3"}


def format_points(n: float) -> str:
    """Format point totals: 421543 -> '421.5K', 1200 -> '1,200', 1234567 -> '1.2M', 2.5 -> '2.5'."""
    if not isinstance(n, int):
        n = float(n)
    if isinstance(n, float) and n.is_integer():
        n = int(n)
    sign = "-" if n < 0 else ""
    n = abs(n)
    if n >= 1_000_000:
        value = n / 1_000_000
        if value >= 100:
            return f"{sign}{value:.0f}M"
        return f"{sign}{value:.1f}M"
    if n >= 10_000:
        value = n / 1_000
        if value >= 1000:
            return f"{sign}{value:.0f}K"
        return f"{sign}{value:.1f}K"
    if isinstance(n, float):
        return f"{sign}{n:,.2f}".rstrip("0").rstrip(".")
    return f"{sign}{n:,}"


def print_leaderboard(
    entries: list[LeaderboardEntry],
    highlight_user: str | None = None,
    title: str = "Leaderboard",
) -> None:
    """Print a ranked table. Rank is the 1-based position in entries."""
    if not entries:
        print_empty_leaderboard()
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Rank", justify="right", width=6)
    table.add_column("User", min_width=20)
    table.add_column("Points", justify="right", min_width=10)

    for rank, entry in enumerate(entries, start=1):
        color = _MEDALS.get(rank)
        rank_text = f"[{color}]#{rank}[/{color}]" if color else f"#{rank}"
        user_text = escape(entry.user_id)
        if highlight_user and entry.user_id == highlight_user:
            user_text = f"[bold]{user_text} (you)[/]"
        table.add_row(rank_text, user_text, format_points(entry.points))

    console.print(table)


def print_empty_leaderboard() -> None:
    panel = Panel(
        "\n  No entries yet. Run [bold]pointrank update <file>[/] to add achievements.\n",
        title="[bold]POINTRANK[/]",
        box=box.ROUNDED,
        border_style="grey50",
        width=60,
    )
    console.print(panel)


def print_update_result(result: dict) -> None:
    """Print a summary after folding new achievements into the stored leaderboard."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"  Achievements:  {format_points(result.get('achievements', 0))}")
    lines.append(f"  Users:         {format_points(result.get('count', 0))}")
    lines.append(f"  Strategy:      {escape(str(result.get('strategy', '')))}")
    lines.append(f"  Saved to:      [bold]{escape(str(result.get('output', '')))}[/]")
    entries = result.get("entries") or []
    if entries:
        leader = entries[0]
        lines.append(f"  Leader:        {escape(leader.user_id)} ({format_points(leader.points)})")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]Leaderboard Updated[/]",
        box=box.ROUNDED,
        border_style="green",
        width=60,
    )
    console.print(panel)


def print_error(message: str) -> None:
    console.print(f"[red]{escape(message)}[/]")
