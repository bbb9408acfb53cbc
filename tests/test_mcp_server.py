"""Tests for the MCP server tool functions."""
from unittest.mock import patch

from pointrank.leaderboard import LeaderboardEntry
from pointrank.mcp_server import calculate, get_leaderboard
from pointrank.parser import write_leaderboard


class TestCalculate:
    def test_ranks_records(self):
        result = calculate(
            [
                {"userId": "1", "points": 10, "date": "2023-01-01T00:00:00Z"},
                {"userId": "2", "points": 10, "date": "2023-01-01T00:00:01Z"},
                {"userId": "3", "points": 12, "date": 1672531300000},
            ]
        )
        assert result["count"] == 3
        assert [e["userId"] for e in result["entries"]] == ["3", "1", "2"]

    def test_with_previous(self):
        result = calculate(
            [{"userId": "b", "points": 5, "date": "2023-01-01T00:00:00Z"}],
            previous=[{"userId": "a", "points": 10}, {"userId": "b", "points": 5}],
        )
        assert result["entries"] == [{"userId": "a", "points": 10}, {"userId": "b", "points": 10}]

    def test_buckets_strategy(self):
        result = calculate(
            [
                {"userId": "late", "points": 1, "date": "2023-01-02T00:00:00Z"},
                {"userId": "early", "points": 1, "date": "2023-01-01T00:00:00Z"},
            ],
            strategy="buckets",
        )
        assert result["entries"][0]["userId"] == "late"

    def test_unknown_strategy(self):
        assert "error" in calculate([], strategy="random")

    def test_invalid_achievement_returns_error(self):
        result = calculate([{"userId": "", "points": 1, "date": "2023-01-01T00:00:00Z"}])
        assert "index 0" in result["error"]

    def test_invalid_previous_returns_error(self):
        assert "error" in calculate([], previous=[{"points": 1}])


class TestGetLeaderboard:
    def test_reads_file_with_ranks(self, tmp_path):
        path = tmp_path / "lb.json"
        write_leaderboard([LeaderboardEntry("a", 9), LeaderboardEntry("b", 3)], path)
        result = get_leaderboard(path=str(path), user_id="b")
        assert result["count"] == 2
        assert result["entries"][0] == {"rank": 1, "userId": "a", "points": 9}
        assert result["your_rank"] == 2

    def test_unknown_user_has_no_rank(self, tmp_path):
        path = tmp_path / "lb.json"
        write_leaderboard([LeaderboardEntry("a", 9)], path)
        assert get_leaderboard(path=str(path), user_id="zed")["your_rank"] is None

    @patch("pointrank.config.DEFAULT_CONFIG_PATH")
    def test_falls_back_to_config(self, mock_config_path, tmp_path):
        mock_config_path.exists.return_value = False
        assert "error" in get_leaderboard()

    def test_missing_file(self, tmp_path):
        assert "error" in get_leaderboard(path=str(tmp_path / "nope.json"))

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "lb.json"
        path.write_text("garbage")
        assert "unreadable" in get_leaderboard(path=str(path))["error"]
