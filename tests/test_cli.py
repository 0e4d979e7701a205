"""
Tests for the JSON request CLI.
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from jetlag_ranking import cli

DIRECT = {
    "id": "direct",
    "price": 780,
    "segments": [
        {
            "origin": "JFK",
            "destination": "LHR",
            "departure": "2025-06-10T22:00:00Z",
            "arrival": "2025-06-11T05:00:00Z",
        }
    ],
}


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Leave pytest's log capture handlers in place."""
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)


def write_request(tmp_path: Path, data) -> str:
    path = tmp_path / "request.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return str(path)


def run_main(argv, capsys) -> tuple[int, dict]:
    code = 0
    try:
        cli.main(argv)
    except SystemExit as e:
        code = e.code
    return code, json.loads(capsys.readouterr().out)


class TestMain:
    """Exit codes and JSON output."""

    def test_rank_request(self, tmp_path, capsys) -> None:
        """A plain request is a ranking request."""
        code, output = run_main([write_request(tmp_path, {"flights": [DIRECT]})], capsys)
        assert code == 0
        assert output["flights"][0]["flight"]["id"] == "direct"
        assert output["price_analysis"]["cheapest"] == "direct"

    def test_naive_inner_timestamp(self, tmp_path, capsys) -> None:
        """A connection stamped without an offset degrades that flight only."""
        mixed = {
            "id": "mixed",
            "segments": [
                {
                    "origin": "JFK",
                    "destination": "BOS",
                    "departure": "2025-06-10T10:00:00Z",
                    "arrival": "2025-06-10T07:30:00",
                },
                {
                    "origin": "BOS",
                    "destination": "LHR",
                    "departure": "2025-06-10T09:00:00",
                    "arrival": "2025-06-10T20:00:00Z",
                },
            ],
        }
        code, output = run_main([write_request(tmp_path, {"flights": [DIRECT, mixed]})], capsys)
        assert code == 0
        degraded = {f["flight"]["id"]: f["score"]["degraded"] for f in output["flights"]}
        assert degraded == {"direct": False, "mixed": True}

    def test_tool_request(self, tmp_path, capsys) -> None:
        """Requests with a tool name go through the router."""
        request = {"tool": "score_flight", "arguments": {"flight": DIRECT}}
        code, output = run_main([write_request(tmp_path, request)], capsys)
        assert code == 0
        assert output["flight_id"] == "direct"

    def test_usage(self, capsys) -> None:
        """Exactly one argument is required."""
        code, output = run_main([], capsys)
        assert code == 1
        assert output["error"].startswith("Usage")

    def test_missing_file(self, tmp_path, capsys) -> None:
        """A missing request file is reported."""
        code, output = run_main([str(tmp_path / "nope.json")], capsys)
        assert code == 1
        assert "Request file not found" in output["error"]

    def test_invalid_json(self, tmp_path, capsys) -> None:
        """Malformed JSON is reported."""
        code, output = run_main([write_request(tmp_path, "{not json")], capsys)
        assert code == 1
        assert output["error"].startswith("Invalid JSON")

    def test_missing_field(self, tmp_path, capsys) -> None:
        """A request without flights names the missing field."""
        code, output = run_main([write_request(tmp_path, {"filters": {}})], capsys)
        assert code == 1
        assert output["error"] == "Missing required field: 'flights'"

    def test_invalid_filter(self, tmp_path, capsys) -> None:
        """Invalid filters report the offending field."""
        request = {"flights": [DIRECT], "filters": {"max_price": -1}}
        code, output = run_main([write_request(tmp_path, request)], capsys)
        assert code == 1
        assert output["field"] == "max_price"

    def test_unknown_tool(self, tmp_path, capsys) -> None:
        """Unknown tools fail cleanly."""
        code, output = run_main([write_request(tmp_path, {"tool": "nope"})], capsys)
        assert code == 1
        assert output["error"] == "Ranking failed: Unknown tool: nope"
