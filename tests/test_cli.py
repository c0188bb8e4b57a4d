"""Tests for the CLI dashboard and the offline analyze mode."""

import json

from sessionmap.analysis.aggregator import aggregate
from sessionmap.backtest.stats import calculate_performance
from sessionmap.cli.dashboard import print_summary
from sessionmap.config import RiskPolicy
from sessionmap.main import _run_analyze

ANALYSIS = {
    "days": [
        {
            "date": "2025-11-10",
            "dayOfWeek": "Monday",
            "sessions": [{"name": "Asia", "high": 25200, "low": 25100}],
            "reactions": [
                {"testedLevel": 25100, "levelName": "Asia Low", "reacted": True,
                 "reactionType": "bounce", "move": 500, "outcome": "LONG"},
                {"testedLevel": 25300, "levelName": "London High", "reacted": False,
                 "reactionType": "break", "move": 0, "outcome": ""},
            ],
        }
    ],
}


class TestDashboard:

    def test_print_summary_format(self, capsys):
        results = aggregate([ANALYSIS])
        metrics = calculate_performance(results.daily_data, RiskPolicy())
        output = print_summary(results, metrics)

        assert "Asia Low" in output
        assert "New York High" in output
        assert "100.0%" in output
        assert "$850.00" in output  # +1000 - 150
        assert "50.0%" in output
        assert capsys.readouterr().out.strip() == output.strip()

    def test_no_losses_shows_na(self):
        results = aggregate([])
        metrics = calculate_performance(results.daily_data, RiskPolicy())
        output = print_summary(results, metrics)
        assert "Profit Factor:   N/A" in output


class TestAnalyzeMode:

    def test_reads_single_document(self, tmp_path, capsys):
        path = tmp_path / "week.json"
        path.write_text(json.dumps(ANALYSIS), encoding="utf-8")
        _run_analyze(str(path), RiskPolicy())
        out = capsys.readouterr().out
        assert "Days:            1" in out
        assert "Trades:          2" in out

    def test_reads_document_list(self, tmp_path, capsys):
        path = tmp_path / "batch.json"
        path.write_text(json.dumps([ANALYSIS, ANALYSIS]), encoding="utf-8")
        _run_analyze(str(path), RiskPolicy(point_value=20.0))
        out = capsys.readouterr().out
        assert "Days:            2" in out
        assert "$19,700.00" in out  # 2 × (10000 - 150)
