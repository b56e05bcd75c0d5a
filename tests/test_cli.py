"""Tests for the command-line interface."""

import json
from datetime import datetime
from unittest.mock import Mock, patch

import pytest

from seogeo.analyzer import AnalysisError, SEOGeoAnalyzer
from seogeo.cli import main
from seogeo.database import HistoryStore


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Isolated configuration: temporary database, no API keys."""
    db_url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", db_url)
    monkeypatch.setenv("PERSIST_HISTORY", "false")
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    return db_url


@pytest.fixture
def report(rich_html):
    analyzer = SEOGeoAnalyzer(fetcher=Mock())
    return analyzer.analyze_html(
        "https://example.com/guide", rich_html, evaluation_instant=datetime(2025, 6, 1)
    )


class TestAnalyzeCommand:
    """Test cases for `seogeo analyze`."""

    @patch("seogeo.cli.SEOGeoAnalyzer")
    def test_json_output(self, mock_analyzer_class, env, report, capsys):
        mock_analyzer_class.return_value.analyze_url.return_value = report

        main(["analyze", "https://example.com/guide", "--output", "json", "--no-recommendations"])

        data = json.loads(capsys.readouterr().out)
        assert data["geoScore"] == 100
        assert data["url"] == "https://example.com/guide"
        kwargs = mock_analyzer_class.call_args.kwargs
        assert kwargs["rubric"] == "business"
        assert kwargs["recommender"] is None
        assert kwargs["history"] is None

    @patch("seogeo.cli.SEOGeoAnalyzer")
    def test_text_output_and_rubric(self, mock_analyzer_class, env, report, capsys):
        mock_analyzer_class.return_value.analyze_url.return_value = report

        main(["analyze", "https://example.com/guide", "--rubric", "medical"])

        out = capsys.readouterr().out
        assert "SEO/GEO Analysis for: https://example.com/guide" in out
        assert "title_tag" in out
        assert mock_analyzer_class.call_args.kwargs["rubric"] == "medical"

    @patch("seogeo.cli.SEOGeoAnalyzer")
    def test_analysis_error_exits_non_zero(self, mock_analyzer_class, env, capsys):
        mock_analyzer_class.return_value.analyze_url.side_effect = AnalysisError("HTTP 404", 404)

        with pytest.raises(SystemExit) as exc_info:
            main(["analyze", "https://example.com/missing"])

        assert exc_info.value.code == 1
        assert "HTTP 404" in capsys.readouterr().err

    @patch("seogeo.cli.HistoryStore")
    @patch("seogeo.cli.SEOGeoAnalyzer")
    def test_analysis_error_closes_history(
        self, mock_analyzer_class, mock_store_class, env, monkeypatch
    ):
        monkeypatch.setenv("PERSIST_HISTORY", "true")
        mock_analyzer_class.return_value.analyze_url.side_effect = AnalysisError("HTTP 500", 500)

        with pytest.raises(SystemExit):
            main(["analyze", "https://example.com/broken"])

        mock_store_class.return_value.close.assert_called_once()
        mock_analyzer_class.return_value.close.assert_called_once()

    @patch("seogeo.cli.SEOGeoAnalyzer")
    def test_email_html_written(self, mock_analyzer_class, env, report, tmp_path):
        mock_analyzer_class.return_value.analyze_url.return_value = report
        target = tmp_path / "email.html"

        main(["analyze", "https://example.com/guide", "--email-html", str(target)])

        assert "GEO (AI) Factor Breakdown" in target.read_text()

    @patch("seogeo.cli.SEOGeoAnalyzer")
    def test_email_without_key_exits(self, mock_analyzer_class, env, report, capsys):
        mock_analyzer_class.return_value.analyze_url.return_value = report

        with patch("seogeo.email_report.settings") as mock_settings:
            mock_settings.RESEND_API_KEY = None
            mock_settings.EMAIL_FROM = "Reports <r@example.com>"
            with pytest.raises(SystemExit) as exc_info:
                main(["analyze", "https://example.com/guide", "--email", "user@example.com"])

        assert exc_info.value.code == 1
        assert "RESEND_API_KEY" in capsys.readouterr().err

    def test_invalid_rubric_rejected(self, env):
        with pytest.raises(SystemExit):
            main(["analyze", "https://example.com/", "--rubric", "legal"])


class TestHistoryCommand:
    """Test cases for `seogeo history`."""

    def test_history_text(self, env, capsys):
        store = HistoryStore(env)
        store.save_report({
            "url": "https://example.com/", "domain": "example.com",
            "rubric": "business", "seo_score": 72, "geo_score": 41,
        })
        store.close()

        main(["history", "example.com"])

        out = capsys.readouterr().out
        assert "Analysis History for: example.com" in out
        assert "SEO Score: 72" in out

    def test_history_json(self, env, capsys):
        store = HistoryStore(env)
        store.save_report({"url": "https://example.com/", "domain": "example.com", "seo_score": 50})
        store.close()

        main(["history", "example.com", "--output", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data[0]["seo_score"] == 50

    def test_history_empty(self, env, capsys):
        main(["history", "nowhere.test"])
        assert "No historical data found" in capsys.readouterr().out
