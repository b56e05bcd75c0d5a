"""Tests for email report rendering and delivery."""

from datetime import datetime
from unittest.mock import Mock, patch

import pytest
from resend.exceptions import ResendError

from seogeo.email_report import (
    EmailDeliveryError,
    EmailReportRenderer,
    EmailSender,
    factor_label,
    is_valid_email,
    points_color,
    score_color,
)
from seogeo.models import AnalysisReport, Evaluation, PageSignals, Recommendation, ScoreFactor


@pytest.fixture
def report():
    signals = PageSignals(
        url="https://example.com/",
        title="Example <Widgets>",
        word_count=1234,
        load_time_ms=850,
        analyzed_at=datetime(2025, 6, 1, 9, 30),
    )
    seo = Evaluation(
        normalized_score=82, raw_points=107, raw_points_max=130,
        factors=(
            ScoreFactor("title_tag", 15, 15, "Perfect title length (55 chars)."),
            ScoreFactor("https_security", 0, 5, "Not using HTTPS."),
        ),
    )
    geo = Evaluation(
        normalized_score=35, raw_points=53, raw_points_max=150,
        factors=(ScoreFactor("ai_search_ready", 2, 20, "Limited question-answer content for AI (0 Q&A patterns)."),),
    )
    return AnalysisReport(
        url="https://example.com/",
        signals=signals,
        seo=seo,
        geo=geo,
        rubric="business",
        issues=["Missing meta description"],
        recommendations=[Recommendation("Add FAQ schema", "Mark up common questions.", "high")],
        analyzed_at=datetime(2025, 6, 1, 9, 30),
    )


class TestFilters:
    """Template filter helpers."""

    def test_factor_label(self):
        assert factor_label("title_tag") == "Title Tag"
        assert factor_label("ai_search_ready") == "Ai Search Ready"

    @pytest.mark.parametrize("score,color", [(80, "#4ade80"), (79, "#22d3ee"), (60, "#22d3ee"), (40, "#fb923c"), (39, "#f87171")])
    def test_score_color(self, score, color):
        assert score_color(score) == color

    @pytest.mark.parametrize("value,color", [(15, "#4ade80"), (8, "#4ade80"), (7, "#fb923c"), (4, "#fb923c"), (3, "#f87171")])
    def test_points_color(self, value, color):
        assert points_color(value) == color

    @pytest.mark.parametrize("address,valid", [
        ("user@example.com", True),
        ("first.last@sub.example.org", True),
        ("user@example", False),
        ("user example@example.com", False),
        ("", False),
        (None, False),
    ])
    def test_is_valid_email(self, address, valid):
        assert is_valid_email(address) is valid


class TestEmailReportRenderer:
    """Test cases for EmailReportRenderer."""

    def test_render_contains_report_sections(self, report):
        html = EmailReportRenderer().render(report)

        assert "SEO/GEO Analysis Report" in html
        assert "https://example.com/" in html
        assert "Title Tag" in html
        assert "Ai Search Ready" in html
        assert "Missing meta description" in html
        assert "Add FAQ schema" in html
        assert "1,234" in html
        assert "#4ade80" in html  # SEO score 82
        assert "#f87171" in html  # 2 points

    def test_render_escapes_page_text(self, report):
        html = EmailReportRenderer().render(report)
        assert "Example &lt;Widgets&gt;" in html

    def test_render_without_issues(self, report):
        report.issues = []
        report.recommendations = []
        html = EmailReportRenderer().render(report)
        assert "No critical issues found" in html
        assert "Detailed Recommendations" not in html


class FakeResendError(ResendError):
    """ResendError carrying a fixed code and message."""

    def __init__(self, code, message):
        Exception.__init__(self, message)
        self.code = code
        self.message = message


class TestEmailSender:
    """Test cases for EmailSender."""

    def test_invalid_address(self, report):
        sender = EmailSender(api_key="re_test")
        with pytest.raises(ValueError, match="Invalid email"):
            sender.send("not-an-email", report)

    def test_missing_api_key(self, report):
        with patch("seogeo.email_report.settings") as mock_settings:
            mock_settings.RESEND_API_KEY = None
            mock_settings.EMAIL_FROM = "Reports <reports@example.com>"
            sender = EmailSender()
        with pytest.raises(ValueError, match="RESEND_API_KEY"):
            sender.send("user@example.com", report)

    @patch("seogeo.email_report.resend.Emails.send")
    def test_send_success(self, mock_send, report):
        mock_send.return_value = {"id": "msg_123"}
        history = Mock()
        sender = EmailSender(api_key="re_test", from_address="Reports <r@example.com>", history=history)

        message_id = sender.send("user@example.com", report)

        assert message_id == "msg_123"
        payload = mock_send.call_args.args[0]
        assert payload["to"] == ["user@example.com"]
        assert payload["from"] == "Reports <r@example.com>"
        assert payload["subject"] == "Your SEO/GEO Analysis Report - https://example.com/"
        assert "<html>" in payload["html"]
        history.save_email_capture.assert_called_once_with("user@example.com", "https://example.com/", 82, 35)

    @patch("seogeo.email_report.resend.Emails.send")
    def test_provider_error(self, mock_send, report):
        mock_send.side_effect = FakeResendError(422, "invalid from")
        history = Mock()
        sender = EmailSender(api_key="re_test", history=history)

        with pytest.raises(EmailDeliveryError) as exc_info:
            sender.send("user@example.com", report)

        assert exc_info.value.status_code == 422
        assert "invalid from" in exc_info.value.body
        history.save_email_capture.assert_not_called()

    @patch("seogeo.email_report.resend.Emails.send")
    def test_capture_failure_is_not_raised(self, mock_send, report):
        mock_send.return_value = {"id": "msg_1"}
        history = Mock()
        history.save_email_capture.side_effect = RuntimeError("disk full")
        sender = EmailSender(api_key="re_test", history=history)

        assert sender.send("user@example.com", report) == "msg_1"
