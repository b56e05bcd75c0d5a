"""HTML email rendering and delivery for analysis reports."""

import logging
import re
from pathlib import Path
from typing import Optional

import resend
from resend.exceptions import ResendError
from jinja2 import Environment, FileSystemLoader, select_autoescape

from seogeo.config import settings
from seogeo.database import HistoryStore
from seogeo.models import AnalysisReport

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
WORD_START_PATTERN = re.compile(r"\b\w")

SCORE_COLORS = ((80, "#4ade80"), (60, "#22d3ee"), (40, "#fb923c"))
POINTS_COLORS = ((8, "#4ade80"), (4, "#fb923c"))
RED = "#f87171"


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects a message."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def is_valid_email(address: Optional[str]) -> bool:
    return bool(address) and EMAIL_PATTERN.match(address) is not None


def factor_label(name: str) -> str:
    """Turn a factor identifier into a display label (title_tag -> Title Tag)."""
    return WORD_START_PATTERN.sub(lambda m: m.group(0).upper(), name.replace("_", " "))


def score_color(score: int) -> str:
    for threshold, color in SCORE_COLORS:
        if score >= threshold:
            return color
    return RED


def points_color(points: int) -> str:
    for threshold, color in POINTS_COLORS:
        if points >= threshold:
            return color
    return RED


class EmailReportRenderer:
    """Renders an analysis report into a self-contained HTML email."""

    def __init__(self, template_dir: Optional[str] = None):
        """Initialize the renderer.

        Args:
            template_dir: Directory containing Jinja2 templates (defaults to the
                templates bundled with the package)
        """
        template_path = Path(template_dir) if template_dir else Path(__file__).parent / "templates"

        self.env = Environment(
            loader=FileSystemLoader(str(template_path)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters['format_number'] = self._format_number
        self.env.filters['factor_label'] = factor_label
        self.env.filters['score_color'] = score_color
        self.env.filters['points_color'] = points_color

    def _format_number(self, value):
        """Format number with thousand separators."""
        try:
            return "{:,}".format(int(value))
        except (ValueError, TypeError):
            return value

    def render(self, report: AnalysisReport) -> str:
        """Render the report email.

        Args:
            report: Analysis report

        Returns:
            HTML document
        """
        template = self.env.get_template('report_email.html')
        return template.render(
            url=report.url,
            rubric=report.rubric,
            seo_score=report.seo_score,
            geo_score=report.geo_score,
            snapshot=report.signals,
            issues=report.issues,
            recommendations=report.recommendations,
            seo_breakdown=report.seo.factors,
            geo_breakdown=report.geo.factors,
        )


class EmailSender:
    """Sends report emails through Resend."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        from_address: Optional[str] = None,
        renderer: Optional[EmailReportRenderer] = None,
        history: Optional[HistoryStore] = None,
    ):
        self.api_key = api_key or settings.RESEND_API_KEY
        self.from_address = from_address or settings.EMAIL_FROM
        self.renderer = renderer or EmailReportRenderer()
        self.history = history

    def send(self, address: str, report: AnalysisReport) -> Optional[str]:
        """Render and send a report email.

        Args:
            address: Recipient email address
            report: Analysis report to send

        Returns:
            Provider message id

        Raises:
            ValueError: If the address is invalid or no API key is configured
            EmailDeliveryError: If Resend rejects the message
        """
        if not is_valid_email(address):
            raise ValueError(f"Invalid email address: {address!r}")
        if not self.api_key:
            raise ValueError("Email service not configured: set RESEND_API_KEY")

        payload = {
            "from": self.from_address,
            "to": [address],
            "subject": f"Your SEO/GEO Analysis Report - {report.url}",
            "html": self.renderer.render(report),
        }
        resend.api_key = self.api_key
        try:
            result = resend.Emails.send(payload)
        except ResendError as e:
            logger.error(f"Resend rejected email for {report.url}: {e}")
            raise EmailDeliveryError(
                f"Failed to send email: {e}",
                status_code=getattr(e, "code", None),
                body=str(e),
            ) from e

        message_id = result.get("id")
        logger.info(f"Sent report for {report.url} (message {message_id})")

        if self.history:
            try:
                self.history.save_email_capture(
                    address, report.url, report.seo_score, report.geo_score
                )
            except Exception as e:
                logger.error(f"Failed to save email capture: {e}")

        return message_id
