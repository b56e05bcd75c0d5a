"""SEO/GEO analyzer that combines fetching, scoring and recommendations."""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Optional, Union
from urllib.parse import urlparse

from seogeo.constants import MIN_H2_FOR_ISSUES, THIN_CONTENT_ISSUE_WORDS
from seogeo.database import HistoryStore
from seogeo.extractor import SignalExtractor
from seogeo.fetcher import PageFetcher
from seogeo.geo_scoring import AIReadinessScorer, RubricConfig
from seogeo.llm import RecommendationClient
from seogeo.models import AnalysisReport, PageSignals
from seogeo.seo_scoring import TraditionalScorer

logger = logging.getLogger(__name__)

GEO_TAG_PATTERNS = (
    ("United States", re.compile(r"\b(?:united\s+states|usa)\b", re.IGNORECASE)),
    ("United Kingdom", re.compile(r"\b(?:united\s+kingdom|uk)\b", re.IGNORECASE)),
    ("European Union", re.compile(r"\b(?:european\s+union|eu)\b", re.IGNORECASE)),
)


class AnalysisError(Exception):
    """Raised when a page cannot be fetched for analysis."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def derive_issues(signals: PageSignals) -> list[str]:
    """List the headline problems shown alongside the scores."""
    issues = []
    if not signals.title:
        issues.append("Missing <title> tag")
    if not signals.meta_description:
        issues.append("Missing meta description")
    if not signals.h1_headings:
        issues.append("Missing H1 heading")
    if len(signals.h2_headings) < MIN_H2_FOR_ISSUES:
        issues.append("Add more H2 subheadings")
    if not signals.structured_data_blocks:
        issues.append("No schema.org structured data")
    if signals.word_count < THIN_CONTENT_ISSUE_WORDS:
        issues.append(f"Content is thin (<{THIN_CONTENT_ISSUE_WORDS} words)")
    return issues


def infer_geo_tags(text: str) -> list[str]:
    """Infer regions mentioned in the page text."""
    return [tag for tag, pattern in GEO_TAG_PATTERNS if pattern.search(text or "")]


def domain_of(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


class SEOGeoAnalyzer:
    """Analyzes a page for traditional SEO and AI-search readiness."""

    def __init__(
        self,
        rubric: Union[RubricConfig, str] = "business",
        fetcher: Optional[PageFetcher] = None,
        recommender: Optional[RecommendationClient] = None,
        history: Optional[HistoryStore] = None,
    ):
        """Initialize the analyzer.

        Args:
            rubric: AI-readiness rubric configuration or its name
            fetcher: Page fetcher (a default PageFetcher when None)
            recommender: Optional recommendation client; skipped when None
            history: Optional history store; reports are saved in the background
        """
        self.fetcher = fetcher or PageFetcher()
        self.extractor = SignalExtractor()
        self.seo_scorer = TraditionalScorer()
        self.geo_scorer = AIReadinessScorer(rubric)
        self.recommender = recommender
        self.history = history
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="history-writer")

    @property
    def rubric_name(self) -> str:
        return self.geo_scorer.config.name

    def analyze_url(
        self, url: str, evaluation_instant: Optional[datetime] = None
    ) -> AnalysisReport:
        """Fetch and analyze a URL.

        Args:
            url: The URL to analyze
            evaluation_instant: Moment used for content freshness (defaults to now)

        Returns:
            AnalysisReport for the page

        Raises:
            AnalysisError: If the page cannot be fetched or returns a non-2xx status
        """
        fetch_result = self.fetcher.fetch(url)
        if not fetch_result.success:
            logger.warning(f"Failed to fetch {url}: {fetch_result.error}")
            raise AnalysisError(fetch_result.error or "Fetch failed", fetch_result.status_code or None)

        signals = self.extractor.extract(
            url=fetch_result.final_url or fetch_result.url,
            html=fetch_result.html,
            load_time_ms=fetch_result.load_time_ms,
            status_code=fetch_result.status_code,
            size_bytes=fetch_result.size_bytes,
            analyzed_at=evaluation_instant,
        )
        return self.analyze_signals(signals, evaluation_instant=evaluation_instant)

    def analyze_html(
        self,
        url: str,
        html: str,
        load_time_ms: int = 0,
        evaluation_instant: Optional[datetime] = None,
    ) -> AnalysisReport:
        """Analyze an HTML document that has already been retrieved."""
        signals = self.extractor.extract(
            url=url, html=html, load_time_ms=load_time_ms, analyzed_at=evaluation_instant
        )
        return self.analyze_signals(signals, evaluation_instant=evaluation_instant)

    def analyze_signals(
        self, signals: PageSignals, evaluation_instant: Optional[datetime] = None
    ) -> AnalysisReport:
        """Score already-extracted signals and assemble the report.

        Args:
            signals: Page signals
            evaluation_instant: Moment used for content freshness (defaults to now)

        Returns:
            AnalysisReport with ordered breakdowns
        """
        instant = evaluation_instant or datetime.now()

        # Scorers share no state, so they can run side by side
        with ThreadPoolExecutor(max_workers=2) as executor:
            seo_future = executor.submit(self.seo_scorer.evaluate, signals)
            geo_future = executor.submit(
                self.geo_scorer.evaluate, signals.raw_html, signals, instant
            )
            seo = seo_future.result()
            geo = geo_future.result()

        seo = replace(seo, factors=self.seo_scorer.order_factors(seo.factors))
        geo = replace(geo, factors=self.geo_scorer.order_factors(geo.factors))

        issues = derive_issues(signals)
        report = AnalysisReport(
            url=signals.url,
            signals=signals,
            seo=seo,
            geo=geo,
            rubric=self.rubric_name,
            issues=issues,
            geo_tags=infer_geo_tags(signals.raw_html),
            analyzed_at=instant,
        )
        logger.info(
            f"Scored {signals.url}: SEO {report.seo_score}/100, GEO {report.geo_score}/100 "
            f"({self.rubric_name} rubric)"
        )

        if self.recommender:
            report.recommendations = self.recommender.generate(seo, geo, issues)

        if self.history:
            self._persist_in_background(report)

        return report

    def _persist_in_background(self, report: AnalysisReport) -> None:
        record = {
            "url": report.url,
            "domain": domain_of(report.url),
            "rubric": report.rubric,
            "seo_score": report.seo_score,
            "geo_score": report.geo_score,
            "seo_breakdown": [f.to_dict() for f in report.seo.factors],
            "geo_breakdown": [f.to_dict() for f in report.geo.factors],
            "recommendations": [r.to_dict() for r in report.recommendations],
            "created_at": report.analyzed_at,
        }
        try:
            self._writer.submit(self._save_record, record)
        except RuntimeError as e:
            # Writer already shut down
            logger.error(f"Failed to persist report for {report.url}: {e}")

    def _save_record(self, record: dict) -> None:
        try:
            self.history.save_report(record)
        except Exception as e:
            logger.error(f"Failed to persist report for {record.get('url')}: {e}")

    def close(self, wait: bool = True) -> None:
        """Release the fetcher and wait for pending history writes."""
        self._writer.shutdown(wait=wait)
        self.fetcher.close()
