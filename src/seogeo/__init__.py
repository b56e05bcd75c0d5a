"""SEO and GEO (AI-search readiness) scoring for web pages."""

__version__ = "0.1.0"

from seogeo.analyzer import SEOGeoAnalyzer, AnalysisError
from seogeo.extractor import SignalExtractor
from seogeo.fetcher import PageFetcher
from seogeo.seo_scoring import TraditionalScorer
from seogeo.geo_scoring import (
    AIReadinessScorer,
    RubricConfig,
    BUSINESS_RUBRIC,
    MEDICAL_RUBRIC,
    get_rubric,
)
from seogeo.ordering import order_factors
from seogeo.llm import RecommendationClient
from seogeo.database import HistoryStore
from seogeo.email_report import EmailReportRenderer, EmailSender, EmailDeliveryError
from seogeo.models import (
    PageSignals,
    ScoreFactor,
    Evaluation,
    Recommendation,
    FetchResult,
    AnalysisReport,
)
from seogeo.config import settings, Config

__all__ = [
    "SEOGeoAnalyzer",
    "AnalysisError",
    "SignalExtractor",
    "PageFetcher",
    "TraditionalScorer",
    "AIReadinessScorer",
    "RubricConfig",
    "BUSINESS_RUBRIC",
    "MEDICAL_RUBRIC",
    "get_rubric",
    "order_factors",
    "RecommendationClient",
    "HistoryStore",
    "EmailReportRenderer",
    "EmailSender",
    "EmailDeliveryError",
    "PageSignals",
    "ScoreFactor",
    "Evaluation",
    "Recommendation",
    "FetchResult",
    "AnalysisReport",
    "settings",
    "Config",
]
