"""Data models for SEO/GEO analysis."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union
from datetime import datetime


@dataclass(frozen=True)
class PageSignals:
    """Signals extracted from a single fetched page.

    raw_html is the source of truth; every other field can be re-derived
    from it by the SignalExtractor. Absent values are None or empty.
    """

    url: str
    raw_html: str = ""
    title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    language_tag: Optional[str] = None
    h1_headings: tuple[str, ...] = ()
    h2_headings: tuple[str, ...] = ()
    structured_data_blocks: tuple[str, ...] = ()
    word_count: int = 0
    load_time_ms: int = 0
    status_code: int = 200
    page_size_kb: int = 0
    analyzed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Serialize to the snapshot document stored with each report.

        Returns:
            Dictionary without the raw HTML body
        """
        return {
            "url": self.url,
            "title": self.title,
            "metaDescription": self.meta_description,
            "canonicalUrl": self.canonical_url,
            "langAttribute": self.language_tag,
            "h1Tags": list(self.h1_headings),
            "h2Tags": list(self.h2_headings),
            "schemaMarkup": list(self.structured_data_blocks),
            "loadTime": self.load_time_ms,
            "statusCode": self.status_code,
            "pageSize": self.page_size_kb,
            "wordCount": self.word_count,
            "analyzedAt": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }


@dataclass(frozen=True)
class ScoreFactor:
    """One scored rubric line item."""

    name: str
    points_awarded: int
    points_max: int
    explanation: str

    def to_dict(self) -> dict:
        return {
            "factor": self.name,
            "points": self.points_awarded,
            "detail": self.explanation,
            "max_points": self.points_max,
        }


@dataclass(frozen=True)
class Evaluation:
    """Result of one scoring component."""

    normalized_score: int
    raw_points: int
    raw_points_max: int
    factors: tuple[ScoreFactor, ...]
    derived_flags: Mapping[str, bool] = field(default_factory=dict)
    measurements: Mapping[str, Union[int, float]] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only copies so evaluations never share mutable state
        object.__setattr__(self, "derived_flags", MappingProxyType(dict(self.derived_flags)))
        object.__setattr__(self, "measurements", MappingProxyType(dict(self.measurements)))

    def factor(self, name: str) -> Optional[ScoreFactor]:
        """Look up a factor by name, or None if the rubric has no such factor."""
        for item in self.factors:
            if item.name == name:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "score": self.normalized_score,
            "rawScore": self.raw_points,
            "maxRawScore": self.raw_points_max,
            "breakdown": [f.to_dict() for f in self.factors],
            "flags": dict(self.derived_flags),
            "measurements": dict(self.measurements),
        }


@dataclass(frozen=True)
class Recommendation:
    """A prioritized action item produced by the language model."""

    title: str
    detail: str
    priority: str = "medium"  # high/medium/low

    def to_dict(self) -> dict:
        return {"title": self.title, "detail": self.detail, "priority": self.priority}


@dataclass
class FetchResult:
    """Result of fetching a single URL."""

    url: str
    html: str = ""
    final_url: Optional[str] = None
    status_code: int = 0
    load_time_ms: int = 0
    size_bytes: int = 0
    success: bool = True
    error: Optional[str] = None


@dataclass
class AnalysisReport:
    """Combined SEO and GEO analysis for one page."""

    url: str
    signals: PageSignals
    seo: Evaluation
    geo: Evaluation
    rubric: str
    issues: list[str] = field(default_factory=list)
    geo_tags: list[str] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    analyzed_at: datetime = field(default_factory=datetime.now)

    @property
    def seo_score(self) -> int:
        return self.seo.normalized_score

    @property
    def geo_score(self) -> int:
        return self.geo.normalized_score

    def to_dict(self) -> dict:
        """Serialize to the response document returned to callers."""
        return {
            "url": self.url,
            "rubric": self.rubric,
            "seoScore": self.seo_score,
            "geoScore": self.geo_score,
            "seoBreakdown": [f.to_dict() for f in self.seo.factors],
            "geoBreakdown": [f.to_dict() for f in self.geo.factors],
            "seoFlags": dict(self.seo.derived_flags),
            "geoFlags": dict(self.geo.derived_flags),
            "geoMeasurements": dict(self.geo.measurements),
            "issues": list(self.issues),
            "geoTags": list(self.geo_tags),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "snapshot": self.signals.to_dict(),
            "analyzedAt": self.analyzed_at.isoformat(),
        }
