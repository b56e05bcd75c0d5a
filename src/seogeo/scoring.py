"""Shared helpers for the rubric scorers.

Both scorers pattern-match the raw HTML instead of parsing it. The helpers
here hold the patterns they share and the bookkeeping that turns awarded
points into an Evaluation.
"""

import re
from typing import Mapping, Optional, Union

from seogeo.models import Evaluation, ScoreFactor

ANCHOR_HREF_PATTERN = re.compile(r"""<a[^>]*href=["']([^"']*)["'][^>]*>""", re.IGNORECASE)
IMG_PATTERN = re.compile(r"<img[^>]*>", re.IGNORECASE)
IMG_WITH_ALT_PATTERN = re.compile(r"""<img[^>]*alt=["'][^"']+["'][^>]*>""", re.IGNORECASE)
VIEWPORT_PATTERN = re.compile(r"""<meta[^>]*name=["']viewport["']""", re.IGNORECASE)

EXTERNAL_SCHEMES = ("http://", "https://")


def normalize_score(raw_points: int, raw_points_max: int) -> int:
    """Scale raw points to 0-100, rounding halves up, clamped.

    Args:
        raw_points: Points awarded
        raw_points_max: Rubric maximum

    Returns:
        Integer score between 0 and 100
    """
    if raw_points_max <= 0:
        return 0
    # Integer form of floor(raw / max * 100 + 0.5)
    scaled = (raw_points * 200 + raw_points_max) // (2 * raw_points_max)
    return max(0, min(100, scaled))


def count_internal_links(html: str) -> int:
    """Count anchors whose href is not an absolute http(s) URL."""
    return sum(
        1
        for href in ANCHOR_HREF_PATTERN.findall(html)
        if not href.strip().lower().startswith(EXTERNAL_SCHEMES)
    )


def image_alt_stats(html: str) -> tuple[int, int]:
    """Count <img> tags and those carrying a non-empty alt attribute.

    Returns:
        Tuple of (image_count, images_with_alt)
    """
    return len(IMG_PATTERN.findall(html)), len(IMG_WITH_ALT_PATTERN.findall(html))


def has_viewport_meta(html: str) -> bool:
    return bool(VIEWPORT_PATTERN.search(html))


def text_length(value: Optional[str]) -> int:
    return len(value) if value else 0


class BreakdownBuilder:
    """Accumulates awarded factors and builds the final Evaluation."""

    def __init__(self, max_points: Mapping[str, int], raw_points_max: int):
        """Initialize the builder.

        Args:
            max_points: Maximum points keyed by factor name
            raw_points_max: Rubric maximum used for normalization
        """
        self.max_points = max_points
        self.raw_points_max = raw_points_max
        self._factors: list[ScoreFactor] = []

    def add(self, name: str, points: int, explanation: str) -> None:
        self._factors.append(
            ScoreFactor(
                name=name,
                points_awarded=points,
                points_max=self.max_points[name],
                explanation=explanation,
            )
        )

    @property
    def raw_points(self) -> int:
        return sum(f.points_awarded for f in self._factors)

    def build(
        self,
        derived_flags: Optional[dict[str, bool]] = None,
        measurements: Optional[dict[str, Union[int, float]]] = None,
    ) -> Evaluation:
        raw_points = self.raw_points
        return Evaluation(
            normalized_score=normalize_score(raw_points, self.raw_points_max),
            raw_points=raw_points,
            raw_points_max=self.raw_points_max,
            factors=tuple(self._factors),
            derived_flags=derived_flags or {},
            measurements=measurements or {},
        )
