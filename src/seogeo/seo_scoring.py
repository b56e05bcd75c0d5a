"""Traditional SEO scoring against a fixed point rubric."""

from typing import Iterable

from seogeo.constants import (
    ALT_COVERAGE_EXCELLENT,
    ALT_COVERAGE_PARTIAL,
    HEADER_EXCELLENT_H2,
    HEADER_GOOD_H2,
    META_DESCRIPTION_GOOD_MIN,
    META_DESCRIPTION_OPTIMAL_MAX,
    META_DESCRIPTION_OPTIMAL_MIN,
    SEO_FACTOR_MAX_POINTS,
    SEO_FACTOR_ORDER,
    SEO_IMAGE_FLAG_COVERAGE,
    SEO_INTERNAL_LINKS_FAIR,
    SEO_INTERNAL_LINKS_GOOD,
    SEO_LOAD_FAST_MS,
    SEO_LOAD_OK_MS,
    SEO_MAX_RAW_POINTS,
    SEO_WORDS_EXCELLENT,
    SEO_WORDS_GOOD,
    SEO_WORDS_THIN,
    TITLE_OPTIMAL_MAX,
    TITLE_OPTIMAL_MIN,
    TITLE_SHORT_MIN,
)
from seogeo.models import Evaluation, PageSignals, ScoreFactor
from seogeo.ordering import order_factors
from seogeo.scoring import (
    BreakdownBuilder,
    count_internal_links,
    has_viewport_meta,
    image_alt_stats,
    text_length,
)


class TraditionalScorer:
    """Scores a page against classic search-engine ranking signals.

    Twelve independent factors, 130 raw points, normalized to 0-100.
    evaluate() has no side effects and never raises for a well-formed
    PageSignals; missing optional fields score as absent.
    """

    FACTOR_ORDER = SEO_FACTOR_ORDER
    MAX_RAW_POINTS = SEO_MAX_RAW_POINTS

    def evaluate(self, signals: PageSignals) -> Evaluation:
        """Evaluate page signals.

        Args:
            signals: Extracted page signals (raw_html is pattern-matched directly)

        Returns:
            Evaluation with factors in canonical order
        """
        html = signals.raw_html or ""
        h1_count = len(signals.h1_headings)
        h2_count = len(signals.h2_headings)
        schema_count = len(signals.structured_data_blocks)
        word_count = max(signals.word_count or 0, 0)
        load_time = max(signals.load_time_ms or 0, 0)

        is_https = (signals.url or "").strip().lower().startswith("https://")
        has_viewport = has_viewport_meta(html)
        internal_links = count_internal_links(html)
        image_count, images_with_alt = image_alt_stats(html)
        alt_coverage = images_with_alt / image_count if image_count > 0 else 1.0

        builder = BreakdownBuilder(SEO_FACTOR_MAX_POINTS, self.MAX_RAW_POINTS)
        self._score_title(builder, signals.title)
        self._score_meta_description(builder, signals.meta_description)
        self._score_headers(builder, h1_count, h2_count)
        self._score_content(builder, word_count)
        self._score_structured_data(builder, schema_count)

        if signals.canonical_url:
            builder.add("canonical_tag", 7, f"Canonical tag present ({signals.canonical_url}).")
        else:
            builder.add("canonical_tag", 0, "Missing canonical tag.")

        if internal_links >= SEO_INTERNAL_LINKS_GOOD:
            builder.add("internal_links", 10, f"{internal_links} internal links.")
        elif internal_links >= SEO_INTERNAL_LINKS_FAIR:
            builder.add("internal_links", 6, f"{internal_links} internal links.")
        else:
            builder.add("internal_links", 2, f"Few internal links ({internal_links}).")

        if alt_coverage >= ALT_COVERAGE_EXCELLENT:
            builder.add("image_optimization", 10, f"{images_with_alt}/{image_count} images with alt text.")
        elif alt_coverage >= ALT_COVERAGE_PARTIAL:
            builder.add("image_optimization", 6, f"{images_with_alt}/{image_count} images with alt text.")
        else:
            builder.add(
                "image_optimization", 2,
                f"Poor alt text coverage ({images_with_alt}/{image_count} images).",
            )

        if has_viewport:
            builder.add("mobile_optimization", 7, "Viewport meta present.")
        else:
            builder.add("mobile_optimization", 0, "Missing viewport meta.")

        if is_https:
            builder.add("https_security", 5, "HTTPS enabled.")
        else:
            builder.add("https_security", 0, "Not using HTTPS.")

        if load_time <= SEO_LOAD_FAST_MS:
            builder.add("page_speed", 7, f"Excellent ({load_time}ms).")
        elif load_time <= SEO_LOAD_OK_MS:
            builder.add("page_speed", 5, f"Good ({load_time}ms).")
        else:
            builder.add("page_speed", 2, f"Slow ({load_time}ms).")

        if signals.language_tag:
            builder.add("language_locale", 5, f"Language: {signals.language_tag}")
        else:
            builder.add("language_locale", 0, "No language attribute.")

        flags = {
            "has_title": bool(signals.title),
            "has_meta_description": bool(signals.meta_description),
            "has_canonical": bool(signals.canonical_url),
            "has_h1": h1_count > 0,
            "has_schema": schema_count > 0,
            "has_good_content": word_count >= SEO_WORDS_THIN,
            "has_mobile_optimization": has_viewport,
            "has_secure_protocol": is_https,
            "has_page_speed": load_time <= SEO_LOAD_OK_MS,
            "has_image_optimization": alt_coverage >= SEO_IMAGE_FLAG_COVERAGE,
        }
        measurements = {
            "title_length": text_length(signals.title),
            "meta_description_length": text_length(signals.meta_description),
            "h1_count": h1_count,
            "h2_count": h2_count,
            "word_count": word_count,
            "schema_count": schema_count,
            "internal_link_count": internal_links,
            "image_count": image_count,
            "images_with_alt": images_with_alt,
            "alt_coverage": round(alt_coverage, 4),
            "load_time_ms": load_time,
        }
        return builder.build(flags, measurements)

    def order_factors(self, factors: Iterable[ScoreFactor]) -> tuple[ScoreFactor, ...]:
        """Re-sort factors into the canonical traditional order."""
        return order_factors(factors, self.FACTOR_ORDER)

    def _score_title(self, builder: BreakdownBuilder, title) -> None:
        length = text_length(title)
        if length == 0:
            builder.add("title_tag", 0, "Missing title tag.")
        elif TITLE_OPTIMAL_MIN <= length <= TITLE_OPTIMAL_MAX:
            builder.add("title_tag", 15, f"Perfect title length ({length} chars).")
        elif TITLE_SHORT_MIN <= length < TITLE_OPTIMAL_MIN:
            builder.add("title_tag", 10, f"Good title but short ({length} chars).")
        else:
            builder.add("title_tag", 5, f"Title needs optimization ({length} chars).")

    def _score_meta_description(self, builder: BreakdownBuilder, description) -> None:
        length = text_length(description)
        if length == 0:
            builder.add("meta_description", 0, "Missing meta description.")
        elif META_DESCRIPTION_OPTIMAL_MIN <= length <= META_DESCRIPTION_OPTIMAL_MAX:
            builder.add("meta_description", 15, f"Perfect length ({length} chars).")
        elif META_DESCRIPTION_GOOD_MIN <= length < META_DESCRIPTION_OPTIMAL_MIN:
            builder.add("meta_description", 12, f"Good length ({length} chars).")
        elif length > META_DESCRIPTION_OPTIMAL_MAX:
            builder.add("meta_description", 5, f"Too long ({length} chars).")
        else:
            builder.add("meta_description", 5, f"Too short ({length} chars).")

    def _score_headers(self, builder: BreakdownBuilder, h1_count: int, h2_count: int) -> None:
        if h1_count == 1 and h2_count >= HEADER_EXCELLENT_H2:
            builder.add("header_tags", 15, f"Excellent: 1 H1 + {h2_count} H2 tags.")
        elif h1_count == 1 and h2_count >= HEADER_GOOD_H2:
            builder.add("header_tags", 10, f"Good: 1 H1 + {h2_count} H2 tags.")
        elif h1_count >= 1:
            builder.add("header_tags", 5, f"H1 present but needs work ({h1_count} H1, {h2_count} H2).")
        else:
            builder.add("header_tags", 0, f"Missing H1 tag ({h2_count} H2 tags).")

    def _score_content(self, builder: BreakdownBuilder, word_count: int) -> None:
        if word_count >= SEO_WORDS_EXCELLENT:
            builder.add("content_quality", 12, f"Excellent depth ({word_count} words).")
        elif word_count >= SEO_WORDS_GOOD:
            builder.add("content_quality", 10, f"Good length ({word_count} words).")
        elif word_count >= SEO_WORDS_THIN:
            builder.add("content_quality", 5, f"Thin content ({word_count} words).")
        else:
            builder.add("content_quality", 0, f"Very thin ({word_count} words).")

    def _score_structured_data(self, builder: BreakdownBuilder, schema_count: int) -> None:
        if schema_count >= 2:
            builder.add("structured_data", 10, f"{schema_count} schema blocks.")
        elif schema_count == 1:
            builder.add("structured_data", 7, "Schema present (1 block).")
        else:
            builder.add("structured_data", 0, "No schema markup (0 blocks).")
