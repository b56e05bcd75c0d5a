"""AI-search readiness (GEO) scoring.

Scores how likely a page is to be cited by generative answer engines:
conversational headers, FAQ schema, question coverage, authority and
E-E-A-T signals. One scorer serves every vertical; the keyword lists,
schema allowlist and tier weights that differ between verticals live in a
RubricConfig chosen when the scorer is built.

JSON-LD blocks are matched as text and never parsed, so a malformed block
that contains the right "@type" marker still counts.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Pattern, Union

from seogeo.constants import (
    ALT_COVERAGE_EXCELLENT,
    ALT_COVERAGE_PARTIAL,
    GEO_DESCRIPTION_MAX,
    GEO_DESCRIPTION_MIN,
    GEO_FACTOR_MAX_POINTS,
    GEO_FACTOR_ORDER_TEMPLATE,
    GEO_INTERNAL_LINKS_FLAG,
    GEO_INTERNAL_LINKS_GOOD,
    GEO_INTERNAL_LINKS_STRONG,
    GEO_LOAD_FAST_MS,
    GEO_LOAD_OK_MS,
    GEO_MAX_RAW_POINTS,
    GEO_STRUCTURE_EXCELLENT_H2,
    GEO_STRUCTURE_GOOD_H2,
    GEO_TITLE_MAX,
    GEO_TITLE_MIN,
    GEO_WORDS_COMPREHENSIVE,
    GEO_WORDS_GOOD,
    GEO_WORDS_MODERATE,
    QUESTION_FACTOR_SLOT,
    QUESTION_MAX_SPAN,
    QUESTIONS_EXCELLENT,
    QUESTIONS_GOOD,
    QUESTIONS_MODERATE,
)
from seogeo.models import Evaluation, PageSignals, ScoreFactor
from seogeo.ordering import order_factors
from seogeo.scoring import (
    ANCHOR_HREF_PATTERN,
    BreakdownBuilder,
    count_internal_links,
    image_alt_stats,
    text_length,
)

QUESTION_PATTERN = re.compile(
    r"\b(?:what|how|why|where|when|can|should|is|are|does|do)\b[^?]{0,%d}\?" % QUESTION_MAX_SPAN,
    re.IGNORECASE,
)
FAQ_SCHEMA_PATTERN = re.compile(r'"@type"\s*:\s*"FAQPage"', re.IGNORECASE)
FAQ_HEADING_PATTERN = re.compile(r"faq|frequently\s+asked\s+questions", re.IGNORECASE)
STRUCTURED_FORMATTING_PATTERN = re.compile(r"<(?:ol|ul|table)\b[^>]*>", re.IGNORECASE)
HREF_HOST_PATTERN = re.compile(r"^\s*(?:https?:)?//([^/?#:\s]+)", re.IGNORECASE)


def _word_alternation(words: Iterable[str]) -> str:
    return "|".join(words)


@dataclass(frozen=True)
class RubricConfig:
    """Vertical-specific settings for the AI-readiness rubric.

    Attributes:
        name: Identifier used on the command line and in persisted history
        vertical_schema_types: Schema.org @type names that count as vertical schema
        requires_combined_schema: Top structured_data tier also needs FAQPage schema
        conversational_triggers: Words that make a heading conversational
        citation_keywords: Regex alternatives signalling cited sources
        authority_domains: Link hosts (or host suffixes) treated as high-trust
        statistic_nouns: Nouns that turn a bare number into a quantified outcome
        eeat_patterns: Trust indicators as (name, compiled pattern), each counted once
        eeat_ladder: (minimum indicator count, points) pairs, highest first
        title_points: Points for an optimal title length
        description_points: Points for an optimal description length
        question_factor_name: Breakdown name of the question coverage factor
    """

    name: str
    vertical_schema_types: tuple[str, ...]
    requires_combined_schema: bool
    conversational_triggers: tuple[str, ...]
    citation_keywords: tuple[str, ...]
    authority_domains: tuple[str, ...]
    statistic_nouns: tuple[str, ...]
    eeat_patterns: tuple[tuple[str, Pattern], ...]
    eeat_ladder: tuple[tuple[int, int], ...]
    title_points: int
    description_points: int
    question_factor_name: str

    def __post_init__(self):
        # Compiled once per configuration; evaluate() only reads them.
        object.__setattr__(self, "vertical_schema_re", re.compile(
            r'"@type"\s*:\s*"(?:%s)"' % _word_alternation(re.escape(t) for t in self.vertical_schema_types),
            re.IGNORECASE,
        ))
        object.__setattr__(self, "conversational_re", re.compile(
            r"\b(?:%s)\b" % _word_alternation(self.conversational_triggers)
        ))
        object.__setattr__(self, "citation_re", re.compile(
            r"\b(?:%s)\b" % _word_alternation(self.citation_keywords), re.IGNORECASE
        ))
        object.__setattr__(self, "statistics_re", re.compile(
            r"\d+%%|\d+\s*(?:%s)" % _word_alternation(self.statistic_nouns), re.IGNORECASE
        ))

    @property
    def meta_points_max(self) -> int:
        return self.title_points + self.description_points

    def eeat_points(self, eeat_count: int) -> int:
        for minimum, points in self.eeat_ladder:
            if eeat_count >= minimum:
                return points
        return 0

    def is_authority_host(self, host: str) -> bool:
        host = host.lower().rstrip(".")
        for domain in self.authority_domains:
            domain = domain.lower().lstrip(".")
            if host == domain or host.endswith("." + domain):
                return True
        return False


BUSINESS_RUBRIC = RubricConfig(
    name="business",
    vertical_schema_types=(
        "Organization", "LocalBusiness", "Service", "Product",
        "Article", "HowTo", "WebPage", "BreadcrumbList",
    ),
    requires_combined_schema=True,
    conversational_triggers=(
        "what", "how", "why", "when", "guide", "understanding",
        "best", "top", "tips", "ways", "steps",
    ),
    citation_keywords=(
        "source", "reference", "citation", "study", "research", "report",
        "survey", "data", r"according\s+to", "statistics",
    ),
    authority_domains=(
        "gov", "edu", "forbes.com", "hbr.org", "harvard.edu",
        "mckinsey.com", "gartner.com", "statista.com",
    ),
    statistic_nouns=(
        "percent", "companies", "businesses", "customers", "users",
        "increase", "decrease", "growth",
    ),
    eeat_patterns=(
        ("author_byline", re.compile(r"\b(?:by|author|written\s+by|contributor)\b", re.IGNORECASE)),
        ("credentials", re.compile(
            r"\b(?:CEO|founder|expert|consultant|analyst|MBA|CPA|certified|professional"
            r"|years\s+of\s+experience)\b",
            re.IGNORECASE,
        )),
        ("about_section", re.compile(
            r"\b(?:about\s+us|our\s+team|who\s+we\s+are|our\s+story)\b", re.IGNORECASE
        )),
    ),
    eeat_ladder=((3, 13), (2, 8), (1, 4)),
    title_points=5,
    description_points=5,
    question_factor_name="ai_search_ready",
)

MEDICAL_RUBRIC = RubricConfig(
    name="medical",
    vertical_schema_types=(
        "MedicalWebPage", "MedicalCondition", "MedicalOrganization",
        "MedicalClinic", "Physician", "Hospital", "Drug",
        "MedicalProcedure", "HealthTopicContent",
    ),
    requires_combined_schema=False,
    conversational_triggers=(
        "what", "how", "why", "when", "guide", "understanding", "symptoms",
        "causes", "treatment", "treatments", "signs", "risks",
        "prevention", "diagnosis", "tips",
    ),
    citation_keywords=(
        "study", "studies", "research", r"clinical\s+trials?", "journal",
        r"peer[-\s]reviewed", r"according\s+to", "sources?", "references?",
        "evidence", "guidelines", r"meta[-\s]analysis",
    ),
    authority_domains=(
        "gov", "edu", "who.int", "mayoclinic.org", "clevelandclinic.org",
        "nejm.org", "thelancet.com", "bmj.com", "jamanetwork.com",
        "cochranelibrary.com",
    ),
    statistic_nouns=(
        "percent", "patients", "people", "adults", "children", "cases",
        "studies", "participants", r"mg\b", "deaths",
    ),
    eeat_patterns=(
        ("author_byline", re.compile(r"\b(?:by|author|written\s+by|contributor)\b", re.IGNORECASE)),
        ("clinical_credentials", re.compile(
            r"\b(?:MD|DO|RN|NP|PhD|MPH|PharmD)\b|\bM\.D\."
            r"|(?i:\b(?:board[-\s]certified|physician|surgeon|pharmacist"
            r"|nurse\s+practitioner|registered\s+dietitian)\b)"
        )),
        ("medical_review", re.compile(
            r"\b(?:medically\s+reviewed|reviewed\s+by|fact[-\s]checked|clinical\s+review"
            r"|editorial\s+(?:policy|board))\b",
            re.IGNORECASE,
        )),
    ),
    eeat_ladder=((2, 13), (1, 6)),
    title_points=4,
    description_points=4,
    question_factor_name="voice_search",
)

RUBRICS = {
    BUSINESS_RUBRIC.name: BUSINESS_RUBRIC,
    MEDICAL_RUBRIC.name: MEDICAL_RUBRIC,
}


def get_rubric(name: str) -> RubricConfig:
    """Resolve a rubric configuration by name.

    Raises:
        ValueError: If no rubric is registered under that name
    """
    try:
        return RUBRICS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown rubric: '{name}'. Supported rubrics: {', '.join(sorted(RUBRICS))}"
        ) from None


class AIReadinessScorer:
    """Scores a page for generative answer engine readiness.

    Fourteen factors, 150 raw points, normalized to 0-100. Every factor is
    deterministic for a given evaluation instant; content_freshness is the
    only one that depends on it.
    """

    MAX_RAW_POINTS = GEO_MAX_RAW_POINTS

    def __init__(self, config: Union[RubricConfig, str] = BUSINESS_RUBRIC):
        """Initialize the scorer.

        Args:
            config: Rubric configuration or its registered name
        """
        self.config = get_rubric(config) if isinstance(config, str) else config
        question_name = self.config.question_factor_name
        self.factor_order = tuple(
            question_name if name == QUESTION_FACTOR_SLOT else name
            for name in GEO_FACTOR_ORDER_TEMPLATE
        )
        self.max_points = {
            (question_name if name == QUESTION_FACTOR_SLOT else name): points
            for name, points in GEO_FACTOR_MAX_POINTS.items()
        }
        self.max_points["meta_optimization"] = self.config.meta_points_max

    def evaluate(
        self,
        html: Optional[str],
        signals: PageSignals,
        evaluation_instant: Optional[Union[datetime, date]] = None,
    ) -> Evaluation:
        """Evaluate a page.

        Args:
            html: Raw HTML; falls back to signals.raw_html when None
            signals: Extracted page signals
            evaluation_instant: Moment the evaluation is made; drives content
                freshness. Defaults to now.

        Returns:
            Evaluation with factors in canonical order
        """
        config = self.config
        html = signals.raw_html if html is None else html
        html = html or ""
        instant = evaluation_instant or datetime.now()

        schema_blocks = signals.structured_data_blocks
        h1_tags = signals.h1_headings
        h2_count = len(signals.h2_headings)
        word_count = max(signals.word_count or 0, 0)
        load_time = max(signals.load_time_ms or 0, 0)

        # Structured data
        has_structured_data = len(schema_blocks) > 0
        has_faq_schema = any(FAQ_SCHEMA_PATTERN.search(block) for block in schema_blocks)
        has_vertical_schema = any(config.vertical_schema_re.search(block) for block in schema_blocks)

        # FAQ and question coverage
        question_count = sum(1 for _ in QUESTION_PATTERN.finditer(html))
        has_faq_content = (
            has_faq_schema
            or bool(FAQ_HEADING_PATTERN.search(html))
            or question_count >= QUESTIONS_MODERATE
        )

        headers_text = " ".join(list(h1_tags) + list(signals.h2_headings)).lower()
        has_conversational_headers = bool(config.conversational_re.search(headers_text))
        has_structured_formatting = bool(STRUCTURED_FORMATTING_PATTERN.search(html))

        # Authority
        has_citations = bool(config.citation_re.search(html))
        has_high_quality_citations = self._has_authority_link(html)
        has_statistics = bool(config.statistics_re.search(html))

        # E-E-A-T
        matched_indicators = [name for name, pattern in config.eeat_patterns if pattern.search(html)]
        eeat_count = len(matched_indicators)

        # Meta
        title_length = text_length(signals.title)
        description_length = text_length(signals.meta_description)
        has_optimal_title = GEO_TITLE_MIN <= title_length <= GEO_TITLE_MAX
        has_optimal_description = GEO_DESCRIPTION_MIN <= description_length <= GEO_DESCRIPTION_MAX

        # Images: no images means no coverage here
        image_count, images_with_alt = image_alt_stats(html)
        alt_coverage = images_with_alt / image_count if image_count > 0 else 0.0

        internal_link_count = count_internal_links(html)

        years = (instant.year, instant.year - 1)
        has_content_freshness = bool(
            re.search(r"\b(?:%d|%d)\b" % years, html)
        )

        builder = BreakdownBuilder(self.max_points, self.MAX_RAW_POINTS)

        if has_conversational_headers and h1_tags:
            builder.add("conversational_headers", 15, "AI-friendly conversational headers detected.")
        elif h1_tags:
            builder.add(
                "conversational_headers", 5,
                f"Headers present but could be more conversational ({len(h1_tags)} H1).",
            )
        else:
            builder.add("conversational_headers", 0, "Missing conversational header structure (no H1).")

        if h2_count >= GEO_STRUCTURE_EXCELLENT_H2:
            builder.add("structure", 10, f"Excellent structure: {h2_count} H2 sections.")
        elif h2_count >= GEO_STRUCTURE_GOOD_H2:
            builder.add("structure", 6, f"Good structure: {h2_count} H2 sections.")
        else:
            builder.add("structure", 2, f"Limited structure for AI parsing ({h2_count} H2 sections).")

        if word_count >= GEO_WORDS_COMPREHENSIVE:
            builder.add("content_depth", 12, f"Comprehensive content ({word_count} words).")
        elif word_count >= GEO_WORDS_GOOD:
            builder.add("content_depth", 8, f"Good depth ({word_count} words).")
        elif word_count >= GEO_WORDS_MODERATE:
            builder.add("content_depth", 4, f"Moderate depth ({word_count} words).")
        else:
            builder.add("content_depth", 0, f"Thin content limits AI visibility ({word_count} words).")

        top_schema = has_vertical_schema and (has_faq_schema or not config.requires_combined_schema)
        if top_schema:
            detail = (
                f"Rich {config.name} + FAQ schema markup" if config.requires_combined_schema
                else f"Rich {config.name} schema markup"
            )
            builder.add("structured_data", 15, f"{detail} ({len(schema_blocks)} blocks).")
        elif has_vertical_schema or has_structured_data:
            builder.add("structured_data", 8, f"Schema markup present ({len(schema_blocks)} blocks).")
        else:
            builder.add("structured_data", 0, "No structured data for AI engines.")

        if has_faq_schema:
            builder.add("faq_schema", 18, "FAQPage schema - excellent for AI answers.")
        elif has_faq_content:
            builder.add("faq_schema", 5, f"FAQ content found but no schema markup ({question_count} questions).")
        else:
            builder.add("faq_schema", 0, "No FAQ content or schema.")

        question_factor = config.question_factor_name
        if question_count >= QUESTIONS_EXCELLENT:
            builder.add(question_factor, 20, f"Excellent AI coverage ({question_count} Q&A patterns).")
        elif question_count >= QUESTIONS_GOOD:
            builder.add(question_factor, 15, f"Good AI coverage ({question_count} Q&A patterns).")
        elif question_count >= QUESTIONS_MODERATE:
            builder.add(question_factor, 8, f"Moderate AI coverage ({question_count} Q&A patterns).")
        else:
            builder.add(
                question_factor, 2,
                f"Limited question-answer content for AI ({question_count} Q&A patterns).",
            )

        if has_high_quality_citations and has_statistics:
            builder.add("authority_signals", 12, "Strong citations + data points.")
        elif has_citations or has_statistics:
            builder.add(
                "authority_signals", 6,
                f"Some authority signals detected (citations: {'yes' if has_citations else 'no'}, "
                f"statistics: {'yes' if has_statistics else 'no'}).",
            )
        else:
            builder.add("authority_signals", 0, "Add citations and data for credibility.")

        if load_time <= GEO_LOAD_FAST_MS:
            builder.add("performance", 5, f"Fast load time ({load_time}ms).")
        elif load_time <= GEO_LOAD_OK_MS:
            builder.add("performance", 3, f"Acceptable speed ({load_time}ms).")
        else:
            builder.add("performance", 0, f"Slow performance hurts rankings ({load_time}ms).")

        eeat_points = config.eeat_points(eeat_count)
        indicator_total = len(config.eeat_patterns)
        if eeat_points >= self.max_points["eeat_signals"]:
            eeat_detail = "Strong E-E-A-T signals (expertise + trust)"
        elif eeat_points > 0:
            eeat_detail = "E-E-A-T foundation present"
        else:
            eeat_detail = "Add author credentials and expertise signals"
        builder.add(
            "eeat_signals", eeat_points,
            f"{eeat_detail} ({eeat_count}/{indicator_total} indicators).",
        )

        meta_points = 0
        if has_optimal_title:
            meta_points += config.title_points
        if has_optimal_description:
            meta_points += config.description_points
        builder.add(
            "meta_optimization", meta_points,
            f"Meta tags: {meta_points}/{config.meta_points_max} points "
            f"(title {title_length} chars, description {description_length} chars).",
        )

        if alt_coverage >= ALT_COVERAGE_EXCELLENT:
            builder.add("image_optimization", 5, f"Excellent alt text ({images_with_alt}/{image_count}).")
        elif alt_coverage >= ALT_COVERAGE_PARTIAL:
            builder.add("image_optimization", 3, f"Partial alt text ({images_with_alt}/{image_count}).")
        else:
            builder.add(
                "image_optimization", 0,
                f"Images need alt text for AI indexing ({images_with_alt}/{image_count}).",
            )

        if internal_link_count >= GEO_INTERNAL_LINKS_STRONG:
            builder.add("internal_linking", 5, f"Strong internal linking ({internal_link_count} links).")
        elif internal_link_count >= GEO_INTERNAL_LINKS_GOOD:
            builder.add("internal_linking", 3, f"Good internal linking ({internal_link_count} links).")
        else:
            builder.add(
                "internal_linking", 0,
                f"Add more internal links for topic authority ({internal_link_count} links).",
            )

        if has_structured_formatting:
            builder.add("structured_formatting", 5, "Lists/tables help AI parse content.")
        else:
            builder.add("structured_formatting", 0, "Add lists or tables for better AI parsing.")

        if has_content_freshness:
            builder.add("content_freshness", 5, f"Recent content signals detected ({years[0]}/{years[1]}).")
        else:
            builder.add(
                "content_freshness", 0,
                f"Update content with current year references ({years[0]}).",
            )

        flags = {
            "has_structured_data": has_structured_data,
            "has_faq_schema": has_faq_schema,
            "has_vertical_schema": has_vertical_schema,
            "has_faq_content": has_faq_content,
            "has_conversational_headers": has_conversational_headers,
            "has_structured_formatting": has_structured_formatting,
            "has_citations": has_citations,
            "has_high_quality_citations": has_high_quality_citations,
            "has_statistics": has_statistics,
            "has_eeat": eeat_count > 0,
            "has_meta_optimization": title_length > 0 or description_length > 0,
            "has_image_optimization": image_count > 0 and alt_coverage > 0,
            "has_internal_links": internal_link_count >= GEO_INTERNAL_LINKS_FLAG,
            "has_content_freshness": has_content_freshness,
        }
        measurements = {
            "question_count": question_count,
            "word_count": word_count,
            "load_time_ms": load_time,
            "h2_count": h2_count,
            "eeat_count": eeat_count,
            "image_count": image_count,
            "images_with_alt": images_with_alt,
            "alt_coverage": round(alt_coverage, 4),
            "internal_link_count": internal_link_count,
            "evaluation_year": years[0],
        }
        return builder.build(flags, measurements)

    def order_factors(self, factors: Iterable[ScoreFactor]) -> tuple[ScoreFactor, ...]:
        """Re-sort factors into this rubric's canonical order."""
        return order_factors(factors, self.factor_order)

    def _has_authority_link(self, html: str) -> bool:
        for href in ANCHOR_HREF_PATTERN.findall(html):
            match = HREF_HOST_PATTERN.match(href)
            if match and self.config.is_authority_host(match.group(1)):
                return True
        return False
