# src/seogeo/constants.py
"""Centralized constants for the SEO/GEO scorer.

This module contains the rubric weights, tier boundaries and canonical factor
orders shared by the scoring components. User-configurable settings live in
config.py; rubric variants (business/medical) live in geo_scoring.py.
"""

# =============================================================================
# Traditional (SEO) Rubric
# =============================================================================

# Maximum raw points for the traditional rubric
SEO_MAX_RAW_POINTS = 130

# Canonical display order; persisted history and the email template key on these names
SEO_FACTOR_ORDER = (
    "title_tag",
    "meta_description",
    "header_tags",
    "content_quality",
    "structured_data",
    "canonical_tag",
    "internal_links",
    "image_optimization",
    "mobile_optimization",
    "https_security",
    "page_speed",
    "language_locale",
)

# Maximum points per traditional factor
SEO_FACTOR_MAX_POINTS = {
    "title_tag": 15,
    "meta_description": 15,
    "header_tags": 15,
    "content_quality": 12,
    "structured_data": 10,
    "canonical_tag": 7,
    "internal_links": 10,
    "image_optimization": 10,
    "mobile_optimization": 7,
    "https_security": 5,
    "page_speed": 7,
    "language_locale": 5,
}

# Title length tiers (characters, inclusive bounds)
TITLE_OPTIMAL_MIN = 50
TITLE_OPTIMAL_MAX = 60
TITLE_SHORT_MIN = 30

# Meta description length tiers (characters)
META_DESCRIPTION_OPTIMAL_MIN = 150
META_DESCRIPTION_OPTIMAL_MAX = 160
META_DESCRIPTION_GOOD_MIN = 120

# H2 counts required alongside a single H1
HEADER_EXCELLENT_H2 = 4
HEADER_GOOD_H2 = 2

# Word count tiers for content_quality
SEO_WORDS_EXCELLENT = 1500
SEO_WORDS_GOOD = 800
SEO_WORDS_THIN = 300

# Internal link tiers
SEO_INTERNAL_LINKS_GOOD = 5
SEO_INTERNAL_LINKS_FAIR = 3

# Image alt coverage tiers (ratio 0.0-1.0)
ALT_COVERAGE_EXCELLENT = 0.9
ALT_COVERAGE_PARTIAL = 0.5

# Coverage at which the has_image_optimization flag is raised (traditional only)
SEO_IMAGE_FLAG_COVERAGE = 0.7

# Load time tiers (milliseconds)
SEO_LOAD_FAST_MS = 1500
SEO_LOAD_OK_MS = 3000


# =============================================================================
# AI-Readiness (GEO) Rubric
# =============================================================================

# Maximum raw points for the AI-readiness rubric
GEO_MAX_RAW_POINTS = 150

# Placeholder slot filled by the active rubric's question factor name
QUESTION_FACTOR_SLOT = "voice_search|ai_search_ready"

GEO_FACTOR_ORDER_TEMPLATE = (
    "conversational_headers",
    "structure",
    "content_depth",
    "structured_data",
    "faq_schema",
    QUESTION_FACTOR_SLOT,
    "authority_signals",
    "performance",
    "eeat_signals",
    "meta_optimization",
    "image_optimization",
    "internal_linking",
    "structured_formatting",
    "content_freshness",
)

GEO_FACTOR_MAX_POINTS = {
    "conversational_headers": 15,
    "structure": 10,
    "content_depth": 12,
    "structured_data": 15,
    "faq_schema": 18,
    QUESTION_FACTOR_SLOT: 20,
    "authority_signals": 12,
    "performance": 5,
    "eeat_signals": 13,
    "meta_optimization": 10,
    "image_optimization": 5,
    "internal_linking": 5,
    "structured_formatting": 5,
    "content_freshness": 5,
}

# H2 section tiers for the structure factor
GEO_STRUCTURE_EXCELLENT_H2 = 6
GEO_STRUCTURE_GOOD_H2 = 4

# Word count tiers for content_depth
GEO_WORDS_COMPREHENSIVE = 1500
GEO_WORDS_GOOD = 800
GEO_WORDS_MODERATE = 400

# Question pattern tiers
QUESTIONS_EXCELLENT = 8
QUESTIONS_GOOD = 5
QUESTIONS_MODERATE = 3

# Maximum characters between a question trigger word and its "?"
QUESTION_MAX_SPAN = 120

# Load time tiers (milliseconds)
GEO_LOAD_FAST_MS = 2000
GEO_LOAD_OK_MS = 3500

# Meta optimization optimal ranges (characters, inclusive)
GEO_TITLE_MIN = 30
GEO_TITLE_MAX = 60
GEO_DESCRIPTION_MIN = 120
GEO_DESCRIPTION_MAX = 160

# Internal linking tiers
GEO_INTERNAL_LINKS_STRONG = 10
GEO_INTERNAL_LINKS_GOOD = 5

# Internal links needed for the has_internal_links flag
GEO_INTERNAL_LINKS_FLAG = 3


# =============================================================================
# Reporting Constants
# =============================================================================

# A factor scoring below this share of its maximum is sent to the recommender
LOW_SCORE_RATIO = 0.5

# Maximum recommendations kept from the language model
MAX_RECOMMENDATIONS = 5

# Word count below which a page is reported as thin
THIN_CONTENT_ISSUE_WORDS = 500

# Minimum H2 subheadings before an issue is reported
MIN_H2_FOR_ISSUES = 3
