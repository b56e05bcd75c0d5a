"""Shared fixtures for the seogeo test suite."""

from datetime import datetime

import pytest

from seogeo.models import PageSignals

EVALUATION_INSTANT = datetime(2025, 6, 1, 12, 0, 0)


def _make_signals(url="https://example.com/", **overrides) -> PageSignals:
    """Build PageSignals with empty defaults, overriding selected fields."""
    return PageSignals(url=url, **overrides)


@pytest.fixture
def evaluation_instant():
    return EVALUATION_INSTANT


@pytest.fixture
def rich_html():
    """A page that exercises most positive signals of both rubrics."""
    questions = "".join(
        f"<p>What is step {i} of the process?</p>" for i in range(8)
    )
    body_words = " ".join(["word"] * 1600)
    links = "".join(f'<a href="/page-{i}">Page {i}</a>' for i in range(10))
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<title>How to Choose the Best Accounting Software for a Business</title>
<meta name="description" content="{'d' * 155}">
<meta name="viewport" content="width=device-width, initial-scale=1">
<link rel="canonical" href="https://example.com/guide">
<script type="application/ld+json">{{"@context": "https://schema.org", "@type": "Organization", "name": "Acme"}}</script>
<script type="application/ld+json">{{"@context": "https://schema.org", "@type": "FAQPage", "mainEntity": []}}</script>
</head>
<body>
<h1>What is the best accounting software?</h1>
<h2>Why it matters</h2><h2>Features</h2><h2>Pricing</h2>
<h2>Support</h2><h2>Security</h2><h2>Verdict</h2>
<p>Written by Jane Doe, certified accountant. About us: our team has audited 300 companies.</p>
<p>According to research from <a href="https://www.census.gov/data">the Census Bureau</a>, 45% of firms switched.</p>
<p>Updated for 2025 in the United States and the UK.</p>
<ul><li>One</li><li>Two</li></ul>
<img src="a.png" alt="Dashboard"><img src="b.png" alt="Reports">
{questions}
{links}
<p>{body_words}</p>
</body>
</html>"""


@pytest.fixture
def make_signals():
    """Factory for PageSignals with empty defaults."""
    return _make_signals
