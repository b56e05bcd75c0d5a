"""LLM client that turns low-scoring factors into prioritized recommendations."""

from typing import Optional
import json
import logging
import os
import re

from seogeo.constants import LOW_SCORE_RATIO, MAX_RECOMMENDATIONS
from seogeo.models import Evaluation, Recommendation

logger = logging.getLogger(__name__)

VALID_PRIORITIES = ("high", "medium", "low")
CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def low_scoring_factors(evaluation: Evaluation, ratio: float = LOW_SCORE_RATIO) -> list[dict]:
    """Select factors that scored below a share of their maximum.

    Args:
        evaluation: Scored evaluation
        ratio: Threshold as a fraction of each factor's maximum

    Returns:
        List of factor dictionaries (factor, points, max_points, detail)
    """
    return [
        factor.to_dict()
        for factor in evaluation.factors
        if factor.points_max > 0 and factor.points_awarded < factor.points_max * ratio
    ]


class RecommendationClient:
    """Client for generating recommendations with an LLM.

    Makes a single call with a bounded timeout. Any failure (transport,
    HTTP status, unparsable output) is logged and produces an empty list.
    """

    SYSTEM_PROMPT = "You are an SEO strategist. Respond with a JSON array only."

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "openai/gpt-4o-mini",
        provider: str = "openai",
        base_url: Optional[str] = None,
        timeout: float = 20.0,
        max_tokens: int = 1024,
    ):
        """Initialize the recommendation client.

        Args:
            api_key: API key for the LLM provider
            model: Model name to use
            provider: LLM provider (openai or anthropic)
            base_url: Base URL for OpenAI-compatible endpoints (e.g. OpenRouter)
            timeout: Request timeout in seconds
            max_tokens: Maximum tokens for the response
        """
        self.api_key = api_key or os.getenv("LLM_API_KEY")
        self.model = model
        self.provider = provider
        self.base_url = base_url
        self.timeout = timeout
        self.max_tokens = max_tokens

        if not self.api_key:
            raise ValueError(
                "API key must be provided or set in LLM_API_KEY environment variable"
            )
        if self.provider not in ("openai", "anthropic"):
            raise ValueError(f"Unsupported provider: {self.provider}")

    def generate(
        self,
        seo: Evaluation,
        geo: Evaluation,
        issues: list[str],
    ) -> list[Recommendation]:
        """Generate recommendations for a scored page.

        Args:
            seo: Traditional evaluation
            geo: AI-readiness evaluation
            issues: Issues derived from the page snapshot

        Returns:
            Up to five recommendations, or an empty list on any failure
        """
        prompt = self._build_prompt(seo, geo, issues)
        try:
            response = self._call_llm(prompt)
        except Exception as e:
            logger.error(f"Recommendation request failed: {e}")
            return []

        if not response or not response.strip():
            logger.warning("LLM returned empty response")
            return []

        recommendations = self._parse_recommendations(response)
        logger.info(f"Generated {len(recommendations)} recommendations")
        return recommendations

    def _build_prompt(self, seo: Evaluation, geo: Evaluation, issues: list[str]) -> str:
        weak_factors = [
            f"- [SEO] {f['factor']}: {f['points']}/{f['max_points']} ({f['detail']})"
            for f in low_scoring_factors(seo)
        ] + [
            f"- [GEO] {f['factor']}: {f['points']}/{f['max_points']} ({f['detail']})"
            for f in low_scoring_factors(geo)
        ]
        return (
            "Based on these scores and issues, return a JSON array with 3-5 recommendations.\n"
            'Each item must have: title (string), detail (string), priority ("high" | "medium" | "low").\n'
            f"SEO Score: {seo.normalized_score}/100\n"
            f"GEO Score: {geo.normalized_score}/100\n"
            f"Issues: {'; '.join(issues) or 'None detected'}\n"
            "Low-scoring factors:\n"
            f"{chr(10).join(weak_factors) or '- None'}\n"
            "Return JSON array only, no extra text."
        )

    def _call_llm(self, prompt: str) -> str:
        """Call the configured provider once.

        Raises:
            Exception: Whatever the provider SDK raises
        """
        if self.provider == "anthropic":
            return self._call_anthropic(prompt)
        return self._call_openai(prompt)

    def _call_openai(self, prompt: str) -> str:
        import openai

        client = openai.OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
        )
        response = client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.2,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""

    def _call_anthropic(self, prompt: str) -> str:
        import anthropic

        client = anthropic.Anthropic(
            api_key=self.api_key,
            timeout=self.timeout,
            max_retries=0,
        )
        response = client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=self.SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text

    def _parse_recommendations(self, response: str) -> list[Recommendation]:
        """Parse untrusted model output into recommendations.

        Args:
            response: Raw LLM response

        Returns:
            Parsed recommendations; empty when the output is not a JSON array
        """
        content = CODE_FENCE_PATTERN.sub("", response.strip()).strip()
        try:
            parsed = json.loads(content)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to parse LLM response as JSON: {e}")
            return []

        if not isinstance(parsed, list):
            logger.warning("LLM response was not a JSON array")
            return []

        recommendations = []
        for item in parsed[:MAX_RECOMMENDATIONS]:
            if not isinstance(item, dict):
                continue
            priority = str(item.get("priority", "")).lower()
            recommendations.append(Recommendation(
                title=str(item.get("title") or "Recommendation"),
                detail=str(item.get("detail") or ""),
                priority=priority if priority in VALID_PRIORITIES else "medium",
            ))
        return recommendations
