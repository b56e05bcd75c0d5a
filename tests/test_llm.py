"""Tests for the recommendation client."""

import json
from unittest.mock import Mock, patch

import pytest

from seogeo.llm import RecommendationClient, low_scoring_factors
from seogeo.models import Evaluation, Recommendation, ScoreFactor


@pytest.fixture
def client():
    return RecommendationClient(api_key="test-key")


@pytest.fixture
def evaluations():
    seo = Evaluation(
        normalized_score=40,
        raw_points=52,
        raw_points_max=130,
        factors=(
            ScoreFactor("title_tag", 15, 15, "Perfect title length (55 chars)."),
            ScoreFactor("meta_description", 0, 15, "Missing meta description."),
        ),
    )
    geo = Evaluation(
        normalized_score=30,
        raw_points=45,
        raw_points_max=150,
        factors=(
            ScoreFactor("faq_schema", 5, 18, "FAQ content found but no schema markup (3 questions)."),
            ScoreFactor("performance", 5, 5, "Fast load time (300ms)."),
        ),
    )
    return seo, geo


class TestRecommendationClient:
    """Test cases for RecommendationClient."""

    def test_initialization_defaults(self, client):
        assert client.api_key == "test-key"
        assert client.model == "openai/gpt-4o-mini"
        assert client.provider == "openai"

    def test_initialization_without_key(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="API key must be provided"):
                RecommendationClient()

    def test_initialization_from_env(self):
        with patch.dict("os.environ", {"LLM_API_KEY": "env-key"}):
            assert RecommendationClient().api_key == "env-key"

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            RecommendationClient(api_key="k", provider="gemini")

    def test_low_scoring_factors(self, evaluations):
        seo, geo = evaluations
        assert [f["factor"] for f in low_scoring_factors(seo)] == ["meta_description"]
        assert [f["factor"] for f in low_scoring_factors(geo)] == ["faq_schema"]

    def test_prompt_contains_scores_issues_and_weak_factors(self, client, evaluations):
        seo, geo = evaluations
        prompt = client._build_prompt(seo, geo, ["Missing meta description"])

        assert "SEO Score: 40/100" in prompt
        assert "GEO Score: 30/100" in prompt
        assert "Missing meta description" in prompt
        assert "[SEO] meta_description: 0/15" in prompt
        assert "[GEO] faq_schema: 5/18" in prompt
        assert "title_tag" not in prompt

    def test_parse_plain_json(self, client):
        response = json.dumps([
            {"title": "Add FAQ schema", "detail": "Mark up questions.", "priority": "HIGH"},
            {"title": "Write a description", "detail": "150 chars.", "priority": "urgent"},
        ])
        result = client._parse_recommendations(response)
        assert result == [
            Recommendation("Add FAQ schema", "Mark up questions.", "high"),
            Recommendation("Write a description", "150 chars.", "medium"),
        ]

    def test_parse_code_fenced_json(self, client):
        response = '```json\n[{"title": "Fix title", "detail": "Shorten it", "priority": "low"}]\n```'
        result = client._parse_recommendations(response)
        assert result == [Recommendation("Fix title", "Shorten it", "low")]

    def test_parse_keeps_at_most_five_and_skips_non_objects(self, client):
        items = ["not an object"] + [{"detail": f"d{i}"} for i in range(7)]
        result = client._parse_recommendations(json.dumps(items))
        assert len(result) == 4
        assert all(r.title == "Recommendation" for r in result)

    @pytest.mark.parametrize("response", ["not json at all", '{"title": "object"}', "[1, 2"])
    def test_parse_invalid_output(self, client, response):
        assert client._parse_recommendations(response) == []

    def test_generate_success(self, client, evaluations):
        seo, geo = evaluations
        payload = '[{"title": "Add FAQ schema", "detail": "Use FAQPage.", "priority": "high"}]'
        with patch.object(client, "_call_llm", return_value=payload) as mock_call:
            result = client.generate(seo, geo, [])

        mock_call.assert_called_once()
        assert result == [Recommendation("Add FAQ schema", "Use FAQPage.", "high")]

    def test_generate_failure_returns_empty(self, client, evaluations):
        seo, geo = evaluations
        with patch.object(client, "_call_llm", side_effect=TimeoutError("timed out")):
            assert client.generate(seo, geo, []) == []

    def test_generate_empty_response(self, client, evaluations):
        seo, geo = evaluations
        with patch.object(client, "_call_llm", return_value="   "):
            assert client.generate(seo, geo, []) == []

    @patch("openai.OpenAI")
    def test_call_openai(self, mock_openai_class):
        mock_client = Mock()
        mock_response = Mock()
        mock_response.choices = [Mock(message=Mock(content="[]"))]
        mock_client.chat.completions.create.return_value = mock_response
        mock_openai_class.return_value = mock_client

        client = RecommendationClient(
            api_key="test-key", base_url="https://openrouter.ai/api/v1", timeout=12.0
        )
        assert client._call_llm("prompt") == "[]"

        mock_openai_class.assert_called_once_with(
            api_key="test-key",
            base_url="https://openrouter.ai/api/v1",
            timeout=12.0,
            max_retries=0,
        )
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o-mini"
        assert kwargs["temperature"] == 0.2

    @patch("anthropic.Anthropic")
    def test_call_anthropic(self, mock_anthropic_class):
        mock_client = Mock()
        mock_response = Mock()
        mock_response.content = [Mock(text='[{"title": "x"}]')]
        mock_client.messages.create.return_value = mock_response
        mock_anthropic_class.return_value = mock_client

        client = RecommendationClient(api_key="test-key", provider="anthropic", model="claude-3-haiku")
        assert client._call_llm("prompt") == '[{"title": "x"}]'
        assert mock_client.messages.create.call_args.kwargs["model"] == "claude-3-haiku"
