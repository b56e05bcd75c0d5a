"""Tests for environment-driven configuration."""

from seogeo.config import Config


class TestConfig:
    """Test cases for Config.from_env."""

    def test_defaults(self, monkeypatch):
        for name in ("LLM_API_KEY", "LLM_MODEL", "LLM_TIMEOUT", "RUBRIC", "PERSIST_HISTORY", "FETCH_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()

        assert config.llm_api_key is None
        assert config.llm_model == "openai/gpt-4o-mini"
        assert config.llm_timeout == 20.0
        assert config.fetch_timeout == 30
        assert config.rubric == "business"
        assert config.persist_history is True

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_API_KEY", "sk-test")
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")
        monkeypatch.setenv("LLM_TIMEOUT", "5.5")
        monkeypatch.setenv("RUBRIC", "medical")
        monkeypatch.setenv("PERSIST_HISTORY", "no")
        monkeypatch.setenv("LLM_BASE_URL", "")

        config = Config.from_env()

        assert config.llm_api_key == "sk-test"
        assert config.llm_provider == "anthropic"
        assert config.llm_timeout == 5.5
        assert config.rubric == "medical"
        assert config.persist_history is False
        assert config.llm_base_url is None
