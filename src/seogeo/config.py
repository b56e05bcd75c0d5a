from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
import os

load_dotenv()  # Loads variables from .env file


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///seogeo_history.db")  # Default to SQLite

    # Email delivery (Resend)
    RESEND_API_KEY = os.getenv("RESEND_API_KEY")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "SEO/GEO Reports <reports@example.com>")


settings = Settings()


@dataclass
class Config:
    """Configuration for the SEO/GEO analyzer."""
    llm_api_key: Optional[str] = None
    llm_model: str = "openai/gpt-4o-mini"
    llm_provider: str = "openai"
    llm_base_url: Optional[str] = "https://openrouter.ai/api/v1"
    llm_timeout: float = 20.0
    user_agent: str = "SEO-GEO-Analyzer/1.0"
    fetch_timeout: int = 30
    rubric: str = "business"
    database_url: str = "sqlite:///seogeo_history.db"
    persist_history: bool = True
    resend_api_key: Optional[str] = None
    email_from: str = "SEO/GEO Reports <reports@example.com>"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance with values from environment
        """
        return cls(
            llm_api_key=os.getenv("LLM_API_KEY"),
            llm_model=os.getenv("LLM_MODEL", "openai/gpt-4o-mini"),
            llm_provider=os.getenv("LLM_PROVIDER", "openai"),
            llm_base_url=os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1") or None,
            llm_timeout=float(os.getenv("LLM_TIMEOUT", "20")),
            user_agent=os.getenv("USER_AGENT", "SEO-GEO-Analyzer/1.0"),
            fetch_timeout=int(os.getenv("FETCH_TIMEOUT", "30")),
            rubric=os.getenv("RUBRIC", "business"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///seogeo_history.db"),
            persist_history=_env_bool("PERSIST_HISTORY", True),
            resend_api_key=os.getenv("RESEND_API_KEY"),
            email_from=os.getenv("EMAIL_FROM", "SEO/GEO Reports <reports@example.com>"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
