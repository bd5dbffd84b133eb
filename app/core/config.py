"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.market.risk_radar import DEFAULT_RISK_CATEGORIES


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default_limit: Requests per window allowed per client.
        rate_limit_window_ms: Sliding window length in milliseconds.
        rate_limit_sweep_seconds: Interval of the background log sweep.
        rate_limit_heavy: slowapi limit for inference-heavy endpoints.
        max_url_length: Longest request URL accepted before answering 414.

    Provider credentials are optional at startup; endpoints that need a
    missing key fail with 503 when called.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Market Radar"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    rate_limit_default_limit: int = 60
    rate_limit_window_ms: int = 60_000
    rate_limit_sweep_seconds: float = 60.0
    rate_limit_heavy: str = "10/minute"
    max_url_length: int = 255

    # External providers
    news_api_key: Optional[str] = None
    news_api_url: str = "https://newsapi.org/v2/everything"
    polygon_api_key: Optional[str] = None
    polygon_api_url: str = "https://api.polygon.io/vX/reference/financials"
    http_timeout_seconds: float = 10.0

    # Moving averages
    default_ma_periods: list[int] = [20, 50, 200]

    # Risk radar
    risk_categories: list[str] = list(DEFAULT_RISK_CATEGORIES)
    risk_sentiment_margin: float = 1.5
    risk_lookback_days: int = 7
    risk_article_limit: int = 20
    risk_content_chars: int = 500
    risk_article_timeout_seconds: Optional[float] = 30.0
    # Each article holds up to three inference calls on the default thread
    # pool, and the per-article timeout starts once the slot is taken.
    # 0 lifts the cap.
    risk_classification_concurrency: int = 4

    # NLP models
    sentiment_model: str = "cardiffnlp/twitter-roberta-base-sentiment-latest"
    zero_shot_model: str = "facebook/bart-large-mnli"
    preload_models: bool = False


settings = Settings()
