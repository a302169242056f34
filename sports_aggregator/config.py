"""Configuration management."""

from typing import Optional, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_NEWS_PRIORITY = "espn,newsapi,gnews,reddit,apifootball,sportsdb"
DEFAULT_SCORES_PRIORITY = "espn_scores,sportsdb_scores,apifootball_scores"


class Settings(BaseSettings):
    """Application settings."""

    # Provider credentials
    news_api_key: Optional[str] = Field(default=None, alias="NEWS_API_KEY")
    gnews_api_key: Optional[str] = Field(default=None, alias="GNEWS_API_KEY")
    api_football_key: Optional[str] = Field(default=None, alias="API_FOOTBALL_KEY")
    thesportsdb_key: Optional[str] = Field(default="123", alias="THESPORTSDB_KEY")  # public free-tier key
    reddit_user_agent: str = Field(default="SportsAggregator/1.0", alias="REDDIT_USER_AGENT")

    # Provider priority (comma separated, highest first)
    news_provider_priority: str = Field(default=DEFAULT_NEWS_PRIORITY, alias="NEWS_PROVIDER_PRIORITY")
    scores_provider_priority: str = Field(default=DEFAULT_SCORES_PRIORITY, alias="SCORES_PROVIDER_PRIORITY")

    # Outbound HTTP
    provider_timeout: float = Field(default=10.0, alias="PROVIDER_TIMEOUT")  # seconds per request

    # Health registry
    failure_threshold: int = Field(default=3, alias="FAILURE_THRESHOLD")
    recovery_window: float = Field(default=300.0, alias="RECOVERY_WINDOW")  # seconds

    # Caching
    news_cache_ttl: float = Field(default=300.0, alias="NEWS_CACHE_TTL")
    scores_cache_ttl: float = Field(default=60.0, alias="SCORES_CACHE_TTL")  # scores are more volatile

    # Read API
    default_news_limit: int = Field(default=50, alias="DEFAULT_NEWS_LIMIT")
    max_limit: int = Field(default=100, alias="MAX_LIMIT")

    # Application
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    allowed_origins: Optional[str] = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        alias="ALLOWED_ORIGINS"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True

    @field_validator('news_api_key', 'gnews_api_key', 'api_football_key', 'thesportsdb_key', mode='before')
    @classmethod
    def empty_str_to_none(cls, v):
        """Convert empty strings to None for optional credentials."""
        if v == '' or v is None:
            return None
        return v

    def get_news_priority(self) -> List[str]:
        """Return news provider priority as list."""
        return _split_csv(self.news_provider_priority)

    def get_scores_priority(self) -> List[str]:
        """Return scores provider priority as list."""
        return _split_csv(self.scores_provider_priority)

    def get_allowed_origins_list(self) -> List[str]:
        """Return allowed origins as list."""
        return _split_csv(self.allowed_origins)


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in str(value).split(',') if item.strip()]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
