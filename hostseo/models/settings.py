"""Settings and configuration management."""

import logging
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_COMPETITOR_FEEDS = "\n".join(
    [
        "https://www.godaddy.com/blog/rss/",
        "https://www.hostinger.com/blog/feed/",
        "https://www.bluehost.com/blog/feed/",
        "https://www.namecheap.com/blog/feed/",
        "https://www.hosting.com/blog/rss/",
    ]
)


def _default_seo_meta_keys() -> Dict[str, List[str]]:
    return {
        "title": ["_yoast_wpseo_title", "rank_math_title", "_aioseo_title"],
        "description": [
            "_yoast_wpseo_metadesc",
            "rank_math_description",
            "_aioseo_description",
            "_aisa_meta_description",
        ],
    }


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Brand and generation
    brand: str = Field("TurnUpHosting", description="Brand named in CTAs")
    openai_api_key: Optional[str] = Field(None, description="OpenAI key")
    openai_model: str = Field("gpt-4o-mini", description="Chat model")
    openai_max_tokens: int = Field(
        1600, ge=100, le=16000, description="Output token budget per article"
    )

    # Competitor monitoring
    competitor_feeds: str = Field(
        DEFAULT_COMPETITOR_FEEDS,
        description="Competitor RSS URLs, one per line or comma-separated",
    )

    # Publishing
    schedule: Literal["daily", "twicedaily", "hourly"] = Field(
        "daily", description="Recurring run frequency"
    )
    post_status: Literal["draft", "publish"] = Field(
        "draft", description="Status for newly created posts"
    )
    category_id: Optional[int] = Field(None, description="Category for new posts")
    min_words: int = Field(1000, description="Target article length in words")
    duplicate_threshold: int = Field(
        80, description="Title similarity percent that marks a duplicate"
    )
    duplicate_scan_limit: int = Field(
        500, ge=1, description="Most recent posts compared for duplicates"
    )
    seo_meta_keys: Dict[str, List[str]] = Field(
        default_factory=_default_seo_meta_keys,
        description="Logical SEO field to metadata key names",
    )

    # Content repository
    wordpress_url: Optional[str] = Field(None, description="WordPress site URL")
    wordpress_user: Optional[str] = Field(None, description="WordPress user")
    wordpress_app_password: Optional[str] = Field(
        None, description="WordPress application password"
    )

    # Application Settings
    debug: bool = Field(False, description="Debug mode")
    log_level: str = Field("INFO", description="Log level")

    # API Timeout Settings (in seconds)
    openai_timeout: float = Field(
        80.0, ge=5.0, le=300.0, description="OpenAI API request timeout in seconds"
    )
    wordpress_timeout: float = Field(
        30.0, ge=5.0, le=120.0, description="WordPress API request timeout in seconds"
    )
    rss_feed_timeout: float = Field(
        30.0, ge=5.0, le=120.0, description="RSS feed fetch timeout in seconds"
    )
    default_user_agent: str = Field(
        "HostSEO-Bot/1.0",
        min_length=5,
        max_length=100,
        description="Default User-Agent for HTTP requests",
    )

    @field_validator("min_words")
    @classmethod
    def clamp_min_words(cls, value: int) -> int:
        """Articles shorter than 300 words are never requested."""
        return max(300, value)

    @field_validator("duplicate_threshold")
    @classmethod
    def clamp_duplicate_threshold(cls, value: int) -> int:
        """Keep the similarity threshold inside 50-95 percent."""
        return max(50, min(95, value))

    @model_validator(mode="after")
    def warn_missing_api_key(self) -> "Settings":
        """Generation is disabled, not fatal, without an API key."""
        if not self.openai_api_key:
            logger.warning(
                "OpenAI API key not set - every generation attempt will fail"
            )
        return self

    @property
    def competitor_feed_urls(self) -> List[str]:
        """Configured competitor feeds in their configured order."""
        raw = self.competitor_feeds.replace(",", "\n")
        return [line.strip() for line in raw.splitlines() if line.strip()]

    @property
    def wordpress_configured(self) -> bool:
        return bool(
            self.wordpress_url and self.wordpress_user and self.wordpress_app_password
        )
