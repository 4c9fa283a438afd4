import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    source_base_url: str = "https://virtualdjradio.com"
    schedule_page_url: str = "https://virtualdjradio.com/schedule/"
    client_identifier: str = "VDJRadio-App/1.0"

    fetch_timeout_sec: float = 10.0
    fetch_max_retries: int = 2
    fetch_backoff_factor: float = 2.0

    status_cache_max_age: int = 30  # Liveness changes fast
    schedule_cache_max_age: int = 60

    channel_schedule_heading: str = "Next Up"
    site_schedule_heading: str = "Upcoming Shows"

    refresh_interval_sec: int = 0  # 0 disables background refresh
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("source_base_url", "schedule_page_url")
    @classmethod
    def validate_urls(cls, value: str, info) -> str:
        """Validate source URLs are HTTP/HTTPS."""
        value = value.strip()
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"{info.field_name} must be HTTP/HTTPS: {value}")
        if info.field_name == "source_base_url":
            return value.rstrip("/")
        return value

    @field_validator("client_identifier", "channel_schedule_heading", "site_schedule_heading")
    @classmethod
    def validate_non_empty(cls, value: str, info) -> str:
        """Ensure identifier and heading values are not blank."""
        if not value.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return value.strip()

    @field_validator("fetch_timeout_sec")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Validate page fetch timeout (seconds)."""
        if value <= 0:
            raise ValueError("fetch_timeout_sec must be > 0")
        return value

    @field_validator("fetch_max_retries")
    @classmethod
    def validate_max_retries(cls, value: int) -> int:
        """Ensure at least one fetch attempt is made."""
        if value < 1:
            raise ValueError("fetch_max_retries must be >= 1")
        return value

    @field_validator("fetch_backoff_factor")
    @classmethod
    def validate_backoff_factor(cls, value: float) -> float:
        """Ensure the backoff factor is at least 1."""
        if value < 1:
            raise ValueError("fetch_backoff_factor must be >= 1")
        return value

    @field_validator("status_cache_max_age", "schedule_cache_max_age")
    @classmethod
    def validate_cache_ages(cls, value: int, info) -> int:
        """Ensure cache lifetimes are positive."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("refresh_interval_sec")
    @classmethod
    def validate_refresh_interval(cls, value: int) -> int:
        """Validate background refresh interval (seconds)."""
        if value < 0:
            raise ValueError("refresh_interval_sec must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_cache_configuration(self):
        """Validate cross-field configuration."""
        if self.status_cache_max_age >= self.schedule_cache_max_age:
            raise ValueError(
                "status_cache_max_age must be shorter than schedule_cache_max_age"
            )

        if self.refresh_interval_sec and self.refresh_interval_sec > self.status_cache_max_age:
            logger.warning(
                "refresh_interval_sec (%ss) exceeds status_cache_max_age (%ss) - "
                "some status polls will fetch live",
                self.refresh_interval_sec,
                self.status_cache_max_age,
            )

        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Source: %s", self.source_base_url)
        logger.info("  Schedule Page: %s", self.schedule_page_url)
        logger.info("  Client Identifier: %s", self.client_identifier)
        logger.info(
            "  Fetch: timeout=%.1fs retries=%s backoff=%.1f",
            self.fetch_timeout_sec,
            self.fetch_max_retries,
            self.fetch_backoff_factor,
        )
        logger.info(
            "  Cache Max-Age: status=%ss schedule=%ss",
            self.status_cache_max_age,
            self.schedule_cache_max_age,
        )
        logger.info(
            "  Schedule Headings: channel=%r site=%r",
            self.channel_schedule_heading,
            self.site_schedule_heading,
        )
        logger.info(
            "  Background Refresh: %s",
            f"{self.refresh_interval_sec}s" if self.refresh_interval_sec else "disabled",
        )


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
