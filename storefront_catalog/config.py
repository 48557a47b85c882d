"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_PROBE_ORDER = "clothing,footwear,accessories,baby-care,toys,generic"
_DEFAULT_CDN_HOSTS = "cloudinary.com,amazonaws.com,cdn"


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Redis document store
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    CATALOG_KEY_PREFIX: str = os.getenv("CATALOG_KEY_PREFIX", "catalog:")
    CATALOG_ID_PATTERN: str | None = os.getenv("CATALOG_ID_PATTERN") or None

    # Identity resolution
    CATALOG_PROBE_ORDER: str = os.getenv("CATALOG_PROBE_ORDER", _DEFAULT_PROBE_ORDER)
    RESOLVER_CONCURRENT_PROBES: bool = (
        os.getenv("RESOLVER_CONCURRENT_PROBES", "false").lower() == "true"
    )

    # Category taxonomy (defaults to the packaged JSON table)
    TAXONOMY_PATH: str | None = os.getenv("TAXONOMY_PATH") or None

    # Image URL normalization
    BASE_URL: str | None = os.getenv("BASE_URL") or os.getenv("BACKEND_URL")
    IMAGE_CDN_HOSTS: str = os.getenv("IMAGE_CDN_HOSTS", _DEFAULT_CDN_HOSTS)

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def image_base_origin(self) -> str:
        """Origin prepended to relative image paths; empty means leave them relative."""
        if self.BASE_URL:
            return self.BASE_URL.rstrip("/")
        return "" if self.is_production else "http://localhost:5000"

    @property
    def cdn_hosts(self) -> tuple[str, ...]:
        return tuple(
            host.strip().lower() for host in self.IMAGE_CDN_HOSTS.split(",") if host.strip()
        )

    @property
    def probe_order(self) -> list[str]:
        """Catalog domains in identity-resolution priority order."""
        return [
            domain.strip().lower()
            for domain in self.CATALOG_PROBE_ORDER.split(",")
            if domain.strip()
        ]

    def __init__(self):
        self.env = os.getenv("ENV", "dev")
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            f"Config initialized with env={self.env}, debug={self.debug}, "
            f"log_level={self.log_level}"
        )


# Create a global settings instance for import
settings = Settings()
