"""
Environment-driven configuration for the cart helper.
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Configuration loaded from environment variables."""

    @classmethod
    def _get_redis_url(cls) -> Optional[str]:
        return os.getenv("REDIS_URL")

    @classmethod
    def _get_storage_path(cls) -> Optional[str]:
        return os.getenv("STORAGE_PATH")

    @classmethod
    def _get_member_feed_url(cls) -> Optional[str]:
        # Support both the sheet export name and the plain one
        return os.getenv("MEMBER_FEED_URL") or os.getenv("MEMBER_SHEET_CSV_URL")

    @classmethod
    def _get_product_api_base_url(cls) -> str:
        return os.getenv("PRODUCT_API_BASE_URL", "https://world.openfoodfacts.org").rstrip("/")

    @classmethod
    def _get_http_timeout_seconds(cls) -> float:
        return float(os.getenv("HTTP_TIMEOUT_SECONDS", "8"))

    @classmethod
    def _get_timezone(cls) -> str:
        return os.getenv("TIMEZONE", "Asia/Jakarta")

    @classmethod
    def _get_log_level(cls) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()

    # Properties that read from environment each time
    @property
    def REDIS_URL(self) -> Optional[str]:
        return self._get_redis_url()

    @property
    def STORAGE_PATH(self) -> Optional[str]:
        return self._get_storage_path()

    @property
    def MEMBER_FEED_URL(self) -> Optional[str]:
        return self._get_member_feed_url()

    @property
    def PRODUCT_API_BASE_URL(self) -> str:
        return self._get_product_api_base_url()

    @property
    def HTTP_TIMEOUT_SECONDS(self) -> float:
        return self._get_http_timeout_seconds()

    @property
    def TIMEZONE(self) -> str:
        return self._get_timezone()

    @property
    def LOG_LEVEL(self) -> str:
        return self._get_log_level()

    def validate(self) -> None:
        """Validate settings needed for member login."""
        if not self.MEMBER_FEED_URL:
            raise ValueError("MEMBER_FEED_URL or MEMBER_SHEET_CSV_URL is required for member login")
        if self.HTTP_TIMEOUT_SECONDS <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")


settings = Settings()


def configure() -> None:
    """Load .env and set up logging for scripts and embedding apps."""
    load_dotenv()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
