import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

UNIT_MATCH_MODES = ("exact", "loose")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_ttl: int = int(os.getenv("CACHE_TTL", "3600"))  # 1 hour default
    cache_unit_match: str = os.getenv("CACHE_UNIT_MATCH", "exact").lower()

    # Tree construction
    max_tree_depth: int = int(os.getenv("MAX_TREE_DEPTH", "64"))

    # Hierarchy data (JSON file with nested {"unit": ..., "children": [...]} roots)
    hierarchy_data_path: str | None = os.getenv("HIERARCHY_DATA_PATH")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.cache_unit_match not in UNIT_MATCH_MODES:
            raise ValueError(
                f"CACHE_UNIT_MATCH must be one of {list(UNIT_MATCH_MODES)}, "
                f"got {self.cache_unit_match!r}"
            )

        if self.max_tree_depth < 1:
            raise ValueError("MAX_TREE_DEPTH must be at least 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for scripts and the API server."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
