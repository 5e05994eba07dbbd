"""Configuration management for the listing crawler.

Handles all crawler configuration including environment variables, the YAML
targets file and default settings. Provides structured configuration classes
for HTTP behaviour, politeness delays and output location.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import CrawlTarget

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

USER_AGENTS = [
    DEFAULT_USER_AGENT,
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.1.1 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:89.0) Gecko/20100101 Firefox/89.0",
]


class CrawlConfig(BaseSettings):
    """Crawler behaviour settings.

    Attributes:
        base_delay: Fixed pause between requests in seconds.
        jitter: Upper bound of the random extra pause in seconds.
        timeout: Per-request timeout in seconds.
        verify_ssl: Whether TLS certificates are verified.
        detail_concurrency: Maximum simultaneous detail-page fetches.
        max_pages: Global cap on index pages per target, None for no cap.
        results_dir: Directory CSV files are written to.
        rotate_user_agent: Pick a random user agent for every request.
        uk_region: Send en-GB language and a GB country cookie.
        log_level: Root logging level name.
    """
    model_config = SettingsConfigDict(populate_by_name=True)

    base_delay: float = Field(default=2.0, validation_alias="SCRAPER_BASE_DELAY")
    jitter: float = Field(default=2.0, validation_alias="SCRAPER_JITTER")
    timeout: int = Field(default=30, validation_alias="SCRAPER_TIMEOUT")
    verify_ssl: bool = Field(default=True, validation_alias="SCRAPER_VERIFY_SSL")
    detail_concurrency: int = Field(default=1, ge=1, validation_alias="SCRAPER_DETAIL_CONCURRENCY")
    max_pages: int | None = Field(default=None, validation_alias="SCRAPER_MAX_PAGES")
    results_dir: str = Field(default="results", validation_alias="SCRAPER_RESULTS_DIR")
    rotate_user_agent: bool = Field(default=False, validation_alias="SCRAPER_ROTATE_USER_AGENT")
    uk_region: bool = Field(default=False, validation_alias="SCRAPER_UK_REGION")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @property
    def user_agents(self) -> list[str]:
        """Get the user agent pool for outgoing requests.

        Returns:
            All known user agents when rotation is on, else the default only.
        """
        if self.rotate_user_agent:
            return list(USER_AGENTS)
        return [DEFAULT_USER_AGENT]


class Config:
    """Application configuration manager.

    Loads crawler settings from the environment and crawl targets from
    ``targets.yml`` in the configuration directory.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to agriscrape/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)
        self.crawl = CrawlConfig()
        self.targets = self._load_targets()

    def _load_targets(self) -> list[CrawlTarget]:
        """Load crawl targets from YAML configuration.

        Returns:
            List of targets, empty if the file is missing or has none.
        """
        targets_path = self.config_dir / "targets.yml"
        if not targets_path.exists():
            return []

        with open(targets_path) as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        return [CrawlTarget(**entry) for entry in data.get("targets", [])]

    def get_target(self, name: str) -> CrawlTarget | None:
        """Find a configured target by name.

        Args:
            name: Target name from targets.yml.

        Returns:
            Matching target, None if not configured.
        """
        for target in self.targets:
            if target.name == name:
                return target
        return None


# Global configuration instance
config = Config()
