"""Shared fixtures for crawler tests.

Provides a crawler configuration with delays disabled and a factory for
fake HTTP sessions serving the inline pages from ``pages.py``.
"""

import pytest

from agriscrape.config import CrawlConfig
from pages import FakeSession


@pytest.fixture
def crawl_config() -> CrawlConfig:
    """Crawler settings with politeness delays disabled."""
    return CrawlConfig(base_delay=0, jitter=0, detail_concurrency=1)


@pytest.fixture
def fake_session_factory():
    """Factory building FakeSession objects from URL to HTML mappings."""
    return FakeSession
