"""Dependency-injection container.

Wires the crawler settings, the scraper registry and the crawl orchestrator
together so the entry point and tests can swap any of them out.
"""

from dependency_injector import containers, providers

from agriscrape.config import CrawlConfig
from agriscrape.crawler.orchestrator import CrawlOrchestrator
from agriscrape.scrapers import scraper_registry


class Container(containers.DeclarativeContainer):
    """DI container for the application."""

    crawl_config = providers.Singleton(CrawlConfig)
    registry = providers.Object(scraper_registry)

    orchestrator = providers.Factory(
        CrawlOrchestrator,
        crawl_config=crawl_config,
        registry=registry,
    )
