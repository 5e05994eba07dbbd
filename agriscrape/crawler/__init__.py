"""Crawl orchestration package."""

from .orchestrator import CrawlOrchestrator

__all__ = ['CrawlOrchestrator']
