"""Web scrapers package.

Contains site-specific scraping implementations for agricultural machinery
marketplaces. Each scraper knows its site's pagination parameter and the CSS
selectors for index and detail pages; the crawl loop itself lives in the
crawler package.

- ScraperProtocol: Unified interface for all site scrapers
- ScraperRegistry: Centralized management and URL routing
- AgriaffairesScraper: agriaffaires.co.uk, ``?page=N`` pagination
- LandwirtScraper: landwirt.com, ``?offset=N`` pagination
"""

from .agriaffaires import agriaffaires_scraper
from .base import BaseScraper, ScraperProtocol, scraper_registry
from .landwirt import landwirt_scraper

# Auto-register all available scrapers
scraper_registry.register(agriaffaires_scraper)
scraper_registry.register(landwirt_scraper)

__all__ = [
    'ScraperProtocol',
    'BaseScraper',
    'scraper_registry',
    'agriaffaires_scraper',
    'landwirt_scraper',
]
