"""Agricultural Machinery Listing Crawler Package.

Crawls paginated used-machinery marketplaces, follows each listing to its
detail page and exports the records to timestamped CSV files.

The application follows a modular architecture with separate concerns for:
- Site-specific markup extraction (scrapers)
- Pagination and detail enrichment (crawler)
- HTTP fetching, request throttling and CSV export (services)
"""
