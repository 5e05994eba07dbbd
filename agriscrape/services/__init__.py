"""Services package for HTTP fetching, request throttling and CSV export."""
