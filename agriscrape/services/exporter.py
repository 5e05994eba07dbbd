"""CSV export of crawled listings.

Listings carry a fixed set of fields plus a dynamic attribute bag whose keys
differ per record. The exporter builds one header for the whole run from the
fixed columns followed by every dynamic key in first-seen order, then renders
one row per listing with empty cells for keys the listing does not have.
"""

import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from ..models import Listing

logger = logging.getLogger(__name__)

# (CSV header, Listing field)
FIXED_COLUMNS: list[tuple[str, str]] = [
    ("Title", "title"),
    ("Price", "price"),
    ("Original Price", "original_price"),
    ("Price Excl. VAT", "price_excl_vat"),
    ("Reference Price", "reference_price"),
    ("Reference Currency", "reference_currency"),
    ("Displayed Currency", "displayed_currency"),
    ("Price Type", "price_type"),
    ("HP", "hp"),
    ("Year", "year"),
    ("Working Hours", "working_hours"),
    ("Location", "location"),
    ("Dealer", "dealer"),
    ("Phone Numbers", "phone_numbers"),
    ("Image URL", "image_url"),
    ("Details", "summary"),
    ("Detail URL", "detail_url"),
    ("Description", "description"),
]

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class ExportError(Exception):
    """Raised when the results directory or CSV file cannot be written."""


def collect_attribute_keys(listings: list[Listing]) -> list[str]:
    """Union of all attribute keys in first-seen order."""
    seen: dict[str, None] = {}
    for listing in listings:
        for key in listing.attributes:
            seen.setdefault(key, None)
    return list(seen)


def build_header(listings: list[Listing]) -> list[str]:
    """Build the CSV header for a set of listings.

    Args:
        listings: All listings of the run.

    Returns:
        Fixed column names followed by the dynamic attribute keys.
    """
    return [name for name, _ in FIXED_COLUMNS] + collect_attribute_keys(listings)


def build_rows(listings: list[Listing], attribute_keys: list[str]) -> list[list[str]]:
    """Render listings as rows aligned with ``build_header``.

    Args:
        listings: Listings in output order.
        attribute_keys: Dynamic keys in header order.

    Returns:
        One list of cell values per listing.
    """
    rows = []
    for listing in listings:
        row = [getattr(listing, field) for _, field in FIXED_COLUMNS]
        row.extend(listing.attributes.get(key, "") for key in attribute_keys)
        rows.append(row)
    return rows


def output_path(results_dir: str | Path, prefix: str, started_at: datetime) -> Path:
    """Timestamped CSV path for a run started at ``started_at``."""
    return Path(results_dir) / f"{prefix}_{started_at.strftime(TIMESTAMP_FORMAT)}.csv"


def write_csv(
    listings: list[Listing],
    results_dir: str | Path,
    prefix: str,
    started_at: datetime,
) -> Path:
    """Write listings to a timestamped CSV file.

    Args:
        listings: Listings to write, in crawl order.
        results_dir: Directory to create the file in, created if missing.
        prefix: Filename prefix.
        started_at: Run start time used in the filename.

    Returns:
        Path of the written file.

    Raises:
        ExportError: If the directory or file cannot be created.
    """
    path = output_path(results_dir, prefix, started_at)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"error creating results directory {path.parent}: {e}") from e

    attribute_keys = collect_attribute_keys(listings)
    header = [name for name, _ in FIXED_COLUMNS] + attribute_keys
    df = pd.DataFrame(build_rows(listings, attribute_keys), columns=header, dtype=str)

    try:
        df.to_csv(path, index=False)
    except OSError as e:
        raise ExportError(f"error writing CSV file {path}: {e}") from e

    logger.info(f"Saved {len(df)} listings to {path}")
    return path
