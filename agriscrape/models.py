"""Data models for the listing crawler.

Defines Pydantic models for all data structures passed between the scrapers,
the crawl orchestrator and the CSV exporter: listing records, detail-page
results, parsed index pages, crawl targets and run reports.
"""

from pydantic import BaseModel, Field


class Listing(BaseModel):
    """One machine listing scraped from a marketplace.

    Fixed fields are plain strings and default to empty when the markup does
    not carry them. Site-specific specification rows land in ``attributes``,
    whose key set differs from one listing to the next.

    Attributes:
        title: Listing headline.
        price: Displayed price text.
        original_price: Struck-through price before a reduction.
        price_excl_vat: Price excluding VAT as shown by the site.
        reference_price: Raw price from the ``data-reference_price`` attribute.
        reference_currency: Currency code of the reference price.
        displayed_currency: Currency symbol shown next to the price.
        price_type: VAT qualifier, e.g. "excl. VAT".
        hp: Engine power text.
        year: Year of construction text.
        working_hours: Working hours text.
        location: Seller location.
        dealer: Dealer name.
        phone_numbers: Contact numbers joined with "; ".
        image_url: Thumbnail image URL.
        summary: Short free-text details shown on the index page.
        detail_url: Absolute URL of the detail page.
        description: Long description from the detail page.
        attributes: Dynamic label/value pairs discovered at parse time.
    """

    title: str = ""
    price: str = ""
    original_price: str = ""
    price_excl_vat: str = ""
    reference_price: str = ""
    reference_currency: str = ""
    displayed_currency: str = ""
    price_type: str = ""
    hp: str = ""
    year: str = ""
    working_hours: str = ""
    location: str = ""
    dealer: str = ""
    phone_numbers: str = ""
    image_url: str = ""
    summary: str = ""
    detail_url: str = ""
    description: str = ""
    attributes: dict[str, str] = Field(default_factory=dict)

    def merge_detail(self, detail: "DetailData") -> None:
        """Fold a detail-page result into this listing.

        Non-empty detail values win over summary values; empty ones never
        blank out what the index page already provided.

        Args:
            detail: Parsed detail page for this listing.
        """
        if detail.description:
            self.description = detail.description
        for name, value in detail.fields.items():
            if value and name in Listing.model_fields and name != "attributes":
                setattr(self, name, value)
        self.attributes.update(detail.attributes)


class DetailData(BaseModel):
    """Data extracted from a single detail page.

    Attributes:
        description: Long description text.
        fields: Fixed ``Listing`` field overrides keyed by field name.
        attributes: Dynamic label/value pairs.
    """

    description: str = ""
    fields: dict[str, str] = Field(default_factory=dict)
    attributes: dict[str, str] = Field(default_factory=dict)


class ListingPage(BaseModel):
    """Result of parsing one paginated index page.

    Attributes:
        listings: Listing summaries in page order.
        has_next: Whether a "next page" control was present.
    """

    listings: list[Listing] = Field(default_factory=list)
    has_next: bool = False


class CrawlTarget(BaseModel):
    """A start URL to crawl and where its results go.

    Attributes:
        name: Short identifier used on the command line.
        start_url: First index page URL without pagination parameters.
        output_prefix: CSV filename prefix.
        fetch_details: Whether to follow detail-page links.
        max_pages: Optional cap on index pages, None for no cap.
    """

    name: str
    start_url: str
    output_prefix: str = "listings"
    fetch_details: bool = True
    max_pages: int | None = None


class CrawlReport(BaseModel):
    """Summary of one finished crawl.

    Attributes:
        target: Name of the crawled target.
        pages_crawled: Index pages fetched, including the terminating one.
        listings_found: Listing summaries collected.
        details_enriched: Detail pages merged successfully.
        details_failed: Detail pages that failed and were skipped.
        output_path: Written CSV path, None if nothing was written.
    """

    target: str
    pages_crawled: int = 0
    listings_found: int = 0
    details_enriched: int = 0
    details_failed: int = 0
    output_path: str | None = None
