"""Landwirt.com listing scraper.

Extracts used farm machinery from landwirt.com result lists. Result lists are
paginated by item offset (``?offset=N``) in steps of twenty. Each result row
holds the title, prices, a category field list and the dealer address; the
detail page adds the long description, the equipment list and the
specification grid.
"""

from bs4 import Tag

from ..models import DetailData, Listing, ListingPage
from .base import (
    BaseScraper,
    make_soup,
    parse_label_value_rows,
    select_attr,
    select_first_text,
    select_last_text,
    select_text,
    with_query_param,
)

PAGE_SIZE = 20
LISTING_SELECTOR = ".row.gmmtreffer"

CATEGORY_PREFIXES = {
    "hp/kW:": "hp",
    "Year of construction:": "year",
    "Working hours:": "working_hours",
}


class LandwirtScraper(BaseScraper):
    """Scraper for landwirt.com used machinery listings."""

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        """Initialize Landwirt scraper.

        Args:
            page_size: Results per index page, used to compute the offset.
        """
        super().__init__("landwirt", "https://www.landwirt.com")
        self.page_size = page_size

    def page_url(self, start_url: str, page: int) -> str:
        return with_query_param(start_url, "offset", (page - 1) * self.page_size)

    def parse_listing_page(self, html: str) -> ListingPage:
        soup = make_soup(html)
        listings = [self._parse_row(row) for row in soup.select(LISTING_SELECTOR)]
        has_next = soup.select_one("a[rel='next']") is not None

        self._log_page_parsed("index", len(listings))
        return ListingPage(listings=listings, has_next=has_next)

    def _parse_row(self, row: Tag) -> Listing:
        """Build a listing summary from one result row."""
        listing = Listing(
            title=select_text(row, "h3 a"),
            detail_url=self.absolutize_url(select_attr(row, "h3 a", "href")),
            price=select_first_text(row, ".gmmprice1, .pricetagbig"),
            original_price=select_text(row, ".gmmprice4 s"),
            price_excl_vat=select_last_text(row, ".gmmVat.hidden-xs"),
            image_url=select_attr(row, ".bildboxgmm img", "src"),
            summary=select_text(row, "p[style='font-size:14px']"),
        )

        for li in row.select(".gmmlistcatfield li"):
            text = li.get_text().strip()
            for prefix, field in CATEGORY_PREFIXES.items():
                if text.startswith(prefix):
                    setattr(listing, field, text.removeprefix(prefix).strip())
                    break

        # "Dealer name - Location"; anything else is ambiguous and left empty
        parts = select_text(row, "address.gmmlist_t10").split("-")
        if len(parts) == 2:
            listing.dealer = parts[0].strip()
            listing.location = parts[1].strip()

        return listing

    def parse_detail_page(self, html: str) -> DetailData:
        soup = make_soup(html)
        detail = DetailData(description=select_text(soup, "#description_original"))

        for item in soup.select(".detail-equip .eitems"):
            name = select_text(item, "a") or item.get_text().strip()
            if name:
                detail.attributes[f"Equipment: {name}"] = "Yes"

        specs = parse_label_value_rows(soup, ".detail-infos .row", ".col-xs-6")
        for key, value in specs.items():
            detail.attributes[f"Spec: {key}"] = value

        self._log_page_parsed("detail", len(detail.attributes))
        return detail


# Create and export Landwirt scraper instance
landwirt_scraper = LandwirtScraper()
