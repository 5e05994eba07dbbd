"""Agriaffaires listing scraper.

Extracts machine listings from agriaffaires.co.uk category pages and enriches
them from the individual classified pages. Index pages are paginated with a
``?page=N`` query parameter and carry a "Next" pagination link while more
results exist.

Price details come from the ``.js-priceToChange`` element, whose
``data-reference_price`` and ``data-reference_currency`` attributes hold the
unconverted price. Detail pages expose specification tables, an equipment
list and the dealer contact block.
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

LISTING_SELECTOR = ".listing-block.listing-block--classified"
NEXT_LINK_SELECTOR = ".pagination__link"
SPEC_TABLE_ROWS = ".table--specs tr, table tbody tr"

# Spec-table labels that also fill a fixed listing field
SPEC_FIELD_MAP = {
    "Power": "hp",
    "Year": "year",
    "Hours": "working_hours",
    "Working hours": "working_hours",
    "Price excl. VAT": "price_excl_vat",
}


class AgriaffairesScraper(BaseScraper):
    """Scraper for agriaffaires.co.uk classified listings."""

    def __init__(self) -> None:
        """Initialize Agriaffaires scraper."""
        super().__init__("agriaffaires", "https://www.agriaffaires.co.uk")

    def page_url(self, start_url: str, page: int) -> str:
        return with_query_param(start_url, "page", page)

    def parse_listing_page(self, html: str) -> ListingPage:
        soup = make_soup(html)
        listings = [self._parse_block(block) for block in soup.select(LISTING_SELECTOR)]

        has_next = any("Next" in link.get_text() for link in soup.select(NEXT_LINK_SELECTOR))

        self._log_page_parsed("index", len(listings))
        return ListingPage(listings=listings, has_next=has_next)

    def _parse_block(self, block: Tag) -> Listing:
        """Build a listing summary from one classified block."""
        listing = Listing(
            title=select_text(block, ".listing-block__title"),
            image_url=select_attr(block, ".listing-block__picture img", "src"),
            detail_url=self.absolutize_url(select_attr(block, ".listing-block__link", "href")),
        )

        price_el = block.select_one(".price")
        if price_el is not None:
            listing.price = select_text(price_el, ".js-priceToChange")
            listing.reference_price = select_attr(price_el, ".js-priceToChange", "data-reference_price")
            listing.reference_currency = select_attr(
                price_el, ".js-priceToChange", "data-reference_currency"
            )
            listing.displayed_currency = select_text(price_el, ".js-currencyToChange")
            listing.price_type = select_text(price_el, ".h3-like.u-bold")
        if not listing.price:
            listing.price = select_text(block, ".listing-block__price")

        for span in block.select(".listing-block__description span"):
            text = span.get_text().strip()
            if "hp" in text:
                listing.hp = text
            elif "Year" in text:
                listing.year = text
            elif "h" in text:
                listing.working_hours = text

        contact = block.select_one(".block--contact-desktop .item-fluid.item-center")
        if contact is not None:
            listing.dealer = select_text(contact, "a.no-under")
            listing.location = select_text(contact, ".u-bold")
        if not listing.dealer:
            listing.dealer = select_text(block, ".listing-block__category")
        if not listing.location:
            listing.location = select_text(block, ".listing-block__localisation")

        phones = [a.get_text().strip() for a in block.select("#js-dropdown-phone-2 li a")]
        listing.phone_numbers = "; ".join(p for p in phones if p)

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

        table = parse_label_value_rows(soup, SPEC_TABLE_ROWS, "td", strip_colon=True)
        detail.attributes.update(table)
        if table:
            detail.fields["summary"] = "; ".join(f"{key}: {value}" for key, value in table.items())
        for label, field in SPEC_FIELD_MAP.items():
            if table.get(label):
                detail.fields[field] = table[label]

        price_block = soup.select_one(".block--all.block--price")
        if price_block is not None:
            detail.fields["price"] = select_first_text(price_block, ".js-priceToChange")
            detail.fields["reference_price"] = select_attr(
                price_block, ".js-priceToChange", "data-reference_price"
            )
            detail.fields["reference_currency"] = select_attr(
                price_block, ".js-priceToChange", "data-reference_currency"
            )
            detail.fields["displayed_currency"] = select_first_text(price_block, ".js-currencyToChange")
            detail.fields["price_type"] = select_first_text(price_block, ".h3-like.u-bold")

        detail.fields["dealer"] = select_first_text(soup, ".block--contact-desktop .u-bold.h3-like.man")
        detail.fields["location"] = select_last_text(soup, ".block--contact-desktop .u-bold")

        phones = [el.get("data-pdisplay", "").strip() for el in soup.select(".js-hi-t")]
        detail.fields["phone_numbers"] = "; ".join(p for p in phones if p)

        self._log_page_parsed("detail", len(detail.attributes))
        return detail


# Create and export Agriaffaires scraper instance
agriaffaires_scraper = AgriaffairesScraper()
