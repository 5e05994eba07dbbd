"""Tests for the Agriaffaires and Landwirt site scrapers.

This module contains tests for the scrapers that:
- Build paginated index URLs for each site
- Extract listing summaries from index page markup
- Extract descriptions, fixed fields and dynamic attributes from detail pages
- Route URLs to the right scraper through the registry
"""

from agriscrape.scrapers import agriaffaires_scraper, landwirt_scraper, scraper_registry
from agriscrape.scrapers.base import make_soup, parse_label_value_rows, with_query_param
from pages import (
    AGRIAFFAIRES_DETAIL_HTML,
    AGRIAFFAIRES_INDEX_HTML,
    AGRIAFFAIRES_START,
    EMPTY_INDEX_HTML,
    LANDWIRT_DETAIL_HTML,
    LANDWIRT_INDEX_HTML,
    LANDWIRT_START,
)


def test_agriaffaires_page_url():
    """Test page-number pagination."""
    assert agriaffaires_scraper.page_url(AGRIAFFAIRES_START, 1) == f"{AGRIAFFAIRES_START}?page=1"
    assert agriaffaires_scraper.page_url(AGRIAFFAIRES_START, 7) == f"{AGRIAFFAIRES_START}?page=7"


def test_landwirt_page_url():
    """Test offset pagination in steps of twenty."""
    assert landwirt_scraper.page_url(LANDWIRT_START, 1) == f"{LANDWIRT_START}?offset=0"
    assert landwirt_scraper.page_url(LANDWIRT_START, 3) == f"{LANDWIRT_START}?offset=40"


def test_with_query_param_replaces_existing_value():
    """Test that an existing pagination parameter is replaced, others kept."""
    url = with_query_param("https://example.com/list.html?sort=price&page=4", "page", 5)
    assert url == "https://example.com/list.html?sort=price&page=5"


def test_agriaffaires_index_page():
    """Test summary extraction from an Agriaffaires index page."""
    page = agriaffaires_scraper.parse_listing_page(AGRIAFFAIRES_INDEX_HTML)

    assert page.has_next is True
    assert len(page.listings) == 2

    first, second = page.listings
    assert first.title == "Fordson Major"
    assert first.detail_url == "https://www.agriaffaires.co.uk/used/farm-tractor/44698339/fordson-major.html"
    assert first.image_url == "https://img.agriaffaires.com/1.jpg"
    assert first.price == "4,500"
    assert first.reference_price == "4500"
    assert first.reference_currency == "GBP"
    assert first.displayed_currency == "£"
    assert first.price_type == "excl. VAT"
    assert first.hp == "45 hp"
    assert first.year == "Year 1956"
    assert first.working_hours == "3200 h"
    assert first.dealer == "Smith Tractors"
    assert first.location == "Devon"
    assert first.phone_numbers == "01234 567890; 07700 900123"
    assert first.attributes == {}

    # Block without price or contact markup falls back to the plain fields
    assert second.title == "Fordson Super Major"
    assert second.detail_url == "https://www.agriaffaires.co.uk/used/farm-tractor/555/fordson-super-major.html"
    assert second.price == "3,000 £"
    assert second.dealer == "Farm tractor"
    assert second.location == "Yorkshire"
    assert second.phone_numbers == ""
    assert second.reference_price == ""


def test_agriaffaires_detail_page():
    """Test detail extraction from an Agriaffaires classified page."""
    detail = agriaffaires_scraper.parse_detail_page(AGRIAFFAIRES_DETAIL_HTML)

    assert detail.description == "Good runner, new tyres."
    assert detail.attributes == {
        "Equipment: Front loader": "Yes",
        "Equipment: PTO": "Yes",
        "Spec: Condition": "Good",
        "Make": "Fordson",
        "Power": "45 hp",
    }
    assert detail.fields["hp"] == "45 hp"
    assert detail.fields["summary"] == "Make: Fordson; Power: 45 hp"
    assert detail.fields["price"] == "4,500"
    assert detail.fields["reference_currency"] == "GBP"
    assert detail.fields["dealer"] == "Smith Tractors Ltd"
    assert detail.fields["location"] == "Exeter, Devon"
    assert detail.fields["phone_numbers"] == "01234 567890"


def test_landwirt_index_page():
    """Test summary extraction from a Landwirt result list."""
    page = landwirt_scraper.parse_listing_page(LANDWIRT_INDEX_HTML)

    assert page.has_next is False
    assert len(page.listings) == 2

    first, second = page.listings
    assert first.title == "McCormick X7.670"
    assert first.detail_url == "https://www.landwirt.com/en/used-farm-machinery/123/mccormick-x7.html"
    assert first.price == "€ 98,000"
    assert first.original_price == "€ 105,000"
    assert first.price_excl_vat == "€ 81,667 excl. VAT"
    assert first.image_url == "https://www.landwirt.com/img/1.jpg"
    assert first.summary == "Front linkage, air brakes"
    assert first.hp == "175/129"
    assert first.year == "2019"
    assert first.working_hours == "2,100"
    assert first.dealer == "Agrar GmbH"
    assert first.location == "Austria"

    assert second.price == "€ 40,000"
    # Address with extra dashes cannot be split reliably
    assert second.dealer == ""
    assert second.location == ""


def test_landwirt_detail_page():
    """Test detail extraction from a Landwirt listing page."""
    detail = landwirt_scraper.parse_detail_page(LANDWIRT_DETAIL_HTML)

    assert detail.description == "Well maintained, always shedded."
    assert detail.attributes == {
        "Equipment: Air conditioning": "Yes",
        "Equipment: Front PTO": "Yes",
        "Spec: Transmission": "Powershift",
    }
    assert detail.fields == {}


def test_empty_index_page_has_no_listings():
    """Test that a page without listing markup parses to nothing."""
    assert agriaffaires_scraper.parse_listing_page(EMPTY_INDEX_HTML).listings == []
    assert landwirt_scraper.parse_listing_page(EMPTY_INDEX_HTML).listings == []


def test_parsing_is_deterministic():
    """Test that repeated parses of the same markup give identical records."""
    first = agriaffaires_scraper.parse_listing_page(AGRIAFFAIRES_INDEX_HTML)
    second = agriaffaires_scraper.parse_listing_page(AGRIAFFAIRES_INDEX_HTML)
    assert first == second


def test_parse_label_value_rows_skips_incomplete_rows():
    """Test first/last cell pairing and skipping of empty keys or values."""
    soup = make_soup(
        "<table>"
        "<tr><td> Make: </td><td>ignored</td><td> Fordson </td></tr>"
        "<tr><td>Model</td></tr>"
        "<tr><td>Status</td><td>  </td></tr>"
        "<tr><td></td><td>value</td></tr>"
        "</table>"
    )

    rows = parse_label_value_rows(soup, "tr", "td", strip_colon=True)

    # A single-cell row pairs the cell with itself
    assert rows == {"Make": "Fordson", "Model": "Model"}


def test_registry_routes_by_host():
    """Test URL routing through the scraper registry."""
    assert scraper_registry.get_scraper_for_url(AGRIAFFAIRES_START) is agriaffaires_scraper
    assert scraper_registry.get_scraper_for_url("https://agriaffaires.co.uk/x") is agriaffaires_scraper
    assert scraper_registry.get_scraper_for_url(LANDWIRT_START) is landwirt_scraper
    assert scraper_registry.get_scraper_for_url("https://example.com/tractors") is None
    assert set(scraper_registry.get_all_sites()) == {"agriaffaires", "landwirt"}
