import pytest

from catalog import (
    CatalogFilters,
    badges,
    featured_products,
    filter_products,
    related_products,
    sort_products,
    stock_status,
    team_options,
    vendor_id,
    vendor_name,
)


@pytest.mark.parametrize("stock,expected", [(21, "in stock"), (20, "limited"), (6, "limited"), (5, "low"), (4, "low"), (0, "low"), (None, "low")])
def test_stock_status(stock, expected):
    assert stock_status(stock) == expected


def ids(products):
    return [p["id"] for p in products]


def test_no_filters_keeps_everything_in_order(products):
    assert ids(filter_products(products, CatalogFilters())) == ["a", "b", "c"]


def test_facets_intersect(products):
    assert ids(filter_products(products, CatalogFilters(channel=["official"]))) == ["a", "c"]
    assert ids(filter_products(products, CatalogFilters(channel=["official"], team=["McLaren"]))) == ["c"]
    assert ids(filter_products(products, CatalogFilters(channel=["creator"], category=["apparel"]))) == []
    assert ids(filter_products(products, CatalogFilters(category=["art", "accessories"]))) == ["a", "b"]


def test_price_bands():
    items = [{"id": str(price), "price": price} for price in (10, 50, 75, 100, 150, 200, 300)]
    assert ids(filter_products(items, CatalogFilters(price="0-50"))) == ["10", "50"]
    assert ids(filter_products(items, CatalogFilters(price="50-100"))) == ["50", "75", "100"]
    assert ids(filter_products(items, CatalogFilters(price="100-200"))) == ["100", "150", "200"]
    assert ids(filter_products(items, CatalogFilters(price="200+"))) == ["200", "300"]


def test_sorting(products):
    assert ids(sort_products(products, "price-low")) == ["b", "a", "c"]
    assert ids(sort_products(products, "price-high")) == ["c", "a", "b"]
    assert ids(sort_products(products)) == ["a", "c", "b"]
    assert ids(products) == ["a", "b", "c"]


def test_newest_treats_missing_release_date_as_earliest(products):
    products[0]["release_date"] = "2024-01-10"
    products[2]["release_date"] = "2024-05-01"
    assert ids(sort_products(products, "newest")) == ["c", "a", "b"]


def test_badges_and_vendor(products):
    official, creator = products[0], products[1]
    official["badges"] = ["official", "new", "limited"]
    assert badges(official) == ["Official", "Limited", "New"]
    assert badges(creator) == ["Creator"]
    assert vendor_name(official) == "Ferrari"
    assert vendor_name(creator) == "Apex Studio"
    assert vendor_id({"vendor_type": "official", "team": "Red Bull"}) == "red-bull-official"
    assert vendor_id(creator) == "apex-studio"
    assert vendor_id({"vendor_type": "creator"}) == "creator"


def test_team_options_and_related(products):
    products.append({"id": "d", "team": "Ferrari", "category": "apparel"})
    assert team_options(products) == ["Ferrari", "McLaren"]
    assert ids(related_products(products, products[0])) == ["d"]
    assert ids(related_products(products, products[2])) == ["d"]
    assert ids(featured_products(products, limit=2)) == ["a", "b"]
