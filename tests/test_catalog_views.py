"""Tests for the discovery feed and seller views."""
from datetime import datetime, timedelta

from bson import ObjectId

from suq.services.catalog_views import discover, sales_stats, seller_listings, seller_sales

SELLER = ObjectId("507f1f77bcf86cd799439011")
OTHER = ObjectId("65a1f0c2e4b0a1b2c3d4e5f6")
START = datetime(2025, 1, 1)


def product(name, price=10.0, status="available", seller=SELLER, age_days=0):
    return {
        "_id": ObjectId(),
        "name": name,
        "price": price,
        "status": status,
        "sellerId": seller,
        "createdAt": START - timedelta(days=age_days),
    }


def test_discover_orders_and_filters():
    products = [
        product("old", price=300, age_days=5),
        product("new", price=20, age_days=0),
        product("sold", price=999, status="sold", age_days=1),
        product("reserved", status="reserved", age_days=3),
    ]

    feed = discover(products)

    assert [p["name"] for p in feed["newArrivals"]] == ["new", "sold", "reserved", "old"]
    assert [p["name"] for p in feed["topRanked"]] == ["old", "new"]
    assert [p["name"] for p in feed["topSellers"]] == ["sold", "reserved"]


def test_discover_limits_each_list():
    products = [product(f"p{i}", price=i, age_days=i) for i in range(10)]

    feed = discover(products)

    assert len(feed["newArrivals"]) == 6
    assert len(feed["topRanked"]) == 6
    assert feed["topRanked"][0]["name"] == "p9"
    assert feed["topSellers"] == []


def test_seller_listings_match_text_and_object_ids():
    legacy = {**product("legacy"), "sellerId": str(SELLER)}
    products = [product("mine"), product("theirs", seller=OTHER), legacy]

    names = [p["name"] for p in seller_listings(products, str(SELLER))]

    assert names == ["mine", "legacy"]


def test_seller_sales_and_stats():
    products = [
        product("listed"),
        product("sold-1", price=100, status="sold"),
        product("sold-2", price=50.5, status="sold"),
        product("held", price=70, status="reserved"),
        product("other", price=1000, status="sold", seller=OTHER),
    ]

    sales = seller_sales(products, SELLER)

    assert [p["name"] for p in sales] == ["sold-1", "sold-2", "held"]
    assert sales_stats(sales) == {"soldCount": 2, "reservedCount": 1, "revenue": 150.5}


def test_sales_stats_empty():
    assert sales_stats([]) == {"soldCount": 0, "reservedCount": 0, "revenue": 0}
