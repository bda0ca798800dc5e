"""Shared fixtures: a small nut-shop catalog and fake backends."""

import json
from decimal import Decimal

import httpx
import pytest

from storecart.cart import (
    AddLine,
    ClearLines,
    InventoryRecord,
    Product,
    RemoveLine,
    SetQuantity,
)
from storecart.catalog import weight_options
from storecart.store import LineItemIn

API = "http://shop.test/api"


@pytest.fixture
def almonds():
    """Weight-priced product: 250g / 500g / 1kg variants."""
    return Product(
        id="p-almond",
        name="Almonds",
        price=Decimal("400"),
        weight_options=weight_options(Decimal("400")),
        category="nuts",
        tags=("raw", "protein"),
        image="/img/almonds.jpg",
    )


@pytest.fixture
def dates():
    """Plain unit-priced product with tracked stock."""
    return Product(
        id="p-dates",
        name="Medjool Dates",
        price=Decimal("49.99"),
        inventory=InventoryRecord(track_quantity=True, quantity=3),
        category="dried-fruit",
        tags=("sweet",),
    )


@pytest.fixture
def honey():
    return Product(id="p-honey", name="Honey", price=Decimal("25.00"), category="pantry")


@pytest.fixture
def retired():
    """Product that has been switched off in the catalog."""
    return Product(id="p-retired", name="Old Mix", price=Decimal("10"), is_active=False)


@pytest.fixture
def catalog(almonds, dates, honey):
    return {p.id: p for p in (almonds, dates, honey)}


class FakeCartServer:
    """In-process cart API speaking the remote store's wire format."""

    def __init__(self, catalog, *, fail_with=None):
        self.catalog = catalog
        self.items = ()
        self.fail_with = fail_with
        self.requests = []

    def _envelope(self):
        return {
            "success": True,
            "data": {
                "items": [
                    LineItemIn.from_domain(item).model_dump(mode="json", by_alias=True)
                    for item in self.items
                ]
            },
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))

        if self.fail_with == "timeout":
            raise httpx.ReadTimeout("upstream too slow", request=request)
        if self.fail_with == "connect":
            raise httpx.ConnectError("connection refused", request=request)
        if isinstance(self.fail_with, int):
            return httpx.Response(self.fail_with, json={"success": False, "message": "down"})

        path = request.url.path.removeprefix("/api")
        body = json.loads(request.content) if request.content else {}

        match request.method, path.strip("/").split("/"):
            case "GET", ["cart"]:
                pass
            case "POST", ["cart"]:
                product = self.catalog[body["productId"]]
                option = body.get("weightOption")
                variant = product.variant(option["grams"]) if option else None
                self.items = AddLine(product, body.get("quantity", 1), variant).apply(self.items)
            case "PATCH", ["cart", product_id]:
                option = body.get("weightOption")
                variant = self.catalog[product_id].variant(option["grams"]) if option else None
                self.items = SetQuantity(product_id, body["quantity"], variant).apply(self.items)
            case "DELETE", ["cart", product_id]:
                grams = request.url.params.get("grams")
                variant = self.catalog[product_id].variant(int(grams)) if grams else None
                self.items = RemoveLine(product_id, variant).apply(self.items)
            case "DELETE", ["cart"]:
                self.items = ClearLines().apply(self.items)
            case _:
                return httpx.Response(404, json={"success": False, "message": "Not found"})

        return httpx.Response(200, json=self._envelope())


class BrokenStore:
    """Repository whose every call raises, as a dead network would."""

    def __init__(self, name="remote"):
        self._name = name
        self.calls = 0

    @property
    def name(self):
        return self._name

    async def load(self):
        self.calls += 1
        raise httpx.ConnectError("connection refused")

    async def save(self, items):
        self.calls += 1
        raise httpx.ConnectError("connection refused")

    async def commit(self, mutation, current):
        self.calls += 1
        raise httpx.ConnectError("connection refused")


@pytest.fixture
def server(catalog):
    return FakeCartServer(catalog)


def make_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=API, transport=httpx.MockTransport(handler))


@pytest.fixture
def variants(almonds):
    """(250g, 500g, 1kg) variants of the almonds product."""
    by_grams = {v.grams: v for v in almonds.weight_options}
    return by_grams[250], by_grams[500], by_grams[1000]

