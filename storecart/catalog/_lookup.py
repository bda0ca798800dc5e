"""
Catalog lookup — the read-only product source the cart consults.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from storecart._types import ProductId
from storecart.cart._types import Product


class CatalogLookup(Protocol):
    def get_product(self, product_id: ProductId) -> Product | None: ...


class InMemoryCatalog:
    """
    Dict-backed catalog.

    Example:
        catalog = InMemoryCatalog([almonds, cashews])
        report = validate_against(controller.items, catalog.get_product)
    """

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products = {p.id: p for p in products}

    def get_product(self, product_id: ProductId) -> Product | None:
        return self._products.get(product_id)

    def put(self, product: Product) -> None:
        self._products[product.id] = product

    def remove(self, product_id: ProductId) -> None:
        self._products.pop(product_id, None)

    def products(self) -> tuple[Product, ...]:
        return tuple(self._products.values())


__all__ = ("CatalogLookup", "InMemoryCatalog")
