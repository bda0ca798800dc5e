"""
Wire codec — pydantic models in the cart API's field names.

The same models encode the local JSON payload and decode remote responses,
so a list written by either backend reads back the same way.

    payload = encode_items(items)          # -> JSON str
    items = decode_items(payload)          # -> tuple[LineItem, ...]
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from storecart.cart._ops import Items
from storecart.cart._types import InventoryRecord, LineItem, Product, WeightVariant


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════

class WeightOptionIn(_Wire):
    label: str = ""
    grams: int
    price: Decimal = Decimal("0")

    def to_domain(self) -> WeightVariant:
        return WeightVariant(label=self.label, grams=self.grams, price=self.price)

    @classmethod
    def from_domain(cls, dom: WeightVariant) -> WeightOptionIn:
        return cls(label=dom.label, grams=dom.grams, price=dom.price)


class InventoryIn(_Wire):
    track_quantity: bool = Field(default=False, alias="trackQuantity")
    quantity: int = 0

    def to_domain(self) -> InventoryRecord:
        return InventoryRecord(track_quantity=self.track_quantity, quantity=self.quantity)

    @classmethod
    def from_domain(cls, dom: InventoryRecord) -> InventoryIn:
        return cls(track_quantity=dom.track_quantity, quantity=dom.quantity)


class ProductIn(_Wire):
    id: str = Field(alias="_id")
    name: str = ""
    price: Decimal = Decimal("0")
    is_active: bool = Field(default=True, alias="isActive")
    inventory: InventoryIn | None = None
    weight_options: list[WeightOptionIn] = Field(default_factory=list, alias="weightOptions")
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    image: str | None = None

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.price,
            is_active=self.is_active,
            inventory=self.inventory.to_domain() if self.inventory else None,
            weight_options=tuple(o.to_domain() for o in self.weight_options),
            category=self.category,
            tags=tuple(self.tags),
            image=self.image,
        )

    @classmethod
    def from_domain(cls, dom: Product) -> ProductIn:
        return cls(
            id=dom.id,
            name=dom.name,
            price=dom.price,
            is_active=dom.is_active,
            inventory=InventoryIn.from_domain(dom.inventory) if dom.inventory else None,
            weight_options=[WeightOptionIn.from_domain(o) for o in dom.weight_options],
            category=dom.category,
            tags=list(dom.tags),
            image=dom.image,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════

class LineItemIn(_Wire):
    product: ProductIn
    quantity: int = Field(ge=1)
    price: Decimal | None = None
    weight_option: WeightOptionIn | None = Field(default=None, alias="weightOption")
    added_at: datetime | None = Field(default=None, alias="addedAt")

    def to_domain(self) -> LineItem:
        item = LineItem(
            product=self.product.to_domain(),
            quantity=self.quantity,
            price=self.price,
            variant=self.weight_option.to_domain() if self.weight_option else None,
        )
        return item if self.added_at is None else replace(item, added_at=self.added_at)

    @classmethod
    def from_domain(cls, dom: LineItem) -> LineItemIn:
        return cls(
            product=ProductIn.from_domain(dom.product),
            quantity=dom.quantity,
            price=dom.price,
            weight_option=WeightOptionIn.from_domain(dom.variant) if dom.variant else None,
            added_at=dom.added_at,
        )


class CartData(_Wire):
    items: list[LineItemIn] = Field(default_factory=list)

    def to_domain(self) -> Items:
        return tuple(item.to_domain() for item in self.items)


class CartResponse(_Wire):
    """``{success, message?, data: {items: [...]}}`` envelope of the cart API."""
    success: bool = True
    message: str | None = None
    data: CartData | None = None

    def to_domain(self) -> Items:
        return self.data.to_domain() if self.data else ()


_items_adapter = TypeAdapter(list[LineItemIn])


def encode_items(items: Items) -> str:
    wire = [LineItemIn.from_domain(item) for item in items]
    return _items_adapter.dump_json(wire, by_alias=True).decode()


def decode_items(payload: str | bytes) -> Items:
    """Parse a stored list. Raises ``pydantic.ValidationError`` on garbage."""
    return tuple(item.to_domain() for item in _items_adapter.validate_json(payload))


__all__ = (
    "WeightOptionIn",
    "InventoryIn",
    "ProductIn",
    "LineItemIn",
    "CartData",
    "CartResponse",
    "encode_items",
    "decode_items",
)
