"""
Order submission — cash-on-delivery orders against the checkout service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field

from storecart._types import Money
from storecart.cart._types import CartSummary
from storecart.cart._validate import ValidationProblem
from storecart.store._codec import WeightOptionIn

logger = logging.getLogger(__name__)

PAYMENT_METHOD = "cash_on_delivery"
DEFAULT_NOTES = "Payment Method: Cash on Delivery"
DEFAULT_FAILURE = "Failed to create order"

# ═══════════════════════════════════════════════════════════════════════════════
# Domain
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ShippingAddress:
    full_name: str
    email: str
    phone: str
    street: str
    city: str
    zip_code: str
    country: str = "Egypt"


@dataclass(frozen=True, slots=True)
class OrderRequest:
    address: ShippingAddress
    notes: str = DEFAULT_NOTES


@dataclass(frozen=True, slots=True)
class OrderConfirmation:
    order_id: str
    order_number: str | None
    total: Money | None
    shipping_cost: Money | None
    status: str | None = None


class CheckoutErrorKind(Enum):
    EMPTY_CART = auto()
    VALIDATION = auto()
    SHIPPING_UNAVAILABLE = auto()
    SUBMISSION = auto()


class CheckoutError(Exception):
    def __init__(
        self,
        kind: CheckoutErrorKind,
        message: str,
        problems: tuple[ValidationProblem, ...] = (),
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.problems = problems


class OrderRejected(Exception):
    """The checkout service refused the order; ``message`` is shown as is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ═══════════════════════════════════════════════════════════════════════════════
# Wire
# ═══════════════════════════════════════════════════════════════════════════════


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ShippingAddressOut(_Wire):
    full_name: str = Field(alias="fullName")
    email: str
    phone: str
    street: str
    city: str
    zip_code: str = Field(alias="zipCode")
    country: str

    @classmethod
    def from_domain(cls, dom: ShippingAddress) -> ShippingAddressOut:
        return cls(
            full_name=dom.full_name,
            email=dom.email,
            phone=dom.phone,
            street=dom.street,
            city=dom.city,
            zip_code=dom.zip_code,
            country=dom.country,
        )


class OrderLineOut(_Wire):
    product: str
    name: str
    price: Decimal
    quantity: int
    image: str = ""
    weight_option: WeightOptionIn | None = Field(default=None, alias="weightOption")


class PricingOut(_Wire):
    items_price: Decimal = Field(alias="itemsPrice")
    tax_price: Decimal = Field(alias="taxPrice")
    shipping_price: Decimal = Field(alias="shippingPrice")
    total_price: Decimal = Field(alias="totalPrice")


class CartSummaryOut(_Wire):
    items: list[OrderLineOut]
    pricing: PricingOut

    @classmethod
    def from_domain(cls, dom: CartSummary) -> CartSummaryOut:
        return cls(
            items=[
                OrderLineOut(
                    product=line.product_id,
                    name=line.name,
                    price=line.price,
                    quantity=line.quantity,
                    image=line.image or "",
                    weight_option=WeightOptionIn.from_domain(line.weight_option)
                    if line.weight_option
                    else None,
                )
                for line in dom.lines
            ],
            pricing=PricingOut(
                items_price=dom.items_price,
                tax_price=dom.tax_price,
                shipping_price=dom.shipping_price,
                total_price=dom.total_price,
            ),
        )


class OrderPayload(_Wire):
    """Body of ``POST /checkout``."""
    shipping_address: ShippingAddressOut = Field(alias="shippingAddress")
    payment_method: str = Field(default=PAYMENT_METHOD, alias="paymentMethod")
    shipping_cost: Decimal = Field(alias="shippingCost")
    notes: str = DEFAULT_NOTES
    cart: CartSummaryOut

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class OrderOut(_Wire):
    id: str = Field(alias="_id")
    order_number: str | None = Field(default=None, alias="orderNumber")
    total: Decimal | None = None
    shipping_cost: Decimal | None = Field(default=None, alias="shippingCost")
    order_status: str | None = Field(default=None, alias="orderStatus")

    def to_domain(self) -> OrderConfirmation:
        return OrderConfirmation(
            order_id=self.id,
            order_number=self.order_number,
            total=self.total,
            shipping_cost=self.shipping_cost,
            status=self.order_status,
        )


class OrderData(_Wire):
    order: OrderOut


class OrderResponse(_Wire):
    success: bool = False
    message: str | None = None
    data: OrderData | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Gateway
# ═══════════════════════════════════════════════════════════════════════════════


class OrderGateway(Protocol):
    """
    Checkout service protocol.

    ``submit`` raises ``OrderRejected`` (or any exception) on failure.
    """

    async def submit(self, payload: OrderPayload) -> OrderConfirmation: ...


class HttpOrderGateway:
    """
    ``POST /checkout`` over httpx.

    Example:
        async with httpx.AsyncClient(base_url=url, headers=auth) as client:
            gateway = HttpOrderGateway(client)
    """

    def __init__(self, client: httpx.AsyncClient, path: str = "/checkout") -> None:
        self._client = client
        self._path = path

    async def submit(self, payload: OrderPayload) -> OrderConfirmation:
        try:
            response = await self._client.post(self._path, json=payload.to_json())
        except httpx.HTTPError as e:
            raise OrderRejected(str(e) or DEFAULT_FAILURE) from e

        try:
            envelope = OrderResponse.model_validate_json(response.content)
        except ValueError:
            raise OrderRejected(f"{DEFAULT_FAILURE} (HTTP {response.status_code})") from None

        if response.is_error or not envelope.success or envelope.data is None:
            raise OrderRejected(envelope.message or DEFAULT_FAILURE)

        confirmation = envelope.data.order.to_domain()
        logger.info("order %s accepted", confirmation.order_number or confirmation.order_id)
        return confirmation


__all__ = (
    "PAYMENT_METHOD",
    "ShippingAddress",
    "OrderRequest",
    "OrderConfirmation",
    "CheckoutErrorKind",
    "CheckoutError",
    "OrderRejected",
    "ShippingAddressOut",
    "CartSummaryOut",
    "OrderPayload",
    "OrderResponse",
    "OrderGateway",
    "HttpOrderGateway",
)
