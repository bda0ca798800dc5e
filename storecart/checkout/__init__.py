"""
Checkout — zone-table shipping and cash-on-delivery order placement.

    from storecart import checkout as CO

    CO.shipping_fee("Giza")                       # Decimal("70")
    result = await CO.place_order(controller, request, gateway)
"""

from __future__ import annotations

from storecart.checkout._shipping import ShippingQuote, shipping_fee, quote
from storecart.checkout._order import (
    PAYMENT_METHOD,
    ShippingAddress,
    OrderRequest,
    OrderConfirmation,
    CheckoutErrorKind,
    CheckoutError,
    OrderRejected,
    OrderPayload,
    OrderResponse,
    OrderGateway,
    HttpOrderGateway,
)
from storecart.checkout._graph import (
    Checkout,
    CheckoutNode,
    ItemsNode,
    ValidationNode,
    ShippingNode,
    PayloadNode,
    PlaceOrderNode,
    place_order,
)

__all__ = (
    "ShippingQuote",
    "shipping_fee",
    "quote",
    "PAYMENT_METHOD",
    "ShippingAddress",
    "OrderRequest",
    "OrderConfirmation",
    "CheckoutErrorKind",
    "CheckoutError",
    "OrderRejected",
    "OrderPayload",
    "OrderResponse",
    "OrderGateway",
    "HttpOrderGateway",
    "Checkout",
    "CheckoutNode",
    "ItemsNode",
    "ValidationNode",
    "ShippingNode",
    "PayloadNode",
    "PlaceOrderNode",
    "place_order",
)
