"""
Checkout graph — validate, quote and submit as one computation.

    CheckoutNode ──► ItemsNode ──► ValidationNode ──┐
          │                                         ├──► PayloadNode ──► PlaceOrderNode
          └──────────► ShippingNode ────────────────┘

Validation and the shipping quote run concurrently. Any node may raise
``CheckoutError``; ``place_order`` turns it into ``Error`` and only clears the
cart on ``Ok``.
"""

import logging
from dataclasses import dataclass
from typing import Any, cast

from kungfu import Error, Ok, Result
from combinators import lift as L
from nodnod import EventLoopAgent, Node, Scope, Value, scalar_node

from storecart.cart._controller import CartController
from storecart.cart._ops import Items
from storecart.cart._types import CartSummary
from storecart.cart._validate import ValidationReport, validate
from storecart.checkout._order import (
    CartSummaryOut,
    CheckoutError,
    CheckoutErrorKind,
    OrderConfirmation,
    OrderGateway,
    OrderPayload,
    OrderRejected,
    OrderRequest,
    ShippingAddressOut,
)
from storecart.checkout._shipping import ShippingQuote, quote
from storecart.config import CartSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Checkout:
    """Everything a checkout run reads: a cart snapshot plus collaborators."""

    items: Items
    summary: CartSummary
    request: OrderRequest
    gateway: OrderGateway
    settings: CartSettings = DEFAULT_SETTINGS


@scalar_node
class CheckoutNode:
    """Entry point: wraps the Checkout input."""

    def __init__(self, data: Checkout) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, checkout: Checkout) -> "CheckoutNode":
        return cls(checkout)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart checks
# ═══════════════════════════════════════════════════════════════════════════════


@scalar_node
class ItemsNode:
    def __init__(self, items: Items) -> None:
        self.items = items

    @classmethod
    def __compose__(cls, checkout: CheckoutNode) -> "ItemsNode":
        if not checkout.data.items:
            raise CheckoutError(CheckoutErrorKind.EMPTY_CART, "Cart is empty")
        return cls(checkout.data.items)


@scalar_node
class ValidationNode:
    """Stock/availability check, run once per checkout."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report

    @classmethod
    async def __compose__(cls, items: ItemsNode) -> "ValidationNode":
        report = validate(items.items)
        if not report.is_valid:
            raise CheckoutError(
                CheckoutErrorKind.VALIDATION,
                "; ".join(report.reasons),
                report.problems,
            )
        return cls(report)


@scalar_node
class ShippingNode:
    def __init__(self, quote: ShippingQuote) -> None:
        self.quote = quote

    @classmethod
    async def __compose__(cls, checkout: CheckoutNode) -> "ShippingNode":
        q = quote(checkout.data.request.address.city, settings=checkout.data.settings)
        if not q.available:
            raise CheckoutError(CheckoutErrorKind.SHIPPING_UNAVAILABLE, "City is required")
        return cls(q)


# ═══════════════════════════════════════════════════════════════════════════════
# Submission
# ═══════════════════════════════════════════════════════════════════════════════


@scalar_node
class PayloadNode:
    def __init__(self, payload: OrderPayload) -> None:
        self.payload = payload

    @classmethod
    def __compose__(
        cls,
        checkout: CheckoutNode,
        validation: ValidationNode,
        shipping: ShippingNode,
    ) -> "PayloadNode":
        data = checkout.data
        payload = OrderPayload(
            shipping_address=ShippingAddressOut.from_domain(data.request.address),
            shipping_cost=shipping.quote.fee,
            notes=data.request.notes,
            cart=CartSummaryOut.from_domain(data.summary),
        )
        return cls(payload)


def _rejected(exc: Exception) -> CheckoutError:
    message = exc.message if isinstance(exc, OrderRejected) else str(exc)
    return CheckoutError(CheckoutErrorKind.SUBMISSION, message or "Failed to create order")


@scalar_node
class PlaceOrderNode:
    def __init__(self, data: OrderConfirmation) -> None:
        self.data = data

    @classmethod
    async def __compose__(cls, checkout: CheckoutNode, payload: PayloadNode) -> "PlaceOrderNode":
        gateway = checkout.data.gateway
        submitted = await L.catching_async(
            lambda: gateway.submit(payload.payload),
            on_error=_rejected,
        )
        match submitted:
            case Ok(confirmation):
                return cls(confirmation)
            case Error(err):
                raise err

    @classmethod
    async def execute(cls, checkout: Checkout) -> Result[OrderConfirmation, CheckoutError]:
        """Run the whole graph for one checkout."""
        try:
            result = await _compose(cls, checkout)
            return Ok(result.data)
        except CheckoutError as e:
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════════════════════


async def _compose[T](target: type[T], checkout: Checkout) -> T:
    agent = EventLoopAgent.build({cast(type[Node[Any, Any]], target)})

    async with Scope(detail="checkout") as scope:
        scope.push(Value(Checkout, checkout))
        await agent.run(scope, {})
        return cast(T, scope[target].value)


async def place_order(
    controller: CartController,
    request: OrderRequest,
    gateway: OrderGateway,
    *,
    settings: CartSettings | None = None,
) -> Result[OrderConfirmation, CheckoutError]:
    """
    Place a cash-on-delivery order for the controller's cart.

    On ``Ok`` the cart is cleared. On ``Error`` it is left untouched so the
    shopper can retry; the error message is the service's, verbatim.
    """
    checkout = Checkout(
        items=controller.items,
        summary=controller.summary(),
        request=request,
        gateway=gateway,
        settings=settings or DEFAULT_SETTINGS,
    )

    result = await PlaceOrderNode.execute(checkout)
    match result:
        case Ok(confirmation):
            logger.info("order %s placed, clearing cart", confirmation.order_id)
            await controller.clear_cart()
        case Error(err):
            logger.warning("checkout failed (%s): %s", err.kind.name.lower(), err.message)
    return result


__all__ = (
    "Checkout",
    "CheckoutNode",
    "ItemsNode",
    "ValidationNode",
    "ShippingNode",
    "PayloadNode",
    "PlaceOrderNode",
    "place_order",
)
