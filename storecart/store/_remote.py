"""
Remote store — the server-authoritative per-account cart over HTTP.

Every mutating call returns the server's full item list; that list, not the
caller's optimistic copy, becomes the session's state.

    GET    /cart                 -> {success, data: {items}}
    POST   /cart                 {productId, quantity, weightOption?}
    PATCH  /cart/{productId}     {quantity, weightOption?}
    DELETE /cart/{productId}     ?grams=<variant grams>
    DELETE /cart
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from storecart.cart._ops import AddLine, ClearLines, Items, Mutation, RemoveLine, SetQuantity
from storecart.cart._types import WeightVariant
from storecart.config import CartSettings, DEFAULT_SETTINGS
from storecart.store._codec import CartResponse, WeightOptionIn
from storecart.store._types import StoreErrorKind, StoreFailure

logger = logging.getLogger(__name__)


def _weight_option(variant: WeightVariant | None) -> dict[str, Any] | None:
    if variant is None:
        return None
    return WeightOptionIn.from_domain(variant).model_dump(mode="json", by_alias=True)


def _handle_response(response: httpx.Response) -> Items:
    """Decode the envelope; 5xx raise, ``success: false`` and 4xx are rejections."""
    if response.status_code >= 500:
        response.raise_for_status()

    envelope = CartResponse.model_validate_json(response.content)

    if response.is_error or not envelope.success:
        raise StoreFailure(
            StoreErrorKind.REJECTED,
            envelope.message or f"HTTP {response.status_code}",
        )

    return envelope.to_domain()


class RemoteCartStore:
    """
    Cart API client.

    Example:
        async with httpx.AsyncClient(base_url=url, headers=auth) as client:
            remote = RemoteCartStore(client)
            items = await remote.load()
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: CartSettings = DEFAULT_SETTINGS,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RemoteCartStore:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
            headers=headers,
            transport=transport,
        )
        return cls(client)

    @property
    def name(self) -> str:
        return "remote"

    async def aclose(self) -> None:
        await self._client.aclose()

    # ─────────────────────────────────────────────────────────────────────────
    # Repository protocol
    # ─────────────────────────────────────────────────────────────────────────

    async def load(self) -> Items:
        return _handle_response(await self._client.get("/cart"))

    async def save(self, items: Items) -> None:
        """Replace the server cart: clear, then re-add every line."""
        await self._clear()
        for item in items:
            await self._add(AddLine(item.product, item.quantity, item.variant))
        logger.debug("pushed %d line(s) to remote cart", len(items))

    async def commit(self, mutation: Mutation, current: Items) -> Items:
        match mutation:
            case AddLine():
                return await self._add(mutation)
            case SetQuantity() if mutation.removes:
                return await self._remove(RemoveLine(mutation.product_id, mutation.variant))
            case SetQuantity():
                return await self._set_quantity(mutation)
            case RemoveLine():
                return await self._remove(mutation)
            case ClearLines():
                return await self._clear()

    # ─────────────────────────────────────────────────────────────────────────
    # Endpoints
    # ─────────────────────────────────────────────────────────────────────────

    async def _add(self, op: AddLine) -> Items:
        body: dict[str, Any] = {"productId": op.product.id, "quantity": op.quantity}
        if (option := _weight_option(op.variant)) is not None:
            body["weightOption"] = option
        return _handle_response(await self._client.post("/cart", json=body))

    async def _set_quantity(self, op: SetQuantity) -> Items:
        body: dict[str, Any] = {"quantity": op.quantity}
        if (option := _weight_option(op.variant)) is not None:
            body["weightOption"] = option
        return _handle_response(await self._client.patch(f"/cart/{op.product_id}", json=body))

    async def _remove(self, op: RemoveLine) -> Items:
        params = {"grams": op.variant.grams} if op.variant is not None else None
        return _handle_response(await self._client.delete(f"/cart/{op.product_id}", params=params))

    async def _clear(self) -> Items:
        _handle_response(await self._client.delete("/cart"))
        return ()


__all__ = ("RemoteCartStore",)
