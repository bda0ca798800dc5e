"""
Store types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from storecart.cart._ops import Items, Mutation

# ═══════════════════════════════════════════════════════════════════════════════
# CartRepository Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════

class CartRepository(Protocol):
    """
    Persistence backend protocol.

    Implementations raise on failure; ``storecart.store`` lifts every call into
    a ``LazyCoroResult[..., StoreError]`` so callers never see the exception.

    Example:
        class RedisCartStore:
            def __init__(self, client: Redis, key: str) -> None:
                self.client = client
                self.key = key

            @property
            def name(self) -> str:
                return "redis"

            async def load(self) -> Items:
                raw = await self.client.get(self.key)
                return decode_items(raw) if raw else ()

            async def save(self, items: Items) -> None:
                await self.client.set(self.key, encode_items(items))

            async def commit(self, mutation: Mutation, current: Items) -> Items:
                items = mutation.apply(await self.load())
                await self.save(items)
                return items
    """

    @property
    def name(self) -> str:
        """Backend name for logs."""
        ...

    async def load(self) -> Items:
        """Read the full item list."""
        ...

    async def save(self, items: Items) -> None:
        """Replace the stored list."""
        ...

    async def commit(self, mutation: Mutation, current: Items) -> Items:
        """
        Apply one mutation and return the full resulting list.

        ``current`` is the caller's list before the mutation; backends that
        own their state may ignore it.
        """
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════

class StoreErrorKind(Enum):
    """Store error kinds."""
    UNAVAILABLE = auto()
    TIMEOUT = auto()
    REJECTED = auto()
    CORRUPT = auto()


@dataclass(frozen=True, slots=True)
class StoreError:
    """Store operation error."""
    kind: StoreErrorKind
    store: str
    message: str

    def __str__(self) -> str:
        return f"[{self.store}] {self.kind.name.lower()}: {self.message}"


class StoreFailure(Exception):
    """Raised by backends that already know the error kind."""

    def __init__(self, kind: StoreErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CartRepository",
    "StoreErrorKind",
    "StoreError",
    "StoreFailure",
)
