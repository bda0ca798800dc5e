"""
Local stores — durable-per-device SQLite table and an in-process dict.

Both are always available: the controller falls back to them whenever the
remote store errors, so a failing local store only ever costs durability.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pydantic
from sqlalchemy import DateTime, String, Text, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from storecart.cart._ops import Items, Mutation
from storecart.config import CartSettings, DEFAULT_SETTINGS
from storecart.store._codec import decode_items, encode_items

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class CartRow(Base):
    """One JSON-encoded item list per storage key."""

    __tablename__ = "cart_storage"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create database and return (session_factory, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


async def open_local_store(
    settings: CartSettings = DEFAULT_SETTINGS,
) -> tuple[LocalCartStore, AsyncEngine]:
    """Create the database at ``settings.local_db_url`` and return (store, engine)."""
    session_factory, engine = await create_database(settings.local_db_url)
    return LocalCartStore.from_settings(session_factory, settings), engine


# ═══════════════════════════════════════════════════════════════════════════════
# LocalCartStore — SQLAlchemy
# ═══════════════════════════════════════════════════════════════════════════════


class LocalCartStore:
    """
    Device-local cart persisted in a key/JSON table.

    An unreadable payload loads as an empty cart (logged at error level); the
    next save overwrites it.

    Example:
        session_factory, engine = await create_database("sqlite+aiosqlite:///cart.db")
        local = LocalCartStore(session_factory, key="cart_items")
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        key: str = "cart_items",
    ) -> None:
        self._session_factory = session_factory
        self._key = key

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        settings: CartSettings = DEFAULT_SETTINGS,
    ) -> LocalCartStore:
        return cls(session_factory, key=settings.storage_key)

    @property
    def name(self) -> str:
        return "local"

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> Items:
        async with self._session_factory() as session:
            row = await session.scalar(select(CartRow).where(CartRow.key == self._key))

        if row is None:
            return ()

        try:
            return decode_items(row.payload)
        except pydantic.ValidationError as e:
            logger.error("Error reading %r from local store: %s", self._key, e)
            return ()

    async def save(self, items: Items) -> None:
        payload = encode_items(items)
        now = datetime.now(timezone.utc)

        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(CartRow, self._key)
                if row is None:
                    session.add(CartRow(key=self._key, payload=payload, updated_at=now))
                else:
                    row.payload = payload
                    row.updated_at = now

        logger.debug("saved %d line(s) under %r", len(items), self._key)

    async def commit(self, mutation: Mutation, current: Items) -> Items:
        # stored copy may predate a remote session; apply to the caller's list
        items = mutation.apply(current)
        await self.save(items)
        return items


# ═══════════════════════════════════════════════════════════════════════════════
# MemoryCartStore — in-process
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryCartStore:
    """
    In-memory cart store.

    Example:
        store = MemoryCartStore()
        controller = CartController(store)
    """

    def __init__(self, items: Items = ()) -> None:
        self._items: Items = tuple(items)
        self.saves = 0

    @property
    def name(self) -> str:
        return "memory"

    @property
    def items(self) -> Items:
        return self._items

    async def load(self) -> Items:
        return self._items

    async def save(self, items: Items) -> None:
        self._items = tuple(items)
        self.saves += 1

    async def commit(self, mutation: Mutation, current: Items) -> Items:
        items = mutation.apply(current)
        await self.save(items)
        return items


__all__ = (
    "Base",
    "CartRow",
    "create_database",
    "open_local_store",
    "LocalCartStore",
    "MemoryCartStore",
)
