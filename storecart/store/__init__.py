"""
Store — dual-mode cart persistence.

    from storecart import store as S

    local, engine = await S.open_local_store(settings)
    remote = S.RemoteCartStore.from_settings(settings, token=token)
    result = await S.load(remote, seconds=settings.request_timeout)
"""

from __future__ import annotations

from storecart.store._types import (
    CartRepository,
    StoreError,
    StoreErrorKind,
    StoreFailure,
)
from storecart.store._codec import (
    CartResponse,
    LineItemIn,
    ProductIn,
    decode_items,
    encode_items,
)
from storecart.store._local import (
    CartRow,
    LocalCartStore,
    MemoryCartStore,
    create_database,
    open_local_store,
)
from storecart.store._remote import RemoteCartStore
from storecart.store._ops import classify, load, save, commit

__all__ = (
    "CartRepository",
    "StoreError",
    "StoreErrorKind",
    "StoreFailure",
    "CartResponse",
    "LineItemIn",
    "ProductIn",
    "decode_items",
    "encode_items",
    "CartRow",
    "LocalCartStore",
    "MemoryCartStore",
    "create_database",
    "open_local_store",
    "RemoteCartStore",
    "classify",
    "load",
    "save",
    "commit",
)
