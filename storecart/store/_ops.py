"""
Store operations — lift repository calls into ``LazyCoroResult``.

    result = await S.commit(remote, AddLine(product, 2), items, seconds=10)
    match result:
        case Ok(items): ...
        case Error(err): ...   # StoreError, never an exception
"""

from __future__ import annotations

import httpx
import pydantic
from kungfu import LazyCoroResult
from combinators import lift as L
import combinators

from storecart.cart._ops import Items, Mutation
from storecart.store._types import CartRepository, StoreError, StoreErrorKind, StoreFailure

# ═══════════════════════════════════════════════════════════════════════════════
# Error classification
# ═══════════════════════════════════════════════════════════════════════════════


def classify(store: str, exc: Exception) -> StoreError:
    """Map a backend exception onto a ``StoreError``."""
    match exc:
        case StoreFailure(kind=kind, message=message):
            return StoreError(kind, store, message)
        case httpx.TimeoutException():
            return StoreError(StoreErrorKind.TIMEOUT, store, str(exc) or "request timed out")
        case httpx.HTTPStatusError(response=response) if response.status_code >= 500:
            return StoreError(StoreErrorKind.UNAVAILABLE, store, f"HTTP {response.status_code}")
        case httpx.HTTPStatusError(response=response):
            return StoreError(StoreErrorKind.REJECTED, store, f"HTTP {response.status_code}")
        case pydantic.ValidationError() | ValueError():
            return StoreError(StoreErrorKind.CORRUPT, store, str(exc))
        case _:
            return StoreError(StoreErrorKind.UNAVAILABLE, store, f"{type(exc).__name__}: {exc}")


def _bounded[T](
    repo: CartRepository,
    op: LazyCoroResult[T, StoreError],
    seconds: float | None,
) -> LazyCoroResult[T, StoreError]:
    if seconds is None:
        return op

    def on_timeout(err: StoreError | combinators.TimeoutError) -> StoreError:
        if isinstance(err, StoreError):
            return err
        return StoreError(StoreErrorKind.TIMEOUT, repo.name, str(err))

    return combinators.timeout(op, seconds=seconds).map_err(on_timeout)


# ═══════════════════════════════════════════════════════════════════════════════
# load() / save() / commit()
# ═══════════════════════════════════════════════════════════════════════════════


def load(repo: CartRepository, *, seconds: float | None = None) -> LazyCoroResult[Items, StoreError]:
    """Read the full item list from a repository."""

    async def do_load() -> Items:
        return await repo.load()

    op = L.catching_async(do_load, on_error=lambda e: classify(repo.name, e))
    return _bounded(repo, op, seconds)


def save(
    repo: CartRepository,
    items: Items,
    *,
    seconds: float | None = None,
) -> LazyCoroResult[None, StoreError]:
    async def do_save() -> None:
        await repo.save(items)

    op = L.catching_async(do_save, on_error=lambda e: classify(repo.name, e))
    return _bounded(repo, op, seconds)


def commit(
    repo: CartRepository,
    mutation: Mutation,
    current: Items,
    *,
    seconds: float | None = None,
) -> LazyCoroResult[Items, StoreError]:
    """
    Apply a mutation in a repository.

    Returns the repository's own view of the list afterwards: for the remote
    store that is the server's list, not the caller's optimistic one.
    """

    async def do_commit() -> Items:
        return await repo.commit(mutation, current)

    op = L.catching_async(do_commit, on_error=lambda e: classify(repo.name, e))
    return _bounded(repo, op, seconds)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("classify", "load", "save", "commit")
