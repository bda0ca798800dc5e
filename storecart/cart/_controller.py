"""
Cart controller — one session's cart.

    controller = CartController(local, remote, authenticated=True)
    await controller.start()
    totals = await controller.add_item(product, 2, variant=product.variant(500))

Mutations update the in-memory list first, then commit to the authoritative
repository. A failing remote commit is retried against the local repository
and the call still succeeds: backend errors never leave this class.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from kungfu import Error, LazyCoroResult, Ok
import combinators

from storecart import store as S
from storecart._types import ProductId
from storecart.cart._identity import same_line
from storecart.cart._ops import AddLine, ClearLines, Items, Mutation, RemoveLine, SetQuantity
from storecart.cart._totals import compute_totals
from storecart.cart._types import (
    CartMode,
    CartState,
    CartSummary,
    LineItem,
    Notice,
    NoticeKind,
    Product,
    Recommendations,
    SummaryLine,
    Totals,
    WeightVariant,
)
from storecart.cart._validate import ValidationReport, validate
from storecart.config import CartSettings, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

type Notify = Callable[[Notice], None]


class CartController:
    """
    Orchestrates add/remove/update/clear over a dual-mode backend.

    Lifecycle: ``UNINITIALIZED -> LOADING -> READY`` via ``start()``. The mode
    (local or remote) is chosen at start from ``authenticated`` and changes
    only through ``set_authenticated``.
    """

    def __init__(
        self,
        local: S.CartRepository,
        remote: S.CartRepository | None = None,
        *,
        authenticated: bool = False,
        settings: CartSettings | None = None,
        notify: Notify | None = None,
    ) -> None:
        self._local = local
        self._remote = remote
        self._authenticated = authenticated
        self._settings = settings or DEFAULT_SETTINGS
        self._notify = notify

        self._items: Items = ()
        self._state = CartState.UNINITIALIZED
        self._mode = CartMode.LOCAL
        self._degraded = False
        self._lock = asyncio.Lock()

    # ═══════════════════════════════════════════════════════════════════════════
    # State
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def mode(self) -> CartMode:
        return self._mode

    @property
    def degraded(self) -> bool:
        """
        True while the remote store may not hold the session's list.

        Set when a remote load or write falls back to the local store; writes
        then stay local until ``reconcile()`` succeeds.
        """
        return self._degraded

    @property
    def items(self) -> Items:
        return self._items

    @property
    def totals(self) -> Totals:
        return compute_totals(
            self._items,
            free_shipping_threshold=self._settings.free_shipping_threshold,
            flat_fee=self._settings.flat_shipping_fee,
        )

    @property
    def item_count(self) -> int:
        """Distinct lines. ``totals.item_count`` sums quantities."""
        return len(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    # ═══════════════════════════════════════════════════════════════════════════
    # Lifecycle
    # ═══════════════════════════════════════════════════════════════════════════

    def _select_mode(self) -> CartMode:
        if self._authenticated and self._remote is not None:
            return CartMode.REMOTE
        return CartMode.LOCAL

    async def start(self) -> Totals:
        """Load the cart. Never raises for backend failures."""
        self._state = CartState.LOADING
        self._mode = self._select_mode()

        self._degraded = False
        match self._mode, self._remote:
            case CartMode.REMOTE, remote if remote is not None:
                match await S.load(remote, seconds=self._settings.request_timeout):
                    case Ok(items):
                        self._items = items
                    case Error(err):
                        logger.warning("Error fetching cart (%s), falling back to local cart", err)
                        self._items = await self._load_local()
                        # the remote store does not hold this list until reconcile()
                        self._degraded = True
            case _:
                self._items = await self._load_local()

        self._state = CartState.READY
        logger.info("cart ready: %d line(s), mode=%s", len(self._items), self._mode.name.lower())
        return self.totals

    async def set_authenticated(self, authenticated: bool) -> Totals:
        """Explicit credential change: re-select the mode and reload."""
        self._authenticated = authenticated
        self._state = CartState.UNINITIALIZED
        return await self.start()

    async def _load_local(self) -> Items:
        match await S.load(self._local):
            case Ok(items):
                return items
            case Error(err):
                logger.error("Error reading local cart: %s", err)
                return ()

    def _ensure_ready(self) -> None:
        if self._state is not CartState.READY:
            raise RuntimeError(f"cart is {self._state.name.lower()}, call start() first")

    # ═══════════════════════════════════════════════════════════════════════════
    # Commit — remote first, local fallback, local only while degraded
    # ═══════════════════════════════════════════════════════════════════════════

    async def _mirror_local(self, items: Items) -> None:
        match await S.save(self._local, items):
            case Ok(_):
                pass
            case Error(err):
                logger.warning("could not mirror cart to local store: %s", err)

    async def _commit(self, mutation: Mutation, before: Items) -> None:
        fell_back = False

        def to_local(err: S.StoreError) -> LazyCoroResult[Items, S.StoreError]:
            nonlocal fell_back
            logger.warning(
                "%s failed on remote cart (%s), falling back to local store",
                type(mutation).__name__,
                err,
            )
            fell_back = True
            self._degraded = True
            return S.commit(self._local, mutation, before)

        async with self._lock:
            remote_first = self._mode is CartMode.REMOTE and not self._degraded
            if remote_first and self._remote is not None:
                remote = S.commit(self._remote, mutation, before, seconds=self._settings.request_timeout)
                op = combinators.fallback_with(remote, secondary=to_local)
            else:
                op = S.commit(self._local, mutation, before)

            match await op:
                case Ok(items):
                    self._items = items
                    if remote_first and not fell_back:
                        await self._mirror_local(items)
                case Error(err):
                    # optimistic list stays; nothing durable holds it
                    logger.error("%s not persisted: %s", type(mutation).__name__, err)

    def _emit(self, kind: NoticeKind, message: str, item: LineItem | None = None) -> None:
        if self._notify is not None:
            self._notify(Notice(kind, message, item))

    def _find(self, product_id: ProductId, variant: WeightVariant | None) -> LineItem | None:
        for item in self._items:
            if same_line(item, product_id, variant):
                return item
        return None

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_item(
        self,
        product: Product,
        quantity: int = 1,
        variant: WeightVariant | None = None,
    ) -> Totals:
        """
        Add ``quantity`` of a product, merging into an existing line with the
        same identity. Raises ``ValueError`` for ``quantity < 1``.
        """
        self._ensure_ready()
        mutation = AddLine(product, quantity, variant)

        before = self._items
        self._items = mutation.apply(before)
        await self._commit(mutation, before)

        self._emit(NoticeKind.ADDED, f"Added {product.name} to cart", self._find(product.id, variant))
        return self.totals

    async def remove_item(self, product_id: ProductId, variant: WeightVariant | None = None) -> Totals:
        """Remove exactly one line. Without ``variant`` only the no-variant line goes."""
        self._ensure_ready()
        existing = self._find(product_id, variant)
        if existing is None:
            return self.totals

        mutation = RemoveLine(product_id, variant)
        before = self._items
        self._items = mutation.apply(before)
        await self._commit(mutation, before)

        self._emit(NoticeKind.REMOVED, f"Removed {existing.product.name} from cart", existing)
        return self.totals

    async def update_quantity(
        self,
        product_id: ProductId,
        quantity: int,
        variant: WeightVariant | None = None,
    ) -> Totals:
        """Set (not increment) a line's quantity; ``quantity <= 0`` removes it."""
        self._ensure_ready()
        if quantity <= 0:
            return await self.remove_item(product_id, variant)

        existing = self._find(product_id, variant)
        if existing is None or existing.quantity == quantity:
            return self.totals

        mutation = SetQuantity(product_id, quantity, variant)
        before = self._items
        self._items = mutation.apply(before)
        await self._commit(mutation, before)

        self._emit(NoticeKind.UPDATED, f"Updated {existing.product.name} quantity", self._find(product_id, variant))
        return self.totals

    async def clear_cart(self) -> Totals:
        """Empty the cart. Local state is cleared even if the backend refuses."""
        self._ensure_ready()
        mutation = ClearLines()
        before = self._items
        self._items = ()
        await self._commit(mutation, before)

        self._items = ()
        self._emit(NoticeKind.CLEARED, "Cart cleared")
        return self.totals

    async def sync_products(self, updated: Iterable[Product]) -> Items:
        """
        Refresh product snapshots from the catalog.

        Captured line prices and variant snapshots are kept; lines whose
        product is not in ``updated`` are left as they are.
        """
        self._ensure_ready()
        by_id = {product.id: product for product in updated}
        if not by_id:
            return self._items

        async with self._lock:
            self._items = tuple(
                replace(item, product=by_id.get(item.product.id, item.product))
                for item in self._items
            )
            await self._mirror_local(self._items)
        return self._items

    async def reconcile(self) -> bool:
        """
        Push the current list to the remote store after a degraded period.

        Opt-in: nothing calls this automatically. Returns whether the remote
        store now holds the session's list.
        """
        self._ensure_ready()
        if self._mode is not CartMode.REMOTE or self._remote is None:
            return False
        if not self._degraded:
            return True

        async with self._lock:
            match await S.save(self._remote, self._items, seconds=self._settings.request_timeout):
                case Ok(_):
                    self._degraded = False
                    logger.info("remote cart reconciled with %d line(s)", len(self._items))
                    return True
                case Error(err):
                    logger.warning("remote cart still unreachable: %s", err)
                    return False

    # ═══════════════════════════════════════════════════════════════════════════
    # Queries
    # ═══════════════════════════════════════════════════════════════════════════

    def is_in_cart(self, product_id: ProductId, variant: WeightVariant | None = None) -> bool:
        return self._find(product_id, variant) is not None

    def get_item_quantity(self, product_id: ProductId, variant: WeightVariant | None = None) -> int:
        item = self._find(product_id, variant)
        return item.quantity if item is not None else 0

    def validate(self) -> ValidationReport:
        return validate(self._items)

    def summary(self) -> CartSummary:
        totals = self.totals
        return CartSummary(
            lines=tuple(
                SummaryLine(
                    product_id=item.product.id,
                    name=item.product.name,
                    price=item.unit_price,
                    quantity=item.quantity,
                    image=item.product.image,
                    weight_option=item.variant,
                )
                for item in self._items
            ),
            items_price=totals.subtotal,
            tax_price=totals.tax,
            shipping_price=totals.shipping,
            total_price=totals.total,
        )

    def recommendations(self) -> Recommendations:
        categories = dict.fromkeys(
            item.product.category for item in self._items if item.product.category
        )
        tags = dict.fromkeys(tag for item in self._items for tag in item.product.tags)
        return Recommendations(
            categories=tuple(categories),
            tags=tuple(tags),
            total_value=self.totals.subtotal,
        )


__all__ = ("CartController", "Notify")
