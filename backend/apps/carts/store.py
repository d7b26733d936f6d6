from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional

from django.db import DatabaseError

from apps.catalog.dtos import ProductDTO
from apps.common import get_logger
from .dtos import CartSummary, LineItem, StoreEvent, StoreSession
from .protocols import (
    CartBackendProtocol,
    KeyValueStorage,
    ProductLookupProtocol,
    WishlistBackendProtocol,
)
from .storage import (
    GUEST_CART_KEY,
    GUEST_WISHLIST_KEY,
    OFFLINE_NOTICE_KEY,
    clear_guest_data,
    line_from_snapshot,
    line_to_snapshot,
    read_snapshot,
    wishlist_from_snapshot,
    write_snapshot,
)

logger = get_logger(__name__).bind(component="carts", layer="store")

Listener = Callable[[StoreEvent], None]
SessionProvider = Callable[[], Optional[StoreSession]]

CENT = Decimal("0.01")


def _coerce_id(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ShopStore:
    """Cart, wishlist and session state for one visitor.

    Guests persist to ``storage`` as JSON snapshots. Signed-in users persist
    to the ``cart_items`` / ``wishlist_items`` tables. Writes are optimistic:
    memory is updated first, and a failed backend write is reported to
    listeners as a ``sync_failed`` event instead of being rolled back. When the
    saved cart cannot be loaded at all, a signed-in visitor falls back to the
    guest snapshots and listeners get one ``backend_unavailable`` event per
    session.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStorage,
        carts: CartBackendProtocol,
        wishlists: WishlistBackendProtocol,
        products: ProductLookupProtocol,
        session_provider: SessionProvider,
        tax_rate: Decimal = Decimal("0.10"),
    ):
        self.storage = storage
        self.carts = carts
        self.wishlists = wishlists
        self.products = products
        self.session_provider = session_provider
        self.tax_rate = Decimal(str(tax_rate))
        self._session: Optional[StoreSession] = None
        self._lines: List[LineItem] = []
        self._wishlist: List[int] = []
        self._listeners: List[Listener] = []
        self._remote = False
        self.logger = logger.bind(store="ShopStore")

    # -- session ---------------------------------------------------------

    @property
    def session(self) -> Optional[StoreSession]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def initialize(self) -> None:
        self._session = self.session_provider()
        self._load_for(self._session)
        self.logger.debug(
            "Store initialized",
            user_id=self._user_id,
            cart_count=self.cart_count,
            wishlist_count=self.wishlist_count,
        )

    def on_session_change(self, session: Optional[StoreSession]) -> bool:
        """Re-hydrate for a new identity. Returns False when nothing changed."""
        new_id = session.user_id if session else None
        if new_id == self._user_id:
            return False
        previous = self._user_id
        self._session = session
        self._load_for(session)
        self.logger.info("Session changed", previous_user_id=previous, user_id=new_id)
        self._publish("session_changed", user_id=new_id)
        return True

    @property
    def _user_id(self) -> Optional[int]:
        return self._session.user_id if self._session else None

    def _load_for(self, session: Optional[StoreSession]) -> None:
        self._remote = False
        if session is None:
            self._rehydrate_guest()
            return
        if not self._fetch_remote(session.user_id):
            self._rehydrate_guest()
            self._announce_offline()
            return
        self._remote = True
        # Guest data is discarded on sign-in rather than merged.
        clear_guest_data(self.storage)
        self.storage.remove_item(OFFLINE_NOTICE_KEY)

    def _rehydrate_guest(self) -> None:
        lines = [line_from_snapshot(raw) for raw in read_snapshot(self.storage, GUEST_CART_KEY)]
        self._lines = [line for line in lines if line is not None]
        self._wishlist = wishlist_from_snapshot(read_snapshot(self.storage, GUEST_WISHLIST_KEY))

    def _fetch_remote(self, user_id: int) -> bool:
        try:
            rows = self.carts.list_rows(user_id)
            wishlist = self.wishlists.list_product_ids(user_id)
        except DatabaseError as exc:
            self.logger.error("Could not load saved cart; using local storage", user_id=user_id, error=str(exc))
            return False
        found = {p.id: p for p in self.products.get_products_by_ids([r.product_id for r in rows])}
        self._lines = [
            LineItem(product=found[row.product_id], quantity=row.quantity)
            for row in rows
            if row.product_id in found
        ]
        dropped = len(rows) - len(self._lines)
        if dropped:
            self.logger.warning("Dropped cart rows for missing products", user_id=user_id, dropped=dropped)
        self._wishlist = list(dict.fromkeys(wishlist))
        return True

    def _announce_offline(self) -> None:
        if self.storage.get_item(OFFLINE_NOTICE_KEY):
            return
        self.storage.set_item(OFFLINE_NOTICE_KEY, "1")
        self._publish("backend_unavailable", user_id=self._user_id)

    # -- cart ------------------------------------------------------------

    def add_to_cart(self, product: ProductDTO, qty: int = 1) -> LineItem:
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise ValueError(f"Quantity must be a positive integer, got {qty!r}")
        line = self._find(product.id)
        if line:
            line.quantity += qty
        else:
            line = LineItem(product=product, quantity=qty)
            self._lines.append(line)
        if self._remote:
            self._sync("cart_upsert", self.carts.upsert_quantity, self._user_id, product.id, line.quantity)
        else:
            self._persist_cart()
        self._publish("cart_changed", product_id=product.id, quantity=line.quantity)
        return line

    def set_quantity(self, product_id, qty) -> None:
        line = self._find(_coerce_id(product_id))
        if line is None:
            return
        qty = int(qty)
        if qty > 0:
            line.quantity = qty
            if self._remote:
                self._sync("cart_update", self.carts.upsert_quantity, self._user_id, line.product_id, qty)
        else:
            self._lines.remove(line)
            if self._remote:
                self._sync("cart_remove", self.carts.remove, self._user_id, line.product_id)
        if not self._remote:
            self._persist_cart()
        self._publish("cart_changed", product_id=line.product_id, quantity=max(qty, 0))

    def remove_from_cart(self, product_id) -> None:
        self.set_quantity(product_id, 0)

    def _find(self, product_id: Optional[int]) -> Optional[LineItem]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def _persist_cart(self) -> None:
        write_snapshot(self.storage, GUEST_CART_KEY, [line_to_snapshot(line) for line in self._lines])

    # -- wishlist --------------------------------------------------------

    def toggle_wishlist(self, product_id) -> bool:
        pid = _coerce_id(product_id)
        if pid is None:
            raise ValueError(f"Invalid product id {product_id!r}")
        if pid in self._wishlist:
            self._wishlist.remove(pid)
            member = False
            if self._remote:
                self._sync("wishlist_remove", self.wishlists.remove, self._user_id, pid)
        else:
            self._wishlist.append(pid)
            member = True
            if self._remote:
                self._sync("wishlist_add", self.wishlists.add, self._user_id, pid)
        if not self._remote:
            write_snapshot(self.storage, GUEST_WISHLIST_KEY, list(self._wishlist))
        self._publish("wishlist_changed", product_id=pid, in_wishlist=member)
        return member

    def is_in_wishlist(self, product_id) -> bool:
        return _coerce_id(product_id) in self._wishlist

    # -- read side -------------------------------------------------------

    @property
    def line_items(self) -> List[LineItem]:
        return list(self._lines)

    @property
    def wishlist_ids(self) -> List[int]:
        return list(self._wishlist)

    @property
    def cart_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def wishlist_count(self) -> int:
        return len(self._wishlist)

    def summary(self) -> CartSummary:
        subtotal = sum((line.line_total for line in self._lines), Decimal("0"))
        tax = (subtotal * self.tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
        return CartSummary(
            subtotal=subtotal.quantize(CENT),
            tax=tax,
            total=(subtotal + tax).quantize(CENT),
            item_count=self.cart_count,
        )

    # -- notifications ---------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, kind: str, **payload) -> None:
        event = StoreEvent(kind=kind, payload=payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                self.logger.exception("Store listener failed", event_kind=kind)

    def _sync(self, operation: str, write, *args) -> bool:
        try:
            write(*args)
        except DatabaseError as exc:
            self.logger.error(
                "Store sync failed", operation=operation, user_id=self._user_id, error=str(exc)
            )
            self._publish("sync_failed", operation=operation, message=str(exc))
            return False
        return True
