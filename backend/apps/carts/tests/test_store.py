import json
import unittest
from decimal import Decimal

from apps.carts.dtos import RemoteCartRow, StoreSession
from apps.carts.storage import GUEST_CART_KEY, GUEST_WISHLIST_KEY, MemoryStorage
from apps.carts.store import ShopStore
from .fakes import FakeCartBackend, FakeProductLookup, FakeWishlistBackend, make_product


def guest_snapshot(items):
    return json.dumps({"state": {"items": items}})


class StoreTestCase(unittest.TestCase):
    def make_store(self, session=None, storage=None, carts=None, wishlists=None, products=None):
        self.storage = storage or MemoryStorage()
        self.carts = carts or FakeCartBackend()
        self.wishlists = wishlists or FakeWishlistBackend()
        self.current_session = session
        store = ShopStore(
            storage=self.storage,
            carts=self.carts,
            wishlists=self.wishlists,
            products=products or FakeProductLookup([make_product(1), make_product(2, "250.50")]),
            session_provider=lambda: self.current_session,
        )
        self.events = []
        store.initialize()
        store.subscribe(self.events.append)
        return store


class GuestStoreTests(StoreTestCase):
    def test_rehydrates_guest_snapshots(self):
        storage = MemoryStorage({
            GUEST_CART_KEY: guest_snapshot([
                {"id": 1, "name": "Buds", "price": "99.00", "quantity": 2},
                {"id": "broken"},
            ]),
            GUEST_WISHLIST_KEY: guest_snapshot([3, "4", 3, "x"]),
        })
        store = self.make_store(storage=storage)
        self.assertEqual(store.cart_count, 2)
        self.assertEqual(store.line_items[0].product.price, Decimal("99.00"))
        self.assertEqual(store.wishlist_ids, [3, 4])

    def test_corrupt_snapshot_means_empty_state(self):
        store = self.make_store(storage=MemoryStorage({GUEST_CART_KEY: "{not json"}))
        self.assertEqual(store.line_items, [])

    def test_add_increments_existing_line_and_persists(self):
        store = self.make_store()
        store.add_to_cart(make_product(1))
        store.add_to_cart(make_product(1), 2)
        self.assertEqual(store.cart_count, 3)
        saved = json.loads(self.storage.get_item(GUEST_CART_KEY))
        self.assertEqual(saved["state"]["items"][0]["quantity"], 3)
        self.assertEqual(self.carts.calls, [])
        self.assertEqual([e.kind for e in self.events], ["cart_changed", "cart_changed"])

    def test_add_rejects_non_positive_or_non_integer_quantity(self):
        store = self.make_store()
        for bad in (0, -1, 1.5, "2", True):
            with self.assertRaises(ValueError):
                store.add_to_cart(make_product(1), bad)
        self.assertEqual(store.cart_count, 0)

    def test_set_quantity_and_remove(self):
        store = self.make_store()
        store.add_to_cart(make_product(1))
        store.add_to_cart(make_product(2))
        store.set_quantity("1", 4)
        self.assertEqual(store.cart_count, 5)
        store.set_quantity(2, 0)
        self.assertEqual([line.product_id for line in store.line_items], [1])
        store.remove_from_cart(1)
        self.assertEqual(store.cart_count, 0)

    def test_set_quantity_unknown_id_is_noop(self):
        store = self.make_store()
        store.set_quantity(99, 3)
        self.assertEqual(self.events, [])

    def test_toggle_wishlist(self):
        store = self.make_store()
        self.assertTrue(store.toggle_wishlist(5))
        self.assertTrue(store.is_in_wishlist("5"))
        self.assertFalse(store.toggle_wishlist(5))
        self.assertEqual(store.wishlist_count, 0)
        saved = json.loads(self.storage.get_item(GUEST_WISHLIST_KEY))
        self.assertEqual(saved, {"state": {"items": []}})

    def test_summary_applies_ten_percent_tax(self):
        store = self.make_store()
        store.add_to_cart(make_product(1, "100.00"), 2)
        store.add_to_cart(make_product(2, "250.50"))
        summary = store.summary()
        self.assertEqual(summary.subtotal, Decimal("450.50"))
        self.assertEqual(summary.tax, Decimal("45.05"))
        self.assertEqual(summary.total, Decimal("495.55"))
        self.assertEqual(summary.item_count, 3)

    def test_unsubscribe_stops_notifications(self):
        store = self.make_store()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        store.toggle_wishlist(1)
        unsubscribe()
        store.toggle_wishlist(1)
        self.assertEqual(len(seen), 1)

    def test_failing_listener_does_not_break_others(self):
        store = self.make_store()

        def broken(event):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.toggle_wishlist(1)
        self.assertEqual(self.events[-1].kind, "wishlist_changed")


class SignedInStoreTests(StoreTestCase):
    session = StoreSession(user_id=7, email="a@example.com")

    def test_login_discards_guest_data_and_hydrates_remote(self):
        storage = MemoryStorage({
            GUEST_CART_KEY: guest_snapshot([{"id": 2, "price": "1", "quantity": 1}]),
            GUEST_WISHLIST_KEY: guest_snapshot([2]),
        })
        carts = FakeCartBackend([RemoteCartRow(1, 2), RemoteCartRow(404, 1)])
        store = self.make_store(
            session=self.session,
            storage=storage,
            carts=carts,
            wishlists=FakeWishlistBackend([2, 2]),
        )
        self.assertIsNone(storage.get_item(GUEST_CART_KEY))
        self.assertIsNone(storage.get_item(GUEST_WISHLIST_KEY))
        self.assertEqual([(l.product_id, l.quantity) for l in store.line_items], [(1, 2)])
        self.assertEqual(store.wishlist_ids, [2])

    def test_writes_go_to_remote_backend(self):
        store = self.make_store(session=self.session)
        store.add_to_cart(make_product(1), 2)
        store.add_to_cart(make_product(1))
        store.set_quantity(1, 0)
        store.toggle_wishlist(2)
        self.assertEqual(
            self.carts.calls,
            [("upsert", 7, 1, 2), ("upsert", 7, 1, 3), ("remove", 7, 1)],
        )
        self.assertEqual(self.wishlists.calls, [("add", 7, 2)])
        self.assertIsNone(self.storage.get_item(GUEST_CART_KEY))

    def test_failed_write_keeps_memory_and_publishes_sync_failed(self):
        carts = FakeCartBackend()
        store = self.make_store(session=self.session, carts=carts)
        carts.fail = True
        store.add_to_cart(make_product(1))
        self.assertEqual(store.cart_count, 1)
        kinds = [e.kind for e in self.events]
        self.assertEqual(kinds, ["sync_failed", "cart_changed"])
        self.assertEqual(self.events[0].payload["operation"], "cart_upsert")

    def test_failed_fetch_falls_back_to_guest_snapshots(self):
        storage = MemoryStorage({
            GUEST_CART_KEY: guest_snapshot([{"id": 2, "price": "250.50", "quantity": 1}]),
            GUEST_WISHLIST_KEY: guest_snapshot([1]),
        })
        store = self.make_store(session=self.session, storage=storage, carts=FakeCartBackend(fail=True))
        self.assertTrue(store.is_authenticated)
        self.assertEqual([(l.product_id, l.quantity) for l in store.line_items], [(2, 1)])
        self.assertEqual(store.wishlist_ids, [1])

        store.add_to_cart(make_product(1))
        self.assertEqual(self.carts.calls, [])
        saved = json.loads(storage.get_item(GUEST_CART_KEY))["state"]["items"]
        self.assertEqual([item["id"] for item in saved], [2, 1])

    def test_unreachable_backend_is_announced_once_per_session(self):
        storage = MemoryStorage()
        announced = []

        def build():
            store = ShopStore(
                storage=storage,
                carts=FakeCartBackend(fail=True),
                wishlists=FakeWishlistBackend(),
                products=FakeProductLookup([make_product(1)]),
                session_provider=lambda: self.session,
            )
            store.subscribe(announced.append)
            store.initialize()

        build()
        build()
        self.assertEqual([e.kind for e in announced], ["backend_unavailable"])
        self.assertEqual(announced[0].payload["user_id"], 7)

    def test_session_change_same_identity_is_noop(self):
        store = self.make_store(session=self.session)
        self.assertFalse(store.on_session_change(StoreSession(user_id=7)))
        self.assertEqual(self.events, [])

    def test_logout_rehydrates_from_local_storage(self):
        store = self.make_store(session=self.session, carts=FakeCartBackend([RemoteCartRow(1, 1)]))
        self.storage.set_item(GUEST_WISHLIST_KEY, guest_snapshot([9]))
        self.assertTrue(store.on_session_change(None))
        self.assertFalse(store.is_authenticated)
        self.assertEqual(store.line_items, [])
        self.assertEqual(store.wishlist_ids, [9])
        self.assertEqual(self.events[-1].kind, "session_changed")
        self.assertIsNone(self.events[-1].payload["user_id"])

    def test_guest_login_switches_to_remote(self):
        store = self.make_store(carts=FakeCartBackend([RemoteCartRow(2, 3)]))
        store.add_to_cart(make_product(1))
        store.on_session_change(self.session)
        self.assertEqual([(l.product_id, l.quantity) for l in store.line_items], [(2, 3)])
        self.assertIsNone(self.storage.get_item(GUEST_CART_KEY))


if __name__ == "__main__":
    unittest.main()
