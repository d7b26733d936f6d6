from apps.carts.storage import (
    GUEST_CART_KEY,
    MemoryStorage,
    SessionStorage,
    line_from_snapshot,
    read_snapshot,
    write_snapshot,
)


def test_session_storage_roundtrip_on_plain_dict():
    session = {}
    storage = SessionStorage(session)
    write_snapshot(storage, GUEST_CART_KEY, [{"id": 1}])
    assert session[GUEST_CART_KEY] == '{"state": {"items": [{"id": 1}]}}'
    storage.remove_item(GUEST_CART_KEY)
    assert storage.get_item(GUEST_CART_KEY) is None


def test_snapshot_without_items_list():
    storage = MemoryStorage({GUEST_CART_KEY: '{"state": {"items": {"id": 1}}}'})
    assert read_snapshot(storage, GUEST_CART_KEY) == []
    storage.set_item(GUEST_CART_KEY, '{"other": 1}')
    assert read_snapshot(storage, GUEST_CART_KEY) == []


def test_line_from_snapshot_drops_bad_quantities():
    assert line_from_snapshot({"id": 1, "price": "10", "quantity": 0}) is None
    assert line_from_snapshot({"id": 1, "price": "abc", "quantity": 1}) is None
    line = line_from_snapshot({"id": "2", "price": 10, "quantity": "3", "images": ["", "g"]})
    assert line.product_id == 2
    assert line.product.image == ""
