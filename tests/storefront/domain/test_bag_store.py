"""Tests for BagStore persistence, notifications and added-to-bag notices."""

import json

from storefront.bag.bag import MAX_QUANTITY, STORAGE_KEY, ShoppingBag
from storefront.bag.storage import FileBagStorage, MemoryBagStorage
from storefront.bag.store import BagStore


def _stored(storage):
    return json.loads(storage.values[STORAGE_KEY])


class _FailingStorage(MemoryBagStorage):
    def set_item(self, key, value):
        raise OSError("quota exceeded")


class TestLoad:
    def test_missing_key_yields_empty_bag(self):
        store = BagStore(MemoryBagStorage())
        assert store.load() == ShoppingBag()
        assert store.is_loaded

    def test_loads_stored_bag(self):
        raw = json.dumps({"items": [{"productId": "p1", "volumeId": 1, "quantity": 3}], "selectedSample": "cedar-mist"})
        store = BagStore(MemoryBagStorage({STORAGE_KEY: raw}))
        store.load()
        assert store.total_items == 3
        assert store.selected_sample == "cedar-mist"

    def test_corrupt_data_yields_empty_bag(self):
        store = BagStore(MemoryBagStorage({STORAGE_KEY: "{corrupt"}))
        assert store.load() == ShoppingBag()

    def test_out_of_range_numbers_drop_the_line(self):
        raw = '{"items":[{"productId":"p1","volumeId":Infinity,"quantity":1},{"productId":"p2","volumeId":1,"quantity":2}]}'
        store = BagStore(MemoryBagStorage({STORAGE_KEY: raw}))
        store.load()
        assert [line.product_id for line in store.items] == ["p2"]

    def test_infinite_quantity_yields_empty_bag(self):
        raw = '{"items":[{"productId":"p1","volumeId":1,"quantity":Infinity}]}'
        assert BagStore(MemoryBagStorage({STORAGE_KEY: raw})).load() == ShoppingBag()

    def test_deeply_nested_payload_yields_empty_bag(self):
        store = BagStore(MemoryBagStorage({STORAGE_KEY: "[" * 100000 + "]" * 100000}))
        assert store.load() == ShoppingBag()
        assert store.is_loaded

    def test_load_reads_storage_once(self):
        storage = MemoryBagStorage()
        store = BagStore(storage)
        store.load()
        storage.values[STORAGE_KEY] = json.dumps({"items": [{"productId": "p1", "volumeId": 1, "quantity": 1}]})
        assert store.load() == ShoppingBag()


class TestPersistence:
    def test_mutations_after_load_are_written(self):
        storage = MemoryBagStorage()
        store = BagStore(storage)
        store.load()
        store.add_item("p1", 1, 2)
        assert _stored(storage)["items"] == [{"productId": "p1", "volumeId": 1, "quantity": 2}]

    def test_mutations_before_load_stay_in_memory(self):
        storage = MemoryBagStorage()
        store = BagStore(storage)
        store.add_item("p1", 1)
        assert storage.writes == 0
        assert store.total_items == 1

    def test_save_failure_keeps_in_memory_state(self):
        store = BagStore(_FailingStorage())
        store.load()
        store.add_item("p1", 1)
        assert store.total_items == 1

    def test_clear_bag_persists_empty_bag(self):
        storage = MemoryBagStorage()
        store = BagStore(storage)
        store.load()
        store.add_item("p1", 1)
        store.set_selected_sample("cedar-mist")
        store.clear_bag()
        assert _stored(storage) == {"items": [], "selectedSample": None}

    def test_file_storage_round_trip(self, tmp_path):
        store = BagStore(FileBagStorage(tmp_path))
        store.load()
        store.add_item("p1", 2, 4)

        reopened = BagStore(FileBagStorage(tmp_path))
        reopened.load()
        assert reopened.total_items == 4


class TestNotices:
    def test_every_add_produces_a_notice(self):
        store = BagStore(MemoryBagStorage())
        store.load()
        store.add_item("p1", 1)
        store.add_item("p2", 1)
        assert [n.product_id for n in store.pending_notices] == ["p1", "p2"]

    def test_notices_are_consumed_oldest_first(self):
        store = BagStore(MemoryBagStorage())
        store.load()
        store.add_item("p1", 1)
        store.add_item("p2", 1)
        assert store.added_product.product_id == "p1"
        store.clear_added_product()
        assert store.added_product.product_id == "p2"
        store.clear_added_product()
        assert store.added_product is None

    def test_overflow_is_reported_on_the_notice(self):
        store = BagStore(MemoryBagStorage())
        store.load()
        store.add_item("p1", 1, 7)
        notice = store.add_item("p1", 1, 7)
        assert notice.is_max_quantity_exceeded is True
        assert store.items[0].quantity == MAX_QUANTITY


class TestSubscriptions:
    def test_listeners_see_every_change(self):
        store = BagStore(MemoryBagStorage())
        seen = []
        store.subscribe(lambda bag: seen.append(len(bag.items)))
        store.load()
        store.add_item("p1", 1)
        store.remove_item("p1", 1)
        assert seen == [0, 1, 0]

    def test_unsubscribe_stops_notifications(self):
        store = BagStore(MemoryBagStorage())
        seen = []
        unsubscribe = store.subscribe(lambda bag: seen.append(bag))
        unsubscribe()
        store.add_item("p1", 1)
        assert seen == []

    def test_line_items_for_checkout(self):
        store = BagStore(MemoryBagStorage())
        store.load()
        store.add_item("p1", 2, 3)
        assert store.line_items() == [{"product_id": "p1", "volume_id": 2, "quantity": 3}]
