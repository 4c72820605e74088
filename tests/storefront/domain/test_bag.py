"""Tests for the pure shopping bag functions and the stored format."""

import json

import pytest
from storefront.bag.bag import (
    MAX_QUANTITY,
    BagLine,
    ShoppingBag,
    add_item,
    as_line,
    clear_bag,
    deserialize,
    find_line,
    remove_item,
    serialize,
    set_selected_sample,
    total_items,
    update_quantity,
)


class TestAddItem:
    def test_adds_new_line(self):
        bag, notice = add_item(ShoppingBag(), "p1", 1, 2)
        assert bag.items == (BagLine("p1", 1, 2),)
        assert notice.product_id == "p1"
        assert notice.is_max_quantity_exceeded is False

    def test_merges_identical_line(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1, 2)
        bag, _ = add_item(bag, "p1", 1, 3)
        assert bag.items == (BagLine("p1", 1, 5),)

    def test_different_volume_is_a_separate_line(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1)
        bag, _ = add_item(bag, "p1", 2)
        assert len(bag.items) == 2

    def test_merge_clamps_and_flags_overflow(self):
        bag, first = add_item(ShoppingBag(), "p1", 1, 7)
        bag, second = add_item(bag, "p1", 1, 7)
        assert find_line(bag, "p1", 1).quantity == MAX_QUANTITY
        assert first.is_max_quantity_exceeded is False
        assert second.is_max_quantity_exceeded is True

    def test_single_large_add_is_clamped(self):
        bag, notice = add_item(ShoppingBag(), "p1", 1, 25)
        assert find_line(bag, "p1", 1).quantity == MAX_QUANTITY
        assert notice.is_max_quantity_exceeded is True

    def test_exactly_max_is_not_flagged(self):
        bag, notice = add_item(ShoppingBag(), "p1", 1, MAX_QUANTITY)
        assert notice.is_max_quantity_exceeded is False

    def test_original_bag_is_unchanged(self):
        original = ShoppingBag()
        add_item(original, "p1", 1)
        assert original.items == ()


class TestUpdateAndRemove:
    def test_update_replaces_quantity(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1, 2)
        bag = update_quantity(bag, "p1", 1, 4)
        assert find_line(bag, "p1", 1).quantity == 4

    def test_update_clamps_to_max(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1, 2)
        bag = update_quantity(bag, "p1", 1, 50)
        assert find_line(bag, "p1", 1).quantity == MAX_QUANTITY

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_to_zero_or_less_removes(self, quantity):
        bag, _ = add_item(ShoppingBag(), "p1", 1, 2)
        bag = update_quantity(bag, "p1", 1, quantity)
        assert bag.items == ()

    def test_remove_only_matching_line(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1)
        bag, _ = add_item(bag, "p2", 1)
        bag = remove_item(bag, "p1", 1)
        assert [line.product_id for line in bag.items] == ["p2"]

    def test_remove_missing_line_is_a_no_op(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1)
        assert remove_item(bag, "p9", 1).items == bag.items


class TestSampleAndTotals:
    def test_select_and_clear_sample(self):
        bag = set_selected_sample(ShoppingBag(), "cedar-mist")
        assert bag.selected_sample == "cedar-mist"
        assert set_selected_sample(bag, None).selected_sample is None

    def test_total_items_sums_quantities(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1, 2)
        bag, _ = add_item(bag, "p2", 1, 3)
        assert total_items(bag) == 5

    def test_clear_bag_drops_sample_too(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1)
        bag = set_selected_sample(bag, "cedar-mist")
        cleared = clear_bag(bag)
        assert cleared.items == ()
        assert cleared.selected_sample is None


class TestStoredFormat:
    def test_serialize_uses_camel_case(self):
        bag, _ = add_item(ShoppingBag(), "p1", 1, 2)
        bag = set_selected_sample(bag, "cedar-mist")
        data = json.loads(serialize(bag))
        assert data == {
            "items": [{"productId": "p1", "volumeId": 1, "quantity": 2}],
            "selectedSample": "cedar-mist",
        }

    def test_deserialize_restores_bag(self):
        bag, _ = add_item(ShoppingBag(), "p1", 2, 3)
        assert deserialize(serialize(bag)) == bag

    def test_deserialize_drops_malformed_lines(self):
        raw = json.dumps(
            {
                "items": [
                    {"productId": "p1", "volumeId": 1, "quantity": 2},
                    {"productId": "p2"},
                    {"productId": "p3", "volumeId": "x", "quantity": 1},
                    {"productId": "p4", "volumeId": 1, "quantity": 0},
                ],
                "selectedSample": None,
            }
        )
        assert deserialize(raw).items == (BagLine("p1", 1, 2),)

    def test_deserialize_merges_and_clamps(self):
        raw = json.dumps(
            {
                "items": [
                    {"productId": "p1", "volumeId": 1, "quantity": 8},
                    {"productId": "p1", "volumeId": 1, "quantity": 8},
                ]
            }
        )
        assert deserialize(raw).items == (BagLine("p1", 1, MAX_QUANTITY),)

    @pytest.mark.parametrize("raw", ["[]", '"bag"', '{"items": "nope"}'])
    def test_deserialize_rejects_non_bag_payloads(self, raw):
        with pytest.raises(ValueError):
            deserialize(raw)

    def test_deserialize_rejects_invalid_json(self):
        with pytest.raises(ValueError):
            deserialize("{not json")


class TestAsLine:
    def test_accepts_camel_and_snake_case(self):
        assert as_line({"productId": "p1", "volumeId": 1, "quantity": 2}) == BagLine("p1", 1, 2)
        assert as_line({"product_id": "p1", "volume_id": "1", "quantity": 2}) == BagLine("p1", 1, 2)

    def test_clamps_quantity(self):
        assert as_line({"product_id": "p1", "volume_id": 1, "quantity": 99}).quantity == MAX_QUANTITY

    @pytest.mark.parametrize(
        "item",
        [
            {"product_id": "", "volume_id": 1},
            {"product_id": "p1"},
            {"product_id": "p1", "volume_id": 1, "quantity": 0},
            {"product_id": "p1", "volume_id": float("inf")},
            {"product_id": "p1", "volume_id": 1, "quantity": float("inf")},
            "p1",
        ],
    )
    def test_rejects_invalid_entries(self, item):
        assert as_line(item) is None
