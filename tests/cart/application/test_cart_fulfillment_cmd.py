"""Application tests for administrator fulfillment updates."""

import json

import pytest
from factories import add_catalog_items, add_custom_item, create_inventory_item
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from clubsupply.cart.cart_item import CartItem
from clubsupply.cart.fulfillment import (
    ReconcileCatalogFulfillment,
    UpdateCartItemFulfillment,
    UpdateCartItemsFulfillment,
)
from clubsupply.catalog.management import RemoveInventoryItem


def _line(cart_item_id):
    return current_domain.repository_for(CartItem).get(cart_item_id)


def _catalog_line(requester_id="req-1", name="Football", quantity=5):
    item_id = create_inventory_item(name=name)
    return add_catalog_items(requester_id, (item_id, quantity))["cart_item_ids"][0]


def _batch(command_cls, *updates):
    return current_domain.process(command_cls(updates=json.dumps(list(updates))), asynchronous=False)


class TestUpdateSingleLine:
    def test_allotted_quantity_accumulates(self):
        line_id = _catalog_line()

        current_domain.process(UpdateCartItemFulfillment(cart_item_id=line_id, allotted_delta=3), asynchronous=False)
        current_domain.process(UpdateCartItemFulfillment(cart_item_id=line_id, allotted_delta=2), asynchronous=False)

        assert _line(line_id).allotted_quantity == 5

    def test_status_and_remarks_replace(self):
        line_id = _catalog_line()

        current_domain.process(
            UpdateCartItemFulfillment(cart_item_id=line_id, status="ready", remarks="Collect Friday"),
            asynchronous=False,
        )

        line = _line(line_id)
        assert line.status == "Ready"
        assert line.remarks == "Collect Friday"
        assert line.allotted_quantity == 0

    def test_unknown_status_rejected(self):
        line_id = _catalog_line()

        with pytest.raises(ValidationError) as exc:
            current_domain.process(UpdateCartItemFulfillment(cart_item_id=line_id, status="Shipped"), asynchronous=False)

        assert "status" in exc.value.messages
        assert _line(line_id).status == "Pending"

    def test_empty_update_rejected(self):
        line_id = _catalog_line()

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCartItemFulfillment(cart_item_id=line_id), asynchronous=False)

    def test_negative_delta_rejected_by_command(self):
        with pytest.raises(ValidationError):
            UpdateCartItemFulfillment(cart_item_id="any", allotted_delta=-1)

    def test_unknown_line(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateCartItemFulfillment(cart_item_id="missing", status="Ready"), asynchronous=False)

    def test_custom_lines_can_be_updated(self):
        line_id = add_custom_item("req-1", "Stopwatch", 2)["cart_item_ids"][0]

        current_domain.process(UpdateCartItemFulfillment(cart_item_id=line_id, status="Amazon"), asynchronous=False)

        assert _line(line_id).status == "Amazon"


class TestStrictBatch:
    def test_applies_every_entry_in_order(self):
        first = _catalog_line(name="Football")
        second = _catalog_line(name="Bat")

        result = _batch(
            UpdateCartItemsFulfillment,
            {"cart_item_id": first, "allotted_delta": 1, "status": "Ready"},
            {"cart_item_id": second, "remarks": "Out of stock", "status": "Rejected"},
            {"cart_item_id": first, "allotted_delta": 2, "status": "Delivered"},
        )

        assert result == [first, second]
        assert _line(first).allotted_quantity == 3
        assert _line(first).status == "Delivered"
        assert _line(second).status == "Rejected"
        assert _line(second).remarks == "Out of stock"

    def test_unknown_id_aborts_whole_batch(self):
        line_id = _catalog_line()

        with pytest.raises(ObjectNotFoundError):
            _batch(
                UpdateCartItemsFulfillment,
                {"cart_item_id": line_id, "allotted_delta": 4},
                {"cart_item_id": "missing", "status": "Ready"},
            )

        assert _line(line_id).allotted_quantity == 0

    def test_invalid_entry_aborts_before_any_change(self):
        line_id = _catalog_line()

        with pytest.raises(ValidationError):
            _batch(
                UpdateCartItemsFulfillment,
                {"cart_item_id": line_id, "allotted_delta": 4},
                {"cart_item_id": line_id, "status": "Lost"},
            )

        assert _line(line_id).allotted_quantity == 0

    def test_empty_batch_rejected(self):
        with pytest.raises(ValidationError):
            _batch(UpdateCartItemsFulfillment)


class TestLenientReconcile:
    def test_skips_unknown_custom_and_removed_catalog_lines(self):
        live = _catalog_line(name="Football")
        gone_item = create_inventory_item(name="Bat")
        gone = add_catalog_items("req-2", (gone_item, 1))["cart_item_ids"][0]
        add_custom_item("req-2", "Stopwatch", 1)
        custom = add_custom_item("req-1", "Whistle", 1)["cart_item_ids"][0]

        # Removing the catalog item cascades its lines away, so "gone" becomes unknown
        current_domain.process(RemoveInventoryItem(inventory_item_id=gone_item), asynchronous=False)

        result = _batch(
            ReconcileCatalogFulfillment,
            {"cart_item_id": live, "allotted_delta": 2, "status": "Ready"},
            {"cart_item_id": gone, "status": "Ready"},
            {"cart_item_id": custom, "status": "Ready"},
            {"cart_item_id": "missing", "status": "Ready"},
        )

        assert result == {"updated": [live], "skipped": [gone, custom, "missing"]}
        assert _line(live).allotted_quantity == 2
        assert _line(live).status == "Ready"
        assert _line(custom).status == "Pending"

    def test_line_whose_catalog_item_vanished_is_skipped(self):
        line_id = _catalog_line()
        line = _line(line_id)

        # Orphan the line without the cascade
        from clubsupply.catalog.inventory_item import InventoryItem

        catalog_repo = current_domain.repository_for(InventoryItem)
        catalog_repo.remove(catalog_repo.get(line.inventory_item_id))

        result = _batch(ReconcileCatalogFulfillment, {"cart_item_id": line_id, "status": "Ready"})

        assert result == {"updated": [], "skipped": [line_id]}
        assert _line(line_id).status == "Pending"

    def test_validation_still_applies(self):
        line_id = _catalog_line()

        with pytest.raises(ValidationError):
            _batch(ReconcileCatalogFulfillment, {"cart_item_id": line_id})
