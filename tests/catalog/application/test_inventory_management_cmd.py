"""Application tests for catalog add, update and delete commands."""

import pytest
from factories import add_catalog_items, add_custom_item, create_inventory_item
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from clubsupply.cart.cart import Cart
from clubsupply.cart.cart_item import CartItem
from clubsupply.catalog.inventory_item import InventoryItem
from clubsupply.catalog.management import AddInventoryItem, RemoveInventoryItem, UpdateInventoryItem
from clubsupply.shared.errors import ConflictError


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestAddInventoryItemCommand:
    def test_persists_item(self):
        item_id = create_inventory_item(name="Shuttlecock", quantity=30)

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.name == "Shuttlecock"
        assert item.quantity == 30
        assert item.status == "enabled"

    def test_duplicate_name_conflicts_and_keeps_original(self):
        item_id = create_inventory_item(name="Shuttlecock", quantity=30)

        with pytest.raises(ConflictError):
            create_inventory_item(name="Shuttlecock", quantity=1, status="disabled")

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.quantity == 30
        assert item.status == "enabled"
        assert len(current_domain.repository_for(InventoryItem).list_all()) == 1

    def test_names_are_case_sensitive(self):
        create_inventory_item(name="Net")
        create_inventory_item(name="net")

        assert len(current_domain.repository_for(InventoryItem).list_all()) == 2

    def test_negative_quantity_rejected_before_store(self):
        with pytest.raises(ValidationError):
            AddInventoryItem(name="Cones", quantity=-3)


class TestUpdateInventoryItemCommand:
    def test_partial_update(self):
        item_id = create_inventory_item(name="Cones", quantity=5)

        _process(UpdateInventoryItem(inventory_item_id=item_id, quantity=12))

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.name == "Cones"
        assert item.quantity == 12

    def test_rename(self):
        item_id = create_inventory_item(name="Cones", quantity=5)

        _process(UpdateInventoryItem(inventory_item_id=item_id, name="Marker Cones"))

        assert current_domain.repository_for(InventoryItem).get(item_id).name == "Marker Cones"

    def test_rename_to_own_name_is_not_a_conflict(self):
        item_id = create_inventory_item(name="Cones", quantity=5)

        _process(UpdateInventoryItem(inventory_item_id=item_id, name="Cones", quantity=6))

        assert current_domain.repository_for(InventoryItem).get(item_id).quantity == 6

    def test_rename_to_taken_name_conflicts(self):
        create_inventory_item(name="Cones")
        item_id = create_inventory_item(name="Bibs")

        with pytest.raises(ConflictError):
            _process(UpdateInventoryItem(inventory_item_id=item_id, name="Cones"))

        assert current_domain.repository_for(InventoryItem).get(item_id).name == "Bibs"

    def test_unknown_item(self):
        with pytest.raises(ObjectNotFoundError):
            _process(UpdateInventoryItem(inventory_item_id="missing", quantity=1))

    def test_disable(self):
        item_id = create_inventory_item(name="Cones")

        _process(UpdateInventoryItem(inventory_item_id=item_id, status="disabled"))

        assert current_domain.repository_for(InventoryItem).get(item_id).status == "disabled"


class TestRemoveInventoryItemCommand:
    def test_unknown_item(self):
        with pytest.raises(ObjectNotFoundError):
            _process(RemoveInventoryItem(inventory_item_id="missing"))

    def test_cascades_to_line_items_in_every_cart(self):
        ball = create_inventory_item(name="Football")
        bat = create_inventory_item(name="Bat")
        add_catalog_items("req-1", (ball, 2), (bat, 1))
        add_catalog_items("req-2", (ball, 5))

        result = _process(RemoveInventoryItem(inventory_item_id=ball))

        assert result == {"removed_cart_items": 2, "emptied_carts": 1}
        assert current_domain.repository_for(InventoryItem).get_or_none(ball) is None
        assert current_domain.repository_for(CartItem).for_inventory_item(ball) == []

    def test_cart_keeps_its_other_items(self):
        ball = create_inventory_item(name="Football")
        bat = create_inventory_item(name="Bat")
        add_catalog_items("req-1", (ball, 2), (bat, 1))

        _process(RemoveInventoryItem(inventory_item_id=ball))

        cart = current_domain.repository_for(Cart).find_by_requester("req-1")
        lines = current_domain.repository_for(CartItem).for_cart(cart)
        assert [line.name for line in lines] == ["Bat"]
        assert cart.line_item_ids() == [str(lines[0].id)]

    def test_cart_left_empty_is_deleted(self):
        ball = create_inventory_item(name="Football")
        add_catalog_items("req-2", (ball, 5))

        _process(RemoveInventoryItem(inventory_item_id=ball))

        assert current_domain.repository_for(Cart).find_by_requester("req-2") is None

    def test_custom_items_are_untouched(self):
        ball = create_inventory_item(name="Football")
        add_catalog_items("req-1", (ball, 1))
        add_custom_item("req-1", "Football", 3)

        result = _process(RemoveInventoryItem(inventory_item_id=ball))

        assert result["removed_cart_items"] == 1
        cart = current_domain.repository_for(Cart).find_by_requester("req-1")
        lines = current_domain.repository_for(CartItem).for_cart(cart)
        assert len(lines) == 1
        assert lines[0].is_custom()
