"""Domain events for the InventoryItem aggregate."""

from protean.fields import Identifier, Integer, String, Text

from clubsupply.domain import clubsupply


@clubsupply.event(part_of="InventoryItem")
class InventoryItemAdded:
    """A new item was added to the catalog."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    quantity = Integer(required=True)
    status = String(required=True, max_length=20)


@clubsupply.event(part_of="InventoryItem")
class InventoryItemUpdated:
    """Name, quantity or enabled status of a catalog item changed."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    quantity = Integer(required=True)
    status = String(required=True, max_length=20)
    changed_fields = Text(sanitize=False)  # JSON array of field names


@clubsupply.event(part_of="InventoryItem")
class InventoryItemAnnotated:
    """The external-order status or remark of a catalog item changed."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    order_status = String(max_length=50)
    remark = Text(sanitize=False)


@clubsupply.event(part_of="InventoryItem")
class InventoryItemRemoved:
    """A catalog item was deleted along with the cart items referencing it."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    removed_cart_items = Integer(default=0)
