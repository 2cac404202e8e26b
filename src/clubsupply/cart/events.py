"""Domain events for the Cart and CartItem aggregates."""

from protean.fields import Boolean, Identifier, Integer, String, Text

from clubsupply.domain import clubsupply


@clubsupply.event(part_of="Cart")
class CartCreated:
    """A requester's cart was opened on their first add."""

    __version__ = 1

    cart_id = Identifier(required=True)
    requester_id = Identifier(required=True)


@clubsupply.event(part_of="Cart")
class CartDeleted:
    """A cart was deleted, explicitly or because its last item was removed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    reason = String(max_length=50)


@clubsupply.event(part_of="CartItem")
class CartItemAdded:
    """Quantity was requested for an item, either as a new line or merged into one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    cart_item_id = Identifier(required=True)
    inventory_item_id = Identifier()
    name = String(required=True, max_length=255, sanitize=False)
    quantity = Integer(required=True)
    ordered_quantity = Integer(required=True)
    merged = Boolean(default=False)


@clubsupply.event(part_of="CartItem")
class CartItemRemoved:
    """A line item left its cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    cart_item_id = Identifier(required=True)
    inventory_item_id = Identifier()
    name = String(required=True, max_length=255, sanitize=False)
    reason = String(max_length=50)


@clubsupply.event(part_of="CartItem")
class CartItemFulfillmentUpdated:
    """An administrator allotted stock to, re-statused or remarked a line item."""

    __version__ = 1

    cart_id = Identifier(required=True)
    cart_item_id = Identifier(required=True)
    allotted_delta = Integer(default=0)
    allotted_quantity = Integer(required=True)
    status = String(required=True, max_length=20)
    remarks = Text(sanitize=False)
