"""CartItem aggregate: one requested line in a cart.

A line either references a catalog item (``inventory_item_id``) or is a
custom request identified only by its name. Requested quantity only grows
through merges; allotted quantity only grows through fulfillment updates.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from clubsupply.cart.events import CartItemAdded, CartItemFulfillmentUpdated, CartItemRemoved
from clubsupply.domain import clubsupply


class FulfillmentStatus(Enum):
    PENDING = "Pending"
    READY = "Ready"
    REJECTED = "Rejected"
    DELIVERED = "Delivered"
    AMAZON = "Amazon"


def normalize_status(value):
    """Match ``value`` case-insensitively against the fulfillment statuses."""
    if value is None:
        return None
    wanted = str(value).strip().lower()
    for status in FulfillmentStatus:
        if status.value.lower() == wanted:
            return status.value

    allowed = ", ".join(s.value for s in FulfillmentStatus)
    raise ValidationError({"status": [f"'{value}' is not a valid status. Use one of: {allowed}"]})


@clubsupply.aggregate
class CartItem:
    cart_id = Identifier(required=True)
    inventory_item_id = Identifier()  # Empty for custom items
    name = String(required=True, max_length=255, sanitize=False)
    ordered_quantity = Integer(required=True, min_value=1)
    allotted_quantity = Integer(min_value=0, default=0)
    status = String(choices=FulfillmentStatus, default=FulfillmentStatus.PENDING.value)
    remarks = Text(sanitize=False)
    link = String(max_length=2048, sanitize=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def for_catalog_item(cls, cart_id, inventory_item, quantity):
        """New line for a catalog item. The name is a snapshot of the catalog name."""
        return cls._new(
            cart_id=cart_id,
            inventory_item_id=str(inventory_item.id),
            name=inventory_item.name,
            quantity=quantity,
        )

    @classmethod
    def custom(cls, cart_id, name, quantity, link=None):
        return cls._new(cart_id=cart_id, inventory_item_id=None, name=name, quantity=quantity, link=link)

    @classmethod
    def _new(cls, cart_id, inventory_item_id, name, quantity, link=None):
        now = datetime.now(UTC)
        item = cls(
            cart_id=cart_id,
            inventory_item_id=inventory_item_id,
            name=name,
            ordered_quantity=quantity,
            allotted_quantity=0,
            status=FulfillmentStatus.PENDING.value,
            link=link,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            CartItemAdded(
                cart_id=str(cart_id),
                cart_item_id=str(item.id),
                inventory_item_id=inventory_item_id,
                name=name,
                quantity=quantity,
                ordered_quantity=quantity,
                merged=False,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Behaviour
    # -------------------------------------------------------------------
    def is_custom(self):
        return not self.inventory_item_id

    def accumulate(self, quantity, link=None):
        """Merge another request for the same item: quantities add up, a new link replaces the old."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        self.ordered_quantity += quantity
        if link:
            self.link = link
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.cart_id),
                cart_item_id=str(self.id),
                inventory_item_id=self.inventory_item_id,
                name=self.name,
                quantity=quantity,
                ordered_quantity=self.ordered_quantity,
                merged=True,
            )
        )

    def update_fulfillment(self, allotted_delta=None, status=None, remarks=None):
        """Add ``allotted_delta`` to the allotted quantity; replace status and remarks when given."""
        if allotted_delta is not None:
            if allotted_delta < 0:
                raise ValidationError({"allotted_delta": ["Allotted quantity can only be increased"]})
            self.allotted_quantity = (self.allotted_quantity or 0) + allotted_delta
        if status is not None:
            self.status = normalize_status(status)
        if remarks is not None:
            self.remarks = remarks
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemFulfillmentUpdated(
                cart_id=str(self.cart_id),
                cart_item_id=str(self.id),
                allotted_delta=allotted_delta or 0,
                allotted_quantity=self.allotted_quantity,
                status=self.status,
                remarks=self.remarks,
            )
        )

    def discard(self, reason):
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.cart_id),
                cart_item_id=str(self.id),
                inventory_item_id=self.inventory_item_id,
                name=self.name,
                reason=reason,
            )
        )
