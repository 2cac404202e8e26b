"""InventoryItem aggregate: one entry in the club-supply catalog.

Quantity is what is on hand. ``status`` toggles visibility to requesters;
``order_status`` and ``remark`` are administrator bookkeeping about
replenishment and are edited separately from the rest.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Integer, String, Text

from clubsupply.catalog.events import (
    InventoryItemAdded,
    InventoryItemAnnotated,
    InventoryItemRemoved,
    InventoryItemUpdated,
)
from clubsupply.domain import clubsupply


class ItemStatus(Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class OrderStatus(Enum):
    AVAILABLE = "Available"
    ORDERED_LOCAL_VENDOR = "Ordered from Local Vendor"
    ORDERED_AMAZON = "Ordered from Amazon"
    NOT_AVAILABLE = "Not Available"


@clubsupply.aggregate
class InventoryItem:
    name = String(required=True, max_length=255, unique=True, sanitize=False)
    quantity = Integer(min_value=0, default=0)
    status = String(choices=ItemStatus, default=ItemStatus.ENABLED.value)
    order_status = String(choices=OrderStatus, default=OrderStatus.AVAILABLE.value)
    remark = Text(sanitize=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def add(cls, name, quantity, status=None):
        now = datetime.now(UTC)
        item = cls(
            name=name,
            quantity=quantity,
            status=status or ItemStatus.ENABLED.value,
            order_status=OrderStatus.AVAILABLE.value,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            InventoryItemAdded(
                inventory_item_id=str(item.id),
                name=item.name,
                quantity=item.quantity,
                status=item.status,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Behaviour
    # -------------------------------------------------------------------
    def is_enabled(self):
        return self.status == ItemStatus.ENABLED.value

    def update_details(self, name=None, quantity=None, status=None):
        """Apply only the supplied values. Returns the names of fields that changed."""
        changed = []
        if name is not None and name != self.name:
            self.name = name
            changed.append("name")
        if quantity is not None and quantity != self.quantity:
            self.quantity = quantity
            changed.append("quantity")
        if status is not None and status != self.status:
            self.status = status
            changed.append("status")

        if changed:
            self.updated_at = datetime.now(UTC)
            self.raise_(
                InventoryItemUpdated(
                    inventory_item_id=str(self.id),
                    name=self.name,
                    quantity=self.quantity,
                    status=self.status,
                    changed_fields=json.dumps(changed),
                )
            )
        return changed

    def annotate(self, order_status=None, remark=None):
        if order_status is not None:
            self.order_status = order_status
        if remark is not None:
            self.remark = remark
        self.updated_at = datetime.now(UTC)

        self.raise_(
            InventoryItemAnnotated(
                inventory_item_id=str(self.id),
                order_status=self.order_status,
                remark=self.remark,
            )
        )

    def mark_removed(self, removed_cart_items=0):
        self.raise_(
            InventoryItemRemoved(
                inventory_item_id=str(self.id),
                name=self.name,
                removed_cart_items=removed_cart_items,
            )
        )
