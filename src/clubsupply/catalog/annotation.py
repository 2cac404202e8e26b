"""Batch annotation of catalog items with external-order status and remark."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Text
from protean.utils.globals import current_domain

from clubsupply.catalog.inventory_item import InventoryItem, OrderStatus
from clubsupply.domain import clubsupply
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUSES = {status.value for status in OrderStatus}


@clubsupply.command(part_of="InventoryItem")
class AnnotateInventoryItems:
    """Set ``order_status`` and/or ``remark`` on several catalog items at once."""

    annotations = Text(required=True, sanitize=False)  # JSON: list of {inventory_item_id, order_status?, remark?}


def parse_annotations(raw):
    entries = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(entries, list) or not entries:
        raise ValidationError({"annotations": ["At least one annotation is required"]})

    parsed = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("inventory_item_id"):
            raise ValidationError({"annotations": [f"Entry {position} is missing inventory_item_id"]})

        order_status = entry.get("order_status")
        if order_status is not None and order_status not in ORDER_STATUSES:
            raise ValidationError({"order_status": [f"Entry {position} has unknown order status '{order_status}'"]})

        parsed.append(
            {
                "inventory_item_id": str(entry["inventory_item_id"]),
                "order_status": order_status,
                "remark": entry.get("remark"),
            }
        )
    return parsed


@clubsupply.command_handler(part_of=InventoryItem)
class AnnotateInventoryHandler:
    @handle(AnnotateInventoryItems)
    def annotate_inventory_items(self, command):
        """All or nothing: an unknown id raises ``ObjectNotFoundError`` and nothing is saved."""
        entries = parse_annotations(command.annotations)
        repo = current_domain.repository_for(InventoryItem)

        touched = {}
        for entry in entries:
            item_id = entry["inventory_item_id"]
            item = touched.get(item_id) or repo.get(item_id)
            item.annotate(order_status=entry["order_status"], remark=entry["remark"])
            touched[item_id] = item

        for item in touched.values():
            repo.add(item)

        logger.info("inventory_items_annotated", count=len(touched))
        return list(touched)
