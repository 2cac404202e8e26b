"""Reconciliation reports, recomputed from the stores on every call.

The inventory summary joins each catalog item with the demand recorded
against it across all carts. Line items are grouped by their catalog id;
custom items have none, so each one forms a group of its own and never
merges with a same-named custom item from another cart.
"""

from collections import OrderedDict

from protean.utils.globals import current_domain

from clubsupply.cart.cart_item import CartItem
from clubsupply.catalog.inventory_item import InventoryItem


def demand_key(line):
    return str(line.inventory_item_id) if line.inventory_item_id else str(line.id)


def demand_by_item(lines):
    """Sum requested and allotted quantities per demand key."""
    groups = OrderedDict()
    for line in lines:
        group = groups.setdefault(demand_key(line), {"total_requested": 0, "total_allotted": 0, "line_items": 0})
        group["total_requested"] += line.ordered_quantity or 0
        group["total_allotted"] += line.allotted_quantity or 0
        group["line_items"] += 1
    return groups


def inventory_summary():
    """One row per catalog item: availability next to total requested and allotted."""
    items = current_domain.repository_for(InventoryItem).list_all()
    groups = demand_by_item(current_domain.repository_for(CartItem).list_all())

    rows = []
    for item in items:
        group = groups.get(str(item.id), {})
        rows.append(
            {
                "id": str(item.id),
                "name": item.name,
                "available_quantity": item.quantity,
                "total_requested": group.get("total_requested", 0),
                "total_allotted": group.get("total_allotted", 0),
                "order_status": item.order_status,
                "remark": item.remark,
            }
        )
    return rows


def custom_item_report():
    """Custom line items exactly as requested; they have no catalog row to join."""
    return [
        {
            "id": str(line.id),
            "cart_id": str(line.cart_id),
            "name": line.name,
            "ordered_quantity": line.ordered_quantity,
            "allotted_quantity": line.allotted_quantity,
            "status": line.status,
            "remarks": line.remarks,
            "link": line.link,
        }
        for line in current_domain.repository_for(CartItem).list_custom()
    ]
