"""Catalog listings, cart views and the requester directory."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from clubsupply.access.coordinator import Coordinator
from clubsupply.cart.cart import Cart
from clubsupply.cart.cart_item import CartItem
from clubsupply.catalog.inventory_item import InventoryItem


def _inventory_row(item):
    return {
        "id": str(item.id),
        "name": item.name,
        "quantity": item.quantity,
        "status": item.status,
        "order_status": item.order_status,
        "remark": item.remark,
    }


def list_inventory():
    return [_inventory_row(item) for item in current_domain.repository_for(InventoryItem).list_all()]


def list_enabled_inventory():
    """What requesters may pick from: enabled items, without stock figures."""
    return [
        {"id": str(item.id), "name": item.name, "status": item.status}
        for item in current_domain.repository_for(InventoryItem).list_enabled()
    ]


def get_inventory_item(inventory_item_id):
    return _inventory_row(current_domain.repository_for(InventoryItem).get(inventory_item_id))


def _cart_lines(requester_id):
    cart = current_domain.repository_for(Cart).find_by_requester(requester_id)
    if cart is None:
        raise ObjectNotFoundError(f"No cart found for requester {requester_id}")

    lines = current_domain.repository_for(CartItem).for_cart(cart)
    if not lines:
        raise ObjectNotFoundError(f"Cart {cart.id} has no items")
    return lines


def requester_cart_view(requester_id):
    """The requester's own cart: what was asked for and where it stands."""
    return [
        {
            "id": str(line.id),
            "name": line.name,
            "ordered_quantity": line.ordered_quantity,
            "status": line.status,
            "remarks": line.remarks,
        }
        for line in _cart_lines(requester_id)
    ]


def administrator_cart_view(requester_id):
    return [
        {
            "id": str(line.id),
            "cart_id": str(line.cart_id),
            "inventory_item_id": str(line.inventory_item_id) if line.inventory_item_id else None,
            "name": line.name,
            "ordered_quantity": line.ordered_quantity,
            "allotted_quantity": line.allotted_quantity,
            "status": line.status,
            "remarks": line.remarks,
            "link": line.link,
        }
        for line in _cart_lines(requester_id)
    ]


def requester_directory():
    """One row per cart with the owning coordinator's profile, blank if the account is gone."""
    coordinator_repo = current_domain.repository_for(Coordinator)

    rows = []
    for cart in current_domain.repository_for(Cart).list_all():
        coordinator = coordinator_repo.get_or_none(cart.requester_id)
        rows.append(
            {
                "cart_id": str(cart.id),
                "requester_id": str(cart.requester_id),
                "club_name": coordinator.club_name if coordinator else "",
                "coordinator_name": coordinator.coordinator_name if coordinator else "",
                "contact": coordinator.mobile if coordinator else "",
            }
        )
    return rows
