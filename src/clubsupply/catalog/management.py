"""Catalog management: commands and handler for add, update and delete."""

from collections import OrderedDict

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from clubsupply.cart.cart import Cart
from clubsupply.cart.cart_item import CartItem
from clubsupply.catalog.inventory_item import InventoryItem, ItemStatus
from clubsupply.domain import clubsupply
from clubsupply.shared.errors import ConflictError, unique_violation
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


@clubsupply.command(part_of="InventoryItem")
class AddInventoryItem:
    name = String(required=True, max_length=255, sanitize=False)
    quantity = Integer(min_value=0, default=0)
    status = String(choices=ItemStatus)


@clubsupply.command(part_of="InventoryItem")
class UpdateInventoryItem:
    """Change any of name, quantity and status; omitted values stay as they are."""

    inventory_item_id = Identifier(required=True)
    name = String(max_length=255, sanitize=False)
    quantity = Integer(min_value=0)
    status = String(choices=ItemStatus)


@clubsupply.command(part_of="InventoryItem")
class RemoveInventoryItem:
    inventory_item_id = Identifier(required=True)


def _name_taken(name):
    return ConflictError(f"An inventory item named '{name}' already exists")


@clubsupply.command_handler(part_of=InventoryItem)
class ManageInventoryHandler:
    @handle(AddInventoryItem)
    def add_inventory_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        if repo.find_by_name(command.name) is not None:
            raise _name_taken(command.name)

        item = InventoryItem.add(
            name=command.name,
            quantity=command.quantity,
            status=command.status,
        )
        try:
            repo.add(item)
        except ValidationError as exc:
            # A concurrent add can win the race past the check above
            if unique_violation(exc, "name"):
                raise _name_taken(command.name) from exc
            raise

        logger.info("inventory_item_added", inventory_item_id=str(item.id), name=item.name)
        return str(item.id)

    @handle(UpdateInventoryItem)
    def update_inventory_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)

        if command.name is not None and command.name != item.name:
            other = repo.find_by_name(command.name)
            if other is not None and str(other.id) != str(item.id):
                raise _name_taken(command.name)

        changed = item.update_details(
            name=command.name,
            quantity=command.quantity,
            status=command.status,
        )
        repo.add(item)

        logger.info("inventory_item_updated", inventory_item_id=str(item.id), changed=changed)
        return str(item.id)

    @handle(RemoveInventoryItem)
    def remove_inventory_item(self, command):
        """Delete a catalog item and every line item that references it.

        Carts left without line items are deleted too.
        """
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)

        cart_repo = current_domain.repository_for(Cart)
        line_repo = current_domain.repository_for(CartItem)

        lines = line_repo.for_inventory_item(item.id)
        lines_by_cart = OrderedDict()
        for line in lines:
            lines_by_cart.setdefault(str(line.cart_id), []).append(line)

        for line in lines:
            line.discard(reason="inventory_item_removed")
            line_repo.remove(line)

        emptied = 0
        for cart_id, cart_lines in lines_by_cart.items():
            cart = cart_repo.get_or_none(cart_id)
            if cart is None:
                continue
            for line in cart_lines:
                cart.detach(line.id)
            if cart.is_empty():
                cart.close(reason="emptied")
                cart_repo.remove(cart)
                emptied += 1
            else:
                cart_repo.add(cart)

        item.mark_removed(removed_cart_items=len(lines))
        repo.remove(item)

        logger.info(
            "inventory_item_removed",
            inventory_item_id=str(item.id),
            removed_cart_items=len(lines),
            emptied_carts=emptied,
        )
        return {"removed_cart_items": len(lines), "emptied_carts": emptied}
