"""Adding and removing cart line items.

Every add first computes the identity of what is being requested (the
catalog id, or the name of a custom item) and then either merges into the
line already holding that identity or creates a new one. A requester's cart
is opened lazily on the first add.
"""

import json
from collections import OrderedDict

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from clubsupply.cart.cart import Cart
from clubsupply.cart.cart_item import CartItem
from clubsupply.catalog.inventory_item import InventoryItem
from clubsupply.domain import clubsupply
from clubsupply.shared.errors import unique_violation
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


@clubsupply.command(part_of="Cart")
class AddCatalogItemsToCart:
    requester_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of {inventory_item_id, quantity}


@clubsupply.command(part_of="Cart")
class AddCustomItemToCart:
    requester_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    quantity = Integer(required=True, min_value=1)
    link = String(max_length=2048, sanitize=False)


@clubsupply.command(part_of="Cart")
class RemoveCartItem:
    cart_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)


def open_cart_for(requester_id):
    """Return the requester's cart, opening an empty one if there is none yet.

    Two first-adds racing each other hit the unique ``requester_id``; the
    loser falls back to the winner's cart.
    """
    repo = current_domain.repository_for(Cart)
    cart = repo.find_by_requester(requester_id)
    if cart is not None:
        return cart

    cart = Cart.open(requester_id)
    try:
        repo.add(cart)
    except ValidationError as exc:
        if not unique_violation(exc, "requester_id"):
            raise
        logger.info("cart_open_lost_race", requester_id=str(requester_id))
        existing = repo.find_by_requester(requester_id)
        if existing is None:
            raise
        return existing

    logger.info("cart_opened", cart_id=str(cart.id), requester_id=str(requester_id))
    return cart


def parse_requested_items(raw):
    """Validate the batch and sum quantities per catalog id, keeping first-seen order."""
    entries = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(entries, list) or not entries:
        raise ValidationError({"items": ["At least one item is required"]})

    requested = OrderedDict()
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("inventory_item_id"):
            raise ValidationError({"items": [f"Entry {position} is missing inventory_item_id"]})

        quantity = entry.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": [f"Entry {position} must request a positive whole quantity"]})

        key = str(entry["inventory_item_id"])
        requested[key] = requested.get(key, 0) + quantity
    return requested


@clubsupply.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(AddCatalogItemsToCart)
    def add_catalog_items(self, command):
        requested = parse_requested_items(command.items)

        # Resolve every catalog id before writing anything
        catalog_repo = current_domain.repository_for(InventoryItem)
        catalog_items = {item_id: catalog_repo.get(item_id) for item_id in requested}

        cart = open_cart_for(command.requester_id)
        line_repo = current_domain.repository_for(CartItem)
        by_catalog_id = {
            str(line.inventory_item_id): line for line in line_repo.for_cart(cart) if not line.is_custom()
        }

        touched = []
        for item_id, quantity in requested.items():
            line = by_catalog_id.get(item_id)
            if line is not None:
                line.accumulate(quantity)
                merged = True
            else:
                line = CartItem.for_catalog_item(cart.id, catalog_items[item_id], quantity)
                cart.attach(line.id)
                merged = False

            line_repo.add(line)
            touched.append(str(line.id))
            logger.info(
                "cart_item_added",
                cart_id=str(cart.id),
                cart_item_id=str(line.id),
                inventory_item_id=item_id,
                quantity=quantity,
                merged=merged,
            )

        current_domain.repository_for(Cart).add(cart)
        return {"cart_id": str(cart.id), "cart_item_ids": touched}

    @handle(AddCustomItemToCart)
    def add_custom_item(self, command):
        cart = open_cart_for(command.requester_id)
        line_repo = current_domain.repository_for(CartItem)

        line = next(
            (line for line in line_repo.for_cart(cart) if line.is_custom() and line.name == command.name),
            None,
        )
        if line is not None:
            line.accumulate(command.quantity, link=command.link)
            merged = True
        else:
            line = CartItem.custom(cart.id, command.name, command.quantity, link=command.link)
            cart.attach(line.id)
            merged = False

        line_repo.add(line)
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "custom_cart_item_added",
            cart_id=str(cart.id),
            cart_item_id=str(line.id),
            quantity=command.quantity,
            merged=merged,
        )
        return {"cart_id": str(cart.id), "cart_item_ids": [str(line.id)]}

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        """Remove one line named ``name``; delete the cart if that was its last line.

        A catalog-backed line goes before a custom line of the same name.
        """
        cart_repo = current_domain.repository_for(Cart)
        line_repo = current_domain.repository_for(CartItem)

        cart = cart_repo.get(command.cart_id)
        matches = [line for line in line_repo.for_cart(cart) if line.name == command.name]
        if not matches:
            raise ObjectNotFoundError(f"Item '{command.name}' not found in cart {command.cart_id}")
        line = next((match for match in matches if not match.is_custom()), matches[0])

        line.discard(reason="removed_by_administrator")
        line_repo.remove(line)

        cart.detach(line.id)
        if cart.is_empty():
            cart.close(reason="emptied")
            cart_repo.remove(cart)
            cart_deleted = True
        else:
            cart_repo.add(cart)
            cart_deleted = False

        logger.info(
            "cart_item_removed",
            cart_id=str(cart.id),
            cart_item_id=str(line.id),
            cart_deleted=cart_deleted,
        )
        return {"cart_id": str(cart.id), "cart_deleted": cart_deleted}
