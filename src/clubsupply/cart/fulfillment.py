"""Administrator fulfillment updates on cart line items.

Three flavours share one update rule (allotted quantity accumulates, status
and remarks are replaced):

* a single line item;
* a strict batch, applied in order, where the first unknown id aborts the
  batch and nothing is saved;
* a lenient batch that only touches line items still backed by a catalog
  item, skipping the rest.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from clubsupply.cart.cart_item import CartItem, normalize_status
from clubsupply.catalog.inventory_item import InventoryItem
from clubsupply.domain import clubsupply
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


@clubsupply.command(part_of="CartItem")
class UpdateCartItemFulfillment:
    cart_item_id = Identifier(required=True)
    allotted_delta = Integer(min_value=0)
    status = String(max_length=20)
    remarks = Text(sanitize=False)


@clubsupply.command(part_of="CartItem")
class UpdateCartItemsFulfillment:
    updates = Text(required=True, sanitize=False)  # JSON: list of {cart_item_id, allotted_delta?, status?, remarks?}


@clubsupply.command(part_of="CartItem")
class ReconcileCatalogFulfillment:
    updates = Text(required=True, sanitize=False)  # JSON: list of {cart_item_id, allotted_delta?, status?, remarks?}


def parse_update(entry, position=None):
    """Validate one update entry and return it with a canonical status."""
    where = "Update" if position is None else f"Entry {position}"
    if not isinstance(entry, dict) or not entry.get("cart_item_id"):
        raise ValidationError({"cart_item_id": [f"{where} is missing cart_item_id"]})

    allotted_delta = entry.get("allotted_delta")
    status = entry.get("status")
    remarks = entry.get("remarks")
    if allotted_delta is None and status is None and remarks is None:
        raise ValidationError({"updates": [f"{where} changes nothing; give allotted_delta, status or remarks"]})

    if allotted_delta is not None and (
        isinstance(allotted_delta, bool) or not isinstance(allotted_delta, int) or allotted_delta < 0
    ):
        raise ValidationError({"allotted_delta": [f"{where} must allot a non-negative whole quantity"]})

    return {
        "cart_item_id": str(entry["cart_item_id"]),
        "allotted_delta": allotted_delta,
        "status": normalize_status(status),
        "remarks": remarks,
    }


def parse_updates(raw):
    entries = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(entries, list) or not entries:
        raise ValidationError({"updates": ["At least one update is required"]})
    return [parse_update(entry, position) for position, entry in enumerate(entries)]


def _apply(line, update):
    line.update_fulfillment(
        allotted_delta=update["allotted_delta"],
        status=update["status"],
        remarks=update["remarks"],
    )


@clubsupply.command_handler(part_of=CartItem)
class CartItemFulfillmentHandler:
    @handle(UpdateCartItemFulfillment)
    def update_cart_item_fulfillment(self, command):
        update = parse_update(
            {
                "cart_item_id": command.cart_item_id,
                "allotted_delta": command.allotted_delta,
                "status": command.status,
                "remarks": command.remarks,
            }
        )
        repo = current_domain.repository_for(CartItem)
        line = repo.get(update["cart_item_id"])
        _apply(line, update)
        repo.add(line)

        logger.info(
            "cart_item_fulfillment_updated",
            cart_item_id=str(line.id),
            allotted_quantity=line.allotted_quantity,
            status=line.status,
        )
        return str(line.id)

    @handle(UpdateCartItemsFulfillment)
    def update_cart_items_fulfillment(self, command):
        updates = parse_updates(command.updates)
        repo = current_domain.repository_for(CartItem)

        touched = {}
        for update in updates:
            line_id = update["cart_item_id"]
            # Raises ObjectNotFoundError; the unit of work then discards earlier entries
            line = touched.get(line_id) or repo.get(line_id)
            _apply(line, update)
            touched[line_id] = line

        for line in touched.values():
            repo.add(line)

        logger.info("cart_items_fulfillment_updated", count=len(updates))
        return list(touched)

    @handle(ReconcileCatalogFulfillment)
    def reconcile_catalog_fulfillment(self, command):
        updates = parse_updates(command.updates)
        repo = current_domain.repository_for(CartItem)

        lines = {}
        for update in updates:
            line_id = update["cart_item_id"]
            if line_id not in lines:
                lines[line_id] = repo.get_or_none(line_id)

        live_catalog_ids = current_domain.repository_for(InventoryItem).existing_ids(
            line.inventory_item_id for line in lines.values() if line is not None
        )

        updated, skipped = [], []
        for update in updates:
            line_id = update["cart_item_id"]
            line = lines[line_id]
            if line is None:
                reason = "unknown_cart_item"
            elif line.is_custom():
                reason = "custom_item"
            elif str(line.inventory_item_id) not in live_catalog_ids:
                reason = "inventory_item_removed"
            else:
                _apply(line, update)
                if line_id not in updated:
                    updated.append(line_id)
                continue

            logger.warning("cart_item_update_skipped", cart_item_id=line_id, reason=reason)
            if line_id not in skipped:
                skipped.append(line_id)

        for line_id in updated:
            repo.add(lines[line_id])

        logger.info("catalog_fulfillment_reconciled", updated=len(updated), skipped=len(skipped))
        return {"updated": updated, "skipped": skipped}
