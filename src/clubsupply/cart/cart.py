"""Cart aggregate: at most one per requester.

The cart owns the ordered list of its line-item ids. Line items themselves
are ``CartItem`` aggregates so they can be queried across carts.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Text

from clubsupply.cart.events import CartCreated, CartDeleted
from clubsupply.domain import clubsupply


@clubsupply.aggregate
class Cart:
    requester_id = Identifier(required=True, unique=True)
    item_ids = Text(sanitize=False)  # JSON array of CartItem ids, in the order they were added
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, requester_id):
        now = datetime.now(UTC)
        cart = cls(
            requester_id=requester_id,
            item_ids=json.dumps([]),
            created_at=now,
            updated_at=now,
        )
        cart.raise_(CartCreated(cart_id=str(cart.id), requester_id=str(requester_id)))
        return cart

    # -------------------------------------------------------------------
    # Line-item references
    # -------------------------------------------------------------------
    def line_item_ids(self):
        return json.loads(self.item_ids) if self.item_ids else []

    def is_empty(self):
        return not self.line_item_ids()

    def attach(self, cart_item_id):
        ids = self.line_item_ids()
        if str(cart_item_id) not in ids:
            ids.append(str(cart_item_id))
            self.item_ids = json.dumps(ids)
            self.updated_at = datetime.now(UTC)

    def detach(self, cart_item_id):
        ids = [i for i in self.line_item_ids() if i != str(cart_item_id)]
        self.item_ids = json.dumps(ids)
        self.updated_at = datetime.now(UTC)

    def close(self, reason):
        self.raise_(CartDeleted(cart_id=str(self.id), requester_id=str(self.requester_id), reason=reason))
