"""Cart and line-item queries."""

from clubsupply.cart.cart import Cart
from clubsupply.cart.cart_item import CartItem
from clubsupply.domain import clubsupply


@clubsupply.repository(part_of=Cart)
class CartRepository:
    def find_by_requester(self, requester_id) -> Cart | None:
        return self.query.filter(requester_id=str(requester_id)).all().first

    def list_all(self) -> list[Cart]:
        return self.query.order_by("created_at").limit(None).all().items

    def remove(self, cart: Cart) -> None:
        self.add(cart)
        self._dao.delete(cart)


@clubsupply.repository(part_of=CartItem)
class CartItemRepository:
    def for_cart(self, cart: Cart) -> list[CartItem]:
        """Line items of ``cart`` in the order the cart lists them."""
        items = self.query.filter(cart_id=str(cart.id)).limit(None).all().items
        position = {item_id: index for index, item_id in enumerate(cart.line_item_ids())}
        return sorted(items, key=lambda item: position.get(str(item.id), len(position)))

    def for_inventory_item(self, inventory_item_id) -> list[CartItem]:
        return self.query.filter(inventory_item_id=str(inventory_item_id)).limit(None).all().items

    def list_all(self) -> list[CartItem]:
        return self.query.order_by("created_at").limit(None).all().items

    def list_custom(self) -> list[CartItem]:
        return [item for item in self.list_all() if item.is_custom()]

    def remove(self, cart_item: CartItem) -> None:
        self.add(cart_item)
        self._dao.delete(cart_item)
