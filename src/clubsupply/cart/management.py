"""Cart deletion by an administrator."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from clubsupply.cart.cart import Cart
from clubsupply.cart.cart_item import CartItem
from clubsupply.domain import clubsupply
from clubsupply.utils.logging import get_logger

logger = get_logger(__name__)


@clubsupply.command(part_of="Cart")
class DeleteCart:
    cart_id = Identifier(required=True)


@clubsupply.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(DeleteCart)
    def delete_cart(self, command):
        """Delete the cart's line items, then the cart itself."""
        cart_repo = current_domain.repository_for(Cart)
        line_repo = current_domain.repository_for(CartItem)

        cart = cart_repo.get(command.cart_id)
        lines = line_repo.for_cart(cart)
        for line in lines:
            line.discard(reason="cart_deleted")
            line_repo.remove(line)

        cart.close(reason="deleted_by_administrator")
        cart_repo.remove(cart)

        logger.info("cart_deleted", cart_id=str(cart.id), removed_cart_items=len(lines))
        return len(lines)
