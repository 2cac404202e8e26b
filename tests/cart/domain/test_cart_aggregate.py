"""Domain tests for the Cart aggregate."""

from clubsupply.cart.cart import Cart
from clubsupply.cart.events import CartCreated, CartDeleted


class TestOpenCart:
    def test_starts_empty(self):
        cart = Cart.open("req-1")
        assert cart.requester_id == "req-1"
        assert cart.line_item_ids() == []
        assert cart.is_empty()

    def test_raises_created_event(self):
        cart = Cart.open("req-1")
        assert isinstance(cart._events[0], CartCreated)
        assert cart._events[0].requester_id == "req-1"


class TestLineItemReferences:
    def test_attach_keeps_order(self):
        cart = Cart.open("req-1")
        cart.attach("b")
        cart.attach("a")
        assert cart.line_item_ids() == ["b", "a"]

    def test_attach_is_idempotent(self):
        cart = Cart.open("req-1")
        cart.attach("a")
        cart.attach("a")
        assert cart.line_item_ids() == ["a"]

    def test_detach(self):
        cart = Cart.open("req-1")
        cart.attach("a")
        cart.attach("b")
        cart.detach("a")
        assert cart.line_item_ids() == ["b"]
        assert not cart.is_empty()

    def test_close_raises_deleted_event(self):
        cart = Cart.open("req-1")
        cart.close(reason="emptied")
        event = cart._events[-1]
        assert isinstance(event, CartDeleted)
        assert event.reason == "emptied"
