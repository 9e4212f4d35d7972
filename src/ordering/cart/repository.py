"""Cart repository. One cart per user, created lazily on first access."""

from ordering.cart.cart import Cart, cart_id_for
from ordering.domain import ordering


@ordering.repository(part_of=Cart)
class CartRepository:
    def find_by_user(self, user_id) -> Cart | None:
        return self.get_or_none(cart_id_for(user_id))

    def get_or_create(self, user_id) -> Cart:
        """Return the user's cart, or a new one that has not been added yet."""
        cart = self.find_by_user(user_id)
        if cart is None:
            cart = Cart.create(user_id)
        return cart
