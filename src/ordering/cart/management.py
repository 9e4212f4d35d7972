"""Cart management: commands and handler.

Handles lazy cart retrieval and clearing.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class GetCart:
    """Return the user's cart, creating an empty one on first access."""

    user_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(GetCart)
    def get_cart(self, command) -> Cart:
        repo = current_domain.repository_for(Cart)
        cart = repo.find_by_user(command.user_id)
        if cart is None:
            cart = Cart.create(command.user_id)
            repo.add(cart)
        return cart

    @handle(ClearCart)
    def clear_cart(self, command) -> Cart:
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        cart.clear()
        repo.add(cart)
        return cart
