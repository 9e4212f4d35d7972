"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from catalog.product.product import Product
from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@ordering.command(part_of="Cart")
class UpdateCartItemQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command) -> Cart:
        product = current_domain.repository_for(Product).get_available(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        cart.add_item(product, quantity=command.quantity)
        repo.add(cart)
        return cart

    @handle(UpdateCartItemQuantity)
    def update_item_quantity(self, command) -> Cart:
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        cart.update_item_quantity(command.product_id, command.quantity)
        repo.add(cart)
        return cart

    @handle(RemoveFromCart)
    def remove_from_cart(self, command) -> Cart:
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        cart.remove_item(command.product_id)
        repo.add(cart)
        return cart
