"""Domain events for the Product aggregate."""

from protean.fields import Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Product")
class ProductAdded:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    price = String(required=True)  # serialized Decimal
    stock_quantity = Integer(required=True)


@ordering.event(part_of="Product")
class StockDecreased:
    """Units of a product left the stock ledger, usually for a placed order."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)


@ordering.event(part_of="Product")
class StockIncreased:
    """Units of a product returned to the stock ledger."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
