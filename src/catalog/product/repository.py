"""Product repository.

The ordering core treats the catalogue as a read capability plus the writes
the Stock Ledger makes. Inactive products are invisible to shoppers.
"""

from catalog.product.product import Product
from ordering.domain import ordering
from shared.errors import NotFound


@ordering.repository(part_of=Product)
class ProductRepository:
    def list_all(self) -> list[Product]:
        return self.query.order_by("id").limit(None).all().items

    def get_available(self, product_id) -> Product:
        """Return a product that can be sold. Unknown and inactive products are reported as not found."""
        product = self.get_or_none(str(product_id))
        if product is None or not product.is_active:
            raise NotFound("Product not found", product_id=str(product_id))
        return product
