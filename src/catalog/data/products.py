"""Starter catalogue (prices in Indian rupees), loaded by ``manage.py seed``."""

from protean.utils.globals import current_domain

from catalog.product.product import Product, ProductCategory

_UNSPLASH = "https://images.unsplash.com/{photo}?w=400&h=400&fit=crop"

SEED_PRODUCTS = [
    {
        "product_id": "1",
        "name": "Wireless Bluetooth Headphones",
        "description": "High-quality wireless headphones with noise cancellation and 30-hour battery life.",
        "price": 8299,
        "category": ProductCategory.ELECTRONICS,
        "image": _UNSPLASH.format(photo="photo-1505740420928-5e560c06d30e"),
        "stock_quantity": 50,
    },
    {
        "product_id": "2",
        "name": "Smart Fitness Watch",
        "description": "Advanced fitness tracker with heart rate monitoring, GPS, and waterproof design.",
        "price": 20799,
        "category": ProductCategory.WEARABLES,
        "image": _UNSPLASH.format(photo="photo-1523275335684-37898b6baf30"),
        "stock_quantity": 30,
    },
    {
        "product_id": "3",
        "name": "Portable Laptop Stand",
        "description": "Ergonomic aluminum laptop stand with adjustable height and cooling design.",
        "price": 4149,
        "category": ProductCategory.ACCESSORIES,
        "image": _UNSPLASH.format(photo="photo-1527864550417-7fd91fc51a46"),
        "stock_quantity": 75,
    },
    {
        "product_id": "4",
        "name": "Wireless Charging Pad",
        "description": "Fast wireless charging pad compatible with all Qi-enabled devices.",
        "price": 2499,
        "category": ProductCategory.ACCESSORIES,
        "image": _UNSPLASH.format(photo="photo-1586953208448-b95a79798f07"),
        "stock_quantity": 100,
    },
    {
        "product_id": "5",
        "name": "USB-C Hub",
        "description": "7-in-1 USB-C hub with HDMI, USB 3.0, SD card reader, and PD charging.",
        "price": 6649,
        "category": ProductCategory.ACCESSORIES,
        "image": _UNSPLASH.format(photo="photo-1625842268584-8f3296236761"),
        "stock_quantity": 40,
    },
    {
        "product_id": "6",
        "name": "Mechanical Keyboard",
        "description": "RGB backlit mechanical keyboard with blue switches and programmable keys.",
        "price": 10799,
        "category": ProductCategory.PERIPHERALS,
        "image": _UNSPLASH.format(photo="photo-1541140532154-b024d705b90a"),
        "stock_quantity": 25,
    },
    {
        "product_id": "7",
        "name": "4K Webcam",
        "description": "Ultra HD webcam with auto-focus, built-in microphone, and privacy shutter.",
        "price": 7499,
        "category": ProductCategory.ELECTRONICS,
        "image": _UNSPLASH.format(photo="photo-1587825140708-dfaf72ae4b04"),
        "stock_quantity": 35,
    },
    {
        "product_id": "8",
        "name": "Bluetooth Speaker",
        "description": "Portable waterproof Bluetooth speaker with 360-degree sound and 12-hour battery.",
        "price": 5829,
        "category": ProductCategory.AUDIO,
        "image": _UNSPLASH.format(photo="photo-1608043152269-423dbba4e7e1"),
        "stock_quantity": 60,
    },
]


def seed_catalogue() -> int:
    """Add every starter product that is not already present. Returns how many were added.

    Must run inside a domain context.
    """
    repo = current_domain.repository_for(Product)
    added = 0
    for data in SEED_PRODUCTS:
        if repo.get_or_none(data["product_id"]) is not None:
            continue
        repo.add(Product.create(**data))
        added += 1
    return added
