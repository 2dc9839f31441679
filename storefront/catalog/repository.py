from typing import List, Optional

from .models import Product

# Catalogue statique: même contenu et même ordre pendant toute la vie du process
_PRODUCTS = (
    Product(id="product_1", name="Premium Coffee Beans", price=1500, image_url="/images/coffee.jpg"),
    Product(id="product_2", name="Handcrafted Mug", price=2500, image_url="/images/mug.jpg"),
)

def list_products() -> List[Product]:
    return list(_PRODUCTS)

def get_product(product_id: str) -> Optional[Product]:
    if not product_id:
        return None
    return next((p for p in _PRODUCTS if p.id == product_id), None)
