from typing import List

from fastapi import APIRouter

from .models import Product
from .repository import list_products

router = APIRouter(prefix="/api", tags=["Catalog API"])

@router.get("/products", response_model=List[Product])
def get_products() -> List[Product]:
    """Catalogue public: [{id, name, price, imageUrl}, ...], prix en centimes."""
    return list_products()
