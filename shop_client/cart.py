"""
Panier côté client: valeur immuable et fonctions de transition.

Chaque transition (add, remove, set_quantity) retourne un nouveau Cart; l'ordre
de première insertion est conservé pour l'affichage et un produit n'apparaît
qu'une fois. Les montants sont en unités mineures (centimes).
"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    price: int = Field(ge=0)
    image_url: str = Field(default="", alias="imageUrl")


class CartItem(Product):
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


class Cart(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: Tuple[CartItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.items

    def get(self, product_id: str) -> Optional[CartItem]:
        return next((it for it in self.items if it.id == product_id), None)

    def add(self, product: Product) -> "Cart":
        """+1 si le produit est déjà présent, sinon nouvelle ligne à quantité 1 en fin de panier."""
        if self.get(product.id) is not None:
            return Cart(items=tuple(
                it.model_copy(update={"quantity": it.quantity + 1}) if it.id == product.id else it
                for it in self.items
            ))
        item = CartItem(id=product.id, name=product.name, price=product.price,
                        image_url=product.image_url, quantity=1)
        return Cart(items=self.items + (item,))

    def remove(self, product_id: str) -> "Cart":
        return Cart(items=tuple(it for it in self.items if it.id != product_id))

    def set_quantity(self, product_id: str, quantity: int) -> "Cart":
        """quantity <= 0 équivaut à remove; id absent: panier inchangé."""
        if quantity <= 0:
            return self.remove(product_id)
        return Cart(items=tuple(
            it.model_copy(update={"quantity": quantity}) if it.id == product_id else it
            for it in self.items
        ))

    def total(self) -> int:
        return sum(it.subtotal for it in self.items)

    def item_count(self) -> int:
        return sum(it.quantity for it in self.items)

    def to_checkout_items(self) -> List[Dict[str, Any]]:
        # Seules les données utiles au backend: id, name, price, quantity
        return [
            {"id": it.id, "name": it.name, "price": it.price, "quantity": it.quantity}
            for it in self.items
        ]


def format_price(minor_units: int) -> str:
    """1500 -> "15.00"."""
    units, cents = divmod(minor_units, 100)
    return f"{units}.{cents:02d}"
