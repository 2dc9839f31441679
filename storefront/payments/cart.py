"""
Logique panier pure (pas de Stripe, pas de réseau).
"""
import json
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidRequest

# Limite Stripe sur la longueur d'une valeur de metadata
METADATA_VALUE_MAX = 500

# module storefront.payments.cart
class CheckoutItem(BaseModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    price: int = Field(ge=0, strict=True)
    quantity: int = Field(ge=1, strict=True)


def _describe(position: int, exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "item"
    return f"Invalid item at position {position}: {field} {err.get('msg', 'is invalid')}"

def parse_items(items: Any) -> List[CheckoutItem]:
    """
    Valide un panier brut [{id?, name, price, quantity}, ...].
    - Soulève InvalidRequest("No items provided") si items est absent, vide ou n'est pas une liste.
    - Soulève InvalidRequest sur le premier article invalide (prix négatif, quantité < 1, nom vide).
    """
    if not items or not isinstance(items, list):
        raise InvalidRequest("No items provided")
    parsed: List[CheckoutItem] = []
    for position, raw in enumerate(items):
        if not isinstance(raw, dict):
            raise InvalidRequest(f"Invalid item at position {position}: expected an object")
        try:
            parsed.append(CheckoutItem.model_validate(raw))
        except ValidationError as e:
            raise InvalidRequest(_describe(position, e))
    return parsed

def to_line_items(items: List[CheckoutItem], currency: str) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir du panier validé.
    - unit_amount est déjà en unités mineures (centimes), transmis tel quel.
    """
    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": item.name},
                "unit_amount": item.price,
            },
            "quantity": item.quantity,
        }
        for item in items
    ]

def make_metadata(items: List[CheckoutItem]) -> Dict[str, str]:
    """
    Métadonnées Stripe associées à la session: {"cart": "[{id, quantity}, ...]"}.
    - Seuls les articles portant un id sont référencés.
    - Les dernières lignes sont retirées tant que le JSON dépasse 500 caractères (limite Stripe).
    """
    cart_meta = [{"id": it.id, "quantity": it.quantity} for it in items if it.id]
    cart_json = json.dumps(cart_meta)
    while cart_meta and len(cart_json) > METADATA_VALUE_MAX:
        cart_meta.pop()
        cart_json = json.dumps(cart_meta)
    if not cart_meta:
        return {}
    return {"cart": cart_json}
