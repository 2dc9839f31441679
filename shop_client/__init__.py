"""
Client de la boutique: panier, parcours de paiement et appels au backend storefront.
"""

from .api import StorefrontAPI, CheckoutSession, NetworkError
from .cart import Cart, CartItem, Product, format_price
from .checkout import CheckoutFlow, CheckoutState
from .redirect import HostedCheckoutRedirector, RedirectError

__all__ = [
    "StorefrontAPI",
    "CheckoutSession",
    "NetworkError",
    "Cart",
    "CartItem",
    "Product",
    "format_price",
    "CheckoutFlow",
    "CheckoutState",
    "HostedCheckoutRedirector",
    "RedirectError",
]
