"""
Parcours d'achat côté client.

Deux états: BROWSING (initial) et REVIEWING.
- proceed_to_checkout: BROWSING -> REVIEWING si le panier n'est pas vide (sinon alerte)
- back_to_shopping: REVIEWING -> BROWSING
- pay (depuis REVIEWING): crée la session via le backend puis redirige vers la page
  Stripe; en cas d'échec, alerte avec la raison et reste en REVIEWING (l'utilisateur peut réessayer).
"""
import enum
import logging
from typing import Callable, List, Optional

from .api import CheckoutSession, NetworkError, StorefrontAPI
from .cart import Cart, Product
from .redirect import HostedCheckoutRedirector, RedirectError

logger = logging.getLogger(__name__)

EMPTY_CART_MESSAGE = "Your cart is empty! Please add some products."


class CheckoutState(str, enum.Enum):
    BROWSING = "browsing"
    REVIEWING = "reviewing"


def _log_alert(message: str) -> None:
    logger.warning(message)


class CheckoutFlow:
    def __init__(
        self,
        api: StorefrontAPI,
        redirector: Optional[Callable[[CheckoutSession], None]] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.redirector = redirector or HostedCheckoutRedirector()
        self.notify = notify or _log_alert
        self.state = CheckoutState.BROWSING
        self.cart = Cart()
        self.products: List[Product] = []

    def load_products(self) -> List[Product]:
        try:
            self.products = self.api.list_products()
        except NetworkError as e:
            logger.error("Error fetching products: %s", e.message)
            self.notify(f"Could not load products: {e.message}")
            self.products = []
        return self.products

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    # --- Panier ---
    def add(self, product: Product) -> Cart:
        self.cart = self.cart.add(product)
        return self.cart

    def remove(self, product_id: str) -> Cart:
        self.cart = self.cart.remove(product_id)
        return self.cart

    def set_quantity(self, product_id: str, quantity: int) -> Cart:
        self.cart = self.cart.set_quantity(product_id, quantity)
        return self.cart

    # --- Transitions ---
    def proceed_to_checkout(self) -> bool:
        if self.cart.is_empty:
            self.notify(EMPTY_CART_MESSAGE)
            return False
        self.state = CheckoutState.REVIEWING
        return True

    def back_to_shopping(self) -> None:
        self.state = CheckoutState.BROWSING

    def pay(self) -> Optional[CheckoutSession]:
        """
        Crée la session Checkout pour le panier courant et redirige.
        Retourne la session si la redirection a été lancée, None sinon.
        """
        if self.state is not CheckoutState.REVIEWING:
            self.notify("Review your cart before paying.")
            return None
        if self.cart.is_empty:
            self.notify(EMPTY_CART_MESSAGE)
            return None
        try:
            session = self.api.create_checkout_session(self.cart.to_checkout_items())
            self.redirector(session)
        except (NetworkError, RedirectError) as e:
            reason = getattr(e, "message", None) or str(e)
            logger.error("Error initiating Stripe Checkout: %s", reason)
            self.notify(f"Could not initiate checkout: {reason}. Please try again.")
            return None
        return session
