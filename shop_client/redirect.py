"""
Redirection vers la page de paiement hébergée par Stripe.
"""
import logging
import webbrowser

from .api import CheckoutSession

logger = logging.getLogger(__name__)


class RedirectError(Exception):
    pass


class HostedCheckoutRedirector:
    """Ouvre la page Checkout de la session dans le navigateur."""

    def __init__(self, opener=None):
        self._open = opener or webbrowser.open

    def __call__(self, session: CheckoutSession) -> None:
        if not session.url:
            logger.error("Checkout session %s has no hosted page URL", session.id)
            raise RedirectError("Payment gateway not ready")
        logger.info("Redirecting to Stripe Checkout session_id=%s", session.id)
        if not self._open(session.url):
            raise RedirectError(f"Could not open a browser. Continue the payment at {session.url}")
