"""
Cas d'usage 'payments': orchestre cart, stripe_client et webhooks.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from storefront import config
from . import cart as cart_logic
from .stripe_client import StripeGateway
from .errors import SignatureInvalid
from .webhooks import WebhookDispatcher

logger = logging.getLogger(__name__)

def checkout_urls(frontend_url: Optional[str] = None) -> Tuple[str, str]:
    """
    URLs de redirection du checkout à partir de l'URL publique du front.
    success_url conserve le jeton {CHECKOUT_SESSION_ID}, remplacé par Stripe.
    """
    base = (frontend_url if frontend_url is not None else config.FRONTEND_URL).rstrip("/")
    return f"{base}{config.CHECKOUT_SUCCESS_PATH}", f"{base}{config.CHECKOUT_CANCEL_PATH}"

def create_checkout_session(gateway: StripeGateway, raw_items: Any) -> Dict[str, Any]:
    """
    Prépare et crée la session Stripe Checkout pour un panier brut.
    - Validation d'abord: un panier invalide ne déclenche aucun appel Stripe (InvalidRequest)
    - Un seul appel Stripe; l'id de session est renvoyé tel quel (UpstreamError si échec)
    Retour: {"id": "<session_id>", "url": "<page hébergée>"}
    """
    items = cart_logic.parse_items(raw_items)
    line_items = cart_logic.to_line_items(items, config.CHECKOUT_CURRENCY)
    success_url, cancel_url = checkout_urls()
    session = gateway.create_checkout_session(
        line_items=line_items,
        success_url=success_url,
        cancel_url=cancel_url,
        metadata=cart_logic.make_metadata(items),
    )
    logger.info("payments.checkout session_id=%s lines=%s", session.get("id"), len(line_items))
    return session

def handle_webhook(gateway: StripeGateway, dispatcher: WebhookDispatcher, payload: bytes, sig_header: str) -> Dict[str, Any]:
    """
    Vérifie puis aiguille un webhook Stripe.
    - payload doit être le body brut reçu (la signature porte sur ces octets exacts)
    - SignatureInvalid si la vérification échoue: rien n'est aiguillé
    """
    logger.info("Webhook received! Verifying signature...")
    try:
        event = gateway.construct_event(payload, sig_header)
    except SignatureInvalid as e:
        logger.warning("Webhook Signature Verification Error: %s", e.message)
        raise
    logger.info("Webhook verified. Event type: %s", event.get("type"))
    dispatcher.dispatch(event)
    return {"received": True}
