"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
Le StripeGateway est construit une seule fois au démarrage (lifespan) et stocké
sur app.state; les vues le récupèrent via la dépendance get_gateway (remplaçable en tests).
"""
import json
import logging
from typing import Any, Dict, List, Optional

import stripe
from fastapi import Request

from .errors import SignatureInvalid, UpstreamError

logger = logging.getLogger(__name__)

def _field(obj: Any, name: str) -> Any:
    # StripeObject: attribut et clé; dict: clé seulement
    value = getattr(obj, name, None)
    if value is None and isinstance(obj, dict):
        value = obj.get(name)
    return value

# module storefront.payments.stripe_client
class StripeGateway:
    def __init__(
        self,
        api_key: str,
        webhook_secret: str,
        *,
        tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
        max_network_retries: int = 2,
        timeout: int = 20,
    ):
        if tolerance is None or tolerance <= 0:
            # verify_header ne contrôle plus l'âge du timestamp sans tolérance positive
            raise ValueError(f"Webhook timestamp tolerance must be a positive number of seconds, got {tolerance!r}")
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance
        self.max_network_retries = max_network_retries
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def configure(self) -> "StripeGateway":
        """
        Applique au SDK les retries réseau (backoff exponentiel côté SDK) et le timeout HTTP.
        Le client HTTP du SDK est global au process, comme le gateway.
        """
        stripe.max_network_retries = self.max_network_retries
        stripe.default_http_client = stripe.RequestsClient(timeout=self.timeout)
        return self

    def create_checkout_session(
        self,
        *,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Crée une session Stripe Checkout (mode "payment", carte).
        Retour: dict session (ex: {"id": "cs_test_...", "url": "https://checkout.stripe.com/..."})
        Erreurs: UpstreamError avec le message Stripe (réseau, clé invalide, requête refusée).
        """
        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": line_items,
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if metadata:
            params["metadata"] = metadata
        try:
            session = stripe.checkout.Session.create(api_key=self.api_key or None, **params)
        except stripe.StripeError as e:
            message = getattr(e, "user_message", None) or str(e) or e.__class__.__name__
            logger.warning("stripe.checkout.Session.create failed type=%s message=%s", e.__class__.__name__, message)
            raise UpstreamError(message) from e
        return {"id": _field(session, "id"), "url": _field(session, "url")}

    def construct_event(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """
        Valide la signature d'un webhook et retourne l'événement Stripe (dict JSON décodé).
        - payload: body brut, tel que reçu (jamais re-sérialisé)
        - sig_header: en-tête Stripe-Signature "t=<ts>,v1=<hmac>"
        Erreurs: SignatureInvalid (signature, timestamp hors tolérance, payload illisible, secret absent).
        """
        if not self.webhook_secret:
            raise SignatureInvalid("Webhook signing secret is not configured")
        if not sig_header:
            raise SignatureInvalid("Missing stripe-signature header")
        try:
            body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
            stripe.WebhookSignature.verify_header(body, sig_header, self.webhook_secret, self.tolerance)
            event = json.loads(body)
        except stripe.SignatureVerificationError as e:
            raise SignatureInvalid(str(e)) from e
        except ValueError as e:
            # Payload non JSON
            raise SignatureInvalid(f"Invalid payload: {e}") from e
        if not isinstance(event, dict):
            raise SignatureInvalid("Invalid payload: expected a JSON object")
        return event


def get_gateway(request: Request) -> StripeGateway:
    """Dépendance FastAPI: gateway construit par le lifespan."""
    return request.app.state.stripe_gateway
