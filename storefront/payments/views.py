import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse

from storefront import config
from storefront.utils.rate_limit import optional_rate_limit
from storefront.payments import service as payments_service
from storefront.payments.errors import InvalidRequest, UpstreamError
from storefront.payments.stripe_client import StripeGateway, get_gateway
from storefront.payments.webhooks import WebhookDispatcher

logger = logging.getLogger(__name__)

# Le webhook est isolé dans son propre router: il lit le body brut et ne déclare
# aucun paramètre de body, pour que rien ne le parse avant la vérification de signature.
webhook_router = APIRouter(tags=["Stripe Webhook"])
router = APIRouter(prefix="/api", tags=["Payments API"])


def get_dispatcher(request: Request) -> WebhookDispatcher:
    return request.app.state.webhook_dispatcher

# module storefront.payments.views
@router.post(
    "/create-checkout-session",
    dependencies=[Depends(optional_rate_limit(config.CHECKOUT_RATE_LIMIT_TIMES, config.CHECKOUT_RATE_LIMIT_SECONDS))],
)
async def create_checkout_session(request: Request, gateway: StripeGateway = Depends(get_gateway)):
    """
    Crée une session Stripe Checkout hébergée pour le panier reçu.
    - Entrée JSON: { "items": [ { "id": "<produit>", "name": "...", "price": <centimes>, "quantity": <int> }, ... ] }
    - Sortie: { "id": "<session_id>", "url": "<page Stripe>" }
    - Erreurs: 400 {"error"} si items absent/vide/invalide, 500 {"error"} si l'appel Stripe échoue
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidRequest("Request body must be a JSON object")
    if not isinstance(body, dict):
        raise InvalidRequest("Request body must be a JSON object")
    try:
        session = payments_service.create_checkout_session(gateway, body.get("items"))
    except UpstreamError:
        logger.exception("Error creating checkout session")
        raise
    return JSONResponse({"id": session.get("id"), "url": session.get("url")})

@router.get("/config")
def public_config() -> Dict[str, Any]:
    """Clé publique Stripe et devise, pour les clients (évite de les coder en dur côté front)."""
    return {"publishableKey": config.STRIPE_PUBLISHABLE_KEY, "currency": config.CHECKOUT_CURRENCY}

@webhook_router.post("/webhook", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    gateway: StripeGateway = Depends(get_gateway),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
):
    """
    Webhook Stripe: vérifie la signature sur le body brut puis aiguille l'événement.
    - Signature: en-tête stripe-signature + STRIPE_WEBHOOK_SECRET
    - Réponses: 200 {"received": true}; 400 {"error": "Webhook Error: ..."} si signature invalide
    - Un type d'événement inconnu est acquitté (200)
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    result = payments_service.handle_webhook(gateway, dispatcher, payload, sig_header)
    return JSONResponse(result)
