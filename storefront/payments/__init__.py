"""
Module 'payments' (feature-first): point d'entrée public.
Réunit validation du panier, client Stripe, dispatch des webhooks et services.
"""

from .errors import StorefrontError, InvalidRequest, SignatureInvalid, UpstreamError
from .cart import CheckoutItem, parse_items, to_line_items, make_metadata
from .stripe_client import StripeGateway, get_gateway
from .webhooks import WebhookDispatcher, ProcessedEvents, build_dispatcher
from .service import checkout_urls, create_checkout_session, handle_webhook

__all__ = [
    # errors
    "StorefrontError",
    "InvalidRequest",
    "SignatureInvalid",
    "UpstreamError",
    # cart
    "CheckoutItem",
    "parse_items",
    "to_line_items",
    "make_metadata",
    # stripe
    "StripeGateway",
    "get_gateway",
    # webhooks
    "WebhookDispatcher",
    "ProcessedEvents",
    "build_dispatcher",
    # services
    "checkout_urls",
    "create_checkout_session",
    "handle_webhook",
]
