"""
Dispatch des événements Stripe authentifiés.

- WebhookDispatcher: table {type d'événement: handler}. Un type inconnu passe par
  la branche par défaut (log uniquement) et n'est jamais une erreur.
- ProcessedEvents: ids d'événements déjà traités (FIFO borné, en mémoire), Stripe
  pouvant relivrer un même événement.
- Handlers par défaut: checkout.session.completed, payment_intent.succeeded (log).
  Le traitement métier (commande, email) n'est pas implémenté ici.
"""
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"


def _data_object(event: Any) -> Optional[Dict[str, Any]]:
    """data.object de l'événement; None si data ou object n'est pas un objet JSON."""
    data = event.get("data")
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    obj = data.get("object")
    if obj is None:
        return {}
    return obj if isinstance(obj, dict) else None


class ProcessedEvents:
    """Ensemble borné d'ids d'événements; max_size <= 0 désactive la déduplication."""

    def __init__(self, max_size: int = 1000):
        self.max_size = max_size
        self._ids: "OrderedDict[str, None]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, event_id: str) -> bool:
        return event_id in self._ids

    def add(self, event_id: str) -> bool:
        """Enregistre event_id. Retourne False s'il était déjà connu."""
        if self.max_size <= 0:
            return True
        if event_id in self._ids:
            return False
        self._ids[event_id] = None
        while len(self._ids) > self.max_size:
            self._ids.popitem(last=False)
        return True


class WebhookDispatcher:
    def __init__(self, processed: Optional[ProcessedEvents] = None):
        self._handlers: Dict[str, Handler] = {}
        self.processed = processed

    @property
    def event_types(self):
        return sorted(self._handlers)

    def register(self, event_type: str) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self._handlers[event_type] = handler
            return handler
        return decorator

    def dispatch(self, event: Any) -> bool:
        """
        Aiguille un événement vérifié vers son handler.
        Retourne True si un handler dédié a été exécuté, False pour un type inconnu,
        un data mal formé ou un événement déjà traité.
        L'id n'est enregistré qu'une fois l'événement traité: si le handler lève,
        la relivraison Stripe est de nouveau aiguillée.
        """
        event_type = event.get("type")
        event_id = event.get("id")
        if not isinstance(event_id, str):
            event_id = None
        if event_id and self.processed is not None and event_id in self.processed:
            logger.info("webhook duplicate event ignored id=%s type=%s", event_id, event_type)
            return False

        handler = self._handlers.get(event_type) if isinstance(event_type, str) else None
        if handler is None:
            logger.info("Unhandled event type %s", event_type)
            self._mark_processed(event_id)
            return False

        obj = _data_object(event)
        if obj is None:
            # Pas d'id enregistré: une relivraison corrigée sera traitée
            logger.warning("webhook malformed data ignored id=%s type=%s", event_id, event_type)
            return False

        handler(obj)
        self._mark_processed(event_id)
        return True

    def _mark_processed(self, event_id: Optional[str]) -> None:
        if event_id and self.processed is not None:
            self.processed.add(event_id)


def on_checkout_session_completed(session: Dict[str, Any]) -> None:
    # Point d'extension: enregistrer la commande, envoyer l'email de confirmation
    logger.info("Checkout Session Completed: %s", session.get("id"))


def on_payment_intent_succeeded(payment_intent: Dict[str, Any]) -> None:
    logger.info("Payment Intent Succeeded: %s", payment_intent.get("id"))


def build_dispatcher(dedup_size: int = 1000) -> WebhookDispatcher:
    dispatcher = WebhookDispatcher(ProcessedEvents(dedup_size))
    dispatcher.register(CHECKOUT_SESSION_COMPLETED)(on_checkout_session_completed)
    dispatcher.register(PAYMENT_INTENT_SUCCEEDED)(on_payment_intent_succeeded)
    return dispatcher
