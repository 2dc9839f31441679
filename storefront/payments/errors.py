"""
Erreurs métier du module payments.
Chaque erreur porte le code HTTP renvoyé au client (voir app_setup/exceptions.py).
"""


class StorefrontError(Exception):
    status_code = 500
    prefix = ""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(StorefrontError):
    """Entrée client absente ou invalide (panier vide, article mal formé)."""
    status_code = 400


class SignatureInvalid(StorefrontError):
    """Webhook non authentifié: signature, timestamp, secret ou payload invalide."""
    status_code = 400
    prefix = "Webhook Error: "


class UpstreamError(StorefrontError):
    """Échec de l'appel à l'API Stripe (réseau, clé invalide, requête refusée)."""
    status_code = 500
