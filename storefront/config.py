# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets Stripe (clé secrète, secret webhook, clé publique)
- Fournit l'URL du front pour construire les redirections du checkout
- Paramètres serveur (port, logs), CORS et rate limiting
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

# Serveur
HOST = _clean_env(os.getenv("HOST")) or "0.0.0.0"
PORT = _int_env("PORT", 5000)
LOG_LEVEL = (_clean_env(os.getenv("LOG_LEVEL")) or "info").lower()

# CORS: toutes les origines par défaut (à restreindre en production)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Stripe: clés publiques/privées et secret webhook
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
STRIPE_PUBLISHABLE_KEY = _clean_env(os.getenv("STRIPE_PUBLISHABLE_KEY") or "")

# Appel Stripe: retries réseau (backoff géré par le SDK) et timeout en secondes
STRIPE_MAX_NETWORK_RETRIES = _int_env("STRIPE_MAX_NETWORK_RETRIES", 2)
STRIPE_TIMEOUT_SECONDS = _int_env("STRIPE_TIMEOUT_SECONDS", 20)

# Webhook: fenêtre de tolérance du timestamp signé (> 0, sinon refus au démarrage),
# taille du store anti-doublons (0 = désactivé)
WEBHOOK_TIMESTAMP_TOLERANCE = _int_env("WEBHOOK_TIMESTAMP_TOLERANCE", 300)
WEBHOOK_DEDUP_SIZE = _int_env("WEBHOOK_DEDUP_SIZE", 1000)

# Front public: base des URLs de succès/annulation du checkout
FRONTEND_URL = (_clean_env(os.getenv("FRONTEND_URL")) or "http://localhost:3000").rstrip("/")
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/success?session_id={CHECKOUT_SESSION_ID}")
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/cancel")
CHECKOUT_CURRENCY = (_clean_env(os.getenv("CHECKOUT_CURRENCY")) or "aud").lower()

# Rate limiting de la création de session
CHECKOUT_RATE_LIMIT_TIMES = _int_env("CHECKOUT_RATE_LIMIT_TIMES", 10)
CHECKOUT_RATE_LIMIT_SECONDS = _int_env("CHECKOUT_RATE_LIMIT_SECONDS", 60)

# Proxies autorisés à fixer l'IP client via X-Forwarded-For (même nom que l'option uvicorn)
FORWARDED_ALLOW_IPS = [h.strip() for h in os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1").split(",") if h.strip()]
