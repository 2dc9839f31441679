"""
Point d'entrée principal pour le backend FastAPI.

Usage:
    python -m storefront

Ce mode lance uvicorn directement et lit quelques variables d'environnement:
- PORT: port d'écoute (par défaut 5000)
- UVICORN_RELOAD: active le reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs (ex: "info", "debug")
"""
import logging
import os

import uvicorn

from storefront.config import HOST, PORT, LOG_LEVEL

if __name__ == "__main__":
    # Les loggers storefront.* (webhooks, checkout) héritent de la config racine
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    uvicorn.run(
        "storefront.asgi:app",  # on réutilise l'ASGI app unique
        host=HOST,
        port=PORT,
        reload=reload_flag,
        log_level=LOG_LEVEL,
    )
