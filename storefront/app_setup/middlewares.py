"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS (toutes origines par défaut, à restreindre en production)
  et ProxyHeaders (X-Forwarded-For accepté seulement des proxies de FORWARDED_ALLOW_IPS).
Aucun middleware ne lit le body des requêtes: le webhook Stripe doit recevoir les octets bruts.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from storefront import config

def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - CORSMiddleware: autorise les origines définies (CORS_ORIGINS, "*" par défaut).
    - ProxyHeadersMiddleware: request.client reflète l’IP transmise par un proxy de confiance;
      l’en-tête d’un client direct est ignoré (clé du rate limiting).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials="*" not in config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=config.FORWARDED_ALLOW_IPS)
