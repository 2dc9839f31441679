"""
Registre central des routers.
- Webhook Stripe (body brut) enregistré en premier
- API JSON: catalogue, paiements
- Health
"""
from fastapi import FastAPI
from storefront.payments import views as payments_views
from storefront.catalog import views as catalog_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # Le webhook passe avant les routes JSON; il ne doit jamais déclarer de body parsé
    app.include_router(payments_views.webhook_router)
    # API
    app.include_router(catalog_views.router)
    app.include_router(payments_views.router)
    # Health & monitoring
    app.include_router(health_router)
