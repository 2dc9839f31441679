# module storefront.app
from fastapi import FastAPI

from storefront.app_setup.lifespan import lifespan
from storefront.app_setup.middlewares import register_basic_middlewares
from storefront.app_setup.exceptions import register_exception_handlers
from storefront.app_setup.routers import register_routers

def create_app() -> FastAPI:
    """
    Crée et configure l’instance FastAPI de l’application.
    Étapes et ordre:
      1) register_basic_middlewares: CORS (aucun middleware ne consomme le body).
      2) register_exception_handlers: erreurs métier et HTTP -> {"error": ...}.
      3) register_routers: webhook Stripe (body brut) puis API JSON puis health.
    Le lifespan construit le StripeGateway, le dispatcher de webhooks et le rate limiter.
    Retourne:
      - FastAPI: l’application prête à être servie (ASGI).
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routers(app)
    return app

# App globale
app = create_app()
