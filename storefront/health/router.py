from fastapi import APIRouter, Request

from storefront import config
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root(request: Request):
    gateway = getattr(request.app.state, "stripe_gateway", None)
    return {
        "ok": True,
        "stripe": {
            "secret_key": bool(gateway and gateway.configured),
            "webhook_secret": bool(gateway and gateway.webhook_secret),
            "publishable_key": bool(config.STRIPE_PUBLISHABLE_KEY),
        },
        "rate_limit": rate_limit_health_info(request),
    }
