"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Construit le StripeGateway (clés, retries, timeout) et le dispatcher de webhooks,
  stockés sur app.state pour toute la vie du process.
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d’environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l’init échoue
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from storefront import config
from storefront.payments.stripe_client import StripeGateway
from storefront.payments.webhooks import build_dispatcher

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")


def build_gateway() -> StripeGateway:
    return StripeGateway(
        config.STRIPE_SECRET_KEY,
        config.STRIPE_WEBHOOK_SECRET,
        tolerance=config.WEBHOOK_TIMESTAMP_TOLERANCE,
        max_network_retries=config.STRIPE_MAX_NETWORK_RETRIES,
        timeout=config.STRIPE_TIMEOUT_SECONDS,
    ).configure()


async def init_rate_limiter(app: FastAPI) -> None:
    """
    Configure le rate limiting et gère les fallbacks.
    - En cas d’échec de Redis et sans fallback, le rate limiting est désactivé proprement.
    - Les logs indiquent l’état effectif (enabled/disabled) pour observabilité.
    """
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 but fakeredis is not installed")
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning("Rate limiting falling back to local in-memory due to init error: %s", e)
        else:
            app.state.rate_limit_enabled = False
            logger.warning("Rate limiting disabled due to init error: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.stripe_gateway = build_gateway()
    app.state.webhook_dispatcher = build_dispatcher(config.WEBHOOK_DEDUP_SIZE)
    if not app.state.stripe_gateway.configured:
        logger.warning("STRIPE_SECRET_KEY is not set: checkout session creation will fail")
    if not config.STRIPE_WEBHOOK_SECRET:
        logger.warning("STRIPE_WEBHOOK_SECRET is not set: every webhook will be rejected")
    await init_rate_limiter(app)

    yield
