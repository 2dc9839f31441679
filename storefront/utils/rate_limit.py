from typing import Dict, Any
from fastapi import Request, Response, HTTPException
import os
import time


def _client_key(request: Request) -> str:
    # Pas de comptes utilisateurs: clé = IP + chemin. X-Forwarded-For n'est pris en compte
    # que via ProxyHeadersMiddleware (proxies de confiance), jamais lu ici.
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{request.url.path}"

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de rate limiting.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state._rl_store, par durée de fenêtre)
    - app.state.rate_limit_enabled False: aucun contrôle
    - sinon fastapi-limiter (Redis) s'il est initialisé
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            stores = getattr(request.app.state, "_rl_store", {})
            store = stores.setdefault(seconds, {})
            # Purge des clés dont la fenêtre est écoulée
            for k in [k for k, v in store.items() if not v or now - v[-1] >= seconds]:
                del store[k]
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = stores
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter import FastAPILimiter
        if getattr(FastAPILimiter, "redis", None) is None:
            return
        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _client_key(req)
        return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    from fastapi_limiter import FastAPILimiter
    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    backend = "redis" if limiter_ready else None
    if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
        backend = "memory"

    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": backend,
    }

    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if limiter_ready and redis_url:
        from urllib.parse import urlparse
        p = urlparse(redis_url)
        info["redis"] = {"scheme": p.scheme, "host": p.hostname, "port": p.port}
    return info
