"""
Rate limiting optionnel des endpoints sensibles (création de checkout, connexion).
- fastapi-limiter (Redis) si initialisé par le lifespan
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (dev)
- désactivé si app.state.rate_limit_enabled est False (tests)
"""
from typing import Dict, Any
from fastapi import Request, HTTPException
import hashlib
import logging
import os
import time

from lawdesk.utils.security import extract_token

logger = logging.getLogger(__name__)

def rate_limit_key(request: Request) -> str:
    """Clé de comptage: jeton de session haché si présent, sinon IP; suffixée par le chemin."""
    token = extract_token(request)
    path = request.url.path
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = request.client.host if request.client else "local"
    return f"ip:{ip}:{path}"

def _local_hit(request: Request, times: int, seconds: int) -> None:
    now = time.time()
    key = rate_limit_key(request)
    store = getattr(request.app.state, "_rl_store", None)
    if store is None:
        store = {}
        request.app.state._rl_store = store
    hits = [t for t in store.get(key, []) if now - t < seconds]
    if len(hits) >= times:
        raise HTTPException(status_code=429, detail="Too Many Requests")
    hits.append(now)
    store[key] = hits

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _local_hit(request, times, seconds)
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        try:
            from fastapi_limiter.depends import RateLimiter

            async def _identifier(req: Request) -> str:
                return rate_limit_key(req)
            limiter = RateLimiter(times=times, seconds=seconds, identifier=_identifier)
        except Exception:
            logger.warning("fastapi-limiter indisponible, requête non limitée path=%s", request.url.path)
            return
        # Le 429 levé par fastapi-limiter remonte tel quel
        await limiter(request, _NoopResponse())
    return _dep

class _NoopResponse:
    """Réponse factice: fastapi-limiter peut y écrire des en-têtes (Retry-After) ignorés ici."""
    def __init__(self):
        self.headers: Dict[str, str] = {}

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        ready = getattr(FastAPILimiter, "redis", None) is not None
    except Exception:
        ready = False
    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": ready,
        "backend": "redis" if ready else ("memory" if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1" else None),
    }
