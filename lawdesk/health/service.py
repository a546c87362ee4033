"""Sondes de santé des dépendances (MongoDB)."""
import logging
import time
from typing import Any, Dict

from lawdesk import config
from lawdesk.infra import mongodb

logger = logging.getLogger(__name__)

def health_mongodb_info() -> Dict[str, Any]:
    """Ping MongoDB: {configured, connect_ok, latency_ms, error?}; ne lève jamais."""
    info: Dict[str, Any] = {"configured": bool(config.MONGODB_URI), "connect_ok": False, "latency_ms": None}
    if not info["configured"]:
        info["error"] = "MONGODB_URI missing"
        return info
    start = time.perf_counter()
    try:
        mongodb.get_client().admin.command("ping")
        info["connect_ok"] = True
        info["latency_ms"] = round((time.perf_counter() - start) * 1000, 1)
    except Exception as e:
        logger.warning("health.service.health_mongodb_info ping failed: %s", e)
        info["error"] = type(e).__name__
    return info
