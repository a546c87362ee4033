"""
Historique des paiements ({BACKEND_URL}/api/payment-history): liste paginée et statistiques.
"""
import logging
from typing import Any, Dict, Tuple

import httpx

from lawdesk import config
from lawdesk.infra import http_client

logger = logging.getLogger(__name__)

class PaymentHistoryServiceError(RuntimeError):
    """Backend historique injoignable."""

def _send(method: str, url: str, **kwargs: Any) -> Tuple[int, Any]:
    try:
        resp = http_client.get_http_client().request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.exception("payment_history.backend_client %s %s failed", method, url)
        raise PaymentHistoryServiceError("Payment history service unavailable") from e
    return resp.status_code, http_client.read_json(resp)

def list_payments(params: Dict[str, Any]) -> Tuple[int, Any]:
    """GET ?userId&page&limit[&startDate&endDate&serviceType&status] -> {payments, pagination}"""
    return _send("GET", f"{config.BACKEND_URL}/api/payment-history", params=params)

def payment_stats(user_id: str) -> Tuple[int, Any]:
    return _send("GET", f"{config.BACKEND_URL}/api/payment-history/stats", params={"userId": user_id})
