"""
Vérification d'une session de paiement au retour du checkout.
- GET {API_BASE}/payments/verify/{session_id}, un seul appel, pas de retry.
- Lecture seule: deux vérifications du même identifiant renvoient les mêmes métadonnées.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from lawdesk import config
from lawdesk.infra import http_client
from .models import (
    VERIFY_FALLBACK_ERROR,
    MissingSessionIdError,
    PaymentMetadata,
    PaymentVerificationError,
    VerifiedPayment,
)

logger = logging.getLogger(__name__)

# module lawdesk.payments.verifier
def parse_metadata(raw: Any) -> Optional[PaymentMetadata]:
    """Métadonnées de session (consultationId, lawyerName, datetime, method) ou None si absentes/incomplètes."""
    if not isinstance(raw, dict) or not raw:
        return None
    try:
        return PaymentMetadata.model_validate(raw)
    except ValueError:
        logger.warning("payments.verifier metadata incomplete keys=%s", sorted(raw.keys()))
        return None

def verify_payment_session(session_id: Optional[str]) -> VerifiedPayment:
    """
    Vérifie le statut payé d'une session et récupère ses métadonnées.
    - session_id absent/vide: MissingSessionIdError, aucun appel réseau
    - result.success faux, corps illisible ou erreur réseau: PaymentVerificationError
    """
    session_id = (session_id or "").strip()
    if not session_id:
        raise MissingSessionIdError()

    url = f"{config.API_BASE}/payments/verify/{quote(session_id, safe='')}"
    try:
        resp = http_client.get_http_client().get(url)
    except httpx.HTTPError as e:
        logger.exception("payments.verifier.verify_payment_session failed session=%s", session_id)
        raise PaymentVerificationError(VERIFY_FALLBACK_ERROR) from e

    result: Dict[str, Any] = http_client.read_json(resp)
    if not isinstance(result, dict) or not result.get("success"):
        message = (result.get("message") if isinstance(result, dict) else None) or VERIFY_FALLBACK_ERROR
        logger.warning("payments.verifier session=%s status=%s message=%s", session_id, resp.status_code, message)
        raise PaymentVerificationError(message)

    return VerifiedPayment(
        paid=result.get("paid") is True,
        metadata=parse_metadata(result.get("metadata")),
    )
