"""
Initiateur de checkout: demande à l'API paiements une session pour une consultation.
- POST {API_BASE}/payments/create-checkout-session
- Mode modal: écrit la session dans le CheckoutStore de l'utilisateur (lu par le modal).
- Mode redirection: ne touche pas au store; la vue redirige le navigateur vers session.url.
Pas de retry ni de clé d'idempotence (le backend reste seul juge des doublons).
"""
import logging
import re
from typing import Any, Dict, Optional

import httpx

from lawdesk import config
from lawdesk.infra import http_client
from .checkout_state import CheckoutStore
from .models import (
    CHECKOUT_FALLBACK_ERROR,
    CheckoutRequest,
    CheckoutSession,
    CheckoutSessionError,
    InvalidFeeError,
)

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")

# module lawdesk.payments.initiator
def parse_fee(fee: Any) -> int:
    """
    Coercition du montant à la manière de parseInt(fee, 10):
    - int: inchangé; float: tronqué vers zéro
    - str: signe optionnel puis chiffres en tête ("4500", " 45.90" -> 45, "12abc" -> 12)
    Soulève InvalidFeeError si aucune valeur entière n'est extractible.
    """
    if isinstance(fee, bool):
        raise InvalidFeeError()
    if isinstance(fee, int):
        return fee
    if isinstance(fee, float):
        if fee != fee or fee in (float("inf"), float("-inf")):
            raise InvalidFeeError()
        return int(fee)
    if isinstance(fee, str):
        match = _LEADING_INT.match(fee)
        if match:
            return int(match.group(1))
    raise InvalidFeeError()

def build_payload(request: CheckoutRequest) -> Dict[str, Any]:
    """Corps JSON attendu par l'API paiements (fee en entier, unités mineures)."""
    return {
        "consultationId": request.consultation_id,
        "lawyerName": request.lawyer_name,
        "datetime": request.datetime,
        "method": request.method,
        "fee": parse_fee(request.fee),
        "userId": request.user_id,
        "customerId": request.customer_id,
    }

def checkout_title(lawyer_name: str) -> str:
    return f"Legal Consultation with {lawyer_name}"

def create_checkout_session(
    request: CheckoutRequest,
    use_modal: bool = True,
    store: Optional[CheckoutStore] = None,
) -> CheckoutSession:
    """
    Crée la session de paiement.
    - use_modal=True et clientSecret présent: store.open_session(...) puis retour de la session
    - sinon: retour de la session (url hébergée) sans écrire dans le store
    Erreurs: CheckoutSessionError avec le message du collaborateur ou le message générique.
    """
    payload = build_payload(request)
    url = f"{config.API_BASE}/payments/create-checkout-session"
    try:
        resp = http_client.get_http_client().post(url, json=payload)
    except httpx.HTTPError as e:
        logger.exception("payments.initiator.create_checkout_session failed consultation=%s", request.consultation_id)
        raise CheckoutSessionError(CHECKOUT_FALLBACK_ERROR) from e

    data = http_client.read_json(resp)
    if not isinstance(data, dict):
        data = {}
    if not resp.is_success:
        message = data.get("message") or CHECKOUT_FALLBACK_ERROR
        logger.warning("payments.initiator create-checkout-session status=%s message=%s", resp.status_code, message)
        raise CheckoutSessionError(message)

    try:
        session = CheckoutSession.model_validate(data)
    except ValueError as e:
        raise CheckoutSessionError(CHECKOUT_FALLBACK_ERROR) from e

    if use_modal and session.client_secret and store is not None:
        store.open_session(
            client_secret=session.client_secret,
            session_id=session.session_id,
            amount=payload["fee"],
            title=checkout_title(request.lawyer_name),
        )
    logger.info("payments.initiator session=%s modal=%s", session.session_id, use_modal)
    return session
