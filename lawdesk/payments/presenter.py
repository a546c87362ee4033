"""
Présentation du modal de paiement lié à un CheckoutState.
- can_render: heuristique sur le client secret (non vide, >= 10 caractères), pas une vérification cryptographique.
- confirm_payment: confirme via Stripe puis renvoie l'URL de la page succès, ou le message d'erreur à afficher sur place.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

import stripe

from lawdesk.config import PAYMENT_SUCCESS_PATH
from . import stripe_client
from .checkout_state import CheckoutStore

logger = logging.getLogger(__name__)

MIN_CLIENT_SECRET_LENGTH = 10

# module lawdesk.payments.presenter
class ConfirmationResult:
    def __init__(self, ok: bool, redirect_url: Optional[str] = None, error: Optional[str] = None, in_flight: bool = False):
        self.ok = ok
        self.redirect_url = redirect_url
        self.error = error
        self.in_flight = in_flight

def can_render(client_secret: Optional[str]) -> bool:
    return bool(client_secret) and len(client_secret) >= MIN_CLIENT_SECRET_LENGTH

def success_url(session_id: str, base_url: str = "") -> str:
    """URL de retour: /dashboard/payment-success?session_id=<id> (préfixée par base_url si fourni)."""
    return f"{base_url.rstrip('/')}{PAYMENT_SUCCESS_PATH}?{urlencode({'session_id': session_id})}"

def confirm_payment(store: CheckoutStore, payment_method: str, base_url: str = "") -> ConfirmationResult:
    """
    Confirme le paiement du checkout courant.
    - Refuse une seconde soumission tant que la première est en vol (in_flight=True).
    - Succès: ferme le modal (reset du store) et renvoie l'URL succès portant le session_id.
    - Échec Stripe: renvoie le message du collaborateur, rien n'est persisté, pas de retry.
    - Toute autre erreur: "Payment failed", le drapeau de soumission est levé quand même.
    """
    state = store.state
    if not can_render(state.client_secret):
        return ConfirmationResult(False, error="Payment form is not ready")
    if not store.begin_submit():
        return ConfirmationResult(False, error="A payment is already being processed", in_flight=True)

    target = success_url(state.session_id, base_url)
    try:
        intent = stripe_client.confirm_payment_intent(
            client_secret=state.client_secret,
            payment_method=payment_method,
            return_url=target,
        )
    except stripe.StripeError as e:
        message = getattr(e, "user_message", None) or str(e) or "Payment failed"
        logger.warning("payments.presenter confirm failed session=%s error=%s", state.session_id, message)
        store.end_submit()
        return ConfirmationResult(False, error=message)
    except ValueError as e:
        store.end_submit()
        return ConfirmationResult(False, error=str(e))
    except Exception:
        logger.exception("payments.presenter confirm crashed session=%s", state.session_id)
        store.end_submit()
        return ConfirmationResult(False, error="Payment failed")

    status = intent.get("status")
    if status not in ("succeeded", "processing", "requires_capture"):
        store.end_submit()
        return ConfirmationResult(False, error=f"Payment not completed (status={status})")

    store.reset()
    return ConfirmationResult(True, redirect_url=target)
