import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from pydantic import BaseModel, Field
from starlette.status import HTTP_303_SEE_OTHER

from lawdesk.utils.security import require_user
from lawdesk.utils.rate_limit import optional_rate_limit
from lawdesk.utils.templates import templates
from lawdesk.payments import presenter
from lawdesk.payments import initiator
from lawdesk.payments import stripe_client
from lawdesk.payments import reconciler
from lawdesk.payments.checkout_state import checkout_stores
from lawdesk.payments.models import CheckoutRequest, CheckoutSessionError, InvalidFeeError
from lawdesk.payments.success_page import PaymentSuccessPage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])
web_router = APIRouter(tags=["Payment Pages"])

class ConfirmPaymentBody(BaseModel):
    payment_method: str = Field(alias="paymentMethod", min_length=1)

def _store_for(user: Dict[str, Any]):
    return checkout_stores.get(str(user.get("id")))

def _state_payload(user: Dict[str, Any]) -> Dict[str, Any]:
    state = _store_for(user).state
    return {
        "isModalOpen": state.is_modal_open,
        "clientSecret": state.client_secret,
        "sessionId": state.session_id,
        "amount": state.amount,
        "title": state.title,
        "submitting": state.submitting,
        "canRender": presenter.can_render(state.client_secret),
        "publishableKey": stripe_client.publishable_key(),
    }

# module lawdesk.payments.views
@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout(body: CheckoutRequest, use_modal: bool = True, user: Dict[str, Any] = Depends(require_user)):
    """
    Crée une session de paiement pour une consultation.
    - Entrée JSON: {consultationId, lawyerName, datetime, method, fee, userId, customerId?}
    - use_modal=true: la session est écrite dans le store de l'utilisateur, réponse JSON pour le modal
    - use_modal=false (ou pas de clientSecret): redirection 303 vers la page de paiement hébergée
    - Erreurs: 400 montant invalide, 502 refus/indisponibilité du collaborateur paiement
    """
    if body.user_id != str(user.get("id")):
        raise HTTPException(status_code=403, detail="Checkout belongs to another user")
    store = _store_for(user)
    try:
        session = initiator.create_checkout_session(body, use_modal=use_modal, store=store)
    except InvalidFeeError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except CheckoutSessionError as e:
        raise HTTPException(status_code=502, detail=e.message)

    if use_modal and session.client_secret:
        return JSONResponse({
            "sessionId": session.session_id,
            "clientSecret": session.client_secret,
            "checkout": _state_payload(user),
        })
    if not session.url:
        raise HTTPException(status_code=502, detail="Checkout URL missing from payment provider response")
    return RedirectResponse(url=session.url, status_code=HTTP_303_SEE_OTHER)

@router.get("/checkout/state")
def checkout_state(user: Dict[str, Any] = Depends(require_user)):
    """Instantané de l'état de checkout lu par le modal."""
    return _state_payload(user)

@router.post("/checkout/reset")
def checkout_reset(user: Dict[str, Any] = Depends(require_user)):
    """Ferme le modal et remet l'état de checkout à zéro."""
    _store_for(user).reset()
    return _state_payload(user)

@router.post("/checkout/confirm")
def checkout_confirm(body: ConfirmPaymentBody, request: Request, user: Dict[str, Any] = Depends(require_user)):
    """
    Soumission du formulaire de paiement (bouton « Pay now »).
    - 400 si aucun client secret exploitable, 409 si une soumission est déjà en cours
    - 402 avec le message Stripe en cas de refus (affiché sur place)
    - Succès: {"redirectUrl": "/dashboard/payment-success?session_id=..."}
    """
    store = _store_for(user)
    if not presenter.can_render(store.state.client_secret):
        raise HTTPException(status_code=400, detail="Payment form is not ready")
    result = presenter.confirm_payment(store, body.payment_method, base_url=str(request.base_url))
    if result.in_flight:
        raise HTTPException(status_code=409, detail=result.error)
    if not result.ok:
        raise HTTPException(status_code=402, detail=result.error)
    return {"redirectUrl": result.redirect_url}

@router.get("/verify/{session_id}")
def verify_session(session_id: str, user: Dict[str, Any] = Depends(require_user)):
    """Vue JSON de la page succès (état terminal + détails de consultation)."""
    page = PaymentSuccessPage().run(session_id)
    return page.to_dict()

@web_router.get("/dashboard/payment-success", response_class=HTMLResponse)
def payment_success_page(request: Request, session_id: Optional[str] = None, user: Dict[str, Any] = Depends(require_user)):
    """
    Page de retour du checkout.
    - Sans session_id: aucune vérification, redirection vers /dashboard/consultations
    - Sinon: vérification puis rendu CONFIRMED (résumé + calendrier) ou FAILED (lien vers les consultations)
    """
    page = PaymentSuccessPage().run(session_id)
    if page.redirect_to:
        return RedirectResponse(url=page.redirect_to, status_code=HTTP_303_SEE_OTHER)
    data = page.to_dict()
    when = reconciler.format_datetime(page.details.datetime) if page.details else ""
    resp = templates.TemplateResponse(request, "payment_success.html", {"page": data, "when": when, "user": user})
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return resp
