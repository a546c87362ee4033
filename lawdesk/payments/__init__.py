"""
Module 'payments' (feature-first): point d'entrée public du flux de paiement des consultations.
Initiateur (session) -> modal (présentation) -> vérification -> réconciliation -> page succès.
"""

from .models import (
    CheckoutRequest,
    CheckoutSession,
    PaymentMetadata,
    VerifiedPayment,
    ConsultationDetails,
    PaymentsError,
    CheckoutSessionError,
    InvalidFeeError,
    PaymentVerificationError,
    MissingSessionIdError,
)
from .checkout_state import CheckoutState, CheckoutStore, CheckoutStoreRegistry, checkout_stores
from .initiator import create_checkout_session, parse_fee
from .verifier import verify_payment_session
from .reconciler import reconcile, to_consultation_details, calendar_event
from .presenter import can_render, success_url, confirm_payment
from .success_page import PageState, PaymentSuccessPage

__all__ = [
    # models
    "CheckoutRequest",
    "CheckoutSession",
    "PaymentMetadata",
    "VerifiedPayment",
    "ConsultationDetails",
    "PaymentsError",
    "CheckoutSessionError",
    "InvalidFeeError",
    "PaymentVerificationError",
    "MissingSessionIdError",
    # state
    "CheckoutState",
    "CheckoutStore",
    "CheckoutStoreRegistry",
    "checkout_stores",
    # flow
    "create_checkout_session",
    "parse_fee",
    "verify_payment_session",
    "reconcile",
    "to_consultation_details",
    "calendar_event",
    "can_render",
    "success_url",
    "confirm_payment",
    "PageState",
    "PaymentSuccessPage",
]
