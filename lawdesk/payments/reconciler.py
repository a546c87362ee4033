"""
Réconciliation: état de paiement vérifié -> modèle d'affichage de la consultation.
Fonctions pures, sans effet de bord ni persistance.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from .models import ConsultationDetails, PaymentMetadata, VerifiedPayment

DEFAULT_DURATION = timedelta(hours=1)

# module lawdesk.payments.reconciler
def to_consultation_details(metadata: PaymentMetadata) -> ConsultationDetails:
    return ConsultationDetails(
        id=metadata.consultation_id,
        lawyer_name=metadata.lawyer_name,
        datetime=metadata.datetime,
        method=metadata.method,
    )

def reconcile(verified: Optional[VerifiedPayment]) -> Optional[ConsultationDetails]:
    """
    Détails de consultation si le paiement est confirmé (paid is True) ET les métadonnées présentes.
    None sinon: l'UI affiche l'état neutre « could not verify payment details ».
    """
    if verified is None or verified.paid is not True or verified.metadata is None:
        return None
    return to_consultation_details(verified.metadata)

def _parse_iso(value: str) -> datetime:
    # fromisoformat n'accepte le suffixe "Z" qu'à partir de Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)

def calendar_event(details: ConsultationDetails, duration: timedelta = DEFAULT_DURATION) -> Optional[Dict[str, Any]]:
    """
    Données « ajouter au calendrier » (durée par défaut 1h, la fin peut tomber le lendemain).
    Retourne None si la date n'est pas au format ISO-8601.
    """
    try:
        start = _parse_iso(details.datetime)
    except (TypeError, ValueError):
        return None
    end = start + duration
    return {
        "name": f"Legal consultation with {details.lawyer_name}",
        "description": f"{details.method.capitalize()} consultation",
        "startDate": start.strftime("%Y-%m-%d"),
        "startTime": start.strftime("%H:%M"),
        "endDate": end.strftime("%Y-%m-%d"),
        "endTime": end.strftime("%H:%M"),
        "location": "Online",
    }

def format_datetime(value: str) -> str:
    """Date lisible pour la page succès ("Wednesday, January 01, 2025 at 10:00"); valeur brute si non ISO."""
    try:
        return _parse_iso(value).strftime("%A, %B %d, %Y at %H:%M")
    except (TypeError, ValueError):
        return value
