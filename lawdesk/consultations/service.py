"""Couche service du domaine Consultations.
- Vue « mes consultations »: jointure en mémoire avec les avocats pour afficher leur nom
- Actions sur une consultation (reprogrammer, annuler) et retour d'expérience (note 1..5)
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from . import repository

ACTIONS = ("reschedule", "cancel")

class ConsultationNotFoundError(LookupError):
    pass

class InvalidActionError(ValueError):
    def __init__(self, message: str = "Invalid action"):
        super().__init__(message)
        self.message = message

def lawyer_key(doc: Dict[str, Any]) -> str:
    """Identifiant d'un avocat tel que référencé par consultation.lawyerId (id explicite, sinon _id)."""
    return str(doc.get("id") or doc.get("_id") or "")

def serialize_lawyer(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Document avocat sérialisable en JSON (_id exposé en id texte)."""
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = lawyer_key(doc)
    return data

def to_consultation_view(doc: Dict[str, Any], lawyers_by_id: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    lawyer = lawyers_by_id.get(str(doc.get("lawyerId") or "")) or {}
    return {
        "id": doc.get("id"),
        "lawyerName": lawyer.get("fullName") or "",
        "datetime": doc.get("scheduledAt"),
        "method": doc.get("method"),
        "notes": doc.get("notes"),
        "roomUrl": doc.get("roomUrl"),
        "status": doc.get("status"),
    }

def list_my_consultations(user_id: str) -> List[Dict[str, Any]]:
    """Consultations de l'utilisateur (scheduledAt décroissant) avec lawyerName résolu ("" si inconnu)."""
    consultations = repository.list_consultations_for_user(user_id)
    lawyers_by_id = {lawyer_key(l): l for l in repository.list_lawyers()}
    return [to_consultation_view(c, lawyers_by_id) for c in consultations]

def list_lawyers() -> List[Dict[str, Any]]:
    return [serialize_lawyer(l) for l in repository.list_lawyers()]

def get_consultation(consultation_id: str) -> Dict[str, Any]:
    doc = repository.get_consultation(consultation_id)
    if not doc:
        raise ConsultationNotFoundError(consultation_id)
    return {k: v for k, v in doc.items() if k != "_id"}

def apply_action(consultation_id: str, action: str, new_datetime: Optional[str] = None) -> Dict[str, Any]:
    """
    Applique une action utilisateur:
    - reschedule: exige newDatetime, met à jour scheduledAt et status=rescheduled
    - cancel: status=cancelled
    L'action est validée avant toute lecture en base.
    """
    if action not in ACTIONS:
        raise InvalidActionError()
    if action == "reschedule" and not (new_datetime or "").strip():
        raise InvalidActionError("newDatetime is required to reschedule")

    if not repository.get_consultation(consultation_id):
        raise ConsultationNotFoundError(consultation_id)

    if action == "reschedule":
        repository.update_consultation(consultation_id, {"status": "rescheduled", "scheduledAt": new_datetime})
        return {"status": "rescheduled", "newDatetime": new_datetime}
    repository.update_consultation(consultation_id, {"status": "cancelled"})
    return {"status": "cancelled"}

def submit_feedback(consultation_id: str, user_id: str, rating: int, comment: Optional[str] = None) -> Dict[str, Any]:
    if not repository.get_consultation(consultation_id):
        raise ConsultationNotFoundError(consultation_id)
    doc: Dict[str, Any] = {
        "consultationId": consultation_id,
        "userId": user_id,
        "rating": rating,
        "comment": comment,
        "createdAt": datetime.now(timezone.utc),
    }
    inserted_id = repository.insert_feedback(doc)
    return {
        "id": inserted_id,
        "consultationId": consultation_id,
        "userId": user_id,
        "rating": rating,
        "comment": comment,
        "createdAt": doc["createdAt"].isoformat(),
    }
