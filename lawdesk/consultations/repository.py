"""Couche d'accès aux données (MongoDB) pour les consultations.
Collections: consultations, lawyers, consultation_feedback.
Les lectures de listes remontent les erreurs (la route répond 500); les lectures unitaires
retournent None quand le document n'existe pas.
"""
import logging
from typing import Any, Dict, List, Optional

from lawdesk.infra.mongodb import get_collection

logger = logging.getLogger(__name__)

CONSULTATIONS = "consultations"
LAWYERS = "lawyers"
FEEDBACK = "consultation_feedback"

def list_consultations_for_user(user_id: str) -> List[Dict[str, Any]]:
    """Consultations de l'utilisateur, triées par scheduledAt décroissant."""
    try:
        cursor = get_collection(CONSULTATIONS).find({"userId": user_id}).sort("scheduledAt", -1)
        return list(cursor)
    except Exception:
        logger.exception("consultations.repository.list_consultations_for_user failed user_id=%s", user_id)
        raise

def list_lawyers() -> List[Dict[str, Any]]:
    try:
        return list(get_collection(LAWYERS).find({}))
    except Exception:
        logger.exception("consultations.repository.list_lawyers failed")
        raise

def get_consultation(consultation_id: str) -> Optional[Dict[str, Any]]:
    if not consultation_id:
        return None
    return get_collection(CONSULTATIONS).find_one({"id": consultation_id})

def update_consultation(consultation_id: str, fields: Dict[str, Any]) -> bool:
    """$set des champs fournis; False si aucune consultation ne correspond."""
    try:
        res = get_collection(CONSULTATIONS).update_one({"id": consultation_id}, {"$set": fields})
        return res.matched_count > 0
    except Exception:
        logger.exception("consultations.repository.update_consultation failed id=%s", consultation_id)
        raise

def insert_feedback(doc: Dict[str, Any]) -> str:
    try:
        res = get_collection(FEEDBACK).insert_one(doc)
        return str(res.inserted_id)
    except Exception:
        logger.exception("consultations.repository.insert_feedback failed consultation=%s", doc.get("consultationId"))
        raise
