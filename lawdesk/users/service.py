"""Couche service du domaine Utilisateurs (onboarding)."""
from typing import Any, Dict, List, Optional

from . import repository

def complete_onboarding(user: Dict[str, Any], legal_interests: List[str]) -> Optional[Dict[str, Any]]:
    """Enregistre les centres d'intérêt; retourne le récapitulatif, ou None si l'écriture a échoué."""
    user_id = user.get("id")
    if not repository.upsert_user_profile(user.get("token") or "", user_id, legal_interests):
        return None
    return {
        "user_id": user_id,
        "legal_interests": legal_interests,
        "onboarding_completed": True,
    }
