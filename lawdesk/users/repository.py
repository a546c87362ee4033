"""Couche d'accès aux données (Supabase) pour le domaine Utilisateurs.
Table user_profiles: préférences d'onboarding (centres d'intérêt juridiques).
Les écritures passent par un client authentifié au nom de l'utilisateur (RLS actif).
Les exceptions sont « catchées » et transformées en False afin que la route réponde 500 proprement.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from lawdesk.infra.supabase_client import get_user_supabase

logger = logging.getLogger(__name__)

def upsert_user_profile(user_token: str, user_id: str, legal_interests: List[str]) -> bool:
    """Crée ou met à jour le profil d'onboarding.
    - Champs écrits: user_id, legal_interests, onboarding_completed=True, updated_at (UTC ISO)
    - Retour: True si succès, False sinon
    """
    if not user_id:
        return False
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "legal_interests": legal_interests,
        "onboarding_completed": True,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        get_user_supabase(user_token).table("user_profiles").upsert(payload).execute()
        return True
    except Exception:
        logger.exception("users.repository.upsert_user_profile failed user_id=%s", user_id)
        return False
