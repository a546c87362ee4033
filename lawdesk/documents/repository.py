"""Accès MongoDB aux documents générés (collection documents)."""
import logging
from typing import Any, Dict, List

from lawdesk.infra.mongodb import get_collection

logger = logging.getLogger(__name__)

DOCUMENTS = "documents"

def _clean(doc: Dict[str, Any]) -> Dict[str, Any]:
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = str(doc.get("_id")) if doc.get("_id") is not None else None
    return data

def list_user_documents(user_id: str) -> List[Dict[str, Any]]:
    """Documents de l'utilisateur, plus récents d'abord; _id exposé en id texte."""
    try:
        cursor = get_collection(DOCUMENTS).find({"userId": user_id}).sort("createdAt", -1)
        return [_clean(d) for d in cursor]
    except Exception:
        logger.exception("documents.repository.list_user_documents failed user_id=%s", user_id)
        raise
