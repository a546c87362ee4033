"""
Appels au service avocats du backend applicatif ({BACKEND_URL}/api/freelancers).
Affaires assignées à un avocat: liste, acceptation, refus, clôture et annotation.
"""
import logging
from typing import Any, Dict, Tuple
from urllib.parse import quote

import httpx

from lawdesk import config
from lawdesk.infra import http_client

logger = logging.getLogger(__name__)

CASE_ACTIONS = ("accept", "decline", "complete")

class CaseServiceError(RuntimeError):
    """Backend avocats injoignable."""

def _cases_url(*parts: str) -> str:
    base = f"{config.BACKEND_URL}/api/freelancers/cases"
    return "/".join([base] + [quote(p, safe="") for p in parts])

def _send(method: str, url: str, **kwargs: Any) -> Tuple[int, Any]:
    try:
        resp = http_client.get_http_client().request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.exception("cases.backend_client %s %s failed", method, url)
        raise CaseServiceError("Case service unavailable") from e
    return resp.status_code, http_client.read_json(resp)

def list_cases(freelancer_id: str) -> Tuple[int, Any]:
    return _send("GET", _cases_url(freelancer_id))

def case_action(case_id: str, action: str, freelancer_id: str) -> Tuple[int, Any]:
    if action not in CASE_ACTIONS:
        raise ValueError(f"Unknown case action: {action}")
    return _send("POST", _cases_url(case_id, action), json={"freelancerId": freelancer_id})

def annotate_case(case_id: str, payload: Dict[str, Any]) -> Tuple[int, Any]:
    """POST .../{id}/annotate {annotatedDocumentUrl, notes?, freelancerId}"""
    return _send("POST", _cases_url(case_id, "annotate"), json=payload)
