"""
Client HTTP partagé vers les collaborateurs (backend applicatif, API paiements).
- Un seul httpx.Client par process (pool de connexions), timeout HTTP_TIMEOUT.
- Pas de Content-Type par défaut: httpx le déduit de json=, data= ou files= (multipart compris).
- Aucune logique de retry: une erreur réseau remonte immédiatement à l'appelant.
"""
from typing import Any, Optional
import httpx

from lawdesk.config import HTTP_TIMEOUT

_client: Optional[httpx.Client] = None

def get_http_client() -> httpx.Client:
    global _client
    if _client is None:
        _client = httpx.Client(timeout=HTTP_TIMEOUT)
    return _client

def set_http_client(client: Optional[httpx.Client]) -> None:
    """Remplace le client partagé (tests: httpx.MockTransport)."""
    global _client
    _client = client

def close_http_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None

def read_json(resp: httpx.Response) -> Any:
    """Corps JSON de la réponse, ou {} si le corps n'est pas du JSON."""
    try:
        return resp.json()
    except ValueError:
        return {}
