"""
Connexion MongoDB (base documentaire: consultations, lawyers, documents).
- MONGODB_URI est obligatoire: ensure_configured() est appelé au démarrage (lifespan)
  et l'application refuse de démarrer sans.
- Le client pymongo est mis en cache au niveau du module (une connexion par process).
"""
import logging
from typing import Optional
from pymongo import MongoClient
from pymongo.database import Database

from lawdesk import config

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None

def ensure_configured() -> str:
    """Retourne MONGODB_URI ou lève RuntimeError (échec immédiat au démarrage)."""
    if not config.MONGODB_URI:
        raise RuntimeError("MONGODB_URI manquant: ajoutez l'URI MongoDB dans .env")
    return config.MONGODB_URI

def get_client() -> MongoClient:
    global _client
    if _client is None:
        uri = ensure_configured()
        _client = MongoClient(uri, serverSelectionTimeoutMS=5000)
        logger.info("MongoDB client created")
    return _client

def get_database() -> Database:
    """Base par défaut de l'URI, sinon MONGODB_DB_NAME."""
    return get_client().get_default_database(default=config.MONGODB_DB_NAME)

def get_collection(name: str):
    return get_database()[name]

def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
