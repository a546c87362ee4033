"""
Clients Supabase partagés (fournisseur d'identité + table user_profiles).
- get_supabase: client anon global (auth.get_user, sign_in, exchange_code)
- get_user_supabase: client anon authentifié au nom d'un utilisateur (RLS actif)
"""
from typing import Optional
from supabase import create_client, Client
from lawdesk.config import SUPABASE_URL, SUPABASE_ANON

_supabase: Optional[Client] = None

def get_supabase() -> Client:
    global _supabase
    if _supabase is None:
        if not SUPABASE_URL or not SUPABASE_ANON:
            raise RuntimeError("NEXT_PUBLIC_SUPABASE_URL / NEXT_PUBLIC_SUPABASE_ANON_KEY manquants")
        _supabase = create_client(SUPABASE_URL, SUPABASE_ANON)
    return _supabase

def get_user_supabase(user_token: str) -> Client:
    """
    Client Supabase 'anon' avec auth utilisateur (RLS actif).
    À utiliser pour écrire user_profiles au nom de l'utilisateur sans polluer l'instance globale.
    """
    if not user_token:
        raise ValueError("user_token is required")
    client = create_client(SUPABASE_URL, SUPABASE_ANON)
    client.postgrest.auth(user_token)
    return client
