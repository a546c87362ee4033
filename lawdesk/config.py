# lawdesk.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

"""
Configuration centrale de lawdesk.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env) sans écraser l'environnement
- Accepte les noms historiques du front (NEXT_PUBLIC_*) en plus des noms serveur
- Normalise et expose les URLs des collaborateurs (backend, Supabase, Stripe, MongoDB)
- Fournit les chemins de redirection du flux de paiement
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _first_env(*names: str, default: str = "") -> str:
    """Retourne la première variable définie (non vide) parmi names, nettoyée."""
    for name in names:
        value = _clean_env(os.getenv(name) or "")
        if value:
            return value
    return default

# Backend applicatif (Express/Flask externe): base de toutes les API métier
BACKEND_URL = _first_env("NEXT_PUBLIC_BACKEND_URL", "BACKEND_URL", default="http://localhost:5001").rstrip("/")
# Base des API paiement (create-checkout-session, verify/<id>)
API_BASE = _first_env("NEXT_PUBLIC_API_URL", "API_BASE", default=f"{BACKEND_URL}/api").rstrip("/")
# Base de la synchronisation des utilisateurs (/api/users/sync)
BASE_URL = _first_env("BASE_URL", default=BACKEND_URL).rstrip("/")

# Supabase: URL et clé anon
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _first_env("NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_URL")
SUPABASE_ANON = _first_env("NEXT_PUBLIC_SUPABASE_ANON_KEY", "SUPABASE_ANON_KEY")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe: clé publique exposée au modal, clé secrète pour la confirmation serveur
STRIPE_PUBLISHABLE_KEY = _first_env("NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY", "STRIPE_PUBLIC_KEY")
STRIPE_SECRET_KEY = _first_env("STRIPE_SECRET_KEY")

# MongoDB: obligatoire, le démarrage échoue si absent (voir infra.mongodb.ensure_configured)
MONGODB_URI = _first_env("MONGODB_URI")
MONGODB_DB_NAME = _first_env("MONGODB_DB_NAME", default="test")

# Appels HTTP sortants (secondes)
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

# Cookies / sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "replace_me_with_a_long_random_secret")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Pages du tableau de bord utilisées par les redirections
PAYMENT_SUCCESS_PATH = "/dashboard/payment-success"
CONSULTATIONS_PATH = "/dashboard/consultations"
DASHBOARD_PATH = "/dashboard"
FREELANCER_DASHBOARD_PATH = "/freelancer/dashboard"
SIGNIN_PATH = "/auth/signin"
