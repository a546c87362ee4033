import secrets
import urllib.parse
from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.middleware.sessions import SessionMiddleware
try:
    from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
except ImportError:
    ProxyHeadersMiddleware = None
from lawdesk.config import SUPABASE_URL, COOKIE_SECURE, CORS_ORIGINS, ALLOWED_HOSTS, SESSION_SECRET_KEY
from lawdesk.utils.security import COOKIE_NAME

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
# Sans cookie de session, un POST ne peut rien faire au nom de l'utilisateur: la connexion reste hors CSRF
CSRF_EXEMPT_PATHS = {
    "/api/v1/auth/login",
}

STRIPE_SOURCES = ["https://js.stripe.com", "https://api.stripe.com", "https://hooks.stripe.com"]

"""
Middlewares transverses de l'application.
- register_basic_middlewares: session, CORS, TrustedHost et confiance en X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité, CSP (Stripe.js autorisé), protection CSRF (cookie + header/form).
- register_no_cache_middleware: empêche la mise en cache des pages du tableau de bord.
"""
def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - SessionMiddleware: session basée sur cookie pour la navigation web.
    - CORSMiddleware: autorise les origines définies (dev/prod).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    - ProxyHeadersMiddleware (si dispo): fait confiance aux en-têtes du proxy (x-forwarded-*).
    """
    app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )
    if ProxyHeadersMiddleware:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

async def _form_csrf_token(request: Request) -> str:
    ctype = request.headers.get("content-type", "")
    if not ctype.startswith("application/x-www-form-urlencoded"):
        return ""
    body = await request.body()

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}
    request._receive = receive

    parsed_body = urllib.parse.parse_qs(body.decode("utf-8", errors="replace"))
    csrf_values = parsed_body.get(CSRF_HEADER_NAME, []) + parsed_body.get("csrf_token", [])
    return csrf_values[0] if csrf_values else ""

def _content_security_policy() -> str:
    csp_connect = ["'self'"] + STRIPE_SOURCES
    if SUPABASE_URL:
        csp_connect.append(SUPABASE_URL.rstrip("/"))
    swagger_cdns = ["https://cdn.jsdelivr.net", "https://unpkg.com"]
    return (
        "default-src 'self'; "
        "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
        "img-src 'self' data: blob: https://fastapi.tiangolo.com; "
        f"style-src 'self' 'unsafe-inline' {' '.join(swagger_cdns)}; "
        "font-src 'self' data:; "
        f"script-src 'self' 'unsafe-inline' https://js.stripe.com {' '.join(swagger_cdns)}; "
        "frame-src https://js.stripe.com https://hooks.stripe.com; "
        f"connect-src {' '.join(csp_connect)}"
    )

def register_security_middleware(app: FastAPI) -> None:
    """
    Middleware de sécurité:
    - CSRF: sur requête mutative avec cookie de session, X-CSRF-Token (ou champ form) doit égaler le cookie csrf_token.
    - En-têtes: X-Frame-Options, X-Content-Type-Options, Referrer-Policy, Permissions-Policy, HSTS (si secure).
    - Dépose un cookie CSRF si manquant (httponly=False pour que le front lise la valeur).
    """
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        method = request.method.upper()
        has_session = bool(request.cookies.get(COOKIE_NAME))
        is_state_changing = method in ("POST", "PUT", "PATCH", "DELETE")
        csrf_cookie = request.cookies.get(CSRF_COOKIE_NAME)
        set_csrf_cookie_value = None if csrf_cookie else secrets.token_urlsafe(32)

        if is_state_changing and has_session and request.url.path not in CSRF_EXEMPT_PATHS:
            token = request.headers.get(CSRF_HEADER_NAME, "") or await _form_csrf_token(request)
            if not csrf_cookie or not token or not secrets.compare_digest(token, csrf_cookie):
                return JSONResponse(status_code=403, content={"detail": "CSRF verification failed"})

        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=(), payment=(self \"https://js.stripe.com\")")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")
        response.headers["Content-Security-Policy"] = _content_security_policy()

        if set_csrf_cookie_value:
            response.set_cookie(
                key=CSRF_COOKIE_NAME,
                value=set_csrf_cookie_value,
                httponly=False,
                secure=COOKIE_SECURE,
                samesite="Lax",
                max_age=60 * 60,
                path="/",
            )
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    """Empêche la mise en cache des pages authentifiées (/dashboard, /freelancer)."""
    @app.middleware("http")
    async def no_cache_for_protected(request: Request, call_next):
        response = await call_next(request)
        path = request.url.path.rstrip("/")
        if request.method == "GET" and (path.startswith("/dashboard") or path.startswith("/freelancer")):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response
