"""
Gestionnaires d'exceptions.
- 401/403 sur une page HTML (hors /api/*): redirection vers /auth/signin?error=...
- Sinon: réponse JSON standard {"detail": ...}
- Toute exception non gérée: 500 {"detail": "Internal server error"} (jamais de page blanche)
"""
import logging
import urllib.parse
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from lawdesk.config import SIGNIN_PATH

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def html_redirect_on_auth_errors(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403):
            accept = (request.headers.get("accept") or "").lower()
            is_api = request.url.path.startswith("/api/")
            if "text/html" in accept and not is_api:
                detail = str(getattr(exc, "detail", "")) or (
                    "Please sign in" if exc.status_code == 401 else "Access denied"
                )
                msg = urllib.parse.quote_plus(detail)
                return RedirectResponse(url=f"{SIGNIN_PATH}?error={msg}", status_code=HTTP_303_SEE_OTHER)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
