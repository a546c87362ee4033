"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn + uvicorn workers) importe `lawdesk.asgi:app`.
- Toute la configuration de FastAPI est centralisée dans lawdesk.app_setup.factory.
"""

from lawdesk.app import app

if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(
        "lawdesk.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
