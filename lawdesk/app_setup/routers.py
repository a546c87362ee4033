"""
Registre central des routers (web, API, health).
- Web: auth_web_router (/auth), payments_web_router (/dashboard/payment-success)
- API: auth, onboarding, paiements, historique des paiements, consultations + annuaire,
  documents, chat, assistant IA, affaires côté avocat
- Health: health_router
"""
from fastapi import FastAPI
from lawdesk.auth.views import web_router as auth_web_router, api_router as auth_api_router
from lawdesk.users.views import api_router as users_api_router
from lawdesk.payments import views as payments_views
from lawdesk.consultations import views as consultations_views
from lawdesk.documents import views as documents_views
from lawdesk.chat import views as chat_views
from lawdesk.assistant import views as assistant_views
from lawdesk.cases import views as cases_views
from lawdesk.payment_history import views as payment_history_views
from lawdesk.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """Agrège tous les routers de l'application (préfixes disjoints)."""
    # Pages web (HTML)
    app.include_router(auth_web_router)
    app.include_router(payments_views.web_router)
    # API
    app.include_router(auth_api_router)
    app.include_router(users_api_router)
    app.include_router(payments_views.router)
    app.include_router(consultations_views.router)
    app.include_router(documents_views.router)
    app.include_router(chat_views.router)
    app.include_router(assistant_views.router)
    app.include_router(cases_views.router)
    app.include_router(payment_history_views.router)
    # Health & monitoring
    app.include_router(health_router)
