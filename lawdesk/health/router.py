from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from lawdesk.health.service import health_mongodb_info
from lawdesk.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/mongodb")
def health_mongodb():
    info = health_mongodb_info()
    return JSONResponse(info, status_code=200 if info.get("connect_ok") else 503)

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)
