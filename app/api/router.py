"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime

from app.api.customers import router as customers_router
from app.api.activity_log import router as activity_log_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(customers_router)
api_router.include_router(activity_log_router)

# ===================== HEALTH & STATUS =====================

@api_router.get("/status")
async def api_status():
    return {"status": "ok", "version": "1.0.0", "timestamp": datetime.now().isoformat()}
