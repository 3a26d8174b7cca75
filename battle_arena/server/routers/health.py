"""Health check endpoints."""
from fastapi import APIRouter
from typing import Dict, Any
from battle_arena.server.settings import settings

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, str]:
    """Basic health check endpoint.

    Returns:
        Simple status response
    """
    return {"status": "ok", "service": settings.SERVICE_NAME}


@router.get("/readyz")
async def readiness_check() -> Dict[str, Any]:
    """Readiness check endpoint.

    Checks if required configuration is present.

    Returns:
        Status response with readiness info
    """
    checks = {
        "mongo_uri": bool(settings.MONGO_URI),
        "mongo_database": bool(settings.MONGO_DATABASE),
        "jwt_secret": len(settings.JWT_SECRET) >= 32,  # HS256 키는 최소 256bit
    }

    ready = all(checks.values())

    return {
        "status": "ok" if ready else "not_ready",
        "checks": checks
    }
