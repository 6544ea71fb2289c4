"""Health check endpoints."""
from fastapi import APIRouter, Request
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])

@router.get("/")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": "LMS Chat Server",
    }

@router.get("/db-health")
async def database_health(request: Request):
    """Database health check through the injected database"""
    healthy = await request.app.state.database.health_check()
    return {
        "status": "healthy" if healthy else "unhealthy",
        "database": "healthy" if healthy else "unreachable",
    }
