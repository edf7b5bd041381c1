from fastapi import APIRouter
from src.api.routes.health import router as health_router
from src.api.routes.stats import router as stats_router

# Create main API router
api_router = APIRouter()

# Include routers
api_router.include_router(health_router)
api_router.include_router(stats_router)
