"""
API module for FastAPI routes.
"""
from fastapi import APIRouter

from ga_meta.api.routes import champions, decklists, events, health, meta

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(decklists.router, prefix="/decklists", tags=["Decklists"])
api_router.include_router(champions.router, prefix="/champions", tags=["Champions"])
api_router.include_router(meta.router, prefix="/meta", tags=["Meta"])
api_router.include_router(meta.cards_router, prefix="/cards", tags=["Cards"])
