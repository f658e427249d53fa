from fastapi import APIRouter

from casefile.api.routes import health, search

api_router = APIRouter()

api_router.include_router(search.router, prefix="", tags=["Case Files"])
api_router.include_router(health.router, prefix="", tags=["Health"])
