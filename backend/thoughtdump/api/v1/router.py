from __future__ import annotations

from fastapi import APIRouter

from .endpoints import auth, classification, focus, health, insights, thoughts

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(thoughts.router, prefix="/thoughts", tags=["thoughts"])
api_router.include_router(classification.router, prefix="/classify", tags=["classification"])
api_router.include_router(focus.router, prefix="/focus", tags=["focus"])
api_router.include_router(insights.router, prefix="/insights", tags=["insights"])
