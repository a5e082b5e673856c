"""API router for version 1."""
from fastapi import APIRouter

from blinkvocab.api.v1.endpoints import (
    auth,
    dashboard,
    health,
    market,
    review,
    tasks,
    users,
    words,
)


api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(review.router)
api_router.include_router(tasks.router)
api_router.include_router(dashboard.router)
api_router.include_router(words.router)
api_router.include_router(market.router)
