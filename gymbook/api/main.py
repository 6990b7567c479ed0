"""API router setup."""

from fastapi import APIRouter

from gymbook.api.routes import booking, gym, reports

api_router = APIRouter()
api_router.include_router(gym.router)
api_router.include_router(booking.client_router)
api_router.include_router(booking.coach_router)
api_router.include_router(reports.router)
