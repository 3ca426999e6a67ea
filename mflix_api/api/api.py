"""
API Router Module - Aggregates all endpoint routers
"""
from fastapi import APIRouter

from mflix_api.api.endpoints import movies

api_router = APIRouter()

api_router.include_router(movies.router, prefix="/movies", tags=["Movies"])
