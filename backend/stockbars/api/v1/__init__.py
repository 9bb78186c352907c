"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from stockbars.api.v1.endpoints import stocks

router = APIRouter()

router.include_router(stocks.router, prefix="/stocks", tags=["Stock Prices"])
