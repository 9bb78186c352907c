"""
FastAPI dependencies.

Services are built once in the application lifespan and kept on app.state.
"""

from fastapi import Request

from stockbars.services.data_ingestion import DataIngestionService
from stockbars.services.query import QueryService


def get_ingestion_service(request: Request) -> DataIngestionService:
    return request.app.state.ingestion_service


def get_query_service(request: Request) -> QueryService:
    return request.app.state.query_service
