"""
Query Service

CONTRACT:
    Input:  BarLookup
    Output: DailyBar

Point lookup of one stored bar, read through the bar cache.
"""

from stockbars.services.query.interface import BarLookup, QueryServiceInterface
from stockbars.services.query.service import QueryService

__all__ = [
    "BarLookup",
    "QueryServiceInterface",
    "QueryService",
]
