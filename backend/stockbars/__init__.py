"""
StockBars - daily stock bar ingestion and query backend.
"""

__version__ = "0.1.0"
