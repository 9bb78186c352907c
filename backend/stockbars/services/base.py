"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import Generic, Optional, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Validated input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema

        Raises:
            ServiceError: If execution fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(ServiceError):
    """Input validation error (blank or missing required input)."""
    pass


class ProviderErrorKind(str, Enum):
    EMPTY_RESPONSE = "empty_response"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNEXPECTED = "unexpected"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_STATUS = "upstream_status"


class ProviderError(ServiceError):
    """Market-data provider call failed or reported an error."""

    def __init__(
        self,
        message: str,
        kind: ProviderErrorKind,
        status_code: Optional[int] = None,
        service_name: str = "PolygonClient",
    ):
        self.kind = kind
        self.status_code = status_code
        super().__init__(
            service_name,
            message,
            {"kind": kind.value, "status_code": status_code},
        )


class RateLimitError(ProviderError):
    """Rate limit exceeded."""

    def __init__(self, message: str, status_code: Optional[int] = 429):
        super().__init__(message, ProviderErrorKind.RATE_LIMITED, status_code)


class ParsingError(ServiceError):
    """Provider payload could not be decoded."""

    def __init__(self, message: str):
        super().__init__("ResponseParser", message)


class BarNotFoundError(ServiceError):
    """No stored bar for the symbol and date."""

    def __init__(self, symbol: str, trading_date: date):
        self.symbol = symbol
        self.trading_date = trading_date
        super().__init__(
            "QueryService",
            f"Stock data not found for symbol '{symbol}' on date '{trading_date.isoformat()}'",
            {"symbol": symbol, "date": trading_date.isoformat()},
        )


class StorageIntegrityError(ServiceError):
    """A write violated the (symbol, date) uniqueness constraint."""

    def __init__(self, message: str, details: dict = None):
        super().__init__("DailyBarRepository", message, details)


class IngestionError(ServiceError):
    """Unexpected failure while orchestrating an ingestion."""

    def __init__(self, message: str):
        super().__init__("IngestionService", message)
