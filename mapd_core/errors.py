"""Exception taxonomy for the connector."""

from typing import Dict, Optional


class ConnectorError(Exception):
    """Base class for every error raised by the connector."""


class ConfigurationError(ConnectorError, ValueError):
    """Connection parameters are missing or of mismatched length."""


class EndpointConnectionError(ConnectorError):
    """One or more endpoints could not be reached while connecting."""

    def __init__(self, message: str, failures: Optional[Dict[str, Exception]] = None):
        super().__init__(message)
        self.failures = dict(failures or {})


class TransportError(ConnectorError):
    """Network failure while talking to an already connected endpoint."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.endpoint = endpoint


class ExhaustedConnectionsError(ConnectorError):
    """Every connection has been removed; nothing is left to retry on."""

    def __init__(self, message: str = "No remaining database connections", attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class InvalidIdError(ConnectorError, IndexError):
    """A connection id outside ``0 <= id < num_connections`` was used."""


class UnmappedTypeError(ConnectorError):
    """A result field carries a type code outside the known enumeration."""

    def __init__(self, type_code: object, field_name: Optional[str] = None):
        where = f" for field '{field_name}'" if field_name else ""
        super().__init__(f"Unmapped datum type code {type_code!r}{where}")
        self.type_code = type_code
        self.field_name = field_name


class MalformedResultError(ConnectorError):
    """A result block does not carry one value per described field."""


class QueryError(ConnectorError):
    """The backend rejected or failed a request (SQL error, bad table, ...)."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.endpoint = endpoint
