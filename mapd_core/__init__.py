"""Multi-server connector: connection pool, load balancing, query dispatch and result normalization."""

from .config import EndpointSpec, BalanceConfig, ConnectorConfig
from .errors import (
    ConnectorError,
    ConfigurationError,
    EndpointConnectionError,
    TransportError,
    ExhaustedConnectionsError,
    InvalidIdError,
    UnmappedTypeError,
    MalformedResultError,
    QueryError,
)
from .datum_types import DatumType, EncodingType, FieldDescriptor
from .transport import MapDClient
from .pool import Connection, ConnectionPool
from .balancer import (
    BalanceStrategy,
    AdaptiveBalance,
    RoundRobinBalance,
    LoadBalancer,
)
from .normalizer import ResultNormalizer, ResultOptions, NULL_ARRAY_ELEMENT
from .dispatcher import (
    RequestMode,
    QueryOptions,
    QueryDispatcher,
    DispatchResult,
    PendingQuery,
)
from .metrics import MetricsTracker
from .resilience import RetryWithBackoff, retry
from .connector import MapDConnector

__all__ = [
    "EndpointSpec",
    "BalanceConfig",
    "ConnectorConfig",
    "ConnectorError",
    "ConfigurationError",
    "EndpointConnectionError",
    "TransportError",
    "ExhaustedConnectionsError",
    "InvalidIdError",
    "UnmappedTypeError",
    "MalformedResultError",
    "QueryError",
    "DatumType",
    "EncodingType",
    "FieldDescriptor",
    "MapDClient",
    "Connection",
    "ConnectionPool",
    "BalanceStrategy",
    "AdaptiveBalance",
    "RoundRobinBalance",
    "LoadBalancer",
    "ResultNormalizer",
    "ResultOptions",
    "NULL_ARRAY_ELEMENT",
    "RequestMode",
    "QueryOptions",
    "QueryDispatcher",
    "DispatchResult",
    "PendingQuery",
    "MetricsTracker",
    "RetryWithBackoff",
    "retry",
    "MapDConnector",
]
