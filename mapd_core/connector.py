import threading
from collections import deque
from typing import Any, Callable, Dict, List, Optional

import mapd_pb2

from .balancer import LoadBalancer
from .config import ConnectorConfig, EndpointSpec
from .datum_types import FieldDescriptor, fields_from_row_desc
from .dispatcher import (
    DispatchResult,
    PendingQuery,
    QueryDispatcher,
    QueryOptions,
    RequestMode,
)
from .errors import ConnectorError, QueryError
from .metrics import MetricsTracker
from .normalizer import ResultNormalizer
from .pool import ConnectionPool
from .transport import MapDClient

NOT_CONNECTED = "You are not connected to a server. Try running the connect method first."

ResultCallback = Callable[[Optional[BaseException], Any], None]


class MapDConnector:
    """
    Client for one or more backend servers.
    Coordinates the connection pool, load balancing, dispatch and result normalization.
    """

    def __init__(
        self,
        config: ConnectorConfig,
        client_factory: Optional[Callable[[EndpointSpec], MapDClient]] = None,
    ):
        self._config = config
        if client_factory is None:
            def client_factory(spec: EndpointSpec) -> MapDClient:
                return MapDClient(spec, timeout=config.request_timeout)

        self._pool = ConnectionPool(
            client_factory=client_factory,
            connect_retries=config.connect_retries,
            max_workers=config.max_workers,
        )
        self._balancer = LoadBalancer(
            strategy=config.balance.strategy,
            default_query_time_ms=config.balance.default_query_time_ms,
            num_pings_per_server=config.balance.num_pings_per_server,
        )
        self._normalizer = ResultNormalizer(log_queries=config.log_queries)
        self._metrics = MetricsTracker()
        self._dispatcher = QueryDispatcher(
            self._pool,
            self._balancer,
            self._normalizer,
            metrics=self._metrics,
            max_workers=config.max_workers,
        )
        self._log_buffer = deque(maxlen=50)  # Store last 50 log lines
        self._log_lock = threading.Lock()

    # -- connection lifecycle -------------------------------------------------

    def connect(self, callback: Optional[ResultCallback] = None) -> "MapDConnector":
        """Open a session on every configured server.

        Unreachable servers are logged and skipped. Without a callback the
        call raises EndpointConnectionError when no server could be reached;
        with a callback the error is passed as its first argument instead.
        """
        try:
            self._balancer.reset()
            self._dispatcher.reset()
            self._pool.connect(self._config.endpoints)
        except ConnectorError as exc:
            self._log(f"[Connector] connect failed: {exc}")
            if callback is None:
                raise
            callback(exc, None)
            return self

        for url, exc in self._pool.failures.items():
            self._log(f"[Connector] skipped unreachable server {url}: {exc}")
        self._log(
            f"[Connector] connected to {self.num_connections}/{self._config.num_endpoints} server(s), "
            f"strategy={self.balance_strategy}"
        )
        if callback is not None:
            callback(None, self)
        return self

    def disconnect(self, callback: Optional[ResultCallback] = None) -> "MapDConnector":
        """Close all sessions and reset queue state and query history."""
        try:
            self._pool.disconnect()
        except ConnectorError as exc:
            self._log(f"[Connector] disconnect error: {exc}")
            if callback is None:
                raise
            callback(exc, None)
            return self
        finally:
            self._balancer.reset()
            self._dispatcher.reset()
        if callback is not None:
            callback(None, self)
        return self

    def close(self) -> None:
        try:
            if self.num_connections:
                self.disconnect()
        finally:
            self._dispatcher.shutdown()

    def __enter__(self) -> "MapDConnector":
        return self.connect()

    def __exit__(self, *args) -> None:
        self.close()

    # -- queries ------------------------------------------------------------------

    def query(
        self,
        query: str,
        columnar_results: bool = True,
        eliminate_null_rows: bool = False,
        query_id: Optional[str] = None,
        limit: int = -1,
    ) -> List[Dict[str, Any]]:
        """Execute SQL and return its rows as a list of dicts."""
        options = QueryOptions(
            columnar_results=columnar_results,
            eliminate_null_rows=eliminate_null_rows,
            query_id=query_id,
            limit=limit,
        )
        return self.dispatch(RequestMode.DIRECT_SYNC, query, options).value

    def query_async(
        self,
        query: str,
        callback: Optional[ResultCallback] = None,
        columnar_results: bool = True,
        eliminate_null_rows: bool = False,
        query_id: Optional[str] = None,
        limit: int = -1,
    ) -> PendingQuery:
        """Execute SQL without blocking; ``callback(error, rows)`` fires on completion."""
        options = QueryOptions(
            columnar_results=columnar_results,
            eliminate_null_rows=eliminate_null_rows,
            query_id=query_id,
            limit=limit,
        )
        return self.dispatch(RequestMode.DIRECT_ASYNC, query, options, callback)

    def render(
        self,
        query: str,
        render_spec: str,
        query_id: Optional[str] = None,
        limit: int = -1,
    ) -> mapd_pb2.TRenderResult:
        """Ask the backend to render ``query``; returns the image result."""
        options = QueryOptions(render_spec=render_spec, query_id=query_id, limit=limit)
        return self.dispatch(RequestMode.RENDER_SYNC, query, options).value

    def render_async(
        self,
        query: str,
        render_spec: str,
        callback: Optional[ResultCallback] = None,
        query_id: Optional[str] = None,
        limit: int = -1,
    ) -> PendingQuery:
        options = QueryOptions(render_spec=render_spec, query_id=query_id, limit=limit)
        return self.dispatch(RequestMode.RENDER_ASYNC, query, options, callback)

    def dispatch(
        self,
        mode: RequestMode,
        query: str,
        options: Optional[QueryOptions] = None,
        callback: Optional[ResultCallback] = None,
    ):
        dispatch_callback = None
        if callback is not None:
            def dispatch_callback(error: Optional[BaseException], result: Optional[DispatchResult]) -> None:
                callback(error, result.value if result is not None else None)

        result = self._dispatcher.dispatch(mode, query, options, dispatch_callback)
        if isinstance(result, DispatchResult) and result.attempts > 1:
            self._log(
                f"[Connector] query nonce={result.nonce} served by {result.endpoint} "
                f"after {result.attempts} attempts"
            )
        return result

    def get_result_row_for_pixel(
        self,
        widget_id: int,
        pixel: Dict[str, int],
        table_col_names: Dict[str, List[str]],
        pixel_radius: int = 2,
    ) -> List[Dict[str, Any]]:
        """Fetch the rows under ``pixel`` of the most recent backend render."""
        return self._dispatcher.get_result_row_for_pixel(widget_id, pixel, table_col_names, pixel_radius)

    # -- load balancing -----------------------------------------------------------

    def ping_servers(self, num_pings: Optional[int] = None) -> List[float]:
        """Measure round trips and add them to each connection's queue time."""
        self._require_connection()
        return self._balancer.ping(self._pool, num_pings)

    @property
    def balance_strategy(self) -> str:
        return self._balancer.strategy

    @balance_strategy.setter
    def balance_strategy(self, name: str) -> None:
        self._balancer.strategy = name

    def queue_times(self) -> List[float]:
        return self._balancer.queue_times(self._pool)

    # -- pass-through calls (first connection) ---------------------------------------

    def get_server_status(self) -> Dict[str, Any]:
        connection = self._require_connection()
        status = connection.client.get_server_status(connection.session_id)
        return {
            "read_only": status.read_only,
            "rendering_enabled": status.rendering_enabled,
            "version": status.version,
        }

    def validate_query(self, query: str) -> List[FieldDescriptor]:
        connection = self._require_connection()
        descriptor = connection.client.sql_validate(connection.session_id, query)
        return fields_from_row_desc(descriptor)

    def get_tables(self) -> List[Dict[str, str]]:
        connection = self._require_connection()
        tables = connection.client.get_tables(connection.session_id)
        return [{"name": table, "label": "obs"} for table in tables]

    def get_fields(self, table_name: str) -> List[Dict[str, object]]:
        connection = self._require_connection()
        descriptor = connection.client.get_table_descriptor(connection.session_id, table_name)
        if not descriptor:
            raise QueryError(f"Table ({table_name}) not found", endpoint=connection.url)
        return [f.to_dict() for f in fields_from_row_desc(descriptor)]

    def get_databases(self) -> List[str]:
        connection = self._require_connection()
        return [db.db_name for db in connection.client.get_databases(connection.session_id)]

    # -- introspection --------------------------------------------------------------

    @property
    def num_connections(self) -> int:
        return self._pool.num_connections

    @property
    def config(self) -> ConnectorConfig:
        return self._config

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    @property
    def balancer(self) -> LoadBalancer:
        return self._balancer

    @property
    def log_queries(self) -> bool:
        return self._normalizer.log_queries

    @log_queries.setter
    def log_queries(self, enabled: bool) -> None:
        if not isinstance(enabled, bool):
            raise TypeError("log_queries can only be set with boolean values")
        self._normalizer.log_queries = enabled
        self._log(f"[Connector] SQL logging is now {'enabled' if enabled else 'disabled'}")

    @property
    def nonce(self) -> int:
        return self._dispatcher.nonce

    def endpoints(self) -> List[str]:
        return self._pool.endpoints()

    def session_ids(self) -> List[str]:
        return self._pool.session_ids()

    def snapshot(self) -> Dict[str, object]:
        stats = self._metrics.snapshot()
        return {
            "connections": self.endpoints(),
            "queue_times": self.queue_times(),
            "query_times": self._balancer.query_times(),
            "failed_endpoints": sorted(self._pool.failures),
            "strategy": self.balance_strategy,
            "nonce": self.nonce,
            "metrics": stats,
            "recent_logs": self._get_recent_logs(max_lines=10),
        }

    def _require_connection(self):
        if self._pool.num_connections == 0:
            raise ConnectorError(NOT_CONNECTED)
        return self._pool[0]

    def _log(self, message: str) -> None:
        print(message, flush=True)
        with self._log_lock:
            self._log_buffer.append(message)

    def _get_recent_logs(self, max_lines: int = 10) -> List[str]:
        """Get recent log lines from buffer."""
        with self._log_lock:
            return list(self._log_buffer)[-max_lines:]
