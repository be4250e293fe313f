"""Ordered set of live backend connections."""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .config import EndpointSpec
from .errors import ConnectorError, EndpointConnectionError, InvalidIdError
from .resilience import RetryWithBackoff
from .transport import MapDClient


@dataclass(eq=False)
class Connection:
    """One connected endpoint together with its load bookkeeping."""

    endpoint: EndpointSpec
    session_id: str
    client: MapDClient
    handicap: float = 0.0
    ping_time: float = 0.0
    pending: Dict[int, float] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return self.endpoint.url

    @property
    def queue_time(self) -> float:
        """Ping handicap plus the estimates of every outstanding request."""
        return self.handicap + sum(self.pending.values())


ClientFactory = Callable[[EndpointSpec], MapDClient]


class ConnectionPool:
    """
    Owns the connections in endpoint order. A connection's position is its
    connection id, so ids shift down when an earlier connection is removed.
    """

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        connect_retries: int = 0,
        max_workers: int = 8,
        retry_delay: float = 0.2,
    ):
        self._client_factory = client_factory or MapDClient
        self._connect_retries = connect_retries
        self._retry_delay = retry_delay
        self._max_workers = max(1, max_workers)
        self._lock = threading.RLock()
        self._connections: List[Connection] = []
        self.failures: Dict[str, Exception] = {}

    @property
    def num_connections(self) -> int:
        with self._lock:
            return len(self._connections)

    def __len__(self) -> int:
        return self.num_connections

    def __getitem__(self, con_id: int) -> Connection:
        with self._lock:
            self._check_id(con_id)
            return self._connections[con_id]

    def connections(self) -> List[Connection]:
        with self._lock:
            return list(self._connections)

    def endpoints(self) -> List[str]:
        with self._lock:
            return [c.url for c in self._connections]

    def session_ids(self) -> List[str]:
        with self._lock:
            return [c.session_id for c in self._connections]

    def index_of(self, connection: Connection) -> Optional[int]:
        with self._lock:
            for idx, candidate in enumerate(self._connections):
                if candidate is connection:
                    return idx
            return None

    def connect(self, endpoints: Sequence[EndpointSpec]) -> List[Connection]:
        """Open one session per endpoint; succeed if at least one works."""
        if self.num_connections:
            self.disconnect()

        workers = min(self._max_workers, max(1, len(endpoints)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mapd-connect") as executor:
            outcomes = list(executor.map(self._open, endpoints))

        connected: List[Connection] = []
        failures: Dict[str, Exception] = {}
        for spec, outcome in zip(endpoints, outcomes):
            if isinstance(outcome, Connection):
                connected.append(outcome)
            else:
                failures[spec.url] = outcome

        with self._lock:
            self._connections = connected
            self.failures = failures

        if not connected:
            raise EndpointConnectionError(
                f"Could not connect to any of {len(endpoints)} server(s)", failures
            )
        print(f"[Pool] connected to {len(connected)}/{len(endpoints)} server(s)", flush=True)
        return list(connected)

    def _open(self, spec: EndpointSpec):
        client = None
        try:
            client = self._client_factory(spec)
            retrier = RetryWithBackoff(
                max_retries=self._connect_retries,
                initial_delay=self._retry_delay,
                on_retry=lambda attempt, exc, wait: print(
                    f"[Pool] connect to {spec.url} failed ({exc}), retry {attempt} in {wait:.2f}s",
                    flush=True,
                ),
            )
            session_id = retrier.call(client.connect, spec.user, spec.password, spec.db_name)
            return Connection(endpoint=spec, session_id=session_id, client=client)
        except ConnectorError as exc:
            print(f"[Pool] failed to connect to {spec.url}: {exc}", flush=True)
            self._close_quietly(client)
            return exc
        except Exception as exc:
            print(f"[Pool] unexpected error connecting to {spec.url}: {exc!r}", flush=True)
            self._close_quietly(client)
            return exc

    @staticmethod
    def _close_quietly(client: Optional[MapDClient]) -> None:
        if client is None:
            return
        try:
            client.close()
        except Exception as exc:
            print(f"[Pool] closing client failed: {exc!r}", flush=True)

    def disconnect(self) -> int:
        """Close every session and forget all connection state."""
        with self._lock:
            connections = self._connections
            self._connections = []

        first_error: Optional[Exception] = None
        for connection in connections:
            try:
                connection.client.disconnect(connection.session_id)
            except ConnectorError as exc:
                print(f"[Pool] disconnect from {connection.url} failed: {exc}", flush=True)
                if first_error is None:
                    first_error = exc
            finally:
                connection.client.close()

        if connections:
            print(f"[Pool] disconnected {len(connections)} connection(s)", flush=True)
        if first_error is not None:
            raise first_error
        return len(connections)

    def remove_connection(self, con_id: int) -> Connection:
        """Drop the connection at ``con_id``. Used only to recover from failures."""
        with self._lock:
            self._check_id(con_id)
            connection = self._connections.pop(con_id)
            remaining = len(self._connections)
        connection.client.close()
        print(f"[Pool] removed connection {con_id} ({connection.url}), {remaining} remaining", flush=True)
        return connection

    def _check_id(self, con_id: int) -> None:
        if isinstance(con_id, bool) or not isinstance(con_id, int) or not 0 <= con_id < len(self._connections):
            raise InvalidIdError(
                f"Connection id invalid: {con_id!r} (have {len(self._connections)} connection(s))"
            )
