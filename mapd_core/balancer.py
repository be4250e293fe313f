"""Connection selection strategies and queue-time accounting."""

import itertools
import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .errors import ExhaustedConnectionsError, TransportError
from .pool import Connection, ConnectionPool


class BalanceStrategy(ABC):
    """Base class for balance strategies."""

    name = ""

    @abstractmethod
    def select(self, nonce: int, queue_times: Sequence[float]) -> int:
        """Return the connection id that should serve the next request."""
        pass


class RoundRobinBalance(BalanceStrategy):
    """Rotate through connections by nonce."""

    name = "round_robin"

    def select(self, nonce: int, queue_times: Sequence[float]) -> int:
        return nonce % len(queue_times)


class AdaptiveBalance(BalanceStrategy):
    """Pick the connection with the least pending load; ties go to the lowest id."""

    name = "adaptive"

    def select(self, nonce: int, queue_times: Sequence[float]) -> int:
        best = 0
        for con_id in range(1, len(queue_times)):
            if queue_times[con_id] < queue_times[best]:
                best = con_id
        return best


STRATEGIES: Dict[str, Callable[[], BalanceStrategy]] = {
    AdaptiveBalance.name: AdaptiveBalance,
    RoundRobinBalance.name: RoundRobinBalance,
}


@dataclass
class Charge:
    """Estimated load placed on one connection by one dispatch."""

    connection: Connection
    token: int
    estimate: float


class LoadBalancer:
    """
    Chooses connections and keeps the queue state that steers the adaptive
    strategy. Queue time per connection is the sum of its outstanding charges
    plus a ping handicap that is never removed. Each charge is held under
    its own token and dropped whole on relief.
    """

    def __init__(
        self,
        strategy: str = "adaptive",
        default_query_time_ms: float = 50.0,
        num_pings_per_server: int = 4,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._strategy = self._create_strategy(strategy)
        self.default_query_time_ms = default_query_time_ms
        self.num_pings_per_server = num_pings_per_server
        self._clock = clock
        self._lock = threading.Lock()
        self._tokens = itertools.count()
        self._query_times: Dict[str, float] = {}

    @staticmethod
    def _create_strategy(name: str) -> BalanceStrategy:
        factory = STRATEGIES.get((name or "adaptive").lower())
        if factory is None:
            raise ValueError(f"Unknown balance strategy '{name}'")
        return factory()

    @property
    def strategy(self) -> str:
        return self._strategy.name

    @strategy.setter
    def strategy(self, name: str) -> None:
        self._strategy = self._create_strategy(name)

    def _estimate_locked(self, query_id: Optional[str]) -> float:
        if query_id is not None and query_id in self._query_times:
            return self._query_times[query_id]
        return self.default_query_time_ms

    def acquire(
        self, pool: ConnectionPool, nonce: int, query_id: Optional[str] = None
    ) -> Tuple[int, Connection, Charge]:
        """Select a connection and charge the query's estimate to it in one step."""
        connections = pool.connections()
        if not connections:
            raise ExhaustedConnectionsError()
        with self._lock:
            con_id = self._strategy.select(nonce, [c.queue_time for c in connections])
            connection = connections[con_id]
            estimate = self._estimate_locked(query_id)
            token = next(self._tokens)
            connection.pending[token] = estimate
        return con_id, connection, Charge(connection, token, estimate)

    def relieve(self, charge: Charge) -> None:
        """Drop a charge from its connection. Relieving twice is a no-op."""
        with self._lock:
            charge.connection.pending.pop(charge.token, None)

    def record(self, query_id: Optional[str], execution_time_ms: Optional[float]) -> None:
        if query_id is None or execution_time_ms is None:
            return
        with self._lock:
            self._query_times[query_id] = float(execution_time_ms)

    def query_times(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._query_times)

    def queue_times(self, pool: ConnectionPool) -> List[float]:
        connections = pool.connections()
        with self._lock:
            return [c.queue_time for c in connections]

    def reset(self) -> None:
        with self._lock:
            self._query_times.clear()

    def ping(self, pool: ConnectionPool, num_pings: Optional[int] = None) -> List[float]:
        """
        Time ``num_pings`` status round trips to every connection in parallel
        and add each connection's average (ms) to its handicap once.

        Returns:
            Queue times after the handicap has been applied.
        """
        count = max(1, num_pings or self.num_pings_per_server)
        connections = pool.connections()
        if not connections:
            return []

        rounds = [(c, i) for c in connections for i in range(count)]
        workers = min(len(rounds), 16)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mapd-ping") as executor:
            durations = list(executor.map(lambda item: self._round_trip(item[0]), rounds))

        totals: Dict[int, float] = {}
        for (connection, _), duration in zip(rounds, durations):
            totals[id(connection)] = totals.get(id(connection), 0.0) + duration

        with self._lock:
            for connection in connections:
                average = totals[id(connection)] / count
                connection.ping_time = average
                connection.handicap += average
            queue_times = [c.queue_time for c in connections]

        summary = ", ".join(f"{c.url}={c.ping_time:.1f}ms" for c in connections)
        print(f"[Balancer] ping averages: {summary}", flush=True)
        return queue_times

    def _round_trip(self, connection: Connection) -> float:
        start = self._clock()
        try:
            connection.client.get_server_status(connection.session_id)
        except TransportError as exc:
            print(f"[Balancer] ping to {connection.url} failed: {exc}", flush=True)
        return (self._clock() - start) * 1000
