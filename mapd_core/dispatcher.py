"""Runs one query or render request end to end.

Every request takes the same path: pick a connection, charge its estimated
cost, issue the RPC, then relieve the charge and normalize the answer. A
transport failure removes the connection that failed and the request is tried
again on what is left, at most once per connection that existed when the
request started.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .balancer import LoadBalancer
from .errors import ExhaustedConnectionsError, TransportError
from .metrics import MetricsTracker
from .normalizer import ResultNormalizer, ResultOptions
from .pool import Connection, ConnectionPool


class RequestMode(Enum):
    """The four ways a request can be issued."""

    DIRECT_SYNC = "direct_sync"
    DIRECT_ASYNC = "direct_async"
    RENDER_SYNC = "render_sync"
    RENDER_ASYNC = "render_async"

    @property
    def is_render(self) -> bool:
        return self in (RequestMode.RENDER_SYNC, RequestMode.RENDER_ASYNC)

    @property
    def is_async(self) -> bool:
        return self in (RequestMode.DIRECT_ASYNC, RequestMode.RENDER_ASYNC)

    @classmethod
    def of(cls, render: bool, asynchronous: bool) -> "RequestMode":
        if render:
            return cls.RENDER_ASYNC if asynchronous else cls.RENDER_SYNC
        return cls.DIRECT_ASYNC if asynchronous else cls.DIRECT_SYNC


@dataclass(frozen=True)
class QueryOptions:
    columnar_results: bool = True
    eliminate_null_rows: bool = False
    render_spec: Optional[str] = None
    query_id: Optional[str] = None
    limit: int = -1


@dataclass
class DispatchResult:
    """Outcome of a completed request."""

    value: Any
    nonce: str
    con_id: int
    endpoint: str
    attempts: int
    execution_time_ms: Optional[float] = None


@dataclass
class PendingQuery:
    """Handle returned by asynchronous modes."""

    nonce: str
    future: "Future[DispatchResult]"

    def result(self, timeout: Optional[float] = None) -> DispatchResult:
        return self.future.result(timeout=timeout)

    def done(self) -> bool:
        return self.future.done()


Callback = Callable[[Optional[BaseException], Optional[DispatchResult]], None]


class QueryDispatcher:
    """Issues requests over the pool, balancing and failing over as needed."""

    def __init__(
        self,
        pool: ConnectionPool,
        balancer: LoadBalancer,
        normalizer: ResultNormalizer,
        metrics: Optional[MetricsTracker] = None,
        max_workers: int = 8,
    ):
        self._pool = pool
        self._balancer = balancer
        self._normalizer = normalizer
        self._metrics = metrics or MetricsTracker()
        self._max_workers = max(1, max_workers)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        self._nonce_lock = threading.Lock()
        self._nonce = 0
        self._last_render_connection: Optional[Connection] = None

    @property
    def nonce(self) -> int:
        """The nonce the next dispatch will use."""
        with self._nonce_lock:
            return self._nonce

    def next_nonce(self) -> int:
        with self._nonce_lock:
            current = self._nonce
            self._nonce += 1
            return current

    def dispatch(
        self,
        mode: RequestMode,
        query: str,
        options: Optional[QueryOptions] = None,
        callback: Optional[Callback] = None,
    ):
        """Run ``query`` in ``mode``.

        Synchronous modes return a DispatchResult or raise. Asynchronous modes
        return a PendingQuery at once; ``callback(error, result)`` is invoked
        when the request finishes.
        """
        options = options or QueryOptions()
        if mode.is_render and not options.render_spec:
            raise ValueError("Render requests need a render_spec.")
        if not mode.is_render and options.render_spec:
            options = replace(options, render_spec=None)

        if mode.is_async:
            return self._submit(mode, query, options, callback)
        return self._run(mode, query, options)

    def _submit(
        self,
        mode: RequestMode,
        query: str,
        options: QueryOptions,
        callback: Optional[Callback],
    ) -> PendingQuery:
        nonce = self.next_nonce()
        future = self._get_executor().submit(self._run, mode, query, options, nonce)
        if callback is not None:
            future.add_done_callback(lambda done: _deliver(done, callback))
        return PendingQuery(nonce=str(nonce), future=future)

    def _run(
        self,
        mode: RequestMode,
        query: str,
        options: QueryOptions,
        nonce: Optional[int] = None,
    ) -> DispatchResult:
        max_attempts = self._pool.num_connections
        if max_attempts == 0:
            self._metrics.record_failure()
            raise ExhaustedConnectionsError(attempts=0)

        attempts = 0
        while True:
            if nonce is None:
                nonce = self.next_nonce()
            try:
                con_id, connection, charge = self._balancer.acquire(self._pool, nonce, options.query_id)
            except ExhaustedConnectionsError:
                self._metrics.record_failure()
                raise ExhaustedConnectionsError(attempts=attempts) from None
            attempts += 1

            start = time.time()
            try:
                raw = self._issue(mode, connection, query, options, str(nonce))
            except TransportError as exc:
                self._balancer.relieve(charge)
                remaining = self._drop(connection, exc)
                if remaining == 0 or attempts >= max_attempts:
                    self._metrics.record_failure()
                    raise ExhaustedConnectionsError(
                        f"No remaining database connections after {attempts} attempt(s)",
                        attempts=attempts,
                    ) from exc
                self._metrics.record_retry()
                nonce = None
                continue
            except Exception:
                self._balancer.relieve(charge)
                self._metrics.record_failure()
                raise

            self._balancer.relieve(charge)
            execution_time_ms = raw.execution_time_ms
            self._balancer.record(options.query_id, execution_time_ms)
            if mode.is_render:
                self._last_render_connection = connection

            result_options = ResultOptions(
                query=f"render: {query}" if mode.is_render else query,
                is_image=mode.is_render,
                eliminate_null_rows=options.eliminate_null_rows,
            )
            try:
                value = self._normalizer.process_result(result_options, raw)
            except Exception:
                self._metrics.record_failure()
                raise
            self._metrics.record_completion((time.time() - start) * 1000)
            return DispatchResult(
                value=value,
                nonce=str(nonce),
                con_id=con_id,
                endpoint=connection.url,
                attempts=attempts,
                execution_time_ms=execution_time_ms,
            )

    @staticmethod
    def _issue(
        mode: RequestMode,
        connection: Connection,
        query: str,
        options: QueryOptions,
        nonce: str,
    ):
        if mode.is_render:
            return connection.client.render(
                connection.session_id, query, options.render_spec, nonce, options.limit
            )
        return connection.client.sql_execute(
            connection.session_id, query, options.columnar_results, nonce, options.limit
        )

    def _drop(self, connection: Connection, exc: TransportError) -> int:
        """Remove a failed connection and return how many are left."""
        con_id = self._pool.index_of(connection)
        if con_id is not None:
            print(f"[Dispatcher] transport failure on {connection.url}: {exc}", flush=True)
            self._pool.remove_connection(con_id)
        if self._last_render_connection is connection:
            self._last_render_connection = None
        remaining = self._pool.num_connections
        if remaining:
            print(f"[Dispatcher] retrying on {remaining} remaining connection(s)", flush=True)
        return remaining

    def render_connection(self) -> Connection:
        """Connection that served the most recent render, or the first one."""
        last = self._last_render_connection
        if last is not None and self._pool.index_of(last) is not None:
            return last
        if self._pool.num_connections == 0:
            raise ExhaustedConnectionsError()
        return self._pool[0]

    def get_result_row_for_pixel(
        self,
        widget_id: int,
        pixel: Dict[str, int],
        table_col_names: Dict[str, List[str]],
        pixel_radius: int = 2,
    ) -> List[Dict[str, Any]]:
        connection = self.render_connection()
        nonce = str(self.next_nonce())
        result = connection.client.get_result_row_for_pixel(
            connection.session_id,
            widget_id,
            pixel,
            table_col_names,
            True,
            int(round(pixel_radius)),
            nonce,
        )
        return self._normalizer.process_pixel_results(result)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="mapd-dispatch"
                )
            return self._executor

    def reset(self) -> None:
        self._last_render_connection = None

    def shutdown(self, wait: bool = True) -> None:
        with self._executor_lock:
            executor = self._executor
            self._executor = None
        if executor is not None:
            executor.shutdown(wait=wait)


def _deliver(future: "Future[DispatchResult]", callback: Callback) -> None:
    error = future.exception()
    if error is not None:
        callback(error, None)
    else:
        callback(None, future.result())
