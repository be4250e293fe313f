import threading
import unittest

import mapd_pb2

from fakes import FakeClientFactory, make_config, query_result
from mapd_core.balancer import LoadBalancer
from mapd_core.dispatcher import PendingQuery, QueryDispatcher, QueryOptions, RequestMode
from mapd_core.errors import ExhaustedConnectionsError, QueryError, TransportError, UnmappedTypeError
from mapd_core.metrics import MetricsTracker
from mapd_core.normalizer import ResultNormalizer
from mapd_core.pool import ConnectionPool

SAMPLE_ROWS = [{"name": "a", "score": 1}, {"name": "b", "score": None}]


class DispatcherTestCase(unittest.TestCase):
    hosts = ["a", "b"]

    def setUp(self):
        self.factory = FakeClientFactory()
        self.pool = ConnectionPool(client_factory=self.factory)
        self.pool.connect(make_config(self.hosts).endpoints)
        self.balancer = LoadBalancer(default_query_time_ms=50.0)
        self.metrics = MetricsTracker()
        self.dispatcher = QueryDispatcher(self.pool, self.balancer, ResultNormalizer(), metrics=self.metrics)

    def tearDown(self):
        self.dispatcher.shutdown()

    def client(self, host):
        return self.factory.clients[host]

    def executed(self, host):
        return [c for c in self.client(host).calls if c[0] == "sql_execute"]


class TestDirectDispatch(DispatcherTestCase):
    def test_direct_sync_returns_rows(self):
        result = self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        self.assertEqual(result.value, SAMPLE_ROWS)
        self.assertEqual(result.nonce, "0")
        self.assertEqual(result.con_id, 0)
        self.assertEqual(result.attempts, 1)
        self.assertEqual(result.execution_time_ms, 7)
        self.assertEqual(self.balancer.queue_times(self.pool), [0.0, 0.0])

    def test_nonce_increments_per_dispatch(self):
        for _ in range(3):
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        nonces = [call[3] for call in self.executed("a")]
        self.assertEqual(nonces, ["0", "1", "2"])
        self.assertEqual(self.dispatcher.nonce, 3)

    def test_options_reach_the_wire(self):
        options = QueryOptions(columnar_results=False, limit=10, render_spec="{}")

        self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t", options)

        self.assertEqual(self.executed("a")[0], ("sql_execute", "SELECT * FROM t", False, "0", 10))

    def test_eliminate_null_rows(self):
        options = QueryOptions(eliminate_null_rows=True)

        result = self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t", options)

        self.assertEqual(result.value, SAMPLE_ROWS[:1])

    def test_queue_is_charged_while_running(self):
        seen = []
        self.client("a").on_execute = lambda: seen.append(self.balancer.queue_times(self.pool))

        self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        self.assertEqual(seen, [[50.0, 0.0]])
        self.assertEqual(self.balancer.queue_times(self.pool), [0.0, 0.0])

    def test_execution_time_recorded_by_query_id(self):
        options = QueryOptions(query_id="q1")

        self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t", options)

        self.assertEqual(self.balancer.query_times(), {"q1": 7.0})
        seen = []
        self.client("a").on_execute = lambda: seen.append(self.balancer.queue_times(self.pool))
        self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t", options)
        self.assertEqual(seen, [[7.0, 0.0]])

    def test_query_error_is_not_retried(self):
        print("\nTesting Dispatcher: server-side error propagates")
        self.client("a").fail_with = QueryError("Exception: syntax error")

        with self.assertRaises(QueryError):
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELEC")

        self.assertEqual(self.pool.num_connections, 2)
        self.assertEqual(self.balancer.queue_times(self.pool), [0.0, 0.0])
        self.assertEqual(self.metrics.snapshot()["failed"], 1)

    def test_unmapped_type_propagates(self):
        result = query_result()
        result.row_set.row_desc[1].col_type.type = 42
        self.client("a").result = result

        with self.assertRaises(UnmappedTypeError):
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")
        self.assertEqual(self.pool.num_connections, 2)


class TestFailover(DispatcherTestCase):
    def test_transport_failure_removes_connection_and_retries(self):
        print("\nTesting Dispatcher: failover to the next connection")
        self.client("a").fail_with = TransportError("connection reset", endpoint="http://a:6274")

        result = self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        self.assertEqual(result.value, SAMPLE_ROWS)
        self.assertEqual(result.attempts, 2)
        self.assertEqual(result.endpoint, "http://b:6274")
        self.assertEqual(result.con_id, 0)
        self.assertEqual(result.nonce, "1")
        self.assertEqual(self.pool.endpoints(), ["http://b:6274"])
        self.assertTrue(self.client("a").closed)
        self.assertEqual(self.balancer.queue_times(self.pool), [0.0])
        snapshot = self.metrics.snapshot()
        self.assertEqual(snapshot["retries"], 1)
        self.assertEqual(snapshot["completed"], 1)
        print("  -> Served by b after 2 attempts, a removed")

    def test_all_connections_failing_exhausts(self):
        print("\nTesting Dispatcher: every connection fails")
        for host in self.hosts:
            self.client(host).fail_with = TransportError("down")

        with self.assertRaises(ExhaustedConnectionsError) as cm:
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        self.assertEqual(cm.exception.attempts, 2)
        self.assertEqual(self.pool.num_connections, 0)
        self.assertEqual(len(self.executed("a")), 1)
        self.assertEqual(len(self.executed("b")), 1)

    def test_empty_pool_fails_immediately(self):
        self.pool.disconnect()

        with self.assertRaises(ExhaustedConnectionsError) as cm:
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")
        self.assertEqual(cm.exception.attempts, 0)

    def test_removing_last_connection_exhausts_sync_and_async(self):
        print("\nTesting Dispatcher: dispatch after the last connection is removed")
        self.pool.remove_connection(1)
        self.assertEqual(
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t").endpoint, "http://a:6274"
        )

        self.pool.remove_connection(0)
        self.assertEqual(self.pool.num_connections, 0)

        with self.assertRaises(ExhaustedConnectionsError):
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        received = []
        done = threading.Event()

        def callback(error, result):
            received.append((error, result))
            done.set()

        pending = self.dispatcher.dispatch(RequestMode.DIRECT_ASYNC, "SELECT * FROM t", callback=callback)
        with self.assertRaises(ExhaustedConnectionsError):
            pending.result(timeout=5)
        self.assertTrue(done.wait(5))
        self.assertIsInstance(received[0][0], ExhaustedConnectionsError)
        self.assertEqual(len(self.executed("a")), 1)
        self.assertEqual(len(self.executed("b")), 0)
        print("  -> Both modes raise ExhaustedConnectionsError")

    def test_render_failover(self):
        self.client("a").fail_with = TransportError("down")

        result = self.dispatcher.dispatch(
            RequestMode.RENDER_SYNC, "SELECT * FROM t", QueryOptions(render_spec="{}")
        )

        self.assertEqual(result.value.image, b"\x89PNG")
        self.assertEqual(result.endpoint, "http://b:6274")


class TestBalancedDispatch(DispatcherTestCase):
    hosts = ["a", "b", "c"]

    def test_round_robin_rotates(self):
        self.balancer.strategy = "round_robin"

        endpoints = [
            self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t").endpoint
            for _ in range(4)
        ]

        self.assertEqual(endpoints, ["http://a:6274", "http://b:6274", "http://c:6274", "http://a:6274"])

    def test_adaptive_avoids_handicapped_connection(self):
        self.pool[0].handicap = 20.0

        result = self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")

        self.assertEqual(result.endpoint, "http://b:6274")


class TestAsyncDispatch(DispatcherTestCase):
    def test_async_returns_pending_query_and_calls_back(self):
        print("\nTesting Dispatcher: asynchronous query")
        done = threading.Event()
        received = []

        def callback(error, result):
            received.append((error, result))
            done.set()

        pending = self.dispatcher.dispatch(RequestMode.DIRECT_ASYNC, "SELECT * FROM t", callback=callback)

        self.assertIsInstance(pending, PendingQuery)
        self.assertEqual(pending.nonce, "0")
        result = pending.result(timeout=5)
        self.assertTrue(done.wait(5))
        error, delivered = received[0]
        self.assertIsNone(error)
        self.assertEqual(delivered.value, SAMPLE_ROWS)
        self.assertEqual(result.nonce, "0")
        self.assertEqual(self.dispatcher.nonce, 1)

    def test_async_error_goes_to_callback(self):
        for host in self.hosts:
            self.client(host).fail_with = TransportError("down")
        done = threading.Event()
        received = []

        def callback(error, result):
            received.append((error, result))
            done.set()

        pending = self.dispatcher.dispatch(RequestMode.DIRECT_ASYNC, "SELECT * FROM t", callback=callback)

        self.assertTrue(done.wait(5))
        self.assertIsInstance(received[0][0], ExhaustedConnectionsError)
        self.assertIsNone(received[0][1])
        with self.assertRaises(ExhaustedConnectionsError):
            pending.result(timeout=5)

    def test_concurrent_queries_leave_queues_empty(self):
        pendings = [
            self.dispatcher.dispatch(RequestMode.DIRECT_ASYNC, "SELECT * FROM t") for _ in range(20)
        ]

        nonces = sorted(int(p.result(timeout=5).nonce) for p in pendings)

        self.assertEqual(nonces, list(range(20)))
        self.assertEqual(self.balancer.queue_times(self.pool), [0.0, 0.0])

    def test_render_async(self):
        pending = self.dispatcher.dispatch(
            RequestMode.RENDER_ASYNC, "SELECT * FROM t", QueryOptions(render_spec='{"marks": []}')
        )

        payload = pending.result(timeout=5).value

        self.assertEqual(payload.image, b"\x89PNG")
        self.assertEqual(self.client("a").calls[-1], ("render", "SELECT * FROM t", '{"marks": []}', "0", -1))


class TestRender(DispatcherTestCase):
    def test_render_requires_spec(self):
        with self.assertRaises(ValueError):
            self.dispatcher.dispatch(RequestMode.RENDER_SYNC, "SELECT * FROM t")

    def test_render_payload_passes_through(self):
        result = self.dispatcher.dispatch(
            RequestMode.RENDER_SYNC, "SELECT * FROM t", QueryOptions(render_spec="{}")
        )

        self.assertEqual(
            result.value, mapd_pb2.TRenderResult(image=b"\x89PNG", nonce="0", execution_time_ms=11)
        )

    def test_pixel_lookup_uses_render_connection(self):
        self.balancer.strategy = "round_robin"
        self.dispatcher.dispatch(RequestMode.DIRECT_SYNC, "SELECT * FROM t")
        self.dispatcher.dispatch(RequestMode.RENDER_SYNC, "SELECT * FROM t", QueryOptions(render_spec="{}"))

        rows = self.dispatcher.get_result_row_for_pixel(1, {"x": 10, "y": 20}, {"t": ["name", "score"]})

        self.assertEqual(rows[0]["row_set"], SAMPLE_ROWS[:1])
        pixel_calls = [c for c in self.client("b").calls if c[0] == "get_result_row_for_pixel"]
        self.assertEqual(pixel_calls, [("get_result_row_for_pixel", 1, 2, "2")])

    def test_pixel_lookup_defaults_to_first_connection(self):
        self.dispatcher.get_result_row_for_pixel(1, {"x": 0, "y": 0}, {"t": ["name"]}, pixel_radius=1.6)

        pixel_calls = [c for c in self.client("a").calls if c[0] == "get_result_row_for_pixel"]
        self.assertEqual(pixel_calls, [("get_result_row_for_pixel", 1, 2, "0")])


class TestRequestMode(unittest.TestCase):
    def test_of(self):
        self.assertIs(RequestMode.of(render=False, asynchronous=False), RequestMode.DIRECT_SYNC)
        self.assertIs(RequestMode.of(render=True, asynchronous=True), RequestMode.RENDER_ASYNC)
        self.assertTrue(RequestMode.RENDER_SYNC.is_render)
        self.assertFalse(RequestMode.RENDER_SYNC.is_async)
        self.assertTrue(RequestMode.DIRECT_ASYNC.is_async)


if __name__ == '__main__':
    unittest.main()
