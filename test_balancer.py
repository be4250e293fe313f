import threading
import unittest
from unittest.mock import MagicMock

from fakes import FakeClientFactory, make_config
from mapd_core.balancer import AdaptiveBalance, LoadBalancer, RoundRobinBalance
from mapd_core.errors import ExhaustedConnectionsError, TransportError
from mapd_core.pool import ConnectionPool


class _SteppingClock:
    """Each thread sees start=0.0 then end=step, so every round trip lasts exactly ``step`` seconds."""

    def __init__(self, step):
        self.step = step
        self._local = threading.local()

    def __call__(self):
        started = getattr(self._local, "started", False)
        self._local.started = not started
        return self.step if started else 0.0


def _pool(hosts):
    pool = ConnectionPool(client_factory=FakeClientFactory())
    pool.connect(make_config(hosts).endpoints)
    return pool


class TestStrategies(unittest.TestCase):
    def test_adaptive_picks_minimum_with_lowest_id_on_ties(self):
        strategy = AdaptiveBalance()
        self.assertEqual(strategy.select(0, [30.0, 10.0, 20.0]), 1)
        self.assertEqual(strategy.select(5, [10.0, 10.0, 10.0]), 0)
        self.assertEqual(strategy.select(5, [20.0, 10.0, 10.0]), 1)

    def test_round_robin_uses_nonce_modulo(self):
        strategy = RoundRobinBalance()
        picks = [strategy.select(nonce, [0.0, 0.0, 0.0]) for nonce in range(7)]
        self.assertEqual(picks, [0, 1, 2, 0, 1, 2, 0])


class TestLoadBalancer(unittest.TestCase):
    def setUp(self):
        self.pool = _pool(["a", "b"])
        self.balancer = LoadBalancer(default_query_time_ms=50.0)

    def test_unknown_query_falls_back_to_default(self):
        print("\nTesting Balancer: three unknown queries on two idle servers")
        picks = []
        for nonce in range(3):
            con_id, _, _ = self.balancer.acquire(self.pool, nonce, None)
            picks.append(con_id)

        self.assertEqual(picks, [0, 1, 0])
        self.assertEqual(self.balancer.queue_times(self.pool), [100.0, 50.0])
        print("  -> Picked 0, 1, 0 and queues are [100, 50]")

    def test_relieve_is_idempotent(self):
        _, connection, charge = self.balancer.acquire(self.pool, 0, None)

        self.balancer.relieve(charge)
        self.balancer.relieve(charge)

        self.assertEqual(connection.queue_time, 0.0)
        self.assertEqual(connection.pending, {})

    def test_concurrent_charges_for_same_query_id_are_independent(self):
        self.balancer.strategy = "round_robin"
        _, first_con, first = self.balancer.acquire(self.pool, 0, "q")
        _, second_con, second = self.balancer.acquire(self.pool, 0, "q")

        self.assertIs(first_con, second_con)
        self.assertEqual(first_con.queue_time, 100.0)
        self.balancer.relieve(first)
        self.assertEqual(first_con.queue_time, 50.0)
        self.balancer.relieve(second)
        self.assertEqual(first_con.queue_time, 0.0)

    def test_relieving_restores_handicap_exactly(self):
        print("\nTesting Balancer: relieve leaves no residue on the handicap")
        self.pool[0].handicap = 0.1
        self.pool[1].handicap = 0.1
        self.balancer.record("odd", 33.3)

        for nonce in range(5):
            _, connection, charge = self.balancer.acquire(self.pool, nonce, "odd")
            self.assertIs(connection, self.pool[0])
            self.balancer.relieve(charge)

        self.assertEqual(self.pool[0].queue_time, 0.1)
        self.assertEqual(self.balancer.queue_times(self.pool), [0.1, 0.1])
        con_id, _, _ = self.balancer.acquire(self.pool, 5, None)
        self.assertEqual(con_id, 0)
        print("  -> Queue time back to exactly 0.1, tie still goes to connection 0")

    def test_recorded_time_drives_estimate(self):
        self.balancer.record("histogram", 12.5)
        self.balancer.record(None, 99)
        self.balancer.record("skipped", None)

        self.assertEqual(self.balancer.query_times(), {"histogram": 12.5})

        _, connection, charge = self.balancer.acquire(self.pool, 0, "histogram")
        self.assertEqual(charge.estimate, 12.5)
        self.assertEqual(connection.queue_time, 12.5)
        _, _, unknown = self.balancer.acquire(self.pool, 1, "unknown")
        self.assertEqual(unknown.estimate, 50.0)

    def test_reset_forgets_history(self):
        self.balancer.record("q", 3)
        self.balancer.reset()
        self.assertEqual(self.balancer.query_times(), {})

    def test_strategy_switch(self):
        self.balancer.strategy = "ROUND_ROBIN"
        self.assertEqual(self.balancer.strategy, "round_robin")
        with self.assertRaises(ValueError):
            self.balancer.strategy = "fastest"
        self.assertEqual(self.balancer.strategy, "round_robin")

    def test_empty_pool_is_exhausted(self):
        with self.assertRaises(ExhaustedConnectionsError):
            self.balancer.acquire(ConnectionPool(client_factory=FakeClientFactory()), 0, None)


class TestPing(unittest.TestCase):
    def test_ping_adds_average_round_trip_once(self):
        print("\nTesting Balancer: ping handicap")
        pool = _pool(["a", "b"])
        pool[1].handicap = 5.0
        balancer = LoadBalancer(num_pings_per_server=4, clock=_SteppingClock(0.010))

        queue_times = balancer.ping(pool)

        self.assertAlmostEqual(queue_times[0], 10.0)
        self.assertAlmostEqual(queue_times[1], 15.0)
        self.assertAlmostEqual(pool[0].ping_time, 10.0)
        calls = [c for c in pool[0].client.calls if c[0] == "get_server_status"]
        self.assertEqual(len(calls), 4)
        print("  -> Each connection charged its 10 ms average once")

    def test_ping_count_override(self):
        pool = _pool(["a"])
        balancer = LoadBalancer(clock=_SteppingClock(0.002))

        balancer.ping(pool, num_pings=2)

        calls = [c for c in pool[0].client.calls if c[0] == "get_server_status"]
        self.assertEqual(len(calls), 2)
        self.assertAlmostEqual(pool[0].queue_time, 2.0)

    def test_failed_ping_still_counts(self):
        pool = _pool(["a"])
        pool[0].client = MagicMock()
        pool[0].client.get_server_status.side_effect = TransportError("down")
        balancer = LoadBalancer(num_pings_per_server=3, clock=_SteppingClock(0.004))

        queue_times = balancer.ping(pool)

        self.assertAlmostEqual(queue_times[0], 4.0)
        self.assertEqual(pool[0].client.get_server_status.call_count, 3)

    def test_ping_empty_pool(self):
        self.assertEqual(LoadBalancer().ping(ConnectionPool(client_factory=FakeClientFactory())), [])


if __name__ == '__main__':
    unittest.main()
