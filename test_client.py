import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

import client
from mock_server import MockBackend, build_server, demo_tables


class TestClientCli(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        backend = MockBackend()
        for table in demo_tables():
            backend.add_table(table)
        cls.server, cls.port = build_server(backend)
        cls.server.start()

    @classmethod
    def tearDownClass(cls):
        cls.server.stop(0)

    def _server_args(self):
        return [
            "--host", "127.0.0.1", "--port", str(self.port),
            "--user", "mapd", "--password", "HyperInteractive", "--db-name", "mapd",
        ]

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = client.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_build_config_from_flags(self):
        args = client.parse_args(self._server_args() + ["--log-queries", "status"])

        config = client.build_config(args)

        self.assertEqual(config.endpoints[0].port, self.port)
        self.assertTrue(config.log_queries)

    def test_query_command(self):
        print("\nTesting CLI: query")
        code, out, _ = self._run(self._server_args() + ["query", "SELECT * FROM flights", "--max-rows", "2"])

        self.assertEqual(code, 0)
        self.assertIn("4 row(s)", out)
        self.assertIn("United Air Lines", out)
        self.assertIn("2 more row(s)", out)

    def test_render_command_writes_image(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.png")
            code, _, _ = self._run(self._server_args() + ["render", "SELECT * FROM flights", "{}", "--output", path])

            self.assertEqual(code, 0)
            with open(path, "rb") as stream:
                self.assertTrue(stream.read().startswith(b"\x89PNG"))

    def test_status_and_tables(self):
        code, out, _ = self._run(self._server_args() + ["status"])
        self.assertEqual(code, 0)
        self.assertIn("version=mock-1.0", out)

        code, out, _ = self._run(self._server_args() + ["tables"])
        self.assertEqual(code, 0)
        self.assertIn("flights", out)

    def test_missing_parameters_fail(self):
        code, _, err = self._run(["--host", "127.0.0.1", "status"])

        self.assertEqual(code, 1)
        self.assertIn("Please enter a", err)

    def test_missing_config_file_fails(self):
        code, _, err = self._run(["--config", "/nonexistent/connector.json", "status"])

        self.assertEqual(code, 1)
        self.assertIn("Error", err)


if __name__ == '__main__':
    unittest.main()
