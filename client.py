import argparse
import json
import sys
import time
from typing import Dict, List, Optional

from mapd_core import ConnectorConfig, ConnectorError, MapDConnector


def build_config(args: argparse.Namespace) -> ConnectorConfig:
    if args.config:
        return ConnectorConfig.from_file(args.config)
    return ConnectorConfig.from_params(
        host=args.host,
        port=args.port,
        user=args.user,
        password=args.password,
        db_name=args.db_name,
        protocol=args.protocol,
        log_queries=args.log_queries,
    )


def print_rows(rows: List[Dict[str, object]], max_rows: int) -> None:
    for row in rows[:max_rows]:
        print(json.dumps(row, default=str))
    if len(rows) > max_rows:
        print(f" ... {len(rows) - max_rows} more row(s)")


def run_query(con: MapDConnector, sql: str, row_format: bool, drop_nulls: bool, limit: int, max_rows: int) -> None:
    start = time.time()
    rows = con.query(sql, columnar_results=not row_format, eliminate_null_rows=drop_nulls, limit=limit)
    latency_ms = (time.time() - start) * 1000
    print(f"Query completed in {latency_ms:.2f} ms, {len(rows)} row(s)")
    print_rows(rows, max_rows)


def run_render(con: MapDConnector, sql: str, render_spec: str, output: Optional[str]) -> None:
    result = con.render(sql, render_spec)
    image = result.image
    print(f"Render completed: {len(image)} bytes, execution_time_ms={result.execution_time_ms}")
    if output:
        with open(output, "wb") as stream:
            stream.write(image)
        print(f"Image written to {output}")


def run_status(con: MapDConnector) -> None:
    status = con.get_server_status()
    print(f"version={status['version']} read_only={status['read_only']} "
          f"rendering_enabled={status['rendering_enabled']}")
    for url in con.endpoints():
        print(f" connected: {url}")


def run_ping(con: MapDConnector, count: Optional[int]) -> None:
    queue_times = con.ping_servers(count)
    for url, queue_time in zip(con.endpoints(), queue_times):
        print(f" {url}: queue_time={queue_time:.2f} ms")


def run_tables(con: MapDConnector) -> None:
    for table in con.get_tables():
        print(table["name"])


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query one or more backend servers.")
    parser.add_argument("--config", help="Path to JSON connector configuration.")
    parser.add_argument("--host", action="append", help="Server host (repeat for several servers).")
    parser.add_argument("--port", action="append", help="Server port (one per --host).")
    parser.add_argument("--user", action="append", help="User name (one per --host).")
    parser.add_argument("--password", action="append", help="Password (one per --host).")
    parser.add_argument("--db-name", action="append", help="Database name (one per --host).")
    parser.add_argument("--protocol", action="append", default=None, help="http or https (one per --host).")
    parser.add_argument("--log-queries", action="store_true", help="Print each query with its timing.")

    commands = parser.add_subparsers(dest="command", required=True)

    query = commands.add_parser("query", help="Execute SQL and print rows.")
    query.add_argument("sql")
    query.add_argument("--row-format", action="store_true", help="Request row-oriented results.")
    query.add_argument("--eliminate-null-rows", action="store_true")
    query.add_argument("--limit", type=int, default=-1)
    query.add_argument("--max-rows", type=int, default=20, help="Rows to print.")

    render = commands.add_parser("render", help="Render SQL on the backend.")
    render.add_argument("sql")
    render.add_argument("render_spec", help="Render specification (JSON string).")
    render.add_argument("--output", help="File to write the image to.")

    commands.add_parser("status", help="Show server status.")

    ping = commands.add_parser("ping", help="Ping servers and show queue times.")
    ping.add_argument("--count", type=int, default=None)

    commands.add_parser("tables", help="List tables.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = build_config(args)
        with MapDConnector(config) as con:
            if args.command == "query":
                run_query(con, args.sql, args.row_format, args.eliminate_null_rows, args.limit, args.max_rows)
            elif args.command == "render":
                run_render(con, args.sql, args.render_spec, args.output)
            elif args.command == "status":
                run_status(con)
            elif args.command == "ping":
                run_ping(con, args.count)
            elif args.command == "tables":
                run_tables(con)
    except (ConnectorError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
