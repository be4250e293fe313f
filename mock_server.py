"""In-memory backend speaking the connector's gRPC protocol.

Serves canned tables in either result orientation. Used by the integration
tests and handy for trying the CLI without a real database.
"""

import argparse
import threading
import uuid
from concurrent import futures
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

import grpc

import mapd_pb2
import mapd_pb2_grpc

from mapd_core.datum_types import DatumType, EncodingType
from mapd_core.normalizer import READERS

# Null slots still take a position in the value list so indexes line up.
PLACEHOLDERS = {"int": 0, "real": 0.0, "str": ""}


@dataclass
class MockColumn:
    name: str
    type: DatumType
    is_array: bool = False
    is_dict: bool = False

    def col_type(self) -> mapd_pb2.TTypeInfo:
        return mapd_pb2.TTypeInfo(
            type=int(self.type),
            encoding=int(EncodingType.DICT if self.is_dict else EncodingType.NONE),
            nullable=True,
            is_array=self.is_array,
        )

    def column_type(self) -> mapd_pb2.TColumnType:
        return mapd_pb2.TColumnType(col_name=self.name, col_type=self.col_type())


@dataclass
class MockTable:
    name: str
    columns: List[MockColumn]
    rows: List[List[Any]] = field(default_factory=list)

    def row_desc(self, names: Optional[Sequence[str]] = None) -> List[mapd_pb2.TColumnType]:
        return [c.column_type() for c in self._select(names)[0]]

    def descriptor(self) -> List[mapd_pb2.TColumnType]:
        return [c.column_type() for c in self.columns]

    def _select(self, names: Optional[Sequence[str]]) -> Tuple[List[MockColumn], List[int]]:
        if not names:
            return list(self.columns), list(range(len(self.columns)))
        picked = [(c, i) for i, c in enumerate(self.columns) if c.name in names]
        return [c for c, _ in picked], [i for _, i in picked]

    def row_set(
        self,
        columnar: bool,
        limit: int = -1,
        names: Optional[Sequence[str]] = None,
    ) -> mapd_pb2.TRowSet:
        columns, indexes = self._select(names)
        rows = self.rows if limit is None or limit < 0 else self.rows[:limit]
        rows = [[row[i] for i in indexes] for row in rows]
        row_set = mapd_pb2.TRowSet(row_desc=self.row_desc(names), is_columnar=columnar)
        if columnar:
            for idx, column in enumerate(columns):
                row_set.columns.append(encode_column(column, [row[idx] for row in rows]))
        else:
            for row in rows:
                cols = [encode_datum(column, value) for column, value in zip(columns, row)]
                row_set.rows.append(mapd_pb2.TRow(cols=cols))
        return row_set


def _wire_value(column: MockColumn, value: Any) -> Any:
    if column.type == DatumType.BOOL:
        return int(bool(value))
    return value


def _scalar_column(column: MockColumn, values: Sequence[Any]) -> mapd_pb2.TColumn:
    slot = READERS[column.type].slot
    data = mapd_pb2.TColumnData()
    getattr(data, f"{slot}_col").extend(
        PLACEHOLDERS[slot] if v is None else _wire_value(column, v) for v in values
    )
    return mapd_pb2.TColumn(data=data, nulls=[v is None for v in values])


def encode_column(column: MockColumn, values: Sequence[Any]) -> mapd_pb2.TColumn:
    """Encode one field's values column-major with a parallel null list."""
    if not column.is_array:
        return _scalar_column(column, values)
    data = mapd_pb2.TColumnData(arr_col=[_scalar_column(column, v or []) for v in values])
    return mapd_pb2.TColumn(data=data, nulls=[v is None for v in values])


def _scalar_datum(column: MockColumn, value: Any) -> mapd_pb2.TDatum:
    if value is None:
        return mapd_pb2.TDatum(is_null=True)
    slot = READERS[column.type].slot
    val = mapd_pb2.TDatumVal(**{f"{slot}_val": _wire_value(column, value)})
    return mapd_pb2.TDatum(val=val)


def encode_datum(column: MockColumn, value: Any) -> mapd_pb2.TDatum:
    """Encode one cell of a row-oriented result."""
    if value is None or not column.is_array:
        return _scalar_datum(column, value)
    elements = [_scalar_datum(column, v) for v in value]
    return mapd_pb2.TDatum(val=mapd_pb2.TDatumVal(arr_val=elements))


class MockBackend(mapd_pb2_grpc.MapDServicer):
    """Implements every service method against in-memory tables."""

    def __init__(
        self,
        user: str = "mapd",
        password: str = "HyperInteractive",
        db_name: str = "mapd",
        execution_time_ms: int = 5,
        version: str = "mock-1.0",
    ):
        self.user = user
        self.password = password
        self.db_name = db_name
        self.execution_time_ms = execution_time_ms
        self.version = version
        self._tables = {}
        self._queries = {}
        self._sessions = {}
        self._lock = threading.Lock()
        self.nonces: List[str] = []

    def add_table(self, table: MockTable, *queries: str) -> None:
        self._tables[table.name] = table
        self._queries[f"SELECT * FROM {table.name}"] = table.name
        for sql in queries:
            self._queries[sql] = table.name

    @property
    def sessions(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def _check_session(self, session: str, context) -> None:
        with self._lock:
            known = session in self._sessions
        if not known:
            context.abort(grpc.StatusCode.UNAUTHENTICATED, "Session not valid.")

    def _table_for(self, query: str, context) -> MockTable:
        name = self._queries.get(query.strip())
        if name is None:
            context.abort(grpc.StatusCode.INVALID_ARGUMENT, f"Exception: cannot run query '{query}'")
        return self._tables[name]

    def Connect(self, request, context):
        if (request.user, request.passwd) != (self.user, self.password):
            context.abort(grpc.StatusCode.PERMISSION_DENIED, "Invalid credentials.")
        if request.dbname != self.db_name:
            context.abort(grpc.StatusCode.NOT_FOUND, f"Database {request.dbname} does not exist.")
        session = uuid.uuid4().hex
        with self._lock:
            self._sessions[session] = request.user
        return mapd_pb2.TSessionResponse(session=session)

    def Disconnect(self, request, context):
        with self._lock:
            self._sessions.pop(request.session, None)
        return mapd_pb2.TEmpty()

    def GetServerStatus(self, request, context):
        return mapd_pb2.TServerStatus(read_only=False, rendering_enabled=True, version=self.version)

    def SqlExecute(self, request, context):
        self._check_session(request.session, context)
        table = self._table_for(request.query, context)
        with self._lock:
            self.nonces.append(request.nonce)
        return mapd_pb2.TQueryResult(
            row_set=table.row_set(request.column_format, request.first_n),
            execution_time_ms=self.execution_time_ms,
            total_time_ms=self.execution_time_ms + 1,
            nonce=request.nonce,
        )

    def Render(self, request, context):
        self._check_session(request.session, context)
        self._table_for(request.query, context)
        return mapd_pb2.TRenderResult(
            image=b"\x89PNG\r\n\x1a\n" + request.render_type.encode("utf-8"),
            nonce=request.nonce,
            execution_time_ms=self.execution_time_ms,
            render_time_ms=1,
            total_time_ms=self.execution_time_ms + 1,
        )

    def SqlValidate(self, request, context):
        self._check_session(request.session, context)
        table = self._table_for(request.query, context)
        return mapd_pb2.TTableDescriptor(columns=table.descriptor())

    def GetTables(self, request, context):
        self._check_session(request.session, context)
        return mapd_pb2.TTablesResponse(tables=sorted(self._tables))

    def GetTableDescriptor(self, request, context):
        self._check_session(request.session, context)
        table = self._tables.get(request.table_name)
        return mapd_pb2.TTableDescriptor(columns=table.descriptor() if table else [])

    def GetDatabases(self, request, context):
        self._check_session(request.session, context)
        db = mapd_pb2.TDBInfo(db_name=self.db_name, db_owner=self.user)
        return mapd_pb2.TDatabasesResponse(databases=[db])

    def GetResultRowForPixel(self, request, context):
        self._check_session(request.session, context)
        result = mapd_pb2.TPixelResult(nonce=request.nonce, execution_time_ms=1)
        for table_name in sorted(request.table_col_names):
            table = self._tables.get(table_name)
            if table is None or not table.rows:
                continue
            names = list(request.table_col_names[table_name].names)
            result.pixel_rows.append(mapd_pb2.TPixelTableRowResult(
                pixel=request.pixel,
                vega_table_name=table_name,
                table_id=[0],
                row_id=[0],
                row_set=table.row_set(request.column_format, 1, names),
            ))
        return result


def build_server(backend: MockBackend, address: str = "127.0.0.1:0", max_workers: int = 16):
    """Create (but do not start) a gRPC server for ``backend``. Returns (server, port)."""
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
    mapd_pb2_grpc.add_MapDServicer_to_server(backend, server)
    port = server.add_insecure_port(address)
    return server, port


def demo_tables() -> List[MockTable]:
    flights = MockTable(
        name="flights",
        columns=[
            MockColumn("carrier_name", DatumType.STR, is_dict=True),
            MockColumn("dep_delay", DatumType.SMALLINT),
            MockColumn("distance", DatumType.FLOAT),
            MockColumn("dep_timestamp", DatumType.TIMESTAMP),
            MockColumn("cancelled", DatumType.BOOL),
            MockColumn("crew_ids", DatumType.INT, is_array=True),
        ],
        rows=[
            ["United Air Lines", 12, 1605.0, 1230768000, False, [101, 102]],
            ["Southwest Airlines", -3, 413.0, 1230771600, False, [201, None]],
            ["Delta Air Lines", None, 760.5, 1230775200, True, [301]],
            ["American Airlines", 45, 2475.0, 1230778800, False, None],
        ],
    )
    return [flights]


def serve(port: int, user: str, password: str, db_name: str) -> None:
    backend = MockBackend(user=user, password=password, db_name=db_name)
    for table in demo_tables():
        backend.add_table(table)
    server, bound = build_server(backend, f"0.0.0.0:{port}")
    server.start()
    print(f"[MockServer] serving {len(demo_tables())} table(s) on port {bound}, db={db_name}", flush=True)
    server.wait_for_termination()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start an in-memory backend.")
    parser.add_argument("--port", type=int, default=6274, help="Port to listen on.")
    parser.add_argument("--user", default="mapd")
    parser.add_argument("--password", default="HyperInteractive")
    parser.add_argument("--db-name", default="mapd")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    serve(args.port, args.user, args.password, args.db_name)
