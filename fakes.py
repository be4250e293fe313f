"""In-process stand-ins for MapDClient used by the unit tests."""

from typing import Callable, Dict, List, Optional

import mapd_pb2

from mapd_core.config import ConnectorConfig, EndpointSpec
from mapd_core.datum_types import DatumType
from mapd_core.errors import TransportError
from mock_server import MockColumn, MockTable


def sample_table() -> MockTable:
    return MockTable(
        name="t",
        columns=[
            MockColumn("name", DatumType.STR, is_dict=True),
            MockColumn("score", DatumType.INT),
        ],
        rows=[["a", 1], ["b", None]],
    )


def query_result(
    table: Optional[MockTable] = None, columnar: bool = True, execution_time_ms: int = 7
) -> mapd_pb2.TQueryResult:
    table = table or sample_table()
    return mapd_pb2.TQueryResult(
        row_set=table.row_set(columnar),
        execution_time_ms=execution_time_ms,
        total_time_ms=execution_time_ms + 1,
    )


class FakeClient:
    """Records calls and answers from canned data. ``fail_with`` is raised by every query."""

    def __init__(
        self,
        spec: EndpointSpec,
        reachable: bool = True,
        result: Optional[mapd_pb2.TQueryResult] = None,
        connect_error: Optional[Exception] = None,
    ):
        self.spec = spec
        self.reachable = reachable
        self.result = result if result is not None else query_result()
        self.connect_error = connect_error
        self.fail_with: Optional[Exception] = None
        self.on_execute: Optional[Callable[[], None]] = None
        self.calls: List[tuple] = []
        self.closed = False
        self.disconnected: List[str] = []

    def connect(self, user: str, password: str, db_name: str) -> str:
        self.calls.append(("connect", user, db_name))
        if self.connect_error is not None:
            raise self.connect_error
        if not self.reachable:
            raise TransportError(f"{self.spec.url}: connection refused", endpoint=self.spec.url)
        return f"session-{self.spec.host}"

    def disconnect(self, session: str) -> None:
        self.disconnected.append(session)

    def get_server_status(self, session: Optional[str]) -> mapd_pb2.TServerStatus:
        self.calls.append(("get_server_status", session))
        return mapd_pb2.TServerStatus(read_only=False, rendering_enabled=True, version="fake")

    def sql_execute(self, session, query, column_format, nonce, first_n=-1):
        self.calls.append(("sql_execute", query, column_format, nonce, first_n))
        if self.on_execute is not None:
            self.on_execute()
        if self.fail_with is not None:
            raise self.fail_with
        return self.result

    def render(self, session, query, render_type, nonce, first_n=-1):
        self.calls.append(("render", query, render_type, nonce, first_n))
        if self.fail_with is not None:
            raise self.fail_with
        return mapd_pb2.TRenderResult(image=b"\x89PNG", nonce=nonce, execution_time_ms=11)

    def sql_validate(self, session, query):
        return [MockColumn("score", DatumType.INT).column_type()]

    def get_tables(self, session):
        return ["t", "u"]

    def get_table_descriptor(self, session, table_name):
        if table_name != "t":
            return []
        return sample_table().descriptor()

    def get_databases(self, session):
        return [mapd_pb2.TDBInfo(db_name="mapd", db_owner="mapd")]

    def get_result_row_for_pixel(self, session, widget_id, pixel, table_col_names, column_format, pixel_radius, nonce):
        self.calls.append(("get_result_row_for_pixel", widget_id, pixel_radius, nonce))
        row = mapd_pb2.TPixelTableRowResult(
            pixel=mapd_pb2.TPixel(x=pixel["x"], y=pixel["y"]),
            vega_table_name="t",
            table_id=[0],
            row_id=[0],
            row_set=sample_table().row_set(True, 1),
        )
        return mapd_pb2.TPixelResult(pixel_rows=[row], nonce=nonce)

    def close(self) -> None:
        self.closed = True


class FakeClientFactory:
    """
    Builds FakeClients. Hosts listed in ``unreachable`` refuse to connect,
    hosts in ``crashing`` raise RuntimeError from connect, and hosts in
    ``broken`` make the factory itself raise.
    """

    def __init__(self, unreachable=(), crashing=(), broken=()):
        self.unreachable = set(unreachable)
        self.crashing = set(crashing)
        self.broken = set(broken)
        self.clients: Dict[str, FakeClient] = {}

    def __call__(self, spec: EndpointSpec) -> FakeClient:
        if spec.host in self.broken:
            raise RuntimeError(f"cannot build client for {spec.host}")
        connect_error = RuntimeError("session handshake crashed") if spec.host in self.crashing else None
        client = FakeClient(spec, reachable=spec.host not in self.unreachable, connect_error=connect_error)
        self.clients[spec.host] = client
        return client


def make_config(hosts: List[str], **options) -> ConnectorConfig:
    count = len(hosts)
    return ConnectorConfig.from_params(
        host=hosts,
        port=[6274] * count,
        user=["mapd"] * count,
        password=["HyperInteractive"] * count,
        db_name=["mapd"] * count,
        **options,
    )
