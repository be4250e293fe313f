"""gRPC transport to a single backend server.

``MapDClient`` wraps the generated ``MapDStub`` and turns ``grpc.RpcError``
into the connector's error taxonomy.
"""

from typing import Dict, List, Optional

import grpc

import mapd_pb2
import mapd_pb2_grpc

from .config import EndpointSpec
from .errors import QueryError, TransportError

# Status codes that mean the endpoint itself is unreachable or gone.
TRANSPORT_STATUS_CODES = frozenset({
    grpc.StatusCode.UNAVAILABLE,
    grpc.StatusCode.DEADLINE_EXCEEDED,
    grpc.StatusCode.CANCELLED,
})

KEEPALIVE_OPTIONS = [
    ('grpc.keepalive_time_ms', 10000),
    ('grpc.keepalive_timeout_ms', 5000),
    ('grpc.keepalive_permit_without_calls', True),
    ('grpc.http2.min_time_between_pings_ms', 10000),
    ('grpc.http2.max_pings_without_data', 0),
]


def open_channel(spec: EndpointSpec) -> grpc.Channel:
    if spec.is_secure:
        credentials = grpc.ssl_channel_credentials()
        return grpc.secure_channel(spec.address, credentials, options=KEEPALIVE_OPTIONS)
    return grpc.insecure_channel(spec.address, options=KEEPALIVE_OPTIONS)


def classify_rpc_error(exc: grpc.RpcError, endpoint: str) -> Exception:
    """Translate a gRPC failure into TransportError or QueryError."""
    code = exc.code() if callable(getattr(exc, "code", None)) else None
    details = exc.details() if callable(getattr(exc, "details", None)) else None
    message = details or str(exc) or "RPC failed"
    if code is None or code in TRANSPORT_STATUS_CODES:
        return TransportError(f"{endpoint}: {message}", endpoint=endpoint)
    return QueryError(f"{endpoint}: {message}", endpoint=endpoint)


class MapDClient:
    """Client for one backend server. Owns its channel."""

    def __init__(
        self,
        spec: EndpointSpec,
        channel: Optional[grpc.Channel] = None,
        timeout: Optional[float] = 30.0,
    ):
        self.spec = spec
        self._channel = channel if channel is not None else open_channel(spec)
        self._stub = mapd_pb2_grpc.MapDStub(self._channel)
        self._timeout = timeout

    def _call(self, method: str, request):
        try:
            return getattr(self._stub, method)(request, timeout=self._timeout)
        except grpc.RpcError as e:
            raise classify_rpc_error(e, self.spec.url) from e

    def connect(self, user: str, password: str, db_name: str) -> str:
        response = self._call("Connect", mapd_pb2.TConnectRequest(user=user, passwd=password, dbname=db_name))
        if not response.session:
            raise QueryError(f"{self.spec.url}: connect returned no session", endpoint=self.spec.url)
        return response.session

    def disconnect(self, session: str) -> None:
        self._call("Disconnect", mapd_pb2.TSessionRequest(session=session))

    def get_server_status(self, session: Optional[str]) -> mapd_pb2.TServerStatus:
        return self._call("GetServerStatus", mapd_pb2.TSessionRequest(session=session or ""))

    def sql_execute(
        self,
        session: str,
        query: str,
        column_format: bool,
        nonce: str,
        first_n: int = -1,
    ) -> mapd_pb2.TQueryResult:
        request = mapd_pb2.TQueryRequest(
            session=session,
            query=query,
            column_format=column_format,
            nonce=nonce,
            first_n=first_n,
        )
        return self._call("SqlExecute", request)

    def render(
        self,
        session: str,
        query: str,
        render_type: str,
        nonce: str,
        first_n: int = -1,
    ) -> mapd_pb2.TRenderResult:
        request = mapd_pb2.TRenderRequest(
            session=session,
            query=query,
            render_type=render_type,
            nonce=nonce,
            first_n=first_n,
        )
        return self._call("Render", request)

    def sql_validate(self, session: str, query: str) -> List[mapd_pb2.TColumnType]:
        response = self._call("SqlValidate", mapd_pb2.TValidateRequest(session=session, query=query))
        return list(response.columns)

    def get_tables(self, session: str) -> List[str]:
        return list(self._call("GetTables", mapd_pb2.TSessionRequest(session=session)).tables)

    def get_table_descriptor(self, session: str, table_name: str) -> List[mapd_pb2.TColumnType]:
        request = mapd_pb2.TTableRequest(session=session, table_name=table_name)
        return list(self._call("GetTableDescriptor", request).columns)

    def get_databases(self, session: str) -> List[mapd_pb2.TDBInfo]:
        return list(self._call("GetDatabases", mapd_pb2.TSessionRequest(session=session)).databases)

    def get_result_row_for_pixel(
        self,
        session: str,
        widget_id: int,
        pixel: Dict[str, int],
        table_col_names: Dict[str, List[str]],
        column_format: bool,
        pixel_radius: int,
        nonce: str,
    ) -> mapd_pb2.TPixelResult:
        request = mapd_pb2.TPixelRequest(
            session=session,
            widget_id=widget_id,
            pixel=mapd_pb2.TPixel(x=pixel["x"], y=pixel["y"]),
            column_format=column_format,
            pixel_radius=pixel_radius,
            nonce=nonce,
        )
        for table, names in table_col_names.items():
            request.table_col_names[table].names.extend(names)
        return self._call("GetResultRowForPixel", request)

    def close(self) -> None:
        self._channel.close()
