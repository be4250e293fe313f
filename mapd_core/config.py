import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .errors import ConfigurationError

BALANCE_STRATEGIES = ("adaptive", "round_robin")
SECURE_PROTOCOLS = ("https", "grpcs")

ParamValue = Union[str, int, Sequence[Union[str, int]], None]


@dataclass(frozen=True)
class EndpointSpec:
    """Immutable description of one backend server to connect to."""

    host: str
    port: int
    user: str
    password: str
    db_name: str
    protocol: str = "http"

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    @property
    def is_secure(self) -> bool:
        return self.protocol.lower() in SECURE_PROTOCOLS


@dataclass(frozen=True)
class BalanceConfig:
    """Load-balancing settings shared by every connection."""

    strategy: str = "adaptive"
    default_query_time_ms: float = 50.0
    num_pings_per_server: int = 4

    def __post_init__(self):
        if self.strategy not in BALANCE_STRATEGIES:
            raise ConfigurationError(
                f"Unknown balance strategy '{self.strategy}', expected one of {BALANCE_STRATEGIES}."
            )
        if self.num_pings_per_server < 1:
            raise ConfigurationError("num_pings_per_server must be at least 1.")

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "BalanceConfig":
        """Create BalanceConfig from dictionary, using defaults if None or missing keys."""
        if not data:
            return cls()
        return cls(
            strategy=data.get("strategy", "adaptive"),
            default_query_time_ms=float(data.get("default_query_time_ms", 50.0)),
            num_pings_per_server=int(data.get("num_pings_per_server", 4)),
        )


@dataclass(frozen=True)
class ConnectorConfig:
    """Everything the connector needs to open its connection set."""

    endpoints: List[EndpointSpec]
    balance: BalanceConfig = field(default_factory=BalanceConfig)
    log_queries: bool = False
    request_timeout: Optional[float] = 30.0
    connect_retries: int = 0
    max_workers: int = 8

    def __post_init__(self):
        if not self.endpoints:
            raise ConfigurationError("Must have at least one server to connect to.")

    @classmethod
    def from_params(
        cls,
        host: ParamValue,
        port: ParamValue,
        user: ParamValue,
        password: ParamValue,
        db_name: ParamValue,
        protocol: ParamValue = None,
        balance: Optional[BalanceConfig] = None,
        **options,
    ) -> "ConnectorConfig":
        """Build a config from per-connection parameter collections.

        Each parameter may be a single value or a list with one entry per
        server. All lists must have the same non-zero length and no required
        entry may be empty.
        """
        hosts = _as_list(host)
        ports = _as_list(port)
        users = _as_list(user)
        passwords = _as_list(password)
        db_names = _as_list(db_name)

        required = (
            ("username", users),
            ("password", passwords),
            ("database", db_names),
            ("host name", hosts),
            ("port", ports),
        )
        for label, values in required:
            if not values or any(value in (None, "") for value in values):
                raise ConfigurationError(f"Please enter a {label}.")

        count = len(hosts)
        protocols = _as_list(protocol) if protocol is not None else ["http"] * count
        if any(len(values) != count for _, values in required) or len(protocols) != count:
            raise ConfigurationError("Array connection parameters must be of equal length.")

        endpoints = []
        for idx in range(count):
            try:
                port_number = int(ports[idx])
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid port '{ports[idx]}'.") from exc
            endpoints.append(
                EndpointSpec(
                    host=str(hosts[idx]),
                    port=port_number,
                    user=str(users[idx]),
                    password=str(passwords[idx]),
                    db_name=str(db_names[idx]),
                    protocol=str(protocols[idx] or "http"),
                )
            )
        return cls(endpoints=endpoints, balance=balance or BalanceConfig(), **options)

    @classmethod
    def from_dict(cls, payload: Dict) -> "ConnectorConfig":
        servers = payload.get("servers", [])
        if not servers:
            raise ConfigurationError("Configuration must include at least one server definition.")

        columns: Dict[str, List[object]] = {
            "host": [], "port": [], "user": [], "password": [], "db_name": [], "protocol": []
        }
        for idx, server in enumerate(servers):
            try:
                for key in ("host", "port", "user", "password", "db_name"):
                    columns[key].append(server[key])
            except KeyError as exc:
                missing = exc.args[0]
                raise ConfigurationError(f"Server #{idx} missing required field '{missing}'.") from exc
            columns["protocol"].append(server.get("protocol", "http"))

        options = {
            key: payload[key]
            for key in ("log_queries", "request_timeout", "connect_retries", "max_workers")
            if key in payload
        }
        return cls.from_params(
            balance=BalanceConfig.from_dict(payload.get("balance")),
            **columns,
            **options,
        )

    @classmethod
    def from_file(cls, config_path: str) -> "ConnectorConfig":
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with path.open("r", encoding="utf-8") as stream:
            payload = json.load(stream)
        return cls.from_dict(payload)

    @property
    def num_endpoints(self) -> int:
        return len(self.endpoints)


def _as_list(value: ParamValue) -> List[object]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
