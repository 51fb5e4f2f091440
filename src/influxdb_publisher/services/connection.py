from typing import Dict, Optional, Tuple
from urllib.parse import SplitResult, urlsplit

import structlog
from influxdb import InfluxDBClient

from influxdb_publisher.errors import InvalidTargetURL
from influxdb_publisher.models.target import ProxyConfig, Target

logger = structlog.get_logger(__name__)

DEFAULT_PORTS = {"http": 8086, "https": 8086}


def parse_target_url(url: Optional[str]) -> SplitResult:
    """Split a target URL, rejecting anything that is not http(s)://host[:port][/path]"""
    try:
        parts = urlsplit((url or "").strip())
        parts.port  # raises ValueError on a non-numeric port
    except ValueError as e:
        raise InvalidTargetURL(url) from e
    if parts.scheme not in DEFAULT_PORTS or not parts.hostname:
        raise InvalidTargetURL(url)
    return parts


class InfluxConnectionFactory:
    """Builds InfluxDB clients for targets and keeps them for reuse.

    Clients are cached per distinct endpoint, credentials and proxy, so their
    HTTP connection pools survive across publish runs.
    """

    def __init__(
        self,
        proxy: Optional[ProxyConfig] = None,
        timeout: Optional[float] = None,
        retries: int = 3,
    ):
        self.proxy = proxy
        self.timeout = timeout
        self.retries = retries
        self._clients: Dict[Tuple, InfluxDBClient] = {}

    def proxies_for(self, target: Target, hostname: str) -> Dict[str, str]:
        if not target.use_proxy or self.proxy is None:
            return {}
        if not self.proxy.applies_to(hostname):
            logger.debug(f"Host {hostname} excluded from proxy")
            return {}
        return self.proxy.as_requests_proxies()

    def connect(self, target: Target) -> InfluxDBClient:
        parts = parse_target_url(target.url)
        proxies = self.proxies_for(target, parts.hostname)
        password = target.password.get_secret_value() if target.password else None

        key = (target.url, target.username, password, tuple(sorted(proxies.items())))
        if key in self._clients:
            return self._clients[key]

        # the client falls back to root:root unless both are None
        credentials = {"username": None, "password": None}
        if target.username:
            credentials.update(username=target.username, password=password or "")

        client = InfluxDBClient(
            host=parts.hostname,
            port=parts.port or DEFAULT_PORTS[parts.scheme],
            ssl=parts.scheme == "https",
            verify_ssl=parts.scheme == "https",
            path=parts.path.rstrip("/"),
            timeout=self.timeout,
            retries=self.retries,
            proxies=proxies or None,
            **credentials,
        )
        self._clients[key] = client
        return client

    def close(self):
        for client in self._clients.values():
            client.close()
        self._clients.clear()
