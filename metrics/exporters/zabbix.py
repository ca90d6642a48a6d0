"""Zabbix exporter: buffers readings and pushes them as one batch"""
import socket
import time
from typing import Dict, List, Optional, Tuple
from zabbix_utils import ItemValue, Sender
from zabbix_utils.exceptions import ProcessingError
from .base import BaseExporter
from metrics.cache import MetricStorage
from metrics.models import MetricValue, KeyFormat
from config import Config
from errors import SendError
from logging_config import get_logger


logger = get_logger(__name__)

KEY_PREFIX = "hw"


def legacy_key(metric: MetricValue) -> str:
    """hw.<name with dots>.<label values...>, labels in key order.

    Label keys are not part of the key, so two metrics whose label values
    line up will share one item.
    """
    parts = [KEY_PREFIX, metric.name.replace("_", ".")]
    parts.extend(metric.labels[k] for k in sorted(metric.labels))
    return ".".join(parts)


def labeled_key(metric: MetricValue) -> str:
    """hw.<name with dots>[k1=v1,k2=v2], keeping the label keys"""
    key = f"{KEY_PREFIX}.{metric.name.replace('_', '.')}"
    if metric.labels:
        pairs = ",".join(f"{k}={metric.labels[k]}" for k in sorted(metric.labels))
        key += f"[{pairs}]"
    return key


KEY_BUILDERS = {
    KeyFormat.LEGACY: legacy_key,
    KeyFormat.LABELED: labeled_key,
}


def parse_server_address(server: str, default_port: int) -> Tuple[str, int]:
    """Split host[:port]; IPv6 literals must be bracketed to carry a port"""
    server = server.strip()
    if server.startswith("["):
        host, _, rest = server[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif server.count(":") == 1:
        host, port = server.split(":")
    else:
        host, port = server, ""

    if not host:
        raise SendError(f"invalid Zabbix server address: {server!r}")
    if not port:
        return host, default_port
    try:
        return host, int(port)
    except ValueError:
        raise SendError(f"invalid port in Zabbix server address: {server!r}")


class ZabbixExporter(BaseExporter):
    """Writes readings into the accumulation cache and sends them on publish"""

    def __init__(self, config: Config, cache: Optional[MetricStorage] = None, sender=None):
        super().__init__(config)
        self.cache = cache if cache is not None else MetricStorage()
        self._sender = sender
        self._derive_key = KEY_BUILDERS[config.zabbix_key_format]

    def derive_key(self, metric: MetricValue) -> str:
        return self._derive_key(metric)

    def record(self, metric: MetricValue) -> None:
        """Last write for a derived key wins"""
        self.cache.set(self.derive_key(metric), metric.value)

    def build_items(self, snapshot: Dict[str, str]) -> List[ItemValue]:
        """Tag every cached entry with the configured source host"""
        host = self.config.zabbix_from
        return [ItemValue(host, key, value) for key, value in sorted(snapshot.items())]

    def resolve_server(self) -> Tuple[str, int]:
        """Resolve the Zabbix server address"""
        host, port = parse_server_address(self.config.zabbix_server, self.config.zabbix_port)
        try:
            socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise SendError(f"cannot resolve Zabbix server {host}: {e}") from e
        return host, port

    def _get_sender(self, host: str, port: int):
        if self._sender is None:
            self._sender = Sender(server=host, port=port, timeout=self.config.zabbix_timeout)
        return self._sender

    def publish(self) -> Dict[str, object]:
        """Send the cache contents to the Zabbix server; returns the acknowledgement"""
        snapshot = self.cache.snapshot()
        if not snapshot:
            logger.warning(
                "No metrics collected, nothing sent to Zabbix server",
                source_host=self.config.zabbix_from,
                event_type="dispatch_skip"
            )
            return {"processed": 0, "failed": 0, "total": 0, "seconds_spent": 0.0}

        items = self.build_items(snapshot)
        host, port = self.resolve_server()
        sender = self._get_sender(host, port)

        logger.info(
            "Sending metrics to Zabbix server",
            server=host,
            port=port,
            source_host=self.config.zabbix_from,
            items=len(items),
            event_type="dispatch_start"
        )

        start_time = time.time()
        try:
            response = sender.send(items)
        except (ProcessingError, OSError, ValueError) as e:
            raise SendError(f"sending to Zabbix server {host}:{port} failed: {e}") from e

        ack = {
            "processed": response.processed,
            "failed": response.failed,
            "total": response.total,
            "seconds_spent": response.time,
        }
        logger.info(
            "Zabbix server acknowledged batch",
            send_time_seconds=round(time.time() - start_time, 3),
            event_type="dispatch_complete",
            **ack
        )
        return ack
