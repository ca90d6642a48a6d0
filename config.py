"""Configuration for the Dell hardware exporter"""
import os
import socket
from pathlib import Path
from typing import List, Optional, Literal
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from metrics.models import ExportFormat, KeyFormat


DEFAULT_COLLECTORS = (
    "dummy,chassis,memory,processors,ps,ps_amps_sysboard_pwr,storage_battery,"
    "storage_enclosure,storage_vdisk,system,temps,volts"
)


def default_zabbix_from() -> str:
    """Host name reported to Zabbix: HOSTNAME[.DOMAINNAME] when set, else the FQDN"""
    hostname = os.environ.get("HOSTNAME", "").strip()
    domain = os.environ.get("DOMAINNAME", "").strip()
    if domain:
        return f"{hostname or socket.gethostname()}.{domain}"
    if hostname:
        return hostname
    return socket.getfqdn()


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Export configuration - exactly one backend per process
    exporter_type: ExportFormat = Field(default=ExportFormat.PROMETHEUS, description="Exporter type (prometheus or zabbix)")

    # Prometheus settings (only used when exporter_type=prometheus)
    metrics_host: str = Field(default="0.0.0.0", description="Address on which to expose metrics")
    metrics_port: int = Field(default=4242, ge=1, le=65535, description="Port on which to expose metrics")
    metrics_path: str = Field(default="/metrics", description="Path under which to expose metrics")

    # Zabbix settings (only used when exporter_type=zabbix)
    zabbix_from: str = Field(default_factory=default_zabbix_from, description="Send to Zabbix from this host name")
    zabbix_server: str = Field(default="localhost", description="Zabbix server hostname or address, optionally host:port")
    zabbix_port: int = Field(default=10051, ge=1, le=65535, description="Zabbix trapper port when none is given in zabbix_server")
    zabbix_key_format: KeyFormat = Field(default=KeyFormat.LEGACY, description="Item key scheme (legacy or labeled)")
    zabbix_timeout: float = Field(default=10.0, gt=0, description="Zabbix sender socket timeout in seconds")

    # Collection settings
    collect: str = Field(default=DEFAULT_COLLECTORS, description="Comma-separated list of collectors to use")
    collector_timeout: float = Field(default=60.0, gt=0, description="Per-collector timeout in seconds")
    omreport_path: str = Field(default="omreport", description="Path to the OpenManage omreport binary")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    # Service settings
    service_name: str = Field(default="dellhw-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @validator('metrics_path')
    def validate_metrics_path(cls, v):
        """Scrape path must be absolute"""
        if not v.startswith('/'):
            raise ValueError("metrics_path must start with '/'")
        return v

    @validator('zabbix_from')
    def validate_zabbix_from(cls, v):
        if not v.strip():
            raise ValueError("zabbix_from must not be empty")
        return v.strip()

    @validator('log_file')
    def ensure_log_directory(cls, v):
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def enabled_collectors(self) -> List[str]:
        """Get enabled collectors as an ordered list"""
        return [item.strip() for item in self.collect.split(',') if item.strip()]

    def is_prometheus_format(self) -> bool:
        return self.exporter_type == ExportFormat.PROMETHEUS
