"""Base exporter interface and factory"""
import abc
from typing import Any, Dict, Optional
from config import Config
from metrics.models import MetricValue, ExportFormat
from logging_config import get_logger


logger = get_logger(__name__)


class BaseExporter(abc.ABC):
    """Abstract base class for metric exporters.

    Collectors emit readings through :meth:`add`. The value is checked once
    here, independent of the backend; readings that are not numeric are
    logged and dropped without failing the collector. Valid readings are
    handed to :meth:`record`, which each backend implements.
    """

    def __init__(self, config: Config):
        self.config = config
        self.metrics_recorded = 0

    def add(self, name: str, value: str, labels: Optional[Dict[str, str]] = None, description: str = "") -> bool:
        """Ingest one reading; returns False when it was dropped"""
        metric = MetricValue(name=name, value=str(value).strip(), labels=dict(labels or {}), help_text=description)
        try:
            # float() also takes digit separators, which are not valid readings
            if "_" in metric.value:
                raise ValueError(metric.value)
            float(metric.value)
        except ValueError:
            logger.warning(
                "Could not parse value for metric",
                metric=name,
                value=metric.value,
                labels=metric.labels,
                event_type="metric_parse_error"
            )
            return False

        logger.debug("Adding metric", metric=name, labels=metric.labels, value=metric.value)
        self.record(metric)
        self.metrics_recorded += 1
        return True

    @abc.abstractmethod
    def record(self, metric: MetricValue) -> None:
        """Store a validated metric in this backend"""
        pass

    @abc.abstractmethod
    def publish(self) -> Any:
        """Publish what the collection pass produced"""
        pass


class ExporterFactory:
    """Factory for creating exporters based on configuration"""

    @staticmethod
    def create_exporter(config: Config) -> BaseExporter:
        """Create an exporter based on the configured exporter type"""
        if config.exporter_type == ExportFormat.PROMETHEUS:
            from .prometheus import PrometheusExporter
            return PrometheusExporter(config)
        elif config.exporter_type == ExportFormat.ZABBIX:
            from .zabbix import ZabbixExporter
            return ZabbixExporter(config)
        else:
            raise ValueError(f"Unsupported exporter type: {config.exporter_type}")
