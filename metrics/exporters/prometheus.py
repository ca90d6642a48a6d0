"""Prometheus exporter: registers gauges for on-demand scraping"""
import threading
from typing import Dict, Optional, Set, Tuple
from prometheus_client import CollectorRegistry, Gauge, generate_latest
from .base import BaseExporter
from metrics.models import MetricValue
from config import Config
from errors import MetricRegistrationError
from logging_config import get_logger


logger = get_logger(__name__)

NAMESPACE = "dell"
SUBSYSTEM = "hw"


class PrometheusExporter(BaseExporter):
    """Registers every reading as a gauge in a registry owned by this exporter.

    A gauge has no update-in-place path for a series that was already
    registered, so each (name, label set) may be recorded only once per
    process. The registry is therefore filled by a single collection pass and
    then served as-is.
    """

    def __init__(self, config: Config, registry: Optional[CollectorRegistry] = None):
        super().__init__(config)
        self.registry = registry if registry is not None else CollectorRegistry()
        self._lock = threading.Lock()
        self._gauges: Dict[str, Gauge] = {}
        self._shapes: Dict[str, Tuple[Tuple[str, ...], str]] = {}
        self._series: Set[Tuple[str, frozenset]] = set()

    @staticmethod
    def full_name(name: str) -> str:
        return f"{NAMESPACE}_{SUBSYSTEM}_{name}"

    def record(self, metric: MetricValue) -> None:
        """Register the metric; a repeated or conflicting series is fatal"""
        series = (metric.name, metric.label_set())
        label_names = tuple(sorted(metric.labels))

        with self._lock:
            if series in self._series:
                raise MetricRegistrationError(
                    f"duplicate metric {self.full_name(metric.name)} with labels {metric.labels}"
                )

            gauge = self._gauges.get(metric.name)
            if gauge is None:
                gauge = self._create_gauge(metric, label_names)
            else:
                self._check_consistent(metric, label_names)

            if label_names:
                gauge.labels(*(metric.labels[k] for k in label_names)).set(metric.numeric_value)
            else:
                gauge.set(metric.numeric_value)
            self._series.add(series)

    def _create_gauge(self, metric: MetricValue, label_names: Tuple[str, ...]) -> Gauge:
        try:
            gauge = Gauge(
                metric.name,
                metric.help_text or metric.name,
                labelnames=label_names,
                namespace=NAMESPACE,
                subsystem=SUBSYSTEM,
                registry=self.registry
            )
        except ValueError as e:
            raise MetricRegistrationError(f"cannot register {self.full_name(metric.name)}: {e}") from e

        self._gauges[metric.name] = gauge
        self._shapes[metric.name] = (label_names, metric.help_text or metric.name)
        return gauge

    def _check_consistent(self, metric: MetricValue, label_names: Tuple[str, ...]) -> None:
        """Series sharing a name must share label names and help text"""
        registered_labels, registered_help = self._shapes[metric.name]
        if registered_labels != label_names:
            raise MetricRegistrationError(
                f"metric {self.full_name(metric.name)} registered with labels {list(registered_labels)}, "
                f"got {list(label_names)}"
            )
        if registered_help != (metric.help_text or metric.name):
            raise MetricRegistrationError(
                f"metric {self.full_name(metric.name)} registered with a different help text"
            )

    def series_count(self) -> int:
        with self._lock:
            return len(self._series)

    def render(self) -> bytes:
        """Current registry contents in the text exposition format"""
        return generate_latest(self.registry)

    def publish(self) -> None:
        """Serve the registry until the process is stopped"""
        from app.server import MetricsServer

        server = MetricsServer(self.config, self.registry)
        logger.info("Serving collected metrics", series=self.series_count(), event_type="dispatch_start")
        server.serve()
