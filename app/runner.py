"""One collection pass followed by dispatch to the configured backend"""
from typing import Any, Optional
from config import Config
from errors import ExporterError
from metrics.exporters.base import BaseExporter, ExporterFactory
from metrics.registry import MetricsRegistry
from logging_config import get_logger, log_error


logger = get_logger(__name__)


class ExporterRunner:
    """Wires the exporter into the collectors, collects, then dispatches"""

    def __init__(self, config: Config, exporter: Optional[BaseExporter] = None,
                 registry: Optional[MetricsRegistry] = None):
        self.config = config
        self.exporter = exporter if exporter is not None else ExporterFactory.create_exporter(config)
        self.registry = registry if registry is not None else MetricsRegistry(config, self.exporter)
        self.result: Any = None

    def collect(self) -> None:
        try:
            self.registry.collect_all(self.config.enabled_collectors)
        finally:
            self.registry.cleanup()

    def dispatch(self) -> Any:
        self.result = self.exporter.publish()
        return self.result

    def run(self) -> int:
        """Collect and dispatch; returns the process exit code"""
        try:
            self.collect()
        except ExporterError as e:
            log_error(logger, e, {"component": "collection", "phase": "collect"})
            return e.exit_code

        try:
            self.dispatch()
        except ExporterError as e:
            log_error(logger, e, {"component": "dispatch", "exporter_type": self.config.exporter_type.value})
            return e.exit_code

        return 0
