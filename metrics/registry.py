"""Collector registry and the collection driver"""
import importlib
import inspect
import pkgutil
import time
from typing import Dict, Iterable, List, Optional
from collectors.base import BaseCollector
from errors import ExporterError, CollectorError
from logging_config import get_logger, log_collection_pass


logger = get_logger(__name__)


class MetricsRegistry:
    """Named collectors, discovered once at startup and run in configured order"""

    def __init__(self, config=None, exporter=None, discover: bool = True):
        self.config = config
        self.exporter = exporter
        self.collectors: Dict[str, BaseCollector] = {}
        if discover:
            self.auto_discover_collectors()

    def auto_discover_collectors(self):
        """Automatically discover and register collectors"""
        import collectors

        for importer, modname, ispkg in pkgutil.iter_modules(collectors.__path__, collectors.__name__ + "."):
            if modname.endswith('.base'):
                continue

            module = importlib.import_module(modname)

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (isinstance(attr, type) and
                        issubclass(attr, BaseCollector) and
                        attr.__module__ == module.__name__ and
                        not inspect.isabstract(attr)):
                    self.register_collector(attr(self.config, self.exporter))

    def register_collector(self, collector: BaseCollector):
        """Register a new collector"""
        if not isinstance(collector, BaseCollector):
            raise ValueError("Collector must inherit from BaseCollector")
        if collector.name in self.collectors:
            raise ValueError(f"Collector {collector.name} is already registered")

        self.collectors[collector.name] = collector
        logger.debug("Registered collector", collector=collector.name, help=collector.help_text)

    def get_collector(self, name: str) -> Optional[BaseCollector]:
        """Get collector by name"""
        return self.collectors.get(name)

    def list_collectors(self) -> List[str]:
        """List all registered collector names"""
        return sorted(self.collectors.keys())

    def collect_all(self, enabled: Optional[Iterable[str]] = None) -> List[str]:
        """Run the enabled collectors in order, stopping at the first failure.

        Unknown names are skipped with a warning and a repeated name runs only
        once. Returns the names of the collectors that ran. Any failure raises
        CollectionError; registration conflicts raised by the exporter are
        passed through unchanged.
        """
        if enabled is None:
            enabled = self.config.enabled_collectors if self.config is not None else self.list_collectors()
        timeout = getattr(self.config, 'collector_timeout', None)

        start_time = time.time()
        recorded_before = getattr(self.exporter, 'metrics_recorded', 0)
        ran: List[str] = []

        for name in enabled:
            if name in ran:
                logger.warning("Collector listed more than once, skipping repeat", collector=name)
                continue

            collector = self.get_collector(name)
            if collector is None:
                logger.warning("Unknown collector, skipping", collector=name, event_type="collection_skip")
                continue

            logger.info("Running collector", collector=name, event_type="collection_start")
            ran.append(name)
            self._run_collector(collector, timeout)

        log_collection_pass(
            logger,
            collectors_run=len(ran),
            metrics_count=getattr(self.exporter, 'metrics_recorded', 0) - recorded_before,
            collection_time=time.time() - start_time
        )
        return ran

    def _run_collector(self, collector: BaseCollector, timeout: Optional[float]) -> None:
        try:
            collector.run(timeout=timeout)
        except ExporterError:
            raise
        except Exception as e:
            raise CollectorError(collector.name, str(e)) from e

    def cleanup(self):
        """Cleanup all collectors"""
        for collector in self.collectors.values():
            collector.cleanup()
