"""Base collector class and interfaces"""
import subprocess
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from errors import CollectorError, CollectorTimeoutError
from logging_config import get_logger


logger = get_logger(__name__)


class BaseCollector(ABC):
    """Base class for all metric collectors.

    A collector is a named, zero-argument unit of work: :meth:`collect` emits
    readings through :meth:`add` and raises to report failure.
    """

    def __init__(self, config=None, exporter=None, name: str = "", help_text: str = ""):
        self.config = config
        self.exporter = exporter
        self._name = name
        self._help_text = help_text
        self._worker: Optional[threading.Thread] = None
        self._cancelled = threading.Event()

    @abstractmethod
    def collect(self) -> None:
        """Emit readings via add(); raise on failure"""
        pass

    @property
    def name(self) -> str:
        """Collector name for identification"""
        return self._name

    @property
    def help_text(self) -> str:
        """Help text describing what this collector does"""
        return self._help_text or f"{self.name} metrics collector"

    @property
    def timeout(self) -> Optional[float]:
        return getattr(self.config, 'collector_timeout', None)

    def add(self, name: str, value, labels: Optional[Dict[str, str]] = None, description: str = "") -> None:
        """Emit one reading through the configured exporter"""
        if self.cancelled:
            raise CollectorError(self.name, "cancelled")
        self.exporter.add(name, value, labels or {}, description)

    def run(self, timeout: Optional[float] = None) -> None:
        """Run collect() on a daemon thread, waiting at most timeout seconds.

        A collector that overruns is cancelled and left behind; it cannot
        emit further readings and does not keep the process alive.
        """
        self._cancelled.clear()
        outcome = {}

        def work():
            try:
                self.collect()
            except Exception as e:
                outcome['error'] = e

        self._worker = threading.Thread(target=work, name=f"{self.name}_collector", daemon=True)
        self._worker.start()
        self._worker.join(timeout)

        if self._worker.is_alive():
            self.cancel()
            raise CollectorTimeoutError(self.name, timeout)
        if 'error' in outcome:
            raise outcome['error']

    def cancel(self) -> None:
        """Stop the collector from starting commands or emitting readings"""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run_command(self, *args: str) -> List[str]:
        """Run an external command and return its stdout lines"""
        if self.cancelled:
            raise CollectorError(self.name, "cancelled")

        logger.debug("Running command", collector=self.name, command=list(args))
        try:
            result = subprocess.run(list(args), capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise CollectorError(self.name, f"{args[0]} timed out after {e.timeout}s") from e
        except OSError as e:
            raise CollectorError(self.name, f"cannot run {args[0]}: {e}") from e

        if result.returncode != 0:
            raise CollectorError(
                self.name,
                f"{args[0]} exited with status {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout.splitlines()

    def cleanup(self):
        """Cleanup resources"""
        self.cancel()
