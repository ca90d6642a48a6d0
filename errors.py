"""Exporter exceptions and the process exit codes they map to"""


EXIT_COLLECTION_FAILED = 1
EXIT_LISTEN_FAILED = 2
EXIT_REGISTRATION_CONFLICT = 3
EXIT_SEND_FAILED = 4
EXIT_CONFIG_INVALID = 5


class ExporterError(Exception):
    """Base class for fatal exporter errors."""
    exit_code = 1


class CollectionError(ExporterError):
    """The collection pass failed."""
    exit_code = EXIT_COLLECTION_FAILED


class CollectorError(CollectionError):
    """A named collector reported a failure."""

    def __init__(self, collector: str, reason: str):
        super().__init__(f"collector {collector} failed: {reason}")
        self.collector = collector
        self.reason = reason


class CollectorTimeoutError(CollectorError):
    """A collector did not finish within its timeout."""

    def __init__(self, collector: str, timeout: float):
        super().__init__(collector, f"timed out after {timeout}s")
        self.timeout = timeout


class MetricRegistrationError(ExporterError):
    """A gauge could not be registered (duplicate or conflicting series)."""
    exit_code = EXIT_REGISTRATION_CONFLICT


class ListenerBindError(ExporterError):
    """The scrape endpoint could not bind its listening address."""
    exit_code = EXIT_LISTEN_FAILED


class SendError(ExporterError):
    """Sending the batch to the Zabbix server failed."""
    exit_code = EXIT_SEND_FAILED
