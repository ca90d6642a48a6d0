"""Metric data models"""
from dataclasses import dataclass, field
from typing import Dict
from enum import Enum


class ExportFormat(Enum):
    """Monitoring backend, selected once at startup"""
    PROMETHEUS = "prometheus"
    ZABBIX = "zabbix"


class KeyFormat(Enum):
    """Zabbix item key scheme"""
    LEGACY = "legacy"
    LABELED = "labeled"


@dataclass
class MetricValue:
    """A single reading emitted by a collector"""
    name: str
    value: str
    labels: Dict[str, str] = field(default_factory=dict)
    help_text: str = ""

    def __post_init__(self):
        # Ensure labels is never None
        if self.labels is None:
            self.labels = {}

    @property
    def numeric_value(self) -> float:
        """Raw value parsed as a float; raises ValueError when not numeric"""
        return float(self.value)

    def label_set(self) -> frozenset:
        return frozenset(self.labels.items())
