"""Dummy collector, always reports 1"""
from .base import BaseCollector


class DummyCollector(BaseCollector):
    """Emit a constant reading so the exporter always has something to publish"""

    def __init__(self, config=None, exporter=None):
        super().__init__(config, exporter, "dummy", "Constant reading used to check the exporter pipeline")

    def collect(self) -> None:
        self.add("dummy", "1", {}, "Dummy metric, always 1")
