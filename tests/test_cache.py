"""Tests for the accumulation cache"""
import threading

from metrics.cache import MetricStorage


class TestMetricStorage:
    """Test cache writes and snapshots"""

    def setup_method(self):
        self.cache = MetricStorage()

    def test_starts_empty(self):
        assert len(self.cache) == 0
        assert self.cache.snapshot() == {}

    def test_last_write_wins(self):
        self.cache.set("hw.temp.cpu.0", "40")
        self.cache.set("hw.temp.cpu.0", "42")

        assert len(self.cache) == 1
        assert self.cache.get("hw.temp.cpu.0") == "42"
        assert "hw.temp.cpu.0" in self.cache

    def test_snapshot_is_independent(self):
        self.cache.set("hw.dummy", "1")
        snapshot = self.cache.snapshot()
        self.cache.set("hw.other", "2")
        snapshot["hw.dummy"] = "changed"

        assert snapshot == {"hw.dummy": "changed"}
        assert self.cache.get("hw.dummy") == "1"
        assert len(self.cache) == 2

    def test_concurrent_writers(self):
        """No writes are lost when several threads write at once"""
        def writer(worker):
            for i in range(200):
                self.cache.set(f"hw.worker.{worker}.{i}", str(i))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(self.cache) == 8 * 200
        assert self.cache.get("hw.worker.7.199") == "199"
