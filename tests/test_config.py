"""Tests for configuration module"""
import os
import tempfile
from pathlib import Path
from unittest.mock import patch
import pytest
from pydantic import ValidationError

from config import Config, DEFAULT_COLLECTORS
from metrics.models import ExportFormat, KeyFormat


class TestConfig:
    """Test configuration validation and parsing"""

    def test_default_config(self):
        """Test default configuration values"""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()

        assert config.exporter_type == ExportFormat.PROMETHEUS
        assert config.metrics_host == "0.0.0.0"
        assert config.metrics_port == 4242
        assert config.metrics_path == "/metrics"
        assert config.zabbix_server == "localhost"
        assert config.zabbix_port == 10051
        assert config.zabbix_key_format == KeyFormat.LEGACY
        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.collect == DEFAULT_COLLECTORS
        assert config.enabled_collectors[0] == "dummy"
        assert config.enabled_collectors[-1] == "volts"
        assert config.zabbix_from

    def test_environment_override(self):
        """Test configuration override from environment variables"""
        env_vars = {
            "EXPORTER_TYPE": "zabbix",
            "METRICS_PORT": "9137",
            "METRICS_PATH": "/probe",
            "ZABBIX_FROM": "node01.example.com",
            "ZABBIX_SERVER": "zbx.example.com:10052",
            "ZABBIX_KEY_FORMAT": "labeled",
            "COLLECT": "temps,fans",
            "COLLECTOR_TIMEOUT": "5",
            "LOG_LEVEL": "debug"
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = Config()

        assert config.exporter_type == ExportFormat.ZABBIX
        assert config.is_prometheus_format() is False
        assert config.metrics_port == 9137
        assert config.metrics_path == "/probe"
        assert config.zabbix_from == "node01.example.com"
        assert config.zabbix_server == "zbx.example.com:10052"
        assert config.zabbix_key_format == KeyFormat.LABELED
        assert config.enabled_collectors == ["temps", "fans"]
        assert config.collector_timeout == 5.0
        assert config.log_level == "DEBUG"

    def test_invalid_exporter_type(self):
        with patch.dict(os.environ, {"EXPORTER_TYPE": "graphite"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_metrics_port(self):
        """Test validation of metrics port"""
        with patch.dict(os.environ, {"METRICS_PORT": "0"}):
            with pytest.raises(ValidationError):
                Config()

        with patch.dict(os.environ, {"METRICS_PORT": "70000"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_metrics_path(self):
        with patch.dict(os.environ, {"METRICS_PATH": "metrics"}):
            with pytest.raises(ValidationError):
                Config()

    def test_validation_collector_timeout(self):
        with patch.dict(os.environ, {"COLLECTOR_TIMEOUT": "0"}):
            with pytest.raises(ValidationError):
                Config()

    def test_enabled_collectors_parsing(self):
        """Order is kept, blanks are dropped"""
        config = Config(collect="temps, dummy , ,fans")

        assert config.enabled_collectors == ["temps", "dummy", "fans"]

    def test_zabbix_from_hostname_and_domain(self):
        """HOSTNAME and DOMAINNAME make up the default sending host"""
        with patch.dict(os.environ, {"HOSTNAME": "node01", "DOMAINNAME": "example.com"}, clear=True):
            assert Config().zabbix_from == "node01.example.com"

        with patch.dict(os.environ, {"HOSTNAME": "node01"}, clear=True):
            assert Config().zabbix_from == "node01"

    @patch("config.socket.getfqdn", return_value="fallback.example.com")
    def test_zabbix_from_falls_back_to_fqdn(self, mock_getfqdn):
        with patch.dict(os.environ, {}, clear=True):
            assert Config().zabbix_from == "fallback.example.com"

    def test_zabbix_from_setting_wins(self):
        env_vars = {"HOSTNAME": "node01", "DOMAINNAME": "example.com", "ZABBIX_FROM": "explicit"}
        with patch.dict(os.environ, env_vars, clear=True):
            assert Config().zabbix_from == "explicit"

    def test_log_directory_creation(self):
        """Test that parent directories are created for the log file"""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "subdir" / "test.log"

            with patch.dict(os.environ, {"LOG_FILE": str(log_file)}):
                config = Config()

                assert config.log_file == log_file
                assert config.log_file.parent.exists()
