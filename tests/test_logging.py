"""Tests for logging configuration"""
import tempfile
import os
import logging
from pathlib import Path
from unittest.mock import patch

from config import Config
from logging_config import (
    setup_structured_logging,
    get_logger,
    log_collection_pass,
    log_server_startup,
    log_error
)


class TestLoggingConfig:
    """Test logging configuration and structured logging"""

    def test_setup_structured_logging(self):
        """Test structured logging setup"""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "logs" / "test.log"
            config = Config(log_file=log_file, log_level="DEBUG")

            setup_structured_logging(config)

            assert log_file.parent.exists()
            logger = logging.getLogger("test")
            assert logger.isEnabledFor(logging.DEBUG)
            for handler in list(logging.getLogger().handlers):
                handler.close()
                logging.getLogger().removeHandler(handler)

    def test_setup_without_log_file(self):
        config = Config(log_level="WARNING")

        setup_structured_logging(config)

        root = logging.getLogger()
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert root.level == logging.WARNING

    def test_get_logger(self):
        """Test getting structured logger"""
        logger = get_logger("test_logger")

        assert logger is not None
        assert hasattr(logger, 'info')
        assert hasattr(logger, 'error')
        assert hasattr(logger, 'debug')
        assert hasattr(logger, 'warning')

    def test_log_collection_pass(self):
        """Test structured collection logging"""
        logger = get_logger("test")

        log_collection_pass(logger, collectors_run=3, metrics_count=10, collection_time=0.5)

    def test_log_server_startup(self):
        """Startup logging works for both backends"""
        logger = get_logger("test")

        log_server_startup(logger, Config(exporter_type="prometheus"))
        log_server_startup(logger, Config(exporter_type="zabbix", zabbix_from="node01"))

    def test_log_error(self):
        """Test structured error logging"""
        logger = get_logger("test")
        error = ValueError("Test error")

        log_error(logger, error, {"component": "test"})
        log_error(logger, error)

    def test_development_vs_production_logging(self):
        """Test different logging configurations for development vs production"""
        config = Config()

        with patch.dict(os.environ, {"ENVIRONMENT": "development"}):
            setup_structured_logging(config)
            get_logger("test").info("Test development log")

        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            setup_structured_logging(config)
            get_logger("test").info("Test production log")

    def test_logger_context_binding(self):
        """Test logger context binding"""
        logger = get_logger("test")

        bound_logger = logger.bind(collector="temps")
        bound_logger.info("Test message with context")
