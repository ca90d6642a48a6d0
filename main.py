#!/usr/bin/env python3
"""Main entry point for the Dell hardware exporter"""
import sys
from pydantic import ValidationError
from config import Config
from errors import EXIT_CONFIG_INVALID
from app.runner import ExporterRunner
from logging_config import setup_structured_logging, get_logger, log_server_startup, log_error


def main():
    """Main application entry point"""
    try:
        config = Config()
    except ValidationError as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "config"})
        sys.exit(EXIT_CONFIG_INVALID)

    setup_structured_logging(config)
    logger = get_logger(__name__)
    log_server_startup(logger, config)

    runner = ExporterRunner(config)
    exit_code = runner.run()
    if exit_code == 0 and runner.result is not None:
        print(runner.result)
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
