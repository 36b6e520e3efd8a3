"""
Service logger: rotating file (JSON) + console.

Usage:
    from fieldbook.core.logger import get_logger, configure, LoggerConfig

    # Configure once at startup (from_env() if no config given)
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/fieldbook"))

    logger = get_logger(__name__)
    logger.info("Started")
"""
from fieldbook.core.logger.config import LoggerConfig
from fieldbook.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from fieldbook.core.logger.setup import configure, get_logger

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
