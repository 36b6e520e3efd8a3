"""
Logger configuration, built in code or from env.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str = "true") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class LoggerConfig:
    """
    Configuration for the service logger.

    Use LoggerConfig.from_env() for env-based config, or build explicitly.
    """

    # Level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    level: str = "INFO"
    # Log directory for rotating file (if None, file handler is skipped)
    log_dir: Optional[str] = None
    # Basename for log file (e.g. "fieldbook" -> fieldbook.log)
    log_file_basename: str = "fieldbook"
    # Max bytes per file before rotation
    max_bytes: int = 5 * 1024 * 1024  # 5 MB
    # Number of backup files to keep
    backup_count: int = 5
    # Root logger name (handlers attached here; children inherit)
    root_name: str = "fieldbook"
    # Enable console handler
    console: bool = True
    # Enable rotating file handler (only if log_dir is set)
    file_rotating: bool = True

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """
        Build config from environment variables.

        Env:
            LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES,
            LOG_BACKUP_COUNT, LOG_ROOT_NAME, LOG_CONSOLE, LOG_FILE_ROTATING
        """
        return cls(
            level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_dir=os.environ.get("LOG_DIR") or None,
            log_file_basename=os.environ.get("LOG_FILE_BASENAME", "fieldbook"),
            max_bytes=int(os.environ.get("LOG_MAX_BYTES", "5242880")),
            backup_count=int(os.environ.get("LOG_BACKUP_COUNT", "5")),
            root_name=os.environ.get("LOG_ROOT_NAME", "fieldbook"),
            console=_env_flag("LOG_CONSOLE"),
            file_rotating=_env_flag("LOG_FILE_ROTATING"),
        )
