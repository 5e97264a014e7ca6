"""Shared utilities for wc3launcher."""

from ._logging import LogFormatType, create_logger
from ._open import open_with_default_app
from ._paths import (
    APP_NAME,
    SETTINGS_FILE_NAME,
    get_executable_dir,
    get_log_file,
    get_settings_file,
)

__all__ = [
    "APP_NAME",
    "SETTINGS_FILE_NAME",
    "LogFormatType",
    "create_logger",
    "get_executable_dir",
    "get_log_file",
    "get_settings_file",
    "open_with_default_app",
]
