import sys
from os import getenv
from pathlib import Path

import platformdirs

APP_NAME = "wc3launcher"
SETTINGS_FILE_NAME = "wc3launcher-settings.json"


def get_executable_dir() -> Path | None:
    """Get the directory of the bundled executable, if running frozen.

    Returns None when running from a regular interpreter, where the directory
    of ``sys.executable`` belongs to Python rather than to this application.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return None


def get_settings_file(explicit: Path | None = None) -> Path:
    """Get the path to the user settings file.

    Resolution order: the explicit path, the WC3LAUNCHER_SETTINGS environment
    variable, beside the executable for frozen builds, then the user config
    directory.

    Args:
        explicit: Path given on the command line, if any.

    Returns:
        Path to the settings file (which may not exist yet).
    """
    if explicit is not None:
        return explicit

    env_path = getenv("WC3LAUNCHER_SETTINGS")
    if env_path:
        return Path(env_path)

    exe_dir = get_executable_dir()
    if exe_dir is not None:
        return exe_dir / SETTINGS_FILE_NAME

    return platformdirs.user_config_path(APP_NAME) / SETTINGS_FILE_NAME


def get_log_file() -> Path:
    """Get the path to the default log file."""
    env_path = getenv("WC3LAUNCHER_LOG_FILE")
    if env_path:
        return Path(env_path)
    return platformdirs.user_log_path(APP_NAME) / f"{APP_NAME}.log"
