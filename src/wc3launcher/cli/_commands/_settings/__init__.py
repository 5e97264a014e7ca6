# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
"""Settings command app for viewing and editing the saved settings."""

# Import command modules to register commands with the app
from . import _read as _read, _write as _write
from ._app import app

__all__ = ["app"]
