"""Open files with the operating system's default application."""

import os
import subprocess
import sys
from pathlib import Path


def open_with_default_app(path: Path) -> None:
    """Launch a file using the OS file association.

    Returns as soon as the launcher has been handed the file; the opened
    application is not waited for.

    Args:
        path: The file to open.

    Raises:
        OSError: If the launcher cannot be started or reports failure.
    """
    if sys.platform == "win32":
        os.startfile(path)  # noqa: S606  # pyright: ignore[reportAttributeAccessIssue]
        return

    opener = "open" if sys.platform == "darwin" else "xdg-open"
    try:
        _ = subprocess.Popen(  # noqa: S603
            [opener, str(path)],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except FileNotFoundError as e:
        msg = f"No file opener available ({opener} not found)"
        raise OSError(msg) from e
