# pyright: reportAny=false
"""Settings store with crash-safe saves.

Saves write a sibling temporary file and rename it over the settings file,
so the file on disk always holds either the previous or the new complete
value. Loads never raise: a missing, empty, or corrupt file reads as absent.
"""

import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING, final

import orjson
from pydantic import ValidationError

from wc3launcher.exceptions import SettingsIOError
from wc3launcher.utils import create_logger

from ._models import UserSettings

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

__all__ = ["SettingsStore"]


@final
class SettingsStore:
    """Loads and saves UserSettings at a fixed path.

    Saves from the same process are serialized; concurrent edits by other
    processes are not guarded against.

    Attributes:
        path: Location of the settings file.
    """

    __slots__ = ("_lock", "_logger", "path")

    def __init__(
        self,
        path: Path,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self.path = path
        self._logger = logger
        self._lock = threading.Lock()

    @property
    def logger(self) -> "FilteringBoundLogger":  # noqa: UP037
        if self._logger is None:
            self._logger = create_logger()
        return self._logger

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> UserSettings | None:
        """Load the settings file.

        Returns:
            The stored settings, or None if the file is missing, empty, or
            cannot be parsed.
        """
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            self.logger.warning(
                "settings_read_failed", path=str(self.path), error=str(e)
            )
            return None

        if not content.strip():
            return None

        try:
            return UserSettings.model_validate(orjson.loads(content))
        except (orjson.JSONDecodeError, ValidationError) as e:
            self.logger.warning(
                "settings_parse_failed", path=str(self.path), error=str(e)
            )
            return None

    def save(self, settings: UserSettings) -> None:
        """Write settings atomically.

        Args:
            settings: The settings to persist.

        Raises:
            SettingsIOError: If the file cannot be written or replaced. The
                previously saved file is left intact.
        """
        content = orjson.dumps(settings.to_json_dict(), option=orjson.OPT_INDENT_2)

        with self._lock:
            temp_path: Path | None = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    mode="wb",
                    dir=self.path.parent,
                    prefix=f"{self.path.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as f:
                    temp_path = Path(f.name)
                    _ = f.write(content)

                # Path.replace() is atomic on both POSIX and Windows
                _ = temp_path.replace(self.path)

            except OSError as e:
                if temp_path is not None:
                    temp_path.unlink(missing_ok=True)
                msg = f"Failed to save settings: {e}"
                raise SettingsIOError(
                    msg, path=self.path, operation="write", cause=e
                ) from e

        self.logger.debug("settings_saved", path=str(self.path))

    def ensure_exists(self, default: UserSettings) -> None:
        """Save ``default`` only if no settings file exists yet.

        Raises:
            SettingsIOError: If the default cannot be written.
        """
        if not self.exists():
            self.save(default)
