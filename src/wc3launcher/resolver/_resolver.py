"""Binary resolver for the bundled worker executable.

This module finds the worker among the bundled resources, copies it to a
writable location, and marks it executable.
"""

import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, final

from wc3launcher.exceptions import ResourceError
from wc3launcher.utils import create_logger

from ._resources import PackageResourceSet, ResourceSet

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

PRODUCT_TOKEN = "wc3proxy"
MARKER_TOKEN = "embeddedcli"
EXECUTABLE_SUFFIX = ".exe"
DEFAULT_FILE_NAME = "wc3proxy.exe"
HOST_MODULE = __name__.split(".", maxsplit=1)[0]
_PATH_SEPARATORS = ("/", "\\")


@final
class BinaryResolver:
    """Locates and materializes the worker executable.

    A resource qualifies as the worker when its name (case-insensitively)
    carries the embedded-CLI marker or the executable suffix, does not carry
    the host module name, and carries the product token while ending in the
    executable suffix. The first qualifying resource, in the order the
    resource set yields them, is copied into ``output_dir``.

    Attributes:
        resources: The resource set to search.
        output_dir: Directory the executable is written to.
        product_token: Substring identifying the worker product.
        marker_token: Substring identifying an embedded CLI resource.
        executable_suffix: Suffix of executable resource names.
        host_module: Name of the host application's own module.
        default_file_name: Output name used when none can be derived.
    """

    __slots__ = (
        "_logger",
        "default_file_name",
        "executable_suffix",
        "host_module",
        "marker_token",
        "output_dir",
        "product_token",
        "resources",
    )

    def __init__(  # noqa: PLR0913
        self,
        resources: ResourceSet | None = None,
        *,
        output_dir: Path | None = None,
        product_token: str = PRODUCT_TOKEN,
        marker_token: str = MARKER_TOKEN,
        executable_suffix: str = EXECUTABLE_SUFFIX,
        host_module: str = HOST_MODULE,
        default_file_name: str = DEFAULT_FILE_NAME,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self.resources: ResourceSet = resources or PackageResourceSet()
        self.output_dir = output_dir or Path(tempfile.gettempdir())
        self.product_token = product_token
        self.marker_token = marker_token
        self.executable_suffix = executable_suffix
        self.host_module = host_module
        self.default_file_name = default_file_name
        self._logger = logger

    @property
    def logger(self) -> "FilteringBoundLogger":  # noqa: UP037
        if self._logger is None:
            self._logger = create_logger()
        return self._logger

    def qualifies(self, name: str) -> bool:
        """Check whether a resource name identifies the worker executable.

        Args:
            name: The resource name.

        Returns:
            True if the resource should be extracted as the worker.
        """
        lower = name.lower()
        suffix = self.executable_suffix.lower()
        host = self.host_module.lower()

        if not (self.marker_token.lower() in lower or lower.endswith(suffix)):
            return False

        if host and host in lower:
            return False

        return self.product_token.lower() in lower and lower.endswith(suffix)

    def derive_file_name(self, name: str) -> str:
        """Derive the output file name from a resource name.

        The dotted segment equal to the product token is joined with the
        final segment; failing that, the second-to-last segment is used.

        Args:
            name: The resource name.

        Returns:
            The file name to write the executable under.
        """
        segments = name.split(".")
        extension = segments[-1]
        token = self.product_token.lower()

        match = next((s for s in segments if s.lower() == token), None)
        if match is not None:
            file_name = f"{match}.{extension}"
        elif len(segments) >= 2:  # noqa: PLR2004
            file_name = f"{segments[-2]}.{extension}"
        else:
            file_name = name

        # "." alone, a bare extension or a path cannot name a file in output_dir
        if (
            not file_name.strip(".")
            or file_name.startswith(".")
            or any(sep in file_name for sep in _PATH_SEPARATORS)
        ):
            return self.default_file_name
        return file_name

    def resolve(self) -> Path | None:
        """Materialize the worker executable.

        Never raises: every failure is logged and reported as None.

        Returns:
            Path to the extracted executable, or None if no qualifying
            resource exists or it could not be copied.
        """
        try:
            candidates = list(self.resources.candidates())
        except OSError as e:
            self.logger.warning("resource_enumeration_failed", error=str(e))
            return None

        for resource in candidates:
            if not self.qualifies(resource.name):
                continue

            try:
                source = resource.open()
            except OSError as e:
                self.logger.warning(
                    "resource_open_failed", resource=resource.name, error=str(e)
                )
                continue

            destination = self.output_dir / self.derive_file_name(resource.name)
            try:
                with source:
                    self._materialize(resource.name, source, destination)
            except ResourceError as e:
                self.logger.warning(
                    "worker_binary_copy_failed",
                    resource=e.resource_name,
                    destination=str(destination),
                    error=str(e.cause or e),
                )
                return None

            self._mark_executable(destination)
            self.logger.info(
                "worker_binary_resolved",
                resource=resource.name,
                path=str(destination),
                size=resource.size,
            )
            return destination

        self.logger.warning("worker_binary_not_found", candidates=len(candidates))
        return None

    def _materialize(self, name: str, source: BinaryIO, destination: Path) -> None:
        """Copy a resource's bytes verbatim to the destination, overwriting it.

        Raises:
            ResourceError: If the resource cannot be read or written.
        """
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("wb") as target:
                shutil.copyfileobj(source, target)
        except OSError as e:
            destination.unlink(missing_ok=True)
            msg = f"Failed to extract resource '{name}': {e}"
            raise ResourceError(msg, resource_name=name, cause=e) from e

    def _mark_executable(self, path: Path) -> None:
        """Add execute permission bits; failures are logged, not raised."""
        if sys.platform == "win32":
            return

        try:
            mode = path.stat().st_mode
            path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            self.logger.warning(
                "worker_binary_chmod_failed", path=str(path), error=str(e)
            )
