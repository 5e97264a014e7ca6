"""Bundled resource sets searched for the worker executable.

A resource set enumerates named byte blobs shipped with the application:
- PackageResourceSet: files in a directory inside an installed package
- MappingResourceSet: an in-memory asset table of names to bytes
"""

import io
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path
from typing import BinaryIO, Protocol, final, runtime_checkable


@dataclass(frozen=True, slots=True)
class CandidateResource:
    """A named entry in a bundled resource set.

    Attributes:
        name: Resource name, e.g. ``embeddedcli.wc3proxy.exe``.
        size: Length of the content in bytes.
        opener: Callable returning a fresh binary stream over the content.
    """

    name: str
    size: int
    opener: Callable[[], BinaryIO]

    def open(self) -> BinaryIO:
        """Open a new binary stream over the resource content."""
        return self.opener()


@runtime_checkable
class ResourceSet(Protocol):
    """Protocol for enumerating bundled resources."""

    def candidates(self) -> Iterator[CandidateResource]:
        """Yield every resource in the set, in a stable order."""
        ...


@final
class PackageResourceSet:
    """Resources stored as files in a package data directory.

    Attributes:
        package: Import name of the package holding the resources.
        subdir: Directory inside the package, relative to its root.
    """

    __slots__ = ("package", "subdir")

    def __init__(self, package: str = "wc3launcher", subdir: str = "embedded") -> None:
        self.package = package
        self.subdir = subdir

    def candidates(self) -> Iterator[CandidateResource]:
        root = files(self.package).joinpath(self.subdir)
        if not root.is_dir():
            return

        for entry in sorted(root.iterdir(), key=lambda e: e.name):
            if not entry.is_file():
                continue

            if isinstance(entry, Path):
                size = entry.stat().st_size
            else:
                size = len(entry.read_bytes())

            yield CandidateResource(
                name=entry.name,
                size=size,
                opener=lambda entry=entry: entry.open("rb"),
            )


@final
class MappingResourceSet:
    """An asset table mapping logical resource names to their bytes."""

    __slots__ = ("_assets",)

    def __init__(self, assets: Mapping[str, bytes]) -> None:
        self._assets = dict(assets)

    def candidates(self) -> Iterator[CandidateResource]:
        for name, content in self._assets.items():
            yield CandidateResource(
                name=name,
                size=len(content),
                opener=lambda content=content: io.BytesIO(content),
            )
