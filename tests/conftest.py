"""Shared test fixtures for wc3launcher tests."""

import stat
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from wc3launcher.utils import create_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# Stand-in for the worker: echoes its arguments, then behaves according to
# WC3_STANDIN_MODE (echo, tail, sleep, spawn).
STANDIN_SOURCE = """\
import os
import subprocess
import sys
import time

mode = os.environ.get("WC3_STANDIN_MODE", "echo")
print("args:", " ".join(sys.argv[1:]), flush=True)

if mode == "echo":
    print("to stderr", file=sys.stderr, flush=True)
    sys.exit(7)
elif mode == "tail":
    sys.stdout.write("no newline")
    sys.stdout.flush()
elif mode == "sleep":
    print("ready", flush=True)
    time.sleep(60)
elif mode == "spawn":
    child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    print(f"child {child.pid}", flush=True)
    time.sleep(60)
"""


class StaticResolver:
    """Executable resolver that always returns the same path."""

    def __init__(self, path: Path | None) -> None:
        self.path = path
        self.calls = 0

    def resolve(self) -> Path | None:
        self.calls += 1
        return self.path


@pytest.fixture(autouse=True)
def isolate_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep logs and settings out of the user's directories."""
    base = tmp_path_factory.mktemp("env")
    monkeypatch.setenv("WC3LAUNCHER_LOG_FILE", str(base / "wc3launcher.log"))
    monkeypatch.setenv("WC3LAUNCHER_SETTINGS", str(base / "settings.json"))
    monkeypatch.delenv("WC3LAUNCHER_DEBUG", raising=False)
    monkeypatch.delenv("WC3LAUNCHER_LOG_LEVEL", raising=False)
    monkeypatch.delenv("WC3_STANDIN_MODE", raising=False)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def console() -> Console:
    return Console(
        width=200,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "wc3launcher.log"


@pytest.fixture
def logger(log_path: Path) -> "FilteringBoundLogger":
    return create_logger(level="debug", log_file=log_path)


@pytest.fixture
def standin_worker(tmp_path: Path) -> Iterator[Path]:
    """Write an executable stand-in worker script and return its path."""
    if sys.platform == "win32":
        pytest.skip("stand-in worker relies on a shebang line")

    path = tmp_path / "bin" / "wc3proxy"
    path.parent.mkdir()
    path.write_text(f"#!{sys.executable}\n{STANDIN_SOURCE}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    yield path


@pytest.fixture
def standin_resolver(standin_worker: Path) -> StaticResolver:
    return StaticResolver(standin_worker)


@pytest.fixture
def static_resolver() -> type[StaticResolver]:
    return StaticResolver
