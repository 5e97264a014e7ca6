from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from wc3launcher.utils import create_logger

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem
    from structlog.typing import FilteringBoundLogger

FAKE_LOG_FILE = Path("/logs/wc3launcher.log")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def fake_logger(fs: "FakeFilesystem") -> "FilteringBoundLogger":
    """Create a debug logger writing to the fake filesystem."""
    return create_logger(level="debug", log_file=FAKE_LOG_FILE)
