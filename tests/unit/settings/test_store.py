"""Unit tests for the settings store."""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from wc3launcher.exceptions import SettingsIOError
from wc3launcher.settings import DEFAULT_SETTINGS, SettingsStore, UserSettings

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem
    from pytest_mock import MockerFixture
    from structlog.typing import FilteringBoundLogger

SETTINGS_PATH = Path("/config/wc3launcher-settings.json")
LOG_PATH = Path("/logs/wc3launcher.log")


@pytest.fixture
def store(fake_logger: "FilteringBoundLogger") -> SettingsStore:
    return SettingsStore(SETTINGS_PATH, fake_logger)


class TestLoad:
    def test_missing_file_reads_as_absent(self, store: SettingsStore) -> None:
        assert store.load() is None
        assert not store.exists()

    def test_reads_saved_fields(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        fs.create_file(
            SETTINGS_PATH,
            contents='{"Ip": "192.168.1.20", "Version": "1.26", "IsTft": true}',
        )

        settings = store.load()

        assert settings == UserSettings(
            address="192.168.1.20", version="1.26", is_tft=True
        )

    @pytest.mark.parametrize("contents", ["", "   \n", "{not json", "[1, 2, 3]"])
    def test_unusable_content_reads_as_absent(
        self, fs: "FakeFilesystem", store: SettingsStore, contents: str
    ) -> None:
        fs.create_file(SETTINGS_PATH, contents=contents)

        assert store.load() is None

    def test_corrupt_file_is_logged(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        fs.create_file(SETTINGS_PATH, contents="{not json")

        _ = store.load()

        assert "settings_parse_failed" in LOG_PATH.read_text()

    def test_missing_fields_take_defaults(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        fs.create_file(SETTINGS_PATH, contents='{"Version": "1.30"}')

        settings = store.load()

        assert settings is not None
        assert settings.address == DEFAULT_SETTINGS.address
        assert settings.version == "1.30"
        assert settings.is_tft is False

    def test_unknown_fields_are_ignored(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        fs.create_file(
            SETTINGS_PATH, contents='{"Ip": "1.2.3.4", "WindowWidth": 640}'
        )

        settings = store.load()

        assert settings is not None
        assert settings.address == "1.2.3.4"

    def test_stored_values_are_not_validated(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        fs.create_file(SETTINGS_PATH, contents='{"Ip": "999.0.0.1", "Version": "x"}')

        settings = store.load()

        assert settings is not None
        assert settings.address == "999.0.0.1"


class TestSave:
    def test_writes_indented_json_with_persisted_names(
        self, store: SettingsStore
    ) -> None:
        store.save(UserSettings(address="10.0.0.5", version="1.29", is_tft=True))

        content = SETTINGS_PATH.read_text()
        assert json.loads(content) == {
            "Ip": "10.0.0.5",
            "Version": "1.29",
            "IsTft": True,
        }
        assert '\n  "Ip": "10.0.0.5"' in content

    def test_round_trips_through_load(self, store: SettingsStore) -> None:
        settings = UserSettings(address="10.0.0.5", version="1.31", is_tft=True)

        store.save(settings)

        assert store.load() == settings

    def test_creates_parent_directories(self, store: SettingsStore) -> None:
        store.save(DEFAULT_SETTINGS)

        assert SETTINGS_PATH.is_file()

    def test_leaves_no_temporary_files(self, store: SettingsStore) -> None:
        store.save(DEFAULT_SETTINGS)
        store.save(DEFAULT_SETTINGS.model_copy(update={"version": "1.30"}))

        assert sorted(p.name for p in SETTINGS_PATH.parent.iterdir()) == [
            SETTINGS_PATH.name
        ]

    def test_failed_replace_keeps_previous_file(
        self,
        tmp_path: Path,
        logger: "FilteringBoundLogger",
        mocker: "MockerFixture",
    ) -> None:
        path = tmp_path / "config" / "settings.json"
        store = SettingsStore(path, logger)
        store.save(UserSettings(address="1.1.1.1"))
        _ = mocker.patch.object(Path, "replace", side_effect=OSError("rename failed"))

        with pytest.raises(SettingsIOError) as exc_info:
            store.save(UserSettings(address="2.2.2.2"))

        assert exc_info.value.path == path
        assert exc_info.value.operation == "write"
        assert isinstance(exc_info.value.cause, OSError)
        mocker.stopall()
        assert store.load() == UserSettings(address="1.1.1.1")
        assert [p.name for p in path.parent.iterdir()] == [path.name]

    def test_interrupted_save_leaves_stale_temp_but_readable_file(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        store.save(UserSettings(address="1.1.1.1"))
        # A crash between writing the temporary file and renaming it
        fs.create_file(
            SETTINGS_PATH.with_name(f"{SETTINGS_PATH.name}.abc123.tmp"),
            contents='{"Ip": "2.2.2.2"',
        )

        assert store.load() == UserSettings(address="1.1.1.1")

    def test_parent_that_is_a_file_raises_settings_io_error(
        self, fs: "FakeFilesystem", fake_logger: "FilteringBoundLogger"
    ) -> None:
        fs.create_file("/readonly")
        store = SettingsStore(Path("/readonly/settings.json"), fake_logger)

        with pytest.raises(SettingsIOError):
            store.save(DEFAULT_SETTINGS)

    def test_concurrent_saves_are_serialized(
        self,
        tmp_path: Path,
        logger: "FilteringBoundLogger",
        mocker: "MockerFixture",
    ) -> None:
        path = tmp_path / "config" / "settings.json"
        store = SettingsStore(path, logger)
        candidates = [UserSettings(address=f"10.0.0.{i}") for i in range(1, 41)]

        original_replace = Path.replace
        counter_lock = threading.Lock()
        active = 0
        peak = 0

        def tracking_replace(self: Path, target: Path) -> Path:
            nonlocal active, peak
            with counter_lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.001)
            try:
                return original_replace(self, target)
            finally:
                with counter_lock:
                    active -= 1

        _ = mocker.patch.object(Path, "replace", tracking_replace)

        with ThreadPoolExecutor(max_workers=8) as pool:
            _ = list(pool.map(store.save, candidates))

        assert peak == 1
        assert store.load() in candidates
        assert [p.name for p in path.parent.iterdir()] == [path.name]


class TestEnsureExists:
    def test_writes_default_when_missing(self, store: SettingsStore) -> None:
        store.ensure_exists(DEFAULT_SETTINGS)

        assert store.load() == DEFAULT_SETTINGS

    def test_keeps_existing_file(
        self, fs: "FakeFilesystem", store: SettingsStore
    ) -> None:
        fs.create_file(SETTINGS_PATH, contents='{"Ip": "8.8.8.8"}')

        store.ensure_exists(DEFAULT_SETTINGS)

        assert SETTINGS_PATH.read_text() == '{"Ip": "8.8.8.8"}'
