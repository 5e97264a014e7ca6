"""Unit tests for supervisor data models."""

from pathlib import Path

import pytest

from wc3launcher.supervisor import Expansion, WorkerSpec


class TestExpansion:
    def test_values_are_worker_tokens(self) -> None:
        assert Expansion.ROC.value == "RoC"
        assert Expansion.TFT.value == "TFT"

    @pytest.mark.parametrize(
        ("is_tft", "expected"), [(False, Expansion.ROC), (True, Expansion.TFT)]
    )
    def test_from_flag(self, is_tft: bool, expected: Expansion) -> None:
        assert Expansion.from_flag(is_tft=is_tft) is expected


class TestWorkerSpec:
    def test_arguments_are_address_version_expansion(self) -> None:
        spec = WorkerSpec(address="192.168.1.20", version="1.26", expansion=Expansion.TFT)

        assert spec.arguments() == ("192.168.1.20", "1.26", "TFT")

    def test_command_prepends_executable(self) -> None:
        spec = WorkerSpec(address="1.0.0.1", version="1.29", expansion=Expansion.ROC)

        command = spec.command(Path("/tmp/wc3proxy.exe"))

        assert command == (str(Path("/tmp/wc3proxy.exe")), "1.0.0.1", "1.29", "RoC")

    def test_command_line_quotes_address_and_version(self) -> None:
        spec = WorkerSpec(address="1.0.0.1", version="1.29", expansion=Expansion.ROC)

        line = spec.command_line(Path("wc3proxy.exe"))

        assert line == 'wc3proxy.exe "1.0.0.1" "1.29" RoC'

    def test_is_immutable(self) -> None:
        spec = WorkerSpec(address="1.0.0.1", version="1.29", expansion=Expansion.ROC)

        with pytest.raises(AttributeError):
            spec.address = "2.2.2.2"  # type: ignore[misc]
