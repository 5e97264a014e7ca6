"""Validation of operator input before it can reach the supervisor.

A :class:`~wc3launcher.supervisor.WorkerSpec` is only ever built from input
that passed these checks, so invalid addresses or versions never cause a
spawn attempt.
"""

import ipaddress
import re

from wc3launcher.exceptions import ValidationError
from wc3launcher.supervisor import Expansion, WorkerSpec

__all__ = ["build_worker_spec", "is_valid_address", "is_valid_version"]

_VERSION_PATTERN = re.compile(r"1\.[23][0-9]")


def is_valid_address(value: str | None) -> bool:
    """Check that a value is an IPv4 dotted-quad with octets 0-255.

    Surrounding whitespace is ignored.
    """
    if value is None or not value.strip():
        return False

    try:
        _ = ipaddress.IPv4Address(value.strip())
    except ValueError:
        return False
    return True


def is_valid_version(value: str | None) -> bool:
    """Check that a value is a supported game version (``1.2d`` or ``1.3d``)."""
    if not value:
        return False
    return _VERSION_PATTERN.fullmatch(value) is not None


def build_worker_spec(address: str, version: str, *, is_tft: bool) -> WorkerSpec:
    """Validate operator input and build the worker invocation.

    Args:
        address: Game host address; trimmed before validation.
        version: Game version; trimmed before validation.
        is_tft: True for The Frozen Throne, False for Reign of Chaos.

    Returns:
        The validated worker spec.

    Raises:
        ValidationError: If the address or version is invalid.
    """
    address = address.strip()
    version = version.strip()

    if not is_valid_address(address):
        msg = "Invalid IP"
        raise ValidationError(msg, field="address", value=address)

    if not is_valid_version(version):
        msg = "Invalid Version"
        raise ValidationError(msg, field="version", value=version)

    return WorkerSpec(
        address=address,
        version=version,
        expansion=Expansion.from_flag(is_tft=is_tft),
    )
