"""User settings model.

This module provides the UserSettings Pydantic model persisted between runs.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from wc3launcher.supervisor import Expansion

DEFAULT_ADDRESS = "1.0.0.1"
DEFAULT_VERSION = "1.29"


class UserSettings(BaseModel):
    """Persisted launcher preferences.

    Serialized with the field names ``Ip``, ``Version``, and ``IsTft``.

    Attributes:
        address: Last entered game host address.
        version: Last entered game version.
        is_tft: True for The Frozen Throne, False for Reign of Chaos.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    address: str = Field(default=DEFAULT_ADDRESS, alias="Ip")
    version: str = Field(default=DEFAULT_VERSION, alias="Version")
    is_tft: bool = Field(default=False, alias="IsTft")

    @property
    def expansion(self) -> Expansion:
        return Expansion.from_flag(is_tft=self.is_tft)

    def to_json_dict(self) -> dict[str, object]:
        """Return the on-disk representation, in field order."""
        return self.model_dump(by_alias=True)


DEFAULT_SETTINGS = UserSettings()
