"""Settings for the file driver.

Settings are stored as YAML, by default in ``~/.file-driver/config.yaml``.
Keys may use snake_case or camelCase::

    directoryPermissions: "0775"
    filePermissions: "0664"
    encoding: utf-8
    csvDelimiter: ";"
    lockMode: shared
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from file_driver.errors import ConfigError
from file_driver.types import LockMode

if TYPE_CHECKING:
    from file_driver.driver import FileDriver

# Default settings location
CONFIG_DIR = Path.home() / ".file-driver"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

MAX_MODE = 0o7777


class DriverSettings(BaseModel):
    """Defaults applied by the driver when a caller doesn't pass one."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    directory_permissions: int = Field(default=0o777, alias="directoryPermissions")
    file_permissions: int = Field(default=0o666, alias="filePermissions")
    encoding: str = "utf-8"
    csv_delimiter: str = Field(default=",", alias="csvDelimiter")
    csv_enclosure: str = Field(default='"', alias="csvEnclosure")
    csv_escape: str | None = Field(default=None, alias="csvEscape")
    lock_mode: Literal["shared", "exclusive"] = Field(default="exclusive", alias="lockMode")

    @field_validator("directory_permissions", "file_permissions", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        """Accept octal strings such as "0755" or "0o755"."""
        if isinstance(value, str):
            try:
                value = int(value, 8)
            except ValueError as e:
                raise ValueError(f"Invalid octal permissions: {value!r}") from e
        if isinstance(value, int) and not 0 <= value <= MAX_MODE:
            raise ValueError(f"Permissions out of range: {oct(value)}")
        return value

    @field_validator("csv_delimiter", "csv_enclosure")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("must be a single character")
        return value

    @field_validator("csv_escape")
    @classmethod
    def _optional_character(cls, value: str | None) -> str | None:
        if not value:
            return None
        if len(value) != 1:
            raise ValueError("must be a single character")
        return value

    @property
    def default_lock_mode(self) -> LockMode:
        """Lock mode used when a caller doesn't pass one."""
        return LockMode.SHARED if self.lock_mode == "shared" else LockMode.EXCLUSIVE


def load_settings(driver: FileDriver, path: Path | str | None = None) -> DriverSettings:
    """Load settings through the driver's query and read operations.

    Args:
        driver: Driver used to check and read the settings file.
        path: Settings file. Defaults to ~/.file-driver/config.yaml.

    Returns:
        Parsed settings, or defaults if the file doesn't exist.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
        FileSystemError: If the file exists but cannot be read.
    """
    config_path = str(path or CONFIG_FILE)
    if not driver.is_file(config_path):
        return DriverSettings()

    text = driver.read_contents(config_path)
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid settings file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {config_path} must contain a mapping")

    try:
        return DriverSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}") from e
