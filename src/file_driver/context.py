"""Application context for dependency injection.

Separates object creation from object use so CLI commands can be exercised
with a driver built over a test platform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from file_driver.config import DriverSettings

if TYPE_CHECKING:
    from file_driver.driver import FileDriver
    from file_driver.protocols import Platform


@dataclass
class AppContext:
    """Container for the driver used by CLI commands."""

    driver: FileDriver
    settings: DriverSettings = field(default_factory=DriverSettings)


def create_context(
    config_path: Path | str | None = None,
    platform: Platform | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Settings are read through a default-configured driver, then the final
    driver is built with them. For tests, construct AppContext directly.

    Args:
        config_path: Override settings file location.
        platform: Override native-call implementation.

    Returns:
        Configured AppContext.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    from file_driver.config import load_settings
    from file_driver.driver import FileDriver

    bootstrap = FileDriver.create(platform=platform)
    settings = load_settings(bootstrap, config_path)
    driver = FileDriver.create(platform=bootstrap.platform, settings=settings)
    return AppContext(driver=driver, settings=settings)
