from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lspeasy.version import __version__


class ServerSettings(BaseSettings):
    """Language server settings.

    All settings can be configured via environment variables with the prefix LSPEASY_.
    For example, LSPEASY_EXIT_TIMEOUT_SECONDS=5 shortens the wait for ``exit``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LSPEASY_",
        env_file=".env",
        extra="ignore",
    )

    name: str = "lspeasy"
    """Reported to the client as ``serverInfo.name``."""

    version: str = __version__
    """Reported to the client as ``serverInfo.version``."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    exit_timeout_seconds: float = Field(default=30.0, gt=0)
    """How long to wait for the ``exit`` notification after answering ``shutdown``."""

    handshake_timeout_seconds: float | None = Field(default=None, gt=0)
    """How long to wait for ``initialize``/``initialized``. None waits forever."""
