# cob_scenes/shared/config.py
import os
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Every field can be overridden with a COB_-prefixed environment variable
    (e.g. COB_ASSET_ROOT, COB_STRICT_STATES) or a .env file.
    """

    # --- Application Meta ---
    APP_NAME: str = "Cobweb Scene Loader"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT

    @property
    def ENV(self) -> str:
        return self.APP_ENV.value

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.CONSOLE

    # --- Assets ---
    # Relative asset names are resolved against this directory.
    ASSET_ROOT: str = os.getcwd()
    ASSET_SUFFIX: str = ".cob"
    ENCODING: str = "utf-8"

    # --- Parsing Policy ---
    # False: a state-keyed block only needs 'idle'; hover/press fall back to it.
    # True: idle, hover and press must all be written out.
    STRICT_STATES: bool = False

    @property
    def ASSET_DIR(self) -> str:
        """Absolute form of ASSET_ROOT."""
        return os.path.abspath(os.path.expanduser(self.ASSET_ROOT))

    model_config = SettingsConfigDict(env_prefix="COB_", env_file=".env", extra="ignore")


settings = Settings()
