from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class BaseConfig(BaseSettings):
    ENV_STATE: Optional[str] = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class GlobalConfig(BaseConfig):
    DATABASE_URL: Optional[str] = None
    DB_FORCE_ROLL_BACK: bool = False
    ALGORITHM: Optional[str] = None
    SECRET_KEY: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Risk assessment review settings
    MINIMUM_APPROVALS_REQUIRED: int = 2
    REVIEW_LOOKAHEAD_DAYS: int = 30


class DevConfig(GlobalConfig):
    LOG_LEVEL: str = "DEBUG"

    model_config = SettingsConfigDict(env_prefix="DEV_", extra="ignore")

class ProdConfig(GlobalConfig):
    model_config = SettingsConfigDict(env_prefix="PROD_", extra="ignore")


class TestConfig(GlobalConfig):
    DATABASE_URL: str = "sqlite:///test.db"
    DB_FORCE_ROLL_BACK: bool = True
    SECRET_KEY: str = "testsecretkey"
    ALGORITHM: str = "HS256"

    model_config = SettingsConfigDict(env_prefix="TEST_", extra="ignore")


def get_config(env_state: str):
    configs = {"dev": DevConfig, "prod": ProdConfig, "test": TestConfig}
    return configs[env_state]()


base_config = BaseConfig()

config = get_config(base_config.ENV_STATE)
