from functools import lru_cache
from typing import List, Optional
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class BaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

class GlobalConfig(BaseConfig):
    DATABASE_URI: Optional[str] = None
    SECRET_KEY: Optional[str] = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Post/comment input validation
    POST_TEXT_MIN_LENGTH: int = 1
    POST_TEXT_MAX_LENGTH: int = 300

    # "anyone" keeps the legacy behaviour, "author_or_post_owner" restricts it
    COMMENT_REMOVAL_POLICY: str = "anyone"
    LEGACY_EMPTY_POSTS_404: bool = False

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    #Sentry
    SENTRY_DSN: Optional[str] = None

class DevConfig(GlobalConfig):
    DATABASE_URI: Optional[str] = "sqlite:///dev.db"

    model_config = SettingsConfigDict(env_prefix="DEV_", extra="ignore")

class ProdConfig(GlobalConfig):
    # Most platforms expose DATABASE_URL, fall back to the prefixed name
    DATABASE_URI: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")
    SECRET_KEY: Optional[str] = Field(default=None, validation_alias="SECRET_KEY")
    SENTRY_DSN: Optional[str] = Field(default=None, validation_alias="SENTRY_DSN")

    model_config = SettingsConfigDict(extra="ignore")

    def model_post_init(self, __context):
        if not self.DATABASE_URI:
            self.DATABASE_URI = os.getenv("PROD_DATABASE_URI")
        if not self.SECRET_KEY:
            self.SECRET_KEY = os.getenv("PROD_SECRET_KEY")
        if not self.SENTRY_DSN:
            self.SENTRY_DSN = os.getenv("PROD_SENTRY_DSN")

class TestConfig(GlobalConfig):
    DATABASE_URI: str = "sqlite:///test.db"
    SECRET_KEY: str = "test-secret-key-change-in-production"

    model_config = SettingsConfigDict(env_prefix="TEST_", extra="ignore")

@lru_cache()
def get_config(env_state: str):
    configs = {"dev": DevConfig, "test": TestConfig, "prod": ProdConfig}
    return configs[env_state]()

# Prefer test config automatically when running under pytest unless ENV is set
detected_env = os.getenv("ENV")
if not detected_env and os.getenv("PYTEST_CURRENT_TEST"):
    detected_env = "test"
env_state = detected_env or "prod"
config = get_config(env_state)
