from functools import lru_cache
from typing import Literal, Optional
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production", "test"]
CatalogSourceName = Literal["file", "mongo"]

def _env_file_for(app_env: EnvName) -> str:
    return f".env.{app_env}"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ProductComparisonAPI"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Catalog backing store
    CATALOG_SOURCE: CatalogSourceName = "file"
    CATALOG_PATH: str = "data/products.json"

    # Mongo (only used when CATALOG_SOURCE == "mongo")
    MONGO_URI: Optional[str] = None
    MONGO_DB: str = "catalog"
    MONGO_COLLECTION: str = "products"

    # Redis (optional, rate limiting only)
    REDIS_URL: Optional[str] = None

    # CORS
    ALLOWED_ORIGINS: str = ""  # CSV

    # Rate limiting
    rate_limit_window_s: int = 15 * 60           # 15 minutes
    rate_limit_max_requests: int = 100           # per client IP per window
    rate_limit_prefix: str = "ratelimit"         # redis key namespace

    # API
    api_prefix: str = "/api"
    currency: str = "USD"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development, .env.production or .env.test
                _env_file_encoding="utf-8"
    )
