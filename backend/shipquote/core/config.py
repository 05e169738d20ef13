# Environment-driven settings
# pydantic-settings reads .env -> core/config.py

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "ShipQuote Engine"
    ENVIRONMENT: str = "dev"
    API_PREFIX: str = "/api/v1"
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"


    # ========= Database =========
    # Containers talk to the "db" service; local tools override DATABASE_URL.
    DATABASE_URL: str = Field(
        default="postgresql+psycopg://shipquote:shipquote@db:5432/shipquote",
        alias="DATABASE_URL",
    )
    DB_STATEMENT_TIMEOUT_MS: int = Field(3000, ge=100, alias="DB_STATEMENT_TIMEOUT_MS")


    # ========= Zone cache =========
    ZONE_CACHE_BACKEND: str = Field("memory", alias="ZONE_CACHE_BACKEND")    # memory | redis | none
    ZONE_CACHE_TTL_SEC: int = Field(3600, ge=0, alias="ZONE_CACHE_TTL_SEC")
    ZONE_CACHE_MAX_ENTRIES: int = Field(50_000, ge=1, alias="ZONE_CACHE_MAX_ENTRIES")      # in-memory backend only
    ZONE_CACHE_KEY_PREFIX: str = Field("shipquote:zone", alias="ZONE_CACHE_KEY_PREFIX")
    REDIS_URL: Optional[str] = Field(None, alias="REDIS_URL")


    # ========= Logging =========
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")


    # ========= Weight calculation =========
    DIMENSIONAL_FACTOR: float = Field(5000.0, gt=0, alias="DIMENSIONAL_FACTOR")     # cubic cm per kg
    DEFAULT_ITEM_WEIGHT_KG: float = Field(0.25, gt=0, alias="DEFAULT_ITEM_WEIGHT_KG")
    DEFAULT_ITEM_LENGTH_CM: float = Field(20.0, gt=0, alias="DEFAULT_ITEM_LENGTH_CM")
    DEFAULT_ITEM_WIDTH_CM: float = Field(14.0, gt=0, alias="DEFAULT_ITEM_WIDTH_CM")
    DEFAULT_ITEM_HEIGHT_CM: float = Field(2.0, gt=0, alias="DEFAULT_ITEM_HEIGHT_CM")
    PACKAGING_MIN_KG: float = Field(0.05, ge=0, alias="PACKAGING_MIN_KG")
    PACKAGING_RATIO: float = Field(0.1, ge=0, alias="PACKAGING_RATIO")
    DEFAULT_PICKUP_PINCODE: str = Field("110001", alias="DEFAULT_PICKUP_PINCODE")


    # ========= Fallback quote =========
    FALLBACK_ZONE: str = Field("D", alias="FALLBACK_ZONE")
    FALLBACK_WEIGHT_KG: float = Field(0.5, alias="FALLBACK_WEIGHT_KG")
    FALLBACK_BASE_COST: float = Field(80.0, alias="FALLBACK_BASE_COST")
    FALLBACK_FREE_SHIPPING_THRESHOLD: float = Field(500.0, alias="FALLBACK_FREE_SHIPPING_THRESHOLD")


settings = Settings()  # env only (including .env)
