from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreConfig(BaseModel):
    backend: Literal["memory", "sql"] = Field(default="memory")
    dsn: str = Field(default="sqlite+pysqlite:///address_pool.db")


class SeedConfig(BaseModel):
    enabled: bool = Field(default=True)
    preload_file: Optional[str] = Field(default=None, description="JSON list of postal addresses")


class AllocationConfig(BaseModel):
    random_seed: Optional[int] = Field(default=None)


class ObservabilityConfig(BaseModel):
    service_name: str = Field(default="address-pool")
    metrics_namespace: str = Field(default="address_pool")


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ADDRESS_POOL_", env_nested_delimiter="__", extra="forbid")

    store: StoreConfig = Field(default_factory=StoreConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    enable_debug_logs: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AllocationConfig",
    "AppConfig",
    "ObservabilityConfig",
    "SeedConfig",
    "StoreConfig",
    "get_config",
]
