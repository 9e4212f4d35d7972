"""Runtime configuration for the ordering service.

``Settings`` is built once at process start and passed explicitly to the
components that need it; nothing reads the environment after startup.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    database_url: str | None = None  # None or "memory" selects the in-memory store
    order_id_prefix: str = "KNV"
    log_level: str | None = None
    log_dir: str | None = "logs"
    seed_catalogue: bool = False
    low_stock_threshold: int = 5

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        environment = (env.get("STOREFRONT_ENV") or env.get("ENVIRONMENT") or "development").lower()
        return cls(
            environment=environment,
            database_url=env.get("DATABASE_URL") or None,
            log_level=env.get("LOG_LEVEL") or None,
            log_dir=env.get("LOG_DIR", "logs") or None,
            seed_catalogue=env.get("SEED_CATALOGUE", "").lower() in _TRUTHY,
        )

    @property
    def is_production(self) -> bool:
        return self.environment in ("production", "staging")

    @property
    def uses_memory_store(self) -> bool:
        return self.database_url is None or self.database_url == "memory"
