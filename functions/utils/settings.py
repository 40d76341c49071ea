"""
functions/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single source of truth* for runtime configuration
of the Parts Catalog API.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/parameters.yaml
- Overriding defaults with environment variables (CATALOG_API_*)
- Exposing a cached, fully-validated Settings object to the application

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) YAML defaults from:
       parameters/parameters.yaml
2) Environment variables:
       CATALOG_API_*

Secrets (Supabase service-role key) are never stored in YAML; they come
from the environment of the hosting process.

REQUIRED SETTINGS
-----------------
`supabase_url` and `supabase_service_role_key` are Optional at the model
level so the settings object can be loaded without credentials (tests,
tooling). They are enforced when the data store is built at startup
(see functions/catalog/data_store.py::build_data_store).

WHAT THIS FILE IS NOT FOR
-------------------------
- Business logic
- Database access
- Request handling
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml
from pydantic import AnyHttpUrl, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "parameters.yaml"


class Settings(BaseSettings):
    """
    Runtime settings for the Parts Catalog API.

    Load order / precedence:
        1) YAML defaults (parameters/parameters.yaml)
        2) Environment variables (CATALOG_API_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_API_",
        extra="ignore",
    )

    # Service metadata
    service_name: str = "parts_catalog_api"
    environment: str = "local"
    log_level: str = "INFO"

    # Supabase project
    supabase_url: Optional[AnyHttpUrl] = None
    supabase_service_role_key: Optional[str] = None
    supabase_schema: str = "public"

    # Duplicate-name guard
    similarity_threshold: float = Field(
        default=0.8,
        description="Minimum name similarity at which a create is refused as a probable duplicate.",
    )

    # Well-known file_type ids
    brand_image_file_type_id: int = 1
    product_image_file_type_id: int = 2

    # Object storage
    default_storage_bucket: str = "products"

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])


@lru_cache(maxsize=1)
def _load_yaml_parameters() -> Dict[str, Any]:
    """
    Load base configuration from parameters/parameters.yaml.

    Cached to guarantee consistent config during process lifetime.
    """
    if not PARAMETERS_PATH.exists():
        logger.warning("parameters_yaml_missing", expected=str(PARAMETERS_PATH))
        return {}

    try:
        with PARAMETERS_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning(
                "parameters_yaml_not_dict",
                path=str(PARAMETERS_PATH),
                type=type(data).__name__,
            )
            return {}
        logger.info("parameters_yaml_loaded", path=str(PARAMETERS_PATH))
        return data
    except Exception as exc:  # noqa: BLE001
        logger.error("parameters_yaml_load_error", path=str(PARAMETERS_PATH), error=str(exc))
        return {}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Construct and return the final validated Settings object.

    Cached (singleton per process). Any code needing configuration should
    call this function, not instantiate Settings() directly.
    """
    # 1) YAML defaults
    yaml_data = _load_yaml_parameters()

    # 2) env overrides (partial)
    try:
        env_settings = Settings()
        env_data = env_settings.model_dump(exclude_unset=True)
        logger.info("settings_loaded_env_only_partial", fields=list(env_data.keys()))
    except ValidationError as exc:
        logger.warning("settings_env_validation_error", errors=exc.errors())
        env_data = {}

    # 3) merge + final validation
    merged: Dict[str, Any] = {**yaml_data, **env_data}
    settings = Settings.model_validate(merged)

    logger.info(
        "settings_loaded",
        environment=settings.environment,
        service_name=settings.service_name,
        supabase_url=str(settings.supabase_url) if settings.supabase_url else None,
        supabase_schema=settings.supabase_schema,
        has_service_role_key=bool(settings.supabase_service_role_key),
        similarity_threshold=settings.similarity_threshold,
        default_storage_bucket=settings.default_storage_bucket,
    )

    return settings
