"""
Runtime configuration, read from environment variables.

The secret store settings are grouped in their own model so they can be
handed to the store client explicitly instead of living in module globals.
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, ValidationError

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class SecretStoreConfig(BaseModel):
    backend: Literal["keyvault", "env"] = "keyvault"
    url: Optional[str] = None
    timeout_seconds: float = 10.0
    username_secret: str = "api-username"
    password_secret: str = "api-password"


class Settings(BaseModel):
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    secret_store: SecretStoreConfig = SecretStoreConfig()


def load_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build Settings from environment variables.

    Unset variables fall back to the model defaults. Raises ValueError when a
    value cannot be coerced (e.g. a non-numeric PORT).
    """
    env = os.environ if environ is None else environ

    store_fields = {
        "backend": env.get("SECRET_STORE_BACKEND"),
        "url": env.get("SECRET_STORE_URL"),
        "timeout_seconds": env.get("SECRET_STORE_TIMEOUT_SECONDS"),
        "username_secret": env.get("API_USERNAME_SECRET"),
        "password_secret": env.get("API_PASSWORD_SECRET"),
    }
    settings_fields = {
        "log_level": env.get("LOG_LEVEL"),
        "host": env.get("HOST"),
        "port": env.get("PORT"),
        "max_upload_bytes": env.get("MAX_UPLOAD_BYTES"),
    }

    try:
        store = SecretStoreConfig(**{k: v for k, v in store_fields.items() if v})
        return Settings(
            secret_store=store,
            **{k: v for k, v in settings_fields.items() if v},
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
