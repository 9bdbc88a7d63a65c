"""
Configuration loading with schema validation.

Settings come from built-in defaults, optionally overridden by
config/settings.yaml. String values of the form ${VAR} or ${VAR:default}
are substituted from the environment (a local .env file is loaded first).
A ${VAR} placeholder without a default is required: if the variable is
unset or blank, loading fails with ConfigError.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError


DEFAULT_SETTINGS: Dict[str, Any] = {
    "app": {
        "name": "Ledger1 CMS",
        "version": "1.0.0",
        "environment": "${ENVIRONMENT:development}",
    },
    "store": {
        "connection_string": "${COSMOS_CONNECTION_STRING}",
        "database_id": "${COSMOS_DB_ID}",
        "container_id": "${COSMOS_CONTAINER_ID}",
    },
    "auth": {
        "enable_demo_login": "${CMS_ENABLE_DEMO_LOGIN:false}",
        "bootstrap_admin_username": "${CMS_BOOTSTRAP_ADMIN_USERNAME:admin}",
        "bootstrap_admin_password": "${CMS_BOOTSTRAP_ADMIN_PASSWORD:admin123}",
        "session_sweep_interval_seconds": "${SESSION_SWEEP_INTERVAL_SECONDS:3600}",
    },
    "logging": {
        "level": "${LOG_LEVEL:INFO}",
        "format": "${LOG_FORMAT:json}",
        "file_path": "${LOG_FILE_PATH:}",
        "max_bytes": 10485760,
        "backup_count": 5,
    },
    "web": {
        "host": "${WEB_HOST:0.0.0.0}",
        "port": "${WEB_PORT:8000}",
        "cors_origins": "${CORS_ORIGINS:*}",
    },
}


class AppSettings(BaseModel):
    name: str = "Ledger1 CMS"
    version: str = "1.0.0"
    environment: str = "development"


class StoreSettings(BaseModel):
    """Document store location. All three values are required."""
    connection_string: str = Field(..., min_length=1)
    database_id: str = Field(..., min_length=1)
    container_id: str = Field(..., min_length=1)


class AuthSettings(BaseModel):
    enable_demo_login: bool = False
    bootstrap_admin_username: str = "admin"
    bootstrap_admin_password: str = "admin123"
    session_sweep_interval_seconds: int = Field(default=3600, ge=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class WebSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: str = "*"

    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    store: StoreSettings
    auth: AuthSettings = Field(default_factory=AuthSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    web: WebSettings = Field(default_factory=WebSettings)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Load and parse configuration"""

    def __init__(self, config_dir: str = "config"):
        self.config_dir = Path(config_dir)
        load_dotenv()

    def _substitute_env_vars(self, value: Any, context: str = "") -> Any:
        """Recursively substitute environment variables in config values"""
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return os.getenv(var_name.strip(), default.strip())
                env_value = (os.getenv(var_expr) or "").strip()
                if not env_value:
                    error_msg = f"Environment variable {var_expr} is not defined"
                    if context:
                        error_msg += f" (context: {context})"
                    raise ConfigError(error_msg)
                return env_value
        elif isinstance(value, dict):
            return {
                k: self._substitute_env_vars(v, context=f"{context}.{k}" if context else k)
                for k, v in value.items()
            }
        elif isinstance(value, list):
            return [
                self._substitute_env_vars(item, context=f"{context}[{i}]" if context else f"[{i}]")
                for i, item in enumerate(value)
            ]
        return value

    def load_settings(self) -> Settings:
        """Load application settings"""
        raw_config = DEFAULT_SETTINGS
        settings_path = self.config_dir / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, "r", encoding="utf-8") as f:
                raw_config = _deep_merge(DEFAULT_SETTINGS, yaml.safe_load(f) or {})

        config = self._substitute_env_vars(raw_config)
        if not config["logging"].get("file_path"):
            config["logging"]["file_path"] = None

        try:
            return Settings(**config)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")


def load_settings(config_dir: str = "config") -> Settings:
    return ConfigLoader(config_dir).load_settings()
