"""
Centralized configuration management for the Azure Subscriptions service
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logger import get_logger

logger = get_logger(__name__)


DEFAULT_CACHE_TTL_SECONDS = 3600

# Nested appsettings.json paths, same layout as the portal's app-config.yaml
TENANT_ID_PATH = ("auth", "providers", "microsoft", "development", "tenantId")
CLIENT_ID_PATH = ("auth", "providers", "microsoft", "development", "clientId")
CLIENT_SECRET_PATH = ("auth", "providers", "microsoft", "development", "clientSecret")
MANAGEMENT_GROUP_ID_PATH = ("azureServices", "managementGroup", "managementGroupId")


@dataclass
class AzureConfig:
    """Service principal credentials and the root management group"""
    tenant_id: str
    client_id: str
    client_secret: str
    management_group_id: str

    def missing_settings(self) -> List[str]:
        """Names of required settings that are absent or blank"""
        values = {
            "tenant_id": self.tenant_id,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "management_group_id": self.management_group_id,
        }
        return [name for name, value in values.items() if not (value or "").strip()]

    def is_complete(self) -> bool:
        return not self.missing_settings()


@dataclass
class AppConfig:
    """Application configuration"""
    title: str = "Azure Subscriptions"
    version: str = "1.0.0"
    log_level: str = "INFO"
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS


class ConfigManager:
    """Centralized configuration manager"""

    def __init__(self):
        self._azure_config: Optional[AzureConfig] = None
        self._app_config: Optional[AppConfig] = None
        self._appsettings_cache: Optional[Dict[str, Any]] = None
        self._invalid_settings: Dict[str, str] = {}

    def _load_appsettings(self) -> Dict[str, Any]:
        if self._appsettings_cache is not None:
            return self._appsettings_cache

        settings_path = os.getenv("APPSETTINGS_PATH") or str(Path.cwd() / "appsettings.json")

        try:
            if Path(settings_path).is_file():
                with open(settings_path, "r", encoding="utf-8") as handle:
                    loaded = json.load(handle)
                self._appsettings_cache = loaded if isinstance(loaded, dict) else {}
            else:
                self._appsettings_cache = {}
        except (OSError, ValueError):
            self._appsettings_cache = {}

        return self._appsettings_cache

    def _get_appsettings_value(self, *keys: str) -> Optional[str]:
        data: Any = self._load_appsettings()
        for key in keys:
            if not isinstance(data, dict):
                return None
            data = data.get(key)
        if data is None:
            return None
        return str(data)

    def _setting(self, env_name: str, path: tuple) -> str:
        value = os.getenv(env_name)
        if value is None:
            value = self._get_appsettings_value(*path)
        return (value or "").strip()

    def _int_setting(self, env_name: str, default: int) -> int:
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning(f"⚠️ {env_name}={raw!r} is not an integer, using {default}")
            self._invalid_settings[env_name] = raw
            return default

    @property
    def azure(self) -> AzureConfig:
        """Get Azure configuration"""
        if self._azure_config is None:
            self._azure_config = AzureConfig(
                tenant_id=self._setting("AZURE_TENANT_ID", TENANT_ID_PATH),
                client_id=self._setting("AZURE_CLIENT_ID", CLIENT_ID_PATH),
                client_secret=self._setting("AZURE_CLIENT_SECRET", CLIENT_SECRET_PATH),
                management_group_id=self._setting("AZURE_MANAGEMENT_GROUP_ID", MANAGEMENT_GROUP_ID_PATH),
            )
        return self._azure_config

    @property
    def app(self) -> AppConfig:
        """Get application configuration"""
        if self._app_config is None:
            self._app_config = AppConfig(
                title=os.getenv("APP_TITLE", "Azure Subscriptions"),
                version=os.getenv("APP_VERSION", "1.0.0"),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                cache_ttl_seconds=self._int_setting("SUBSCRIPTION_CACHE_TTL", DEFAULT_CACHE_TTL_SECONDS),
            )
        return self._app_config

    def reload(self) -> None:
        """Drop cached settings so the next access re-reads env and appsettings"""
        self._azure_config = None
        self._app_config = None
        self._appsettings_cache = None
        self._invalid_settings = {}

    def validate_config(self) -> Dict[str, Any]:
        """
        Validate configuration and return status

        Returns:
            Dictionary containing validation results
        """
        validation_results: Dict[str, Any] = {
            "valid": True,
            "errors": [],
            "warnings": [],
            "services": {}
        }

        missing = self.azure.missing_settings()
        for name in missing:
            validation_results["errors"].append(f"Required setting not configured: {name}")
        validation_results["valid"] = not missing
        validation_results["services"]["azure_arm"] = not missing

        if self.app.cache_ttl_seconds <= 0:
            validation_results["warnings"].append(
                "SUBSCRIPTION_CACHE_TTL is not positive; every request will hit Azure"
            )
        for env_name, raw in self._invalid_settings.items():
            validation_results["warnings"].append(
                f"{env_name}={raw!r} is not an integer; the default was used"
            )

        return validation_results

    def get_environment_summary(self) -> Dict[str, str]:
        """Get a summary of environment configuration for logging"""
        return {
            "AZURE_TENANT_ID": "✅" if self.azure.tenant_id else "❌",
            "AZURE_CLIENT_ID": "✅" if self.azure.client_id else "❌",
            "AZURE_CLIENT_SECRET": "✅" if self.azure.client_secret else "❌",
            "AZURE_MANAGEMENT_GROUP_ID": "✅" if self.azure.management_group_id else "❌",
        }


# Global configuration instance
config = ConfigManager()
