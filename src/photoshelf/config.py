"""
Settings for photoshelf.

Lookup order for every key: process environment, then Streamlit secrets
(``.streamlit/secrets.toml``), then the caller's default. ``load_env_file``
copies a ``.env`` file into the environment first, without overriding what is
already set. The Streamlit app and the export job share these getters.
"""

import os
from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import streamlit as st
from dotenv import load_dotenv
from tzlocal import get_localzone

from .error_handling import ConfigurationError
from .logging_config import DEVELOPMENT_ENVIRONMENTS, get_logger

logger = get_logger(__name__)

# Keys of the browser client's .env, accepted so one file can serve both
LEGACY_KEY_ALIASES = {
    "SUPABASE_URL": "VITE_SUPABASE_URL",
    "SUPABASE_ANON_KEY": "VITE_SUPABASE_ANON_KEY",
}
TRUTHY = ("true", "1", "yes", "on")


def _read_setting(key: str) -> Any:
    value = os.getenv(key)
    if value is not None:
        return value

    try:
        return st.secrets.get(key)
    except Exception:  # nosec B110
        # No secrets.toml, or not running under Streamlit
        return None


def _cast(value: Any, cast_type: type) -> Any:
    if cast_type is bool:
        return value.lower() in TRUTHY if isinstance(value, str) else bool(value)
    if cast_type is str:
        return value
    return cast_type(value)


class Config:
    """Cached settings lookup."""

    def __init__(self):
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """
        Look up a setting.

        Args:
            key: Setting name
            default: Returned when the key is unset or cannot be cast
            cast_type: str, int, float or bool

        Returns:
            The value cast to ``cast_type``, or ``default``
        """
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key not in self._cache:
            value = _read_setting(key)
            if value is None and key in LEGACY_KEY_ALIASES:
                value = _read_setting(LEGACY_KEY_ALIASES[key])

            if value is None:
                value = default
            else:
                try:
                    value = _cast(value, cast_type)
                except (ValueError, TypeError) as e:
                    logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
                    value = default

            self._cache[cache_key] = value

        return self._cache[cache_key]

    def get_required(self, key: str, cast_type: type = str) -> Any:
        """
        Look up a setting that must be present and non-empty.

        Raises:
            ConfigurationError: If it is missing
        """
        value = self.get(key, cast_type=cast_type)
        if value is None or value == "":
            raise ConfigurationError(f"Required configuration '{key}' not found", details={"key": key})
        return value

    def is_development(self) -> bool:
        return str(self.get("ENVIRONMENT", "development")).lower() in DEVELOPMENT_ENVIRONMENTS

    def clear_cache(self):
        self._cache.clear()


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def load_env_file(env_file: str = ".env") -> bool:
    """
    Load variables from a .env file into the process environment.

    Existing environment variables win over the file. The configuration cache
    is cleared so freshly loaded values become visible.

    Returns:
        bool: True if the file existed and was loaded
    """
    if not os.path.exists(env_file):
        logger.debug("env_file_not_found", env_file=env_file)
        return False

    load_dotenv(dotenv_path=env_file, override=False)
    get_config().clear_cache()
    logger.info("env_file_loaded", env_file=env_file)
    return True


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get environment variable with type casting."""
    return get_config().get(key, default, cast_type)


def get_required_env(key: str, cast_type: type = str) -> Any:
    """Get required environment variable.

    Raises:
        ConfigurationError: If the required environment variable is not found
    """
    return get_config().get_required(key, cast_type)


def get_supabase_url() -> str:
    """Get the Supabase project URL."""
    return str(get_required_env("SUPABASE_URL"))


def get_supabase_anon_key() -> str:
    """Get the Supabase anonymous (public) API key."""
    return str(get_required_env("SUPABASE_ANON_KEY"))


def get_storage_bucket() -> str:
    """Get the storage bucket holding the images."""
    return str(get_env("SUPABASE_STORAGE_BUCKET", "images"))


def get_metadata_table() -> str:
    """Get the table holding one row per stored image."""
    return str(get_env("SUPABASE_METADATA_TABLE", "image_metadata"))


def get_export_dir() -> str:
    """Get the root directory the export job writes into."""
    return str(get_env("PHOTOSHELF_EXPORT_DIR", "exports"))


def get_display_timezone() -> tzinfo:
    """
    Get the timezone used for month bucketing and display.

    PHOTOSHELF_TIMEZONE takes an IANA name (e.g. "Asia/Tokyo"). Without it the
    machine's local timezone is used.
    """
    name = get_env("PHOTOSHELF_TIMEZONE")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.warning("invalid_timezone", timezone=name, error=str(e))

    # Full zone rules, not just the current offset, so DST months bucket correctly
    return get_localzone()
