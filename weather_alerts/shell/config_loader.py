"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in weather_alerts/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from weather_alerts.core.config import Config


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} environment placeholder.

    Args:
        value: Value to resolve (non-strings are returned unchanged)

    Returns:
        Resolved value, or the original placeholder if the variable is unset
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_bool(value: Any) -> bool:
    """Parse a boolean from YAML or an environment string."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _optional_str(value: Any) -> str | None:
    """Resolve an optional setting; an unresolved placeholder means unset."""
    value = _resolve_value(value)
    if not value or (isinstance(value, str) and value.startswith("${")):
        return None
    return str(value)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    feed = data.get("feed", {})
    firestore = data.get("firestore", {})
    push = data.get("push", {})

    return Config(
        feed_url=_resolve_value(feed.get("url", defaults.feed_url)),
        feed_area=_resolve_value(feed.get("area", defaults.feed_area)),
        feed_timeout_seconds=int(feed.get("timeout_seconds", defaults.feed_timeout_seconds)),
        user_agent=_optional_str(feed.get("user_agent")) or defaults.user_agent,
        firestore_database=_optional_str(firestore.get("database")),
        alerts_collection=firestore.get("alerts_collection", defaults.alerts_collection),
        users_collection=firestore.get("users_collection", defaults.users_collection),
        retention_days=int(data.get("retention_days", defaults.retention_days)),
        max_concurrent_users=int(data.get("max_concurrent_users", defaults.max_concurrent_users)),
        stale_location_hours=int(data.get("stale_location_hours", defaults.stale_location_hours)),
        firebase_project_id=_optional_str(push.get("project_id")),
        push_dry_run=_parse_bool(push.get("dry_run", False)),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: area=%s, database=%s, retention=%dd",
        config.feed_area,
        config.firestore_database or "(default)",
        config.retention_days,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        NWS_AREA: State code to fetch alerts for (default SD)
        NWS_USER_AGENT: User-Agent with contact info
        FEED_TIMEOUT_SECONDS: Feed request timeout
        FIRESTORE_DATABASE: Firestore database name
        RETENTION_DAYS: Days to keep expired alerts
        MAX_CONCURRENT_USERS: Worker threads for per-user dispatch
        FIREBASE_PROJECT_ID: Project for push delivery
        PUSH_DRY_RUN: Validate pushes without delivering ("true"/"false")

    Returns:
        Config object from environment
    """
    defaults = Config()

    return Config(
        feed_area=os.environ.get("NWS_AREA", defaults.feed_area),
        feed_timeout_seconds=int(
            os.environ.get("FEED_TIMEOUT_SECONDS", defaults.feed_timeout_seconds)
        ),
        user_agent=os.environ.get("NWS_USER_AGENT", defaults.user_agent),
        firestore_database=os.environ.get("FIRESTORE_DATABASE") or None,
        retention_days=int(os.environ.get("RETENTION_DAYS", defaults.retention_days)),
        max_concurrent_users=int(
            os.environ.get("MAX_CONCURRENT_USERS", defaults.max_concurrent_users)
        ),
        firebase_project_id=os.environ.get("FIREBASE_PROJECT_ID") or None,
        push_dry_run=_parse_bool(os.environ.get("PUSH_DRY_RUN", "false")),
    )
