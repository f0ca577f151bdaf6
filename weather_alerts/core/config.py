"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

import re
from dataclasses import dataclass, field

from weather_alerts.core.retention import DEFAULT_RETENTION_DAYS


# NWS alert feed for active alerts
DEFAULT_FEED_URL = "https://api.weather.gov/alerts/active"

# Upper bound on concurrent per-user lookups within one alert
MAX_CONCURRENT_USERS_LIMIT = 50


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_url: NWS active alerts endpoint
        feed_area: State/marine zone code to fetch alerts for
        feed_timeout_seconds: Abort the run if the feed takes longer
        user_agent: User-Agent sent to NWS (they require contact info)
        firestore_database: Firestore database name (None for default)
        alerts_collection: Collection holding stored alerts
        users_collection: Collection holding user documents
        retention_days: Days to keep alerts after they expire
        max_concurrent_users: Worker threads for per-user matching/dispatch
        stale_location_hours: Log a warning for older user locations
        firebase_project_id: Project for push delivery (None for default)
        push_dry_run: Validate push messages without delivering them
    """
    feed_url: str = DEFAULT_FEED_URL
    feed_area: str = "SD"
    feed_timeout_seconds: int = 30
    user_agent: str = "severe-weather-alerts (ops@example.com)"
    firestore_database: str | None = None
    alerts_collection: str = "nws_alerts"
    users_collection: str = "users"
    retention_days: int = DEFAULT_RETENTION_DAYS
    max_concurrent_users: int = 20
    stale_location_hours: int = 24
    firebase_project_id: str | None = None
    push_dry_run: bool = False


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def _positive(value: int, field_name: str) -> list[ValidationError]:
    if value <= 0:
        return [ValidationError(
            field=field_name,
            message=f"Must be positive, got {value}",
        )]
    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.feed_url.startswith(("http://", "https://")):
        errors.append(ValidationError(
            field="feed_url",
            message=f"Feed URL must be http(s), got '{config.feed_url}'",
        ))

    if not re.fullmatch(r"[A-Z]{2}", config.feed_area or ""):
        errors.append(ValidationError(
            field="feed_area",
            message=f"Feed area should be a two-letter code, got '{config.feed_area}'",
            severity="warning",
        ))

    errors.extend(_positive(config.feed_timeout_seconds, "feed_timeout_seconds"))
    errors.extend(_positive(config.retention_days, "retention_days"))
    errors.extend(_positive(config.stale_location_hours, "stale_location_hours"))

    if not 1 <= config.max_concurrent_users <= MAX_CONCURRENT_USERS_LIMIT:
        errors.append(ValidationError(
            field="max_concurrent_users",
            message=(
                f"Must be between 1 and {MAX_CONCURRENT_USERS_LIMIT}, "
                f"got {config.max_concurrent_users}"
            ),
        ))

    if "@" not in config.user_agent and "http" not in config.user_agent:
        errors.append(ValidationError(
            field="user_agent",
            message="NWS asks for contact info (email or URL) in the User-Agent",
            severity="warning",
        ))

    if config.push_dry_run:
        errors.append(ValidationError(
            field="push_dry_run",
            message="Push dry run enabled - notifications will not be delivered",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
