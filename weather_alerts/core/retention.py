"""Alert retention rules - Pure functions.

Stored alerts are purged once they have been expired for longer than the
retention window. The deletion itself is done by the imperative shell.
"""

from datetime import datetime, timedelta


# How long expired alerts are kept
DEFAULT_RETENTION_DAYS = 7


def retention_cutoff(now: datetime, days: int = DEFAULT_RETENTION_DAYS) -> datetime:
    """Compute the expiry time before which alerts are purged.

    Pure function.
    """
    return now - timedelta(days=days)


def is_expired(
    expires_at: datetime | None,
    now: datetime,
    days: int = DEFAULT_RETENTION_DAYS,
) -> bool:
    """Check if an alert is past its retention window.

    Pure function. Alerts with no known expiry are never purged.

    Args:
        expires_at: When the alert expired
        now: Current time
        days: Retention window in days

    Returns:
        True if expires_at is older than now minus the window
    """
    if expires_at is None:
        return False
    return expires_at < retention_cutoff(now, days)
