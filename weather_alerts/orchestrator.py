"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. It's the "glue" that
makes the application work.

One run:
    1. Fetch active alerts (feed client) and keep relevant ones (core)
    2. For each alert, compare with the stored version (store + core)
    3. For new/updated alerts: store, then match every user (core),
       check quiet hours (core) and dispatch (dispatcher)
    4. Purge alerts past the retention window (store + core)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone

from weather_alerts.core.alert import Alert, parse_alerts
from weather_alerts.core.config import Config
from weather_alerts.core.dedup import should_process
from weather_alerts.core.formatter import build_alert_document, format_alert_summary
from weather_alerts.core.geofence import matches
from weather_alerts.core.location import is_stale, location_age_hours
from weather_alerts.core.preferences import is_allowed, parse_preferences
from weather_alerts.core.retention import is_expired, retention_cutoff
from weather_alerts.dispatcher import DispatchResult, NotificationDispatcher, skipped
from weather_alerts.shell.firestore_client import FirestoreClient, UserRecord
from weather_alerts.shell.nws_client import NWSClient


logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """Result of a complete alert polling cycle.

    Attributes:
        alerts_fetched: Relevant alerts returned by the feed
        alerts_new: Alerts that were new or updated and got processed
        notifications_sent: Successful deliveries
        notifications_failed: Failed delivery or per-user errors
        notifications_skipped: Matched users not notified (no token, quiet hours)
        alerts_purged: Expired alerts deleted by the retention sweep
        errors: Feed, per-alert and sweep errors
        feed_failed: True if the feed could not be fetched
    """
    alerts_fetched: int = 0
    alerts_new: int = 0
    notifications_sent: list[DispatchResult] = field(default_factory=list)
    notifications_failed: list[DispatchResult] = field(default_factory=list)
    notifications_skipped: int = 0
    alerts_purged: int = 0
    errors: list[str] = field(default_factory=list)
    feed_failed: bool = False

    @property
    def success(self) -> bool:
        """Returns True if no run-level errors occurred."""
        return len(self.errors) == 0

    @property
    def summary(self) -> str:
        """Human-readable summary of the processing result."""
        return (
            f"Fetched {self.alerts_fetched} alerts, "
            f"{self.alerts_new} new/updated, "
            f"{len(self.notifications_sent)} notifications sent, "
            f"{len(self.notifications_failed)} failed, "
            f"{self.notifications_skipped} skipped, "
            f"{self.alerts_purged} purged"
        )


class Orchestrator:
    """Coordinates alert polling, targeting and notification.

    All collaborators are passed in explicitly:
    - feed_client (fetches active alerts)
    - store (alert state, users, preferences, history)
    - dispatcher (push delivery + history records)
    """

    def __init__(
        self,
        config: Config,
        feed_client: NWSClient,
        store: FirestoreClient,
        dispatcher: NotificationDispatcher,
    ) -> None:
        """Initialize orchestrator.

        Args:
            config: Application configuration
            feed_client: Alert feed client
            store: Firestore-backed store
            dispatcher: Notification dispatcher
        """
        self.config = config
        self.feed_client = feed_client
        self.store = store
        self.dispatcher = dispatcher

    def _fetch_alerts(self) -> list[Alert]:
        """Fetch active alerts and keep the relevant ones.

        Raises:
            requests.RequestException, FeedError: Feed failures
        """
        geojson = self.feed_client.fetch_active_alerts(self.config.feed_area)

        # Pure core function
        return parse_alerts(geojson)

    def _needs_processing(self, alert: Alert) -> bool:
        """Compare an alert with its stored version."""
        exists, stored_timestamp = self.store.get_alert_timestamp(alert.storage_key)

        logger.debug(
            "Alert %s: exists=%s stored=%s incoming=%s",
            alert.storage_key,
            exists,
            stored_timestamp,
            alert.effective_timestamp,
        )

        return should_process(exists, stored_timestamp, alert.effective_timestamp)

    def _notify_user(
        self,
        alert: Alert,
        user: UserRecord,
        now: datetime,
        current_hour: int,
    ) -> DispatchResult | None:
        """Match, filter and notify a single user.

        Never raises: per-user errors become failed results.

        Returns:
            DispatchResult, or None if the user is outside the alert area
        """
        try:
            location = user.location
            if location is None:
                logger.debug("No location for user %s", user.user_id)
                return None

            if is_stale(location, now, self.config.stale_location_hours):
                logger.warning(
                    "Location for user %s is %.1f hours old, may be outdated",
                    user.user_id,
                    location_age_hours(location, now),
                )

            if not matches(
                location.lat,
                location.lon,
                alert.geometry,
                alert.event_type,
                alert.area_description,
            ):
                return None

            logger.info("User %s is in alert area for %s", user.user_id, alert.event_type)

            prefs = parse_preferences(self.store.get_preferences(user.user_id))
            if not is_allowed(prefs, current_hour):
                logger.info(
                    "Notification to user %s blocked by quiet hours (%d:00-%d:00)",
                    user.user_id,
                    prefs.quiet_hours.start_hour,
                    prefs.quiet_hours.end_hour,
                )
                return skipped(alert, user.user_id, "quiet hours")

            return self.dispatcher.dispatch(alert, user.user_id, user.fcm_token)

        except Exception as e:
            logger.exception("Error notifying user %s about %s", user.user_id, alert.storage_key)
            return DispatchResult(
                alert=alert,
                user_id=user.user_id,
                success=False,
                error=str(e),
            )

    def _notify_users(
        self,
        alert: Alert,
        users: list[UserRecord],
        now: datetime,
    ) -> list[DispatchResult]:
        """Notify all matching users about an alert, in parallel.

        Delivery order across users is not guaranteed.
        """
        if not users:
            return []

        # Quiet hours use the dispatcher's local wall-clock hour
        current_hour = now.astimezone().hour
        workers = min(self.config.max_concurrent_users, len(users))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = executor.map(
                lambda user: self._notify_user(alert, user, now, current_hour),
                users,
            )
            return [r for r in results if r is not None]

    def _sweep_expired(self, now: datetime) -> tuple[int, list[str]]:
        """Delete alerts past the retention window.

        Each deletion is independent; failures are logged and collected.

        Returns:
            (number purged, error messages)
        """
        errors: list[str] = []
        cutoff = retention_cutoff(now, self.config.retention_days)

        try:
            candidates = self.store.find_expired_alerts(cutoff)
        except Exception as e:
            error_msg = f"Failed to query expired alerts: {e}"
            logger.error(error_msg)
            return 0, [error_msg]

        purged = 0
        for storage_key, expires_at in candidates:
            if not is_expired(expires_at, now, self.config.retention_days):
                continue
            try:
                self.store.delete_alert(storage_key)
                purged += 1
                logger.info("Deleted expired alert: %s", storage_key)
            except Exception as e:
                error_msg = f"Failed to delete expired alert {storage_key}: {e}"
                logger.error(error_msg)
                errors.append(error_msg)

        logger.info("Purged %d expired alerts", purged)
        return purged, errors

    def _record(self, result: ProcessingResult, outcomes: list[DispatchResult]) -> None:
        for outcome in outcomes:
            if outcome.success:
                result.notifications_sent.append(outcome)
            elif outcome.skipped:
                result.notifications_skipped += 1
            else:
                result.notifications_failed.append(outcome)

    def _process_alerts(self, result: ProcessingResult, now: datetime) -> None:
        """Fetch, diff and notify. Feed errors abort this phase."""
        try:
            alerts = self._fetch_alerts()
        except Exception as e:
            error_msg = f"Failed to fetch alerts: {e}"
            logger.error(error_msg)
            result.errors.append(error_msg)
            result.feed_failed = True
            return

        result.alerts_fetched = len(alerts)
        logger.info("Fetched %d relevant alerts", len(alerts))

        users: list[UserRecord] | None = None

        for alert in alerts:
            try:
                if not self._needs_processing(alert):
                    logger.info("Alert already up to date, skipping: %s", alert.storage_key)
                    continue

                # Users are loaded before storing, so a failed lookup leaves
                # the alert unstored and it is retried next run
                if users is None:
                    users = self.store.list_users()

                self.store.save_alert(alert.storage_key, build_alert_document(alert, now))
            except Exception as e:
                error_msg = f"Failed to process alert {alert.storage_key}: {e}"
                logger.error(error_msg)
                result.errors.append(error_msg)
                continue

            result.alerts_new += 1
            logger.info("Processing alert: %s", format_alert_summary(alert))

            self._record(result, self._notify_users(alert, users, now))

    def process(self, now: datetime | None = None) -> ProcessingResult:
        """Run a complete alert polling cycle.

        This is the main entry point that:
        1. Fetches active alerts
        2. Skips alerts whose effective timestamp is unchanged
        3. Stores new/updated alerts
        4. Notifies matching users
        5. Purges expired alerts

        Args:
            now: Current time (defaults to UTC now)

        Returns:
            ProcessingResult with details of what happened
        """
        now = now or datetime.now(timezone.utc)
        result = ProcessingResult()

        self._process_alerts(result, now)

        purged, sweep_errors = self._sweep_expired(now)
        result.alerts_purged = purged
        result.errors.extend(sweep_errors)

        return result
