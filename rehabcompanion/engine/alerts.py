"""Emergency alert lifecycle, derived on demand from mood check history.

An alert is a mood check with ``requested_emergency_call`` set. It stays
active until a doctor dismisses it or the patient submits
``RECOVERY_GOOD_RUN`` GOOD check-ins in a row after it.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from rehabcompanion.core.progression_policies import RECOVERY_GOOD_RUN
from rehabcompanion.engine.mood import MoodLevel


class AlertState(str, enum.Enum):
    RAISED = "RAISED"
    RECOVERED = "RECOVERED"
    DISMISSED = "DISMISSED"


@dataclass(frozen=True)
class AlertStatus:
    has_active_alert: bool
    active_alert_id: int | None = None
    state: AlertState | None = None


NO_ALERT = AlertStatus(has_active_alert=False)


def latest_emergency_request(history: Iterable):
    """Most recent check (by date) that asked for an emergency call, or None."""
    requests = [check for check in history if check.requested_emergency_call]
    if not requests:
        return None
    return max(requests, key=lambda c: c.date)


def has_recovered(history: Iterable, alert, good_run: int = RECOVERY_GOOD_RUN) -> bool:
    later = sorted((check for check in history if check.date > alert.date), key=lambda c: c.date)
    consecutive_good = 0
    for check in later:
        if MoodLevel(check.mood_level) is MoodLevel.GOOD:
            consecutive_good += 1
            if consecutive_good >= good_run:
                return True
        else:
            consecutive_good = 0
    return False


def alert_state(history: Iterable) -> AlertStatus:
    """Describe the latest emergency request, including resolved ones."""
    history = list(history)
    alert = latest_emergency_request(history)
    if alert is None:
        return NO_ALERT
    if alert.is_dismissed:
        return AlertStatus(has_active_alert=False, active_alert_id=alert.id, state=AlertState.DISMISSED)
    if has_recovered(history, alert):
        return AlertStatus(has_active_alert=False, active_alert_id=alert.id, state=AlertState.RECOVERED)
    return AlertStatus(has_active_alert=True, active_alert_id=alert.id, state=AlertState.RAISED)


def compute_active_alert(history: Iterable) -> AlertStatus:
    """Active alert for a patient, or ``NO_ALERT`` when dismissed, recovered or never raised."""
    status = alert_state(history)
    if not status.has_active_alert:
        return NO_ALERT
    return status
