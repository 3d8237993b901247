#!/usr/bin/env python3
"""
Training Status - classify an employee's HazCom training progress.

The status is always derived from the completed modules and the last
training date; it is never read back from storage.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from core.compliance.models import Employee

logger = logging.getLogger(__name__)

ALL_MODULES = ("m1", "m2", "m3", "m4", "m5", "m6", "m7")
TOTAL_MODULES = len(ALL_MODULES)

# Annual refresher window that counts as "due soon"
DUE_SOON_DAYS = 30

NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
OVERDUE = "overdue"
DUE_SOON = "due-soon"
CURRENT = "current"

TRAINING_STATUSES = (NOT_STARTED, IN_PROGRESS, OVERDUE, DUE_SOON, CURRENT)
TRAINED_STATUSES = frozenset({CURRENT, DUE_SOON})

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class TrainingStatusInfo:
    """Result of evaluating one employee."""
    status: str
    completed_count: int
    remaining_count: int
    days_until_due: Optional[int]
    label: str

    @property
    def is_trained(self) -> bool:
        return self.status in TRAINED_STATUSES


def _as_utc_datetime(value) -> datetime:
    """Dates without a time component are read as midnight UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"Unsupported training date type: {type(value).__name__}")


def _add_one_year(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        # Feb 29 -> Mar 1 of the following year
        return moment.replace(year=moment.year + 1, month=3, day=1)


def count_completed_modules(completed_modules) -> int:
    """Count completed modules that belong to the curriculum."""
    completed = set(completed_modules or ())
    return sum(1 for module_id in ALL_MODULES if module_id in completed)


def evaluate_training_status(
    employee: "Employee",
    now: Optional[datetime] = None
) -> TrainingStatusInfo:
    """
    Evaluate an employee's training status.

    Only the completed module set and the last training date are consulted.

    Args:
        employee: Employee with ``completed_modules`` and ``last_training``
        now: Reference time (defaults to the current UTC time)

    Returns:
        TrainingStatusInfo with one of the five training statuses.
    """
    completed_count = count_completed_modules(employee.completed_modules)
    remaining_count = TOTAL_MODULES - completed_count

    if completed_count == 0:
        return TrainingStatusInfo(
            status=NOT_STARTED,
            completed_count=completed_count,
            remaining_count=remaining_count,
            days_until_due=None,
            label="Not started: new hire needs orientation",
        )

    if completed_count < TOTAL_MODULES:
        return TrainingStatusInfo(
            status=IN_PROGRESS,
            completed_count=completed_count,
            remaining_count=remaining_count,
            days_until_due=None,
            label=f"In progress: {completed_count} of {TOTAL_MODULES} modules complete",
        )

    if not employee.last_training:
        return TrainingStatusInfo(
            status=OVERDUE,
            completed_count=completed_count,
            remaining_count=0,
            days_until_due=None,
            label="Overdue: annual refresher date unknown",
        )

    reference = _as_utc_datetime(now) if now is not None else datetime.now(timezone.utc)
    due_date = _add_one_year(_as_utc_datetime(employee.last_training))
    days_until_due = math.ceil((due_date - reference).total_seconds() / _SECONDS_PER_DAY)

    if days_until_due < 0:
        return TrainingStatusInfo(
            status=OVERDUE,
            completed_count=completed_count,
            remaining_count=0,
            days_until_due=days_until_due,
            label=f"Overdue: annual refresher {abs(days_until_due)} days past due",
        )

    if days_until_due <= DUE_SOON_DAYS:
        return TrainingStatusInfo(
            status=DUE_SOON,
            completed_count=completed_count,
            remaining_count=0,
            days_until_due=days_until_due,
            label=f"Due soon: refresher due in {days_until_due} days",
        )

    return TrainingStatusInfo(
        status=CURRENT,
        completed_count=completed_count,
        remaining_count=0,
        days_until_due=days_until_due,
        label="Up to date",
    )


def detect_status_drift(
    employee: "Employee",
    stored_status: Optional[str],
    now: Optional[datetime] = None
) -> Optional[str]:
    """
    Compare a persisted status against the recomputed one.

    Returns:
        The recomputed status when it differs from ``stored_status``,
        otherwise None.
    """
    if stored_status is None:
        return None

    computed = evaluate_training_status(employee, now=now).status
    if computed == stored_status:
        return None

    logger.warning(
        f"Training status drift for employee {getattr(employee, 'id', '?')}: "
        f"stored={stored_status} computed={computed}"
    )
    return computed
