"""SLA helpers: status bucket for a task and the default SLA date for new tasks."""

from datetime import date, timedelta

from app.core.config import settings
from app.db.schema import SlaStatus

DUE_SOON_DAYS = 7
WEEKEND = (5, 6)


def _as_date(value: date | str | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def get_sla_status(
    sla_date: date | str | None, today: date | None = None
) -> SlaStatus:
    """Bucket an SLA date relative to today; unparseable dates count as no SLA."""
    deadline = _as_date(sla_date)
    if deadline is None:
        return SlaStatus.NO_SLA
    today = today or date.today()
    if deadline < today:
        return SlaStatus.OVERDUE
    if deadline == today:
        return SlaStatus.DUE_TODAY
    if deadline <= today + timedelta(days=DUE_SOON_DAYS):
        return SlaStatus.DUE_THIS_WEEK
    return SlaStatus.ON_TRACK


def default_sla_date(
    today: date | None = None, business_days: int | None = None
) -> date:
    """today + N business days (Saturdays and Sundays are skipped)."""
    current = today or date.today()
    remaining = (
        settings.default_sla_business_days if business_days is None else business_days
    )
    while remaining > 0:
        current += timedelta(days=1)
        if current.weekday() not in WEEKEND:
            remaining -= 1
    return current
