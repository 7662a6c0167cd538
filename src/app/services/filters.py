"""Client list filtering.

Every predicate keeps a client when *any* of its tasks matches, and all
active predicates are AND-ed. Filtering is stable: survivors keep their
original relative order.
"""

from collections.abc import Callable, Iterable
from datetime import date

from app.db.schema import TaskStatus
from app.models.client import ClientResponse
from app.models.filters import ClientFilters
from app.services.sla import get_sla_status

ACTIVE_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)

Predicate = Callable[[ClientResponse], bool]

# name -> (status, clears date range)
QUICK_FILTERS: dict[str, tuple[str, bool]] = {
    "all": ("all", True),
    "active": ("active", False),
    "in progress": ("in progress", False),
    "completed": ("completed", False),
}


def _date_range(start: date | None, end: date | None) -> Predicate | None:
    if start is None and end is None:
        return None

    def in_range(task_date: date) -> bool:
        if start is not None and task_date < start:
            return False
        if end is not None and task_date > end:
            return False
        return True

    return lambda client: any(in_range(t.date) for t in client.tasks)


def _text_search(term: str) -> Predicate | None:
    if not term:
        return None
    needle = term.lower()
    return lambda client: any(
        needle in value.lower()
        for value in (client.name, client.company, client.origin, client.id)
    )


def _task_search(term: str) -> Predicate | None:
    if not term:
        return None
    needle = term.lower()
    return lambda client: any(needle in t.description.lower() for t in client.tasks)


def _status(selected: str) -> Predicate | None:
    if selected == "all":
        return None
    if selected == "active":
        return lambda client: any(t.status in ACTIVE_STATUSES for t in client.tasks)
    return lambda client: any(t.status == selected for t in client.tasks)


def _priority(selected: str) -> Predicate | None:
    if selected == "all":
        return None
    return lambda client: any(t.priority == selected for t in client.tasks)


def _sla(selected: str, today: date) -> Predicate | None:
    if selected == "all":
        return None
    return lambda client: any(
        get_sla_status(t.sla_date, today) == selected for t in client.tasks
    )


def build_predicates(
    filters: ClientFilters, today: date | None = None
) -> list[Predicate]:
    """Active predicates in evaluation order (date, text, task text, status, priority, SLA)."""
    today = today or date.today()
    candidates = [
        _date_range(filters.date_start, filters.date_end),
        _text_search(filters.search),
        _task_search(filters.task_search),
        _status(filters.status),
        _priority(filters.priority),
        _sla(filters.sla, today),
    ]
    return [p for p in candidates if p is not None]


def filter_clients(
    clients: Iterable[ClientResponse],
    filters: ClientFilters,
    today: date | None = None,
) -> list[ClientResponse]:
    """Return a new list of the clients that pass every active filter."""
    predicates = build_predicates(filters, today)
    return [c for c in clients if all(p(c) for p in predicates)]


def apply_quick_filter(filters: ClientFilters, name: str) -> ClientFilters:
    """Preset from the dashboard shortcut buttons; resets priority and task search."""
    if name not in QUICK_FILTERS:
        raise ValueError(f"Unknown quick filter: {name!r}")
    status, clear_dates = QUICK_FILTERS[name]
    update: dict = {"status": status, "priority": "all", "task_search": ""}
    if clear_dates:
        update.update(date_start=None, date_end=None)
    return filters.model_copy(update=update)
