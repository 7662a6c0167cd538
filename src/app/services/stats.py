from collections.abc import Iterable

from app.db.schema import TaskStatus
from app.models.client import ClientResponse
from app.models.report import ClientStats


def compute_stats(clients: Iterable[ClientResponse]) -> ClientStats:
    """Totals over the full client list, not the filtered view."""
    clients = list(clients)
    tasks = [t for c in clients for t in c.tasks]
    return ClientStats(
        total_clients=len(clients),
        total_tasks=len(tasks),
        pending=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
        in_progress=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
        completed=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
    )
