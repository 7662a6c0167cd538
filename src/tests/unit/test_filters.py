"""Unit tests for client list filtering."""

import uuid
from datetime import date

import pytest

from app.models.client import ClientResponse
from app.models.filters import ClientFilters
from app.models.task import TaskResponse
from app.services.filters import apply_quick_filter, filter_clients

TODAY = date(2024, 3, 13)


def _task(
    status: str = "pending",
    priority: str = "medium",
    task_date: str = "2024-03-01",
    description: str = "Follow up",
    sla_date: str | None = None,
) -> TaskResponse:
    return TaskResponse(
        id=uuid.uuid4(),
        date=task_date,
        description=description,
        status=status,
        priority=priority,
        sla_date=sla_date,
    )


def _client(client_id: str, name: str = "Client", tasks=None, **extra) -> ClientResponse:
    fields = {"company": "Acme", "origin": "web", **extra}
    return ClientResponse(id=client_id, name=name, tasks=tasks or [], **fields)


def _ids(clients) -> list[str]:
    return [c.id for c in clients]


@pytest.fixture
def clients() -> list[ClientResponse]:
    return [
        _client("CL-1", "Xavier", [_task("pending", "high", "2024-01-10")]),
        _client("CL-2", "Bob", [_task("completed", "low", "2024-02-15")]),
        _client(
            "CL-3",
            "Carol",
            [
                _task("in progress", "medium", "2024-03-05", "Prepare tax return"),
                _task("awaiting client", "high", "2024-03-20"),
            ],
            company="Zeta Corp",
        ),
        _client("CL-4", "Dave", [], origin="referral"),
    ]


def test_default_filters_keep_everything_in_order(clients) -> None:
    result = filter_clients(clients, ClientFilters(), TODAY)
    assert _ids(result) == ["CL-1", "CL-2", "CL-3", "CL-4"]
    assert result is not clients


def test_status_active_and_explicit() -> None:
    clients = [
        _client("CL-1", tasks=[_task("pending")]),
        _client("CL-2", tasks=[_task("completed")]),
    ]
    assert _ids(filter_clients(clients, ClientFilters(status="active"), TODAY)) == ["CL-1"]
    assert _ids(filter_clients(clients, ClientFilters(status="completed"), TODAY)) == ["CL-2"]


def test_active_includes_in_progress(clients) -> None:
    result = filter_clients(clients, ClientFilters(status="active"), TODAY)
    assert _ids(result) == ["CL-1", "CL-3"]


def test_search_is_case_insensitive() -> None:
    clients = [_client("CL-1", "Xavier"), _client("CL-2", "Bob")]
    result = filter_clients(clients, ClientFilters(search="x"), TODAY)
    assert _ids(result) == ["CL-1"]


@pytest.mark.parametrize(
    ("term", "expected"),
    [("zeta", ["CL-3"]), ("REFERRAL", ["CL-4"]), ("cl-2", ["CL-2"])],
)
def test_search_matches_company_origin_and_id(clients, term, expected) -> None:
    result = filter_clients(clients, ClientFilters(search=term), TODAY)
    assert _ids(result) == expected


def test_task_search_matches_description(clients) -> None:
    result = filter_clients(clients, ClientFilters(task_search="TAX"), TODAY)
    assert _ids(result) == ["CL-3"]


def test_priority_filter(clients) -> None:
    result = filter_clients(clients, ClientFilters(priority="high"), TODAY)
    assert _ids(result) == ["CL-1", "CL-3"]


def test_date_range_inclusive(clients) -> None:
    filters = ClientFilters(date_start=date(2024, 2, 15), date_end=date(2024, 3, 5))
    assert _ids(filter_clients(clients, filters, TODAY)) == ["CL-2", "CL-3"]


def test_date_range_open_ended(clients) -> None:
    start_only = ClientFilters(date_start=date(2024, 3, 1))
    end_only = ClientFilters(date_end=date(2024, 1, 31))
    assert _ids(filter_clients(clients, start_only, TODAY)) == ["CL-3"]
    assert _ids(filter_clients(clients, end_only, TODAY)) == ["CL-1"]


def test_date_range_excludes_clients_without_tasks(clients) -> None:
    filters = ClientFilters(date_start=date(2000, 1, 1))
    assert "CL-4" not in _ids(filter_clients(clients, filters, TODAY))


@pytest.mark.parametrize(
    ("bucket", "expected"),
    [
        ("overdue", ["CL-1"]),
        ("due_today", ["CL-2"]),
        ("due_this_week", ["CL-3"]),
        ("on_track", ["CL-3"]),
        ("no_sla", ["CL-4"]),
    ],
)
def test_sla_bucket(bucket, expected) -> None:
    clients = [
        _client("CL-1", tasks=[_task(sla_date="2024-03-01")]),
        _client("CL-2", tasks=[_task(sla_date="2024-03-13")]),
        _client("CL-3", tasks=[_task(sla_date="2024-03-18"), _task(sla_date="2024-05-01")]),
        _client("CL-4", tasks=[_task()]),
    ]
    assert _ids(filter_clients(clients, ClientFilters(sla=bucket), TODAY)) == expected


def test_status_and_priority_commute(clients) -> None:
    status_first = filter_clients(
        filter_clients(clients, ClientFilters(status="active"), TODAY),
        ClientFilters(priority="high"),
        TODAY,
    )
    priority_first = filter_clients(
        filter_clients(clients, ClientFilters(priority="high"), TODAY),
        ClientFilters(status="active"),
        TODAY,
    )
    combined = filter_clients(
        clients, ClientFilters(status="active", priority="high"), TODAY
    )
    assert _ids(status_first) == _ids(priority_first) == _ids(combined) == ["CL-1", "CL-3"]


def test_predicates_are_conjunctive(clients) -> None:
    filters = ClientFilters(status="active", search="xavier", priority="low")
    assert filter_clients(clients, filters, TODAY) == []


def test_quick_filter_resets_priority_and_task_search() -> None:
    filters = ClientFilters(
        status="pending",
        priority="high",
        task_search="tax",
        search="acme",
        date_start=date(2024, 1, 1),
    )
    completed = apply_quick_filter(filters, "completed")
    assert completed.status == "completed"
    assert completed.priority == "all"
    assert completed.task_search == ""
    assert completed.search == "acme"
    assert completed.date_start == date(2024, 1, 1)

    everything = apply_quick_filter(filters, "all")
    assert everything.status == "all"
    assert everything.date_start is None and everything.date_end is None


def test_quick_filter_unknown_name() -> None:
    with pytest.raises(ValueError):
        apply_quick_filter(ClientFilters(), "urgent")
