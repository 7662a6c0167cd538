"""Clients API."""

import uuid
from datetime import date

from fastapi import APIRouter, HTTPException, Query, Request, Response

from app.core.deps import ClientAPIDep, ClientServiceDep
from app.core.errors import ExportError, ImportFormatError
from app.models.client import ClientResponse, ClientUpdate, ClientWithTasksCreate
from app.models.filters import (
    ClientFilters,
    PriorityFilter,
    SlaFilter,
    StatusFilter,
)
from app.models.report import ClientStats, ImportReport
from app.models.task import ClientTaskCreate, ClientTaskUpdate, TaskResponse
from app.services.exporter import build_export
from app.services.filters import filter_clients
from app.services.importer import ClientImporter
from app.services.stats import compute_stats

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=list[ClientResponse])
def list_clients(
    client_service: ClientServiceDep,
    search: str = "",
    task_search: str = "",
    status: StatusFilter = "all",
    priority: PriorityFilter = "all",
    sla: SlaFilter = "all",
    date_start: date | None = None,
    date_end: date | None = None,
    limit: int | None = Query(None, ge=1, description="Max items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
) -> list[ClientResponse]:
    """List clients with their tasks; limit/offset page the filtered list."""
    clients = [ClientResponse.model_validate(c) for c in client_service.get_clients()]
    filters = ClientFilters(
        search=search,
        task_search=task_search,
        status=status,
        priority=priority,
        sla=sla,
        date_start=date_start,
        date_end=date_end,
    )
    matched = filter_clients(clients, filters)
    end = None if limit is None else offset + limit
    return matched[offset:end]


@router.get("/all", response_model=list[ClientResponse])
def list_all_clients(client_service: ClientServiceDep) -> list[ClientResponse]:
    """Full unpaged, unfiltered snapshot."""
    return client_service.get_all_clients()


@router.get("/stats", response_model=ClientStats)
def client_stats(client_service: ClientServiceDep) -> ClientStats:
    """Client and task totals across all clients."""
    clients = [
        ClientResponse.model_validate(c) for c in client_service.get_all_clients()
    ]
    return compute_stats(clients)


@router.get("/export")
async def export_clients(client_api: ClientAPIDep) -> Response:
    """Download every client as all_clients_<date>.json."""
    try:
        document = await build_export(client_api)
    except ExportError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return Response(
        content=document.content,
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"'
        },
    )


@router.post("/import", response_model=ImportReport)
async def import_clients(request: Request, client_api: ClientAPIDep) -> ImportReport:
    """Import a JSON array of clients (raw request body); existing ids are skipped."""
    body = await request.body()
    importer = ClientImporter(client_api)
    try:
        outcome = await importer.import_json(body)
    except ImportFormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return outcome.to_report()


@router.post("/", response_model=ClientResponse, status_code=201)
def create_client_with_tasks(
    body: ClientWithTasksCreate, client_service: ClientServiceDep
) -> ClientResponse:
    """Create a client and its tasks; id generated when omitted, 409 if taken."""
    return client_service.create_client_with_tasks(body)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: str, client_service: ClientServiceDep) -> ClientResponse:
    """Get single client with tasks."""
    return client_service.get_client(client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: str,
    body: ClientUpdate,
    client_service: ClientServiceDep,
) -> ClientResponse:
    """Update name, company, or origin."""
    return client_service.update_client(client_id, body)


@router.post("/{client_id}/tasks", response_model=TaskResponse, status_code=201)
def add_task(
    client_id: str,
    body: ClientTaskCreate,
    client_service: ClientServiceDep,
) -> TaskResponse:
    """Append a task to the client."""
    return client_service.add_task(client_id, body)


@router.patch("/{client_id}/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    client_id: str,
    task_id: uuid.UUID,
    body: ClientTaskUpdate,
    client_service: ClientServiceDep,
) -> TaskResponse:
    """Update a task; sla_date: null clears the SLA."""
    return client_service.update_task(client_id, task_id, body)


@router.delete(
    "/{client_id}/tasks/{task_id}", status_code=204, response_class=Response
)
def delete_task(
    client_id: str,
    task_id: uuid.UUID,
    client_service: ClientServiceDep,
) -> None:
    """Delete a task (clients themselves are never deleted)."""
    client_service.delete_task(client_id, task_id)
