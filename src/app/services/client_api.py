"""Client API abstraction: protocol + HTTP and in-process implementations.

The dashboard core (importer, exporter, dashboard state) only talks to this
protocol:
- HttpClientAPI:  REST calls against a running backend (GET/POST /api/clients...)
- LocalClientAPI: same contract over ClientService, used by the backend's own
                  import/export endpoints
"""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

import httpx
from fastapi import HTTPException
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.core.errors import BackendError, ClientNotFoundError
from app.models.client import ClientCreate, ClientResponse, ClientWithTasksCreate
from app.models.task import ClientTaskCreate
from app.services.clients import CLIENT_NOT_FOUND, ClientService

_CLIENT = TypeAdapter(ClientResponse)
_CLIENT_LIST = TypeAdapter(list[ClientResponse])


class ClientAPI(Protocol):
    """Collaborator operations the dashboard core depends on."""

    async def get_clients(self) -> list[ClientResponse]: ...

    async def get_client(self, client_id: str) -> ClientResponse: ...

    async def get_all_clients(self) -> list[ClientResponse]: ...

    async def create_client_with_tasks(
        self, client: ClientCreate, tasks: list[ClientTaskCreate]
    ) -> None: ...


def _error_detail(resp: httpx.Response) -> str:
    """Pull FastAPI's `detail` out of an error response, falling back to the body text."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        # 422 from request validation: list of {loc, msg, ...}
        return "; ".join(str(d.get("msg", d)) for d in detail if isinstance(d, dict))
    if detail:
        return str(detail)
    return f"Backend returned {resp.status_code}: {resp.text[:200] if resp.text else 'unknown error'}"


def _decode(resp: httpx.Response, adapter: TypeAdapter):
    """Parse a success body; malformed JSON or an unexpected shape is a BackendError."""
    try:
        return adapter.validate_json(resp.content)
    except ValidationError as e:
        first = e.errors()[0]
        raise BackendError(
            f"Unexpected response from backend: {first['msg']}",
            status_code=resp.status_code,
        ) from e


class HttpClientAPI:
    """Calls the backend REST API with httpx.AsyncClient."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self._base_url}/api{path}"
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._timeout
            ) as client:
                resp = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            err_msg = str(e).strip() or type(e).__name__
            raise BackendError(f"Request failed: {err_msg}") from e
        if resp.status_code >= 400:
            raise BackendError(_error_detail(resp), status_code=resp.status_code)
        return resp

    async def get_clients(self) -> list[ClientResponse]:
        resp = await self._request("GET", "/clients/")
        return _decode(resp, _CLIENT_LIST)

    async def get_client(self, client_id: str) -> ClientResponse:
        try:
            resp = await self._request("GET", f"/clients/{quote(client_id, safe='')}")
        except BackendError as e:
            # Route misses also answer 404, with a different detail
            if e.status_code == 404 and str(e) == CLIENT_NOT_FOUND:
                raise ClientNotFoundError(client_id) from e
            raise
        return _decode(resp, _CLIENT)

    async def get_all_clients(self) -> list[ClientResponse]:
        resp = await self._request("GET", "/clients/all")
        return _decode(resp, _CLIENT_LIST)

    async def create_client_with_tasks(
        self, client: ClientCreate, tasks: list[ClientTaskCreate]
    ) -> None:
        body = ClientWithTasksCreate(client=client, tasks=tasks)
        await self._request("POST", "/clients/", json=body.model_dump(mode="json"))


class LocalClientAPI:
    """Same contract as HttpClientAPI, served directly by ClientService."""

    def __init__(self, service: ClientService) -> None:
        self._service = service

    async def get_clients(self) -> list[ClientResponse]:
        return [ClientResponse.model_validate(c) for c in self._service.get_clients()]

    async def get_client(self, client_id: str) -> ClientResponse:
        try:
            client = self._service.get_client(client_id)
        except HTTPException as e:
            if e.status_code == 404:
                raise ClientNotFoundError(client_id) from e
            raise BackendError(str(e.detail), status_code=e.status_code) from e
        return ClientResponse.model_validate(client)

    async def get_all_clients(self) -> list[ClientResponse]:
        return [
            ClientResponse.model_validate(c) for c in self._service.get_all_clients()
        ]

    async def create_client_with_tasks(
        self, client: ClientCreate, tasks: list[ClientTaskCreate]
    ) -> None:
        try:
            self._service.create_client_with_tasks(
                ClientWithTasksCreate(client=client, tasks=tasks)
            )
        except HTTPException as e:
            raise BackendError(str(e.detail), status_code=e.status_code) from e


def build_client_api(
    *,
    base_url: str | None = None,
    timeout: float | None = None,
) -> HttpClientAPI:
    """Factory: HTTP client configured from settings unless overridden."""
    return HttpClientAPI(
        base_url=base_url or settings.api_base_url,
        timeout=settings.api_timeout if timeout is None else timeout,
    )
