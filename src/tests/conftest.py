"""Pytest fixtures."""

import tempfile
import uuid
from collections.abc import Generator
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from app.core.errors import BackendError, ClientNotFoundError
from app.db.schema import Base
from app.db.session import get_db
from app.main import app
from app.models.client import ClientCreate, ClientResponse
from app.models.task import ClientTaskCreate, TaskResponse
from app.services.clients import ClientService

FIXED_TODAY = date(2024, 3, 13)  # a Wednesday


@pytest.fixture
def test_engine() -> Generator[Engine, None, None]:
    """Fresh SQLite file per test so tests don't share state."""
    from app.core.config import settings

    if not settings.database_url.startswith("sqlite"):
        pytest.skip(
            "test_engine only supports SQLite (use test DB URL in CI)")

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        test_db_path = Path(f.name)
    engine = create_engine(
        f"sqlite:///{test_db_path}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()
        try:
            test_db_path.unlink(missing_ok=True)
        except OSError:
            pass


@pytest.fixture
def override_db(test_engine: Engine) -> Generator[None, None, None]:
    """Point the app's get_db dependency at the test engine."""

    def override_get_db() -> Generator[Session, None, None]:
        with Session(test_engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client_with_test_db(override_db: None) -> TestClient:
    """FastAPI test client backed by the isolated SQLite DB."""
    return TestClient(app)


@pytest.fixture
def client_service(test_engine: Engine) -> Generator[ClientService, None, None]:
    with Session(test_engine) as session:
        yield ClientService(session)


class FakeClientAPI:
    """In-memory ClientAPI that records every call."""

    def __init__(self) -> None:
        self.clients: dict[str, ClientResponse] = {}
        self.lookups: list[str] = []
        self.created: list[tuple[ClientCreate, list[ClientTaskCreate]]] = []
        self.fail_create_for: set[str] = set()
        self.fail_lookup_with: Exception | None = None
        self.fail_list = False
        self.fail_list_with: Exception | None = None

    def add(self, client: ClientCreate, tasks: list[ClientTaskCreate]) -> ClientResponse:
        response = ClientResponse(
            id=client.id,
            name=client.name,
            company=client.company,
            origin=client.origin,
            tasks=[
                TaskResponse(
                    id=uuid.uuid4(),
                    date=date.fromisoformat(t.date),
                    description=t.description,
                    status=t.status,
                    priority=t.priority,
                    sla_date=date.fromisoformat(t.sla_date) if t.sla_date else None,
                )
                for t in tasks
            ],
        )
        self.clients[response.id] = response
        return response

    async def get_clients(self) -> list[ClientResponse]:
        if self.fail_list:
            raise BackendError("backend down", status_code=503)
        if self.fail_list_with is not None:
            raise self.fail_list_with
        return list(self.clients.values())

    async def get_all_clients(self) -> list[ClientResponse]:
        return await self.get_clients()

    async def get_client(self, client_id: str) -> ClientResponse:
        self.lookups.append(client_id)
        if self.fail_lookup_with is not None:
            raise self.fail_lookup_with
        if client_id not in self.clients:
            raise ClientNotFoundError(client_id)
        return self.clients[client_id]

    async def create_client_with_tasks(
        self, client: ClientCreate, tasks: list[ClientTaskCreate]
    ) -> None:
        if client.name in self.fail_create_for:
            raise BackendError("database is locked", status_code=500)
        self.created.append((client, tasks))
        self.add(client, tasks)


@pytest.fixture
def fake_api() -> FakeClientAPI:
    return FakeClientAPI()


@pytest.fixture
def today() -> date:
    return FIXED_TODAY
