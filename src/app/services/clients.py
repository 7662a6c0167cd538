"""Client service: list, lookup, create-with-tasks, update, task CRUD."""

import random
import string
import time
import uuid
from datetime import date

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import selectinload

from app.db.schema import Client, ClientTask
from app.models.client import ClientUpdate, ClientWithTasksCreate
from app.models.task import ClientTaskCreate, ClientTaskUpdate
from app.services.base import BaseService

CLIENT_ID_PREFIX = "CL"
CLIENT_NOT_FOUND = "Client not found"
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_client_id() -> str:
    """CL-<epoch millis>-<9 base36 chars>; collisions are not checked."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{CLIENT_ID_PREFIX}-{millis}-{suffix}"


class ClientService(BaseService):
    @staticmethod
    def _parse_date(s: str | None) -> date | None:
        if not s:
            return None
        return date.fromisoformat(s)

    def _build_task(self, data: ClientTaskCreate, position: int) -> ClientTask:
        return ClientTask(
            date=self._parse_date(data.date),
            description=data.description,
            status=data.status,
            priority=data.priority,
            sla_date=self._parse_date(data.sla_date),
            position=position,
        )

    def _client_query(self, session):
        return session.query(Client).options(selectinload(Client.tasks))

    def _get_client_or_404(self, session, client_id: str) -> Client:
        client = (
            self._client_query(session).filter(Client.id == client_id).first()
        )
        if not client:
            raise HTTPException(status_code=404, detail=CLIENT_NOT_FOUND)
        return client

    def _get_task_or_404(
        self, session, client_id: str, task_id: uuid.UUID
    ) -> ClientTask:
        task = (
            session.query(ClientTask)
            .filter(ClientTask.id == task_id, ClientTask.client_id == client_id)
            .first()
        )
        if not task:
            raise HTTPException(status_code=404, detail="Task not found")
        return task

    def get_clients(self) -> list[Client]:
        """Clients in creation order with their tasks."""
        with self.session as session:
            q = (
                self._client_query(session)
                .order_by(Client.created_at.asc(), Client.id.asc())
            )
            return list(q.all())

    def get_all_clients(self) -> list[Client]:
        """Authoritative full snapshot (no paging)."""
        return self.get_clients()

    def get_client(self, client_id: str) -> Client:
        with self.session as session:
            return self._get_client_or_404(session, client_id)

    def create_client_with_tasks(self, data: ClientWithTasksCreate) -> Client:
        with self.session as session:
            client_id = data.client.id or generate_client_id()
            exists = session.query(Client.id).filter(Client.id == client_id).first()
            if exists:
                raise HTTPException(
                    status_code=409,
                    detail=f"Client already exists: {client_id}",
                )
            client = Client(
                id=client_id,
                name=data.client.name,
                company=data.client.company,
                origin=data.client.origin,
            )
            client.tasks = [
                self._build_task(task, position)
                for position, task in enumerate(data.tasks)
            ]
            session.add(client)
            session.commit()
            self.log.info(
                "Created client %s with %d tasks", client_id, len(data.tasks)
            )
            return self._get_client_or_404(session, client_id)

    def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        with self.session as session:
            client = self._get_client_or_404(session, client_id)
            for key, value in data.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(client, key, value)
            session.commit()
            return self._get_client_or_404(session, client_id)

    def add_task(self, client_id: str, data: ClientTaskCreate) -> ClientTask:
        with self.session as session:
            self._get_client_or_404(session, client_id)
            max_position = (
                session.query(func.max(ClientTask.position))
                .filter(ClientTask.client_id == client_id)
                .scalar()
            )
            next_position = 0 if max_position is None else max_position + 1
            task = self._build_task(data, next_position)
            task.client_id = client_id
            session.add(task)
            session.commit()
            session.refresh(task)
            return task

    def update_task(
        self, client_id: str, task_id: uuid.UUID, data: ClientTaskUpdate
    ) -> ClientTask:
        with self.session as session:
            task = self._get_task_or_404(session, client_id, task_id)
            update_data = data.model_dump(exclude_unset=True)
            for key, value in update_data.items():
                # Explicit null clears sla_date; other fields ignore nulls
                if value is None and key != "sla_date":
                    continue
                if key in ("date", "sla_date"):
                    value = self._parse_date(value)
                setattr(task, key, value)
            session.commit()
            session.refresh(task)
            return task

    def delete_task(self, client_id: str, task_id: uuid.UUID) -> None:
        with self.session as session:
            task = self._get_task_or_404(session, client_id, task_id)
            session.delete(task)
            session.commit()
