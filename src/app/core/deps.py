"""Central place for FastAPI dependencies and shared *Dep type aliases."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.client_api import LocalClientAPI
from app.services.clients import ClientService

SessionDep = Annotated[Session, Depends(get_db)]


def get_client_service(session: SessionDep) -> ClientService:
    """Provide ClientService for this request."""
    return ClientService(session)


ClientServiceDep = Annotated[ClientService, Depends(get_client_service)]


def get_client_api(client_service: ClientServiceDep) -> LocalClientAPI:
    """Provide the in-process ClientAPI used by import/export endpoints."""
    return LocalClientAPI(client_service)


ClientAPIDep = Annotated[LocalClientAPI, Depends(get_client_api)]
