"""Shared service logic."""

from sqlalchemy.orm import Session

from app.core.logging import get_logger


class BaseService:
    """Base service with session injection and a per-service logger."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.log = get_logger(f"services.{type(self).__name__}")
