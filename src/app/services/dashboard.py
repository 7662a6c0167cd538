"""Dashboard view state: client cache, filter criteria, import/export actions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

from app.core.errors import DashboardError, ExportError, ImportFileError
from app.core.logging import get_logger
from app.models.client import ClientResponse
from app.models.filters import ClientFilters
from app.models.report import ClientStats
from app.services import filters as filter_engine
from app.services.client_api import ClientAPI
from app.services.exporter import export_to_directory
from app.services.importer import ClientImporter, ImportOutcome
from app.services.stats import compute_stats

LOG = get_logger("dashboard")

FETCH_ERROR = "Failed to fetch clients"
READ_ERROR = "Error reading file"


class Dashboard:
    """
    Owns the in-memory client list and the current filters.

    The list is only ever replaced wholesale by refresh(); user-facing
    messages go through `notify` (defaults to logging them).
    """

    def __init__(
        self,
        api: ClientAPI,
        *,
        notify: Callable[[str], None] | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._api = api
        self._notify = notify or (lambda message: LOG.info("%s", message))
        self._today = today
        self.clients: list[ClientResponse] = []
        self.filters = ClientFilters()
        self.error: str | None = None
        self.is_importing = False

    async def refresh(self) -> None:
        try:
            clients = await self._api.get_clients()
        except Exception as e:
            self.error = FETCH_ERROR
            LOG.error("Error fetching clients: %s", e)
            return
        self.clients = clients
        self.error = None

    @property
    def visible_clients(self) -> list[ClientResponse]:
        return filter_engine.filter_clients(self.clients, self.filters, self._today())

    @property
    def stats(self) -> ClientStats:
        return compute_stats(self.clients)

    def update_filters(self, **changes) -> ClientFilters:
        # Re-validate so bad values fail here rather than at filter time
        self.filters = ClientFilters.model_validate(
            {**self.filters.model_dump(), **changes}
        )
        return self.filters

    def apply_quick_filter(self, name: str) -> ClientFilters:
        self.filters = filter_engine.apply_quick_filter(self.filters, name)
        return self.filters

    def clear_date_filter(self) -> ClientFilters:
        return self.update_filters(date_start=None, date_end=None)

    async def import_file(self, path: str | Path) -> ImportOutcome | None:
        """Read and import a JSON file; returns None when the import aborted."""
        self.is_importing = True
        try:
            try:
                document = Path(path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ImportFileError(READ_ERROR) from e
            importer = ClientImporter(self._api, refresh=self.refresh, today=self._today)
            outcome = await importer.import_json(document)
        except DashboardError as e:
            LOG.error("Error processing JSON: %s", e)
            self._notify(str(e))
            return None
        finally:
            self.is_importing = False
        self._notify(outcome.summary())
        return outcome

    async def export_to(self, directory: str | Path) -> Path | None:
        try:
            return await export_to_directory(self._api, directory, today=self._today)
        except ExportError:
            self._notify("Failed to export data")
            return None
