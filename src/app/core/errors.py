"""Errors raised by the dashboard core (importer, exporter, API clients)."""


class DashboardError(Exception):
    """Base class for dashboard core errors."""


class ImportFormatError(DashboardError):
    """Import document is not valid JSON or its top level is not an array."""


class ClientValidationError(DashboardError):
    """A client record is missing one of its required fields."""


class ClientNotFoundError(DashboardError):
    """Lookup of a client id found nothing."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Client not found: {client_id}")
        self.client_id = client_id


class BackendError(DashboardError):
    """The backend rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ImportFileError(DashboardError):
    """The import file could not be read."""


class ExportError(DashboardError):
    """Fetching or serializing the export snapshot failed."""
