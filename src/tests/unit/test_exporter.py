"""Unit tests for the JSON exporter."""

import asyncio
import json
from datetime import date
from pathlib import Path

import pytest

from app.core.errors import ExportError
from app.models.client import ClientCreate
from app.models.task import ClientTaskCreate
from app.services.exporter import build_export, export_filename, export_to_directory


def _seed(fake_api) -> None:
    fake_api.add(
        ClientCreate(id="CL-1", name="Alice", company="Acme", origin="web"),
        [
            ClientTaskCreate(
                date="2024-03-01",
                description="Kickoff",
                status="in progress",
                priority="high",
                sla_date="2024-03-08",
            )
        ],
    )
    fake_api.add(ClientCreate(id="CL-2", name="Bob", company="Beta", origin="email"), [])


def test_export_filename_embeds_date() -> None:
    assert export_filename(date(2024, 3, 13)) == "all_clients_2024-03-13.json"


def test_build_export_uses_import_shape(fake_api, today: date) -> None:
    _seed(fake_api)
    document = asyncio.run(build_export(fake_api, today=lambda: today))
    assert document.filename == "all_clients_2024-03-13.json"
    assert document.client_count == 2
    assert document.content.startswith('[\n  {\n    "id": "CL-1"')
    data = json.loads(document.content)
    assert data[0] == {
        "id": "CL-1",
        "name": "Alice",
        "company": "Acme",
        "origin": "web",
        "tasks": [
            {
                "date": "2024-03-01",
                "description": "Kickoff",
                "status": "in progress",
                "priority": "high",
                "sla_date": "2024-03-08",
            }
        ],
    }
    assert data[1]["tasks"] == []


def test_export_to_directory_writes_file(fake_api, today: date, tmp_path: Path) -> None:
    _seed(fake_api)
    target = asyncio.run(export_to_directory(fake_api, tmp_path, today=lambda: today))
    assert target == tmp_path / "all_clients_2024-03-13.json"
    assert [c["id"] for c in json.loads(target.read_text())] == ["CL-1", "CL-2"]


def test_export_failure_writes_nothing(fake_api, today: date, tmp_path: Path) -> None:
    fake_api.fail_list = True
    with pytest.raises(ExportError):
        asyncio.run(export_to_directory(fake_api, tmp_path, today=lambda: today))
    assert list(tmp_path.iterdir()) == []
