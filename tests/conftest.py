from datetime import datetime, timezone

import pytest

from ticketdesk import create_app
from ticketdesk.config import TestingConfig
from ticketdesk.extensions import db
from ticketdesk.services.events import EventInventory
from ticketdesk.services.people import PersonDirectory
from ticketdesk.services.requests import RequestQueue
from ticketdesk.services.workspace import WorkspaceService
from ticketdesk.stores import (
    MemoryEventStore,
    MemoryPersonStore,
    MemoryRequestStore,
    MemoryWorkspaceStore,
)

# Mid-October 2025: season 2025-2026, noon Mountain Daylight Time
FIXED_NOW = datetime(2025, 10, 15, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def app(tmp_path):
    """Create and configure a test application instance."""

    class Config(TestingConfig):
        LOCAL_STORE_PATH = str(tmp_path / "local")

    app = create_app(Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def workspace_service(clock):
    return WorkspaceService(MemoryWorkspaceStore(), clock)


@pytest.fixture
def ftm_workspace(workspace_service):
    return workspace_service.create_ftm_workspace("office-key")


@pytest.fixture
def event_store():
    return MemoryEventStore()


@pytest.fixture
def inventory(event_store, ftm_workspace, clock):
    return EventInventory(event_store, workspace=ftm_workspace, clock=clock)


@pytest.fixture
def directory(event_store, clock):
    return PersonDirectory(MemoryPersonStore(), event_store=event_store, clock=clock)


@pytest.fixture
def queue(clock):
    return RequestQueue(MemoryRequestStore(), clock=clock)


@pytest.fixture
def nuggets_event(inventory):
    return inventory.create_event(
        {"team_id": "nuggets", "opponent": "Lakers", "date": "2025-11-20", "time": "19:00"}
    )
