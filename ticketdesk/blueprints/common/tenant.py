"""Workspace (tenant) resolution and per-request service wiring."""

from __future__ import annotations

from functools import wraps

from flask import abort, current_app, g, request

from ticketdesk.domain import Workspace
from ticketdesk.services.events import EventInventory
from ticketdesk.services.people import PersonDirectory
from ticketdesk.services.requests import RequestQueue
from ticketdesk.services.workspace import WorkspaceService
from ticketdesk.stores import StoreBundle, build_stores, build_workspace_store


def init_tenant(app) -> None:
    """Register workspace resolution hooks with the Flask app."""

    @app.before_request
    def _load_workspace() -> None:
        resolve_workspace()


def workspace_service() -> WorkspaceService:
    if "workspace_service" not in g:
        store = build_workspace_store(
            current_app.config, current_app.config.get("STORE_FALLBACK_HOOK")
        )
        g.workspace_service = WorkspaceService(store)
    return g.workspace_service


def resolve_workspace() -> Workspace | None:
    """Resolve the active workspace from the request.

    Order:
    1) X-Workspace-Key header
    2) Query param ?key=
    3) DEFAULT_WORKSPACE_KEY from config

    The key is an opaque tenant identifier compared in cleartext; it is not
    an authentication mechanism.
    """

    key = request.headers.get("X-Workspace-Key")
    if not key:
        key = request.args.get("key")
    if not key:
        key = current_app.config.get("DEFAULT_WORKSPACE_KEY")

    workspace = workspace_service().get_workspace_by_key(key.strip()) if key else None
    g.workspace = workspace
    # Stores are bound to one workspace
    g.pop("workspace_stores", None)
    return workspace


def workspace_required(view):
    """Ensure a workspace is loaded before executing the view."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if getattr(g, "workspace", None) is None:
            abort(404)
        return view(*args, **kwargs)

    return wrapped


def workspace_stores() -> StoreBundle:
    """Stores for the current workspace, built once per request."""
    workspace = getattr(g, "workspace", None)
    if workspace is None:
        raise RuntimeError("Workspace context has not been resolved")
    if "workspace_stores" not in g:
        g.workspace_stores = build_stores(
            current_app.config, workspace.id, current_app.config.get("STORE_FALLBACK_HOOK")
        )
    return g.workspace_stores


def inventory() -> EventInventory:
    return EventInventory(workspace_stores().events, workspace=g.workspace)


def directory() -> PersonDirectory:
    stores = workspace_stores()
    return PersonDirectory(stores.people, event_store=stores.events)


def request_queue() -> RequestQueue:
    return RequestQueue(workspace_stores().requests)


__all__ = [
    "init_tenant",
    "resolve_workspace",
    "workspace_required",
    "workspace_service",
    "workspace_stores",
    "inventory",
    "directory",
    "request_queue",
]
