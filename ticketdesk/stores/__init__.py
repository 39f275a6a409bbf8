"""Store selection from application config."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ticketdesk.stores.fallback import (
    FallbackEventStore,
    FallbackHook,
    FallbackPersonStore,
    FallbackRequestStore,
    FallbackWorkspaceStore,
)
from ticketdesk.stores.interfaces import EventStore, PersonStore, RequestStore, WorkspaceStore
from ticketdesk.stores.json_file import (
    JsonEventStore,
    JsonPersonStore,
    JsonRequestStore,
    JsonWorkspaceStore,
)
from ticketdesk.stores.memory import (
    MemoryEventStore,
    MemoryPersonStore,
    MemoryRequestStore,
    MemoryWorkspaceStore,
)
from ticketdesk.stores.sql import SqlEventStore, SqlPersonStore, SqlRequestStore, SqlWorkspaceStore

BACKENDS = ("sql", "json", "sql+json")


@dataclass(frozen=True)
class StoreBundle:
    events: EventStore
    people: PersonStore
    requests: RequestStore


def _backend(config: Mapping) -> str:
    backend = (config.get("PERSISTENCE_BACKEND") or "sql").lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown PERSISTENCE_BACKEND {backend!r}; expected one of {BACKENDS}")
    return backend


def build_stores(
    config: Mapping, workspace_id: str, on_fallback: FallbackHook | None = None
) -> StoreBundle:
    """Return the event/person/request stores for one workspace."""
    backend = _backend(config)
    local_dir = Path(config.get("LOCAL_STORE_PATH") or "instance/ticketdesk-data") / workspace_id

    if backend == "json":
        return StoreBundle(
            JsonEventStore(local_dir), JsonPersonStore(local_dir), JsonRequestStore(local_dir)
        )
    if backend == "sql":
        return StoreBundle(
            SqlEventStore(workspace_id), SqlPersonStore(workspace_id), SqlRequestStore(workspace_id)
        )
    return StoreBundle(
        FallbackEventStore(SqlEventStore(workspace_id), JsonEventStore(local_dir), on_fallback),
        FallbackPersonStore(SqlPersonStore(workspace_id), JsonPersonStore(local_dir), on_fallback),
        FallbackRequestStore(SqlRequestStore(workspace_id), JsonRequestStore(local_dir), on_fallback),
    )


def build_workspace_store(config: Mapping, on_fallback: FallbackHook | None = None) -> WorkspaceStore:
    backend = _backend(config)
    local_dir = Path(config.get("LOCAL_STORE_PATH") or "instance/ticketdesk-data")
    if backend == "json":
        return JsonWorkspaceStore(local_dir)
    if backend == "sql":
        return SqlWorkspaceStore()
    return FallbackWorkspaceStore(SqlWorkspaceStore(), JsonWorkspaceStore(local_dir), on_fallback)


__all__ = [
    "BACKENDS",
    "StoreBundle",
    "build_stores",
    "build_workspace_store",
    "EventStore",
    "PersonStore",
    "RequestStore",
    "WorkspaceStore",
    "MemoryEventStore",
    "MemoryPersonStore",
    "MemoryRequestStore",
    "MemoryWorkspaceStore",
    "JsonEventStore",
    "JsonPersonStore",
    "JsonRequestStore",
    "JsonWorkspaceStore",
    "SqlEventStore",
    "SqlPersonStore",
    "SqlRequestStore",
    "SqlWorkspaceStore",
    "FallbackEventStore",
    "FallbackPersonStore",
    "FallbackRequestStore",
    "FallbackWorkspaceStore",
]
