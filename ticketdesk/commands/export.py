"""Workspace export CLI commands."""

from datetime import datetime
from pathlib import Path

import click
from flask import current_app
from flask.cli import with_appcontext

from ticketdesk.services.export_import import ExportImportService
from ticketdesk.services.workspace import WorkspaceService
from ticketdesk.stores import build_stores, build_workspace_store


@click.group('export')
def export_commands():
    """Export commands."""
    pass


def ensure_export_dir(output_dir=None):
    """Ensure the export directory exists."""
    export_dir = Path(output_dir or 'exports')
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir


def generate_filename(workspace_name, data_type, extension='csv'):
    """Generate a filename for the export."""
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    safe_name = workspace_name.lower().replace(' ', '_').replace('/', '_')
    return f"{safe_name}_{data_type}_{timestamp}.{extension}"


@export_commands.command('all')
@click.option('--key', 'access_key', required=True, help='Workspace access key')
@click.option('--output-dir', help='Output directory (default: ./exports)')
@click.option('--format', 'fmt', type=click.Choice(['csv', 'xlsx']), default='csv', show_default=True)
@with_appcontext
def export_all(access_key, output_dir, fmt):
    """Export events, tickets, people, assignments and requests.

    Example:
        flask export all --key office-2024
        flask export all --key office-2024 --format xlsx --output-dir /tmp/exports
    """
    workspace = WorkspaceService(build_workspace_store(current_app.config)).get_workspace_by_key(access_key)
    if workspace is None:
        click.echo(click.style(f'Error: Workspace "{access_key}" not found', fg='red'))
        return

    stores = build_stores(current_app.config, workspace.id)
    events = stores.events.list_events()
    people = stores.people.list_people()
    requests = stores.requests.list_requests()
    export_dir = ensure_export_dir(output_dir)

    for kind in ExportImportService.EXPORTABLE_FIELDS:
        payload = ExportImportService.export_kind(
            kind, fmt, workspace=workspace, events=events, people=people, requests=requests
        )
        path = export_dir / generate_filename(workspace.organization_name or workspace.name, kind, fmt)
        if isinstance(payload, bytes):
            path.write_bytes(payload)
        else:
            path.write_text(payload, encoding='utf-8')
        click.echo(click.style(f'✓ Exported {kind} to {path}', fg='green'))
