"""Workspace management CLI commands."""

import click
from flask import current_app
from flask.cli import with_appcontext

from ticketdesk.domain import DomainError
from ticketdesk.services.workspace import DEFAULT_TEAMS, WorkspaceService
from ticketdesk.stores import build_workspace_store


def _service() -> WorkspaceService:
    return WorkspaceService(build_workspace_store(current_app.config))


@click.group('workspace')
def workspace_commands():
    """Workspace management commands."""
    pass


@workspace_commands.command('create')
@click.option('--key', 'access_key', required=True, help='Workspace access key')
@click.option('--custom', is_flag=True, help='Create a custom workspace instead of the default catalog')
@click.option('--org', 'organization_name', help='Organization name (custom workspaces)')
@click.option('--team', 'teams', multiple=True,
              type=click.Choice([team.id for team in DEFAULT_TEAMS]),
              help='Team to enable (custom workspaces, repeatable)')
@with_appcontext
def create_workspace(access_key, custom, organization_name, teams):
    """Create a new workspace.

    Example:
        flask workspace create --key office-2024
        flask workspace create --key acme --custom --org "Acme Corp" --team nuggets --team broncos
    """
    service = _service()
    try:
        if service.get_workspace_by_key(access_key):
            click.echo(click.style(f'Error: Workspace key "{access_key}" is already in use', fg='red'))
            return

        if custom:
            if not organization_name:
                click.echo(click.style('Error: --org is required for custom workspaces', fg='red'))
                return
            workspace = service.create_custom_workspace(access_key, organization_name, teams)
        else:
            workspace = service.create_ftm_workspace(access_key)
    except DomainError as e:
        click.echo(click.style(f'Error creating workspace: {e}', fg='red'))
        return

    click.echo(click.style('✓ Workspace created successfully!', fg='green'))
    click.echo(f'  Name: {workspace.name}')
    click.echo(f'  Organization: {workspace.organization_name}')
    click.echo(f'  ID: {workspace.id}')
    click.echo(f'  Teams: {", ".join(t.id for t in workspace.enabled_teams())}')


@workspace_commands.command('list')
@with_appcontext
def list_workspaces():
    """List all workspaces."""
    workspaces = _service().list_workspaces()
    if not workspaces:
        click.echo('No workspaces found.')
        return

    click.echo(f'Found {len(workspaces)} workspace(s):\n')
    for workspace in workspaces:
        click.echo(f'  {workspace.organization_name} ({workspace.type.value})')
        click.echo(f'    ID: {workspace.id}')
        click.echo(f'    Seasons: {", ".join(workspace.seasons()) or "-"}')
        click.echo('')


@workspace_commands.command('refresh-catalog')
@click.option('--key', 'access_key', required=True, help='Workspace access key')
@with_appcontext
def refresh_catalog(access_key):
    """Reset default seat names and this season's ticket values."""
    service = _service()
    workspace = service.get_workspace_by_key(access_key)
    if workspace is None:
        click.echo(click.style(f'Error: Workspace "{access_key}" not found', fg='red'))
        return

    workspace = service.refresh_default_catalog(workspace.id)
    click.echo(click.style('✓ Catalog refreshed', fg='green'))
    click.echo(f'  Ticket values: {len(workspace.ticket_values)}')
