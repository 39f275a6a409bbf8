"""Data seeding CLI commands."""

import random
from datetime import date, time, timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from ticketdesk.domain import AssignmentType
from ticketdesk.services.assignments import assign_ticket
from ticketdesk.services.events import EventInventory
from ticketdesk.services.people import PersonDirectory
from ticketdesk.services.workspace import WorkspaceService
from ticketdesk.stores import build_stores, build_workspace_store

OPPONENTS = ['Lakers', 'Celtics', 'Blackhawks', 'Chiefs', 'Raiders', 'Stars', 'Jazz', 'Kings']
HOLDERS = [
    ('Jane Doe', 'Acme'),
    ('John Smith', 'Globex'),
    ('Maria Garcia', 'Initech'),
    ('Sam Lee', ''),
]


@click.group('seed')
def seed_commands():
    """Data seeding commands."""
    pass


@seed_commands.command('demo')
@click.option('--key', 'access_key', required=True, help='Workspace access key to seed')
@click.option('--events', 'event_count', default=6, help='Number of events to create (default: 6)')
@click.option('--seed', 'random_seed', type=int, help='Random seed for repeatable data')
@with_appcontext
def seed_demo(access_key, event_count, random_seed):
    """Seed demo events and assignments for a workspace.

    Creates upcoming events for the enabled teams and assigns a few tickets,
    confirming some sales so the reports have data.

    Example:
        flask seed demo --key office-2024 --events 10
    """
    rng = random.Random(random_seed)
    workspace = WorkspaceService(build_workspace_store(current_app.config)).get_workspace_by_key(access_key)
    if workspace is None:
        click.echo(click.style(f'Error: Workspace "{access_key}" not found', fg='red'))
        return
    teams = workspace.enabled_teams()
    if not teams:
        click.echo(click.style('Error: Workspace has no enabled teams', fg='red'))
        return

    stores = build_stores(current_app.config, workspace.id)
    inventory = EventInventory(stores.events, workspace=workspace)
    directory = PersonDirectory(stores.people, event_store=stores.events)

    assigned = 0
    start = date.today() + timedelta(days=3)
    for index in range(event_count):
        team = teams[index % len(teams)]
        event = inventory.create_event({
            'team_id': team.id,
            'opponent': rng.choice(OPPONENTS),
            'date': start + timedelta(days=index * 4),
            'time': time(19, 0),
            'is_playoff': index == event_count - 1,
        })
        for ticket in event.tickets[: rng.randint(0, len(event.tickets))]:
            name, company = rng.choice(HOLDERS)
            assignment_type = rng.choice(list(AssignmentType))
            assign_ticket(inventory, directory, event.id, ticket.id, {
                'assigned_to': name,
                'assigned_company': company,
                'assignment_type': assignment_type,
            })
            if rng.random() < 0.6:
                assign_ticket(inventory, directory, event.id, ticket.id, {
                    'confirmed': True,
                    'status': 'confirmed',
                })
            assigned += 1

    click.echo(click.style('✓ Demo data created', fg='green'))
    click.echo(f'  Events: {event_count}')
    click.echo(f'  Assigned tickets: {assigned}')
