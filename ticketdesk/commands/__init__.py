"""CLI commands for ticketdesk."""

from .export import export_commands
from .seed import seed_commands
from .workspace import workspace_commands


def register_commands(app):
    """Register all CLI command groups with the Flask app."""
    app.cli.add_command(workspace_commands)
    app.cli.add_command(seed_commands)
    app.cli.add_command(export_commands)
