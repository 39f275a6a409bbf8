"""create workspace, event, ticket, people and request tables

Revision ID: ticketdesk_initial
Revises:
Create Date: 2025-09-01 12:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'ticketdesk_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade():
    op.create_table(
        'workspaces',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('organization_name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('access_key', sa.String(length=255), nullable=False),
        sa.Column('teams', sa.JSON(), nullable=False),
        sa.Column('ticket_values', sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_workspaces_access_key', 'workspaces', ['access_key'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('workspace_id', sa.String(length=36), nullable=False),
        sa.Column('team_id', sa.String(length=64), nullable=False),
        sa.Column('opponent', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.Time(), nullable=False),
        sa.Column('is_playoff', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_workspace_date', 'events', ['workspace_id', 'date'], unique=False)

    op.create_table(
        'tickets',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('event_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('seat_type', sa.String(length=255), nullable=False),
        sa.Column('custom_name', sa.String(length=255), nullable=True),
        sa.Column('section', sa.String(length=64), nullable=True),
        sa.Column('row', sa.String(length=64), nullable=True),
        sa.Column('seat', sa.String(length=64), nullable=True),
        sa.Column('value', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('source', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('assigned_to', sa.String(length=255), nullable=True),
        sa.Column('assigned_company', sa.String(length=255), nullable=True),
        sa.Column('assignment_type', sa.String(length=16), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('parking', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tickets_event_id', 'tickets', ['event_id'], unique=False)

    op.create_table(
        'people',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('workspace_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_people_workspace_id', 'people', ['workspace_id'], unique=False)

    op.create_table(
        'assignment_history',
        sa.Column('id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.Column('person_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('event_id', sa.String(length=36), nullable=False),
        sa.Column('event_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('date', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('seat_type', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('assignment_type', sa.String(length=16), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['person_id'], ['people.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_assignment_history_person_id', 'assignment_history', ['person_id'], unique=False)

    op.create_table(
        'ticket_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('workspace_id', sa.String(length=36), nullable=False),
        sa.Column('event_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('user_company', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('user_phone', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('priority', sa.String(length=16), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('requested_quantities', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_by', sa.String(length=255), nullable=True),
        sa.Column('assigned_ticket_id', sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ticket_requests_workspace_id', 'ticket_requests', ['workspace_id'], unique=False)
    op.create_index('ix_ticket_requests_event_id', 'ticket_requests', ['event_id'], unique=False)
    op.create_index('ix_ticket_requests_user_id', 'ticket_requests', ['user_id'], unique=False)


def downgrade():
    op.drop_table('ticket_requests')
    op.drop_table('assignment_history')
    op.drop_table('people')
    op.drop_table('tickets')
    op.drop_table('events')
    op.drop_index('ix_workspaces_access_key', table_name='workspaces')
    op.drop_table('workspaces')
