"""Workspace-scoped JSON API blueprint."""

from __future__ import annotations

from decimal import Decimal

from flask import Blueprint, Response, current_app, g, jsonify, request

from ticketdesk.blueprints.common.tenant import (
    directory,
    inventory,
    request_queue,
    workspace_required,
    workspace_service,
    workspace_stores,
)
from ticketdesk.domain import DomainError, DuplicateRequestError, Event, StoreError, WorkspaceType
from ticketdesk.domain.serialization import (
    event_to_dict,
    parse_bool,
    parse_date,
    parse_money,
    person_to_dict,
    request_to_dict,
    ticket_to_dict,
    workspace_to_dict,
)
from ticketdesk.extensions import limiter
from ticketdesk.services import analytics
from ticketdesk.services.assignments import assign_ticket
from ticketdesk.services.events import get_event_stats
from ticketdesk.services.export_import import ExportImportService

api_bp = Blueprint('api', __name__)

EXPORT_MIMETYPES = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
}


class InvalidInput(ValueError):
    pass


@api_bp.errorhandler(StoreError)
def handle_store_error(error: StoreError):
    return jsonify({'error': 'Storage is temporarily unavailable'}), 503


@api_bp.errorhandler(DomainError)
def handle_domain_error(error: DomainError):
    return jsonify({'error': error.message, 'code': error.code.value}), 409


@api_bp.errorhandler(ValueError)
def handle_value_error(error: ValueError):
    return jsonify({'error': str(error) or 'Invalid request'}), 400


def _body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput('Expected a JSON object body')
    return data


def _require(data: dict, *fields: str) -> None:
    missing = [f for f in fields if data.get(f) in (None, '')]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")


def _non_negative(data: dict, *fields: str) -> None:
    for field in fields:
        if data.get(field) not in (None, '') and parse_money(data[field]) < Decimal('0'):
            raise InvalidInput(f'{field} must not be negative')


def _optional_date(name: str):
    value = request.args.get(name)
    return parse_date(value) if value else None


def serialize_event(event: Event) -> dict:
    data = event_to_dict(event)
    data['team_name'] = g.workspace.team_name(event.team_id)
    data['stats'] = get_event_stats(event)
    return data


# ---------------------------------------------------------------- workspace

@api_bp.route('/workspace', methods=['GET'])
@workspace_required
def get_workspace():
    return jsonify({'item': workspace_to_dict(g.workspace, include_key=False)})


@api_bp.route('/workspace', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('WORKSPACE_CREATE_LIMIT', '10 per hour'))
def create_workspace():
    data = _body()
    _require(data, 'access_key')
    service = workspace_service()
    access_key = str(data['access_key']).strip()
    if service.get_workspace_by_key(access_key) is not None:
        return jsonify({'error': 'Workspace key already in use'}), 409

    workspace_type = WorkspaceType(data.get('type') or WorkspaceType.FTM.value)
    if workspace_type is WorkspaceType.FTM:
        workspace = service.create_ftm_workspace(access_key)
    else:
        _require(data, 'organization_name')
        workspace = service.create_custom_workspace(
            access_key,
            data['organization_name'],
            data.get('selected_teams') or [],
            data.get('custom_seat_types') or {},
        )
    return jsonify({'item': workspace_to_dict(workspace, include_key=False)}), 201


@api_bp.route('/workspace', methods=['PATCH'])
@workspace_required
def update_workspace():
    workspace = workspace_service().update_workspace(g.workspace.id, _body())
    return jsonify({'item': workspace_to_dict(workspace, include_key=False)})


@api_bp.route('/workspace/ticket-values', methods=['PUT'])
@workspace_required
def set_ticket_value():
    data = _body()
    _require(data, 'team_id', 'seat_type', 'value')
    _non_negative(data, 'value')
    workspace = workspace_service().set_ticket_value(
        g.workspace.id,
        data['team_id'],
        data['seat_type'],
        data['value'],
        season=data.get('season'),
        source=data.get('source'),
    )
    return jsonify({'item': workspace_to_dict(workspace, include_key=False)})


@api_bp.route('/workspace/seasons', methods=['POST'])
@workspace_required
def create_season():
    data = _body()
    _require(data, 'season')
    workspace = workspace_service().create_season(g.workspace.id, data['season'])
    if workspace is None:
        return jsonify({'error': 'Season already exists'}), 409
    return jsonify({'item': workspace_to_dict(workspace, include_key=False)}), 201


@api_bp.route('/workspace/refresh-catalog', methods=['POST'])
@workspace_required
def refresh_catalog():
    workspace = workspace_service().refresh_default_catalog(g.workspace.id)
    return jsonify({'item': workspace_to_dict(workspace, include_key=False)})


# ---------------------------------------------------------------- events

@api_bp.route('/events', methods=['GET'])
@workspace_required
def list_events():
    events = inventory().get_filtered_events(
        search=request.args.get('search'),
        team_id=request.args.get('team_id'),
        show_past_events=parse_bool(request.args.get('show_past', 'false')),
    )
    return jsonify({'items': [serialize_event(e) for e in events.sorted()]})


@api_bp.route('/events', methods=['POST'])
@workspace_required
def create_event():
    data = _body()
    _require(data, 'team_id', 'opponent', 'date', 'time')
    if g.workspace.teams and g.workspace.get_team(data['team_id']) is None:
        raise InvalidInput(f"Unknown team {data['team_id']}")
    event = inventory().create_event(data, fallback_seat_types=data.get('seat_types') or ())
    return jsonify({'item': serialize_event(event)}), 201


@api_bp.route('/events/<event_id>', methods=['GET'])
@workspace_required
def get_event(event_id: str):
    event = inventory().get_event(event_id)
    if event is None:
        return jsonify({'error': 'Event not found'}), 404
    return jsonify({'item': serialize_event(event)})


@api_bp.route('/events/<event_id>', methods=['PATCH'])
@workspace_required
def update_event(event_id: str):
    event = inventory().update_event(event_id, _body())
    if event is None:
        return jsonify({'error': 'Event not found'}), 404
    return jsonify({'item': serialize_event(event)})


@api_bp.route('/events/<event_id>', methods=['DELETE'])
@workspace_required
def delete_event(event_id: str):
    if not inventory().delete_event(event_id):
        return jsonify({'error': 'Event not found'}), 404
    return jsonify({'deleted': True})


@api_bp.route('/events/<event_id>/stats', methods=['GET'])
@workspace_required
def event_stats(event_id: str):
    event = inventory().get_event(event_id)
    if event is None:
        return jsonify({'error': 'Event not found'}), 404
    return jsonify({'item': get_event_stats(event)})


@api_bp.route('/events/<event_id>/tickets', methods=['POST'])
@workspace_required
def add_ticket(event_id: str):
    data = _body()
    _require(data, 'section', 'row', 'seat')
    _non_negative(data, 'value')
    ticket = inventory().add_custom_ticket(
        event_id, str(data['section']), str(data['row']), str(data['seat']), data.get('value')
    )
    if ticket is None:
        return jsonify({'error': 'Event not found'}), 404
    return jsonify({'item': ticket_to_dict(ticket)}), 201


@api_bp.route('/events/<event_id>/tickets/bulk', methods=['POST'])
@workspace_required
def bulk_update_tickets(event_id: str):
    data = _body()
    ticket_ids = data.get('ticket_ids')
    changes = data.get('changes')
    if not isinstance(ticket_ids, list) or not ticket_ids or not isinstance(changes, dict):
        raise InvalidInput('ticket_ids (list) and changes (object) are required')
    _non_negative(changes, 'price', 'value')
    if inventory().get_event(event_id) is None:
        return jsonify({'error': 'Event not found'}), 404
    updated, errors = inventory().bulk_update_assignments(event_id, ticket_ids, changes)
    return jsonify({'updated': updated, 'errors': errors})


@api_bp.route('/events/<event_id>/tickets/<ticket_id>', methods=['PATCH'])
@workspace_required
def update_ticket(event_id: str, ticket_id: str):
    changes = _body()
    _non_negative(changes, 'price', 'value')
    ticket = assign_ticket(inventory(), directory(), event_id, ticket_id, changes)
    if ticket is None:
        return jsonify({'error': 'Ticket not found'}), 404
    return jsonify({'item': ticket_to_dict(ticket)})


@api_bp.route('/events/<event_id>/tickets/<ticket_id>', methods=['DELETE'])
@workspace_required
def delete_ticket(event_id: str, ticket_id: str):
    if not inventory().delete_ticket(event_id, ticket_id):
        return jsonify({'error': 'Ticket not found'}), 404
    return jsonify({'deleted': True})


# ---------------------------------------------------------------- people

@api_bp.route('/people', methods=['GET'])
@workspace_required
def list_people():
    query = request.args.get('q')
    people = directory().search_people(query) if query else directory().list_people()
    return jsonify({'items': [person_to_dict(p) for p in people]})


@api_bp.route('/people', methods=['POST'])
@workspace_required
def upsert_person():
    data = _body()
    _require(data, 'name')
    person = directory().add_or_update_person(
        data['name'], data.get('company') or '', data.get('email'), data.get('phone')
    )
    return jsonify({'item': person_to_dict(person)})


@api_bp.route('/people/<person_id>', methods=['GET'])
@workspace_required
def get_person(person_id: str):
    person = directory().get_person(person_id)
    if person is None:
        return jsonify({'error': 'Person not found'}), 404
    return jsonify({'item': person_to_dict(person)})


@api_bp.route('/people/<person_id>', methods=['DELETE'])
@workspace_required
def delete_person(person_id: str):
    if not directory().delete_person(person_id):
        return jsonify({'error': 'Person not found'}), 404
    return jsonify({'deleted': True})


@api_bp.route('/people/<keep_id>/merge/<merge_id>', methods=['POST'])
@workspace_required
def merge_people(keep_id: str, merge_id: str):
    if not directory().merge_people(keep_id, merge_id):
        return jsonify({'error': 'People not found'}), 404
    return jsonify({'item': person_to_dict(directory().get_person(keep_id))})


# ---------------------------------------------------------------- requests

@api_bp.route('/requests', methods=['GET'])
@workspace_required
def list_requests():
    queue = request_queue()
    items = queue.list_requests(request.args.get('status') or None)
    if request.args.get('event_id'):
        items = [r for r in items if r.event_id == request.args['event_id']]
    if request.args.get('user_id'):
        items = [r for r in items if r.user_id == request.args['user_id']]
    return jsonify({'items': [request_to_dict(r) for r in items]})


@api_bp.route('/requests/stats', methods=['GET'])
@workspace_required
def request_stats():
    return jsonify({'item': request_queue().get_request_stats()})


@api_bp.route('/requests', methods=['POST'])
@workspace_required
def create_request():
    data = _body()
    _require(data, 'event_id', 'user_id', 'user_name')
    if inventory().get_event(data['event_id']) is None:
        return jsonify({'error': 'Event not found'}), 404
    queue = request_queue()
    if queue.has_user_requested_event(str(data['user_id']), str(data['event_id'])):
        raise DuplicateRequestError(str(data['user_id']), str(data['event_id']))
    ticket_request = queue.create_request(data)
    return jsonify({'item': request_to_dict(ticket_request)}), 201


@api_bp.route('/requests/<request_id>', methods=['GET'])
@workspace_required
def get_request(request_id: str):
    ticket_request = request_queue().get_request(request_id)
    if ticket_request is None:
        return jsonify({'error': 'Request not found'}), 404
    return jsonify({'item': request_to_dict(ticket_request)})


@api_bp.route('/requests/<request_id>', methods=['PATCH'])
@workspace_required
def update_request(request_id: str):
    data = _body()
    _require(data, 'status', 'processed_by')
    ticket_request = request_queue().update_request_status(
        request_id, data['status'], data['processed_by'], data.get('assigned_ticket_id')
    )
    if ticket_request is None:
        return jsonify({'error': 'Request not found'}), 404
    return jsonify({'item': request_to_dict(ticket_request)})


@api_bp.route('/requests/<request_id>', methods=['DELETE'])
@workspace_required
def delete_request(request_id: str):
    if not request_queue().delete_request(request_id):
        return jsonify({'error': 'Request not found'}), 404
    return jsonify({'deleted': True})


# ---------------------------------------------------------------- reports

@api_bp.route('/reports/revenue', methods=['GET'])
@workspace_required
def revenue_report():
    report = analytics.generate_revenue_report(
        workspace_stores().events.list_events(),
        start_date=_optional_date('start_date'),
        end_date=_optional_date('end_date'),
        team_ids=request.args.getlist('team_id'),
        team_names={team.id: team.name for team in g.workspace.teams},
    )
    return jsonify({'item': report})


@api_bp.route('/reports/assignments', methods=['GET'])
@workspace_required
def assignment_report():
    breakdown = analytics.generate_assignment_breakdown(
        workspace_stores().events.list_events(),
        start_date=_optional_date('start_date'),
        end_date=_optional_date('end_date'),
    )
    return jsonify({'item': breakdown})


@api_bp.route('/reports/top-holders', methods=['GET'])
@workspace_required
def top_holders_report():
    stores = workspace_stores()
    limit = request.args.get('limit', 10, type=int)
    holders = analytics.get_top_ticket_holders(
        stores.people.list_people(), stores.events.list_events(), limit=max(limit, 1)
    )
    return jsonify({'items': holders})


@api_bp.route('/reports/companies', methods=['GET'])
@workspace_required
def company_report():
    stores = workspace_stores()
    companies = analytics.get_company_analytics(
        stores.people.list_people(), stores.events.list_events()
    )
    return jsonify({'items': companies})


@api_bp.route('/reports/events', methods=['GET'])
@workspace_required
def event_report():
    return jsonify({'item': analytics.get_event_statistics(workspace_stores().events.list_events())})


@api_bp.route('/reports/requests', methods=['GET'])
@workspace_required
def request_report():
    stores = workspace_stores()
    stats = analytics.get_request_statistics(
        stores.requests.list_requests(), stores.events.list_events()
    )
    return jsonify({'item': stats})


# ---------------------------------------------------------------- export / import

@api_bp.route('/export/<kind>.<fmt>', methods=['GET'])
@workspace_required
def export_data(kind: str, fmt: str):
    if kind not in ExportImportService.EXPORTABLE_FIELDS or fmt not in EXPORT_MIMETYPES:
        return jsonify({'error': 'Unknown export'}), 404
    stores = workspace_stores()
    payload = ExportImportService.export_kind(
        kind,
        fmt,
        workspace=g.workspace,
        events=stores.events.list_events() if kind in ('events', 'tickets') else (),
        people=stores.people.list_people() if kind in ('people', 'assignments') else (),
        requests=stores.requests.list_requests() if kind == 'requests' else (),
    )
    return Response(
        payload,
        mimetype=EXPORT_MIMETYPES[fmt],
        headers={'Content-Disposition': f'attachment; filename={kind}.{fmt}'},
    )


@api_bp.route('/import/<kind>/template.csv', methods=['GET'])
@workspace_required
def import_template(kind: str):
    if kind not in ExportImportService.IMPORTABLE_FIELDS:
        return jsonify({'error': 'Unknown import'}), 404
    return Response(
        ExportImportService.template_csv(kind),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={kind}-template.csv'},
    )


@api_bp.route('/import/<kind>', methods=['POST'])
@workspace_required
def import_data(kind: str):
    if kind not in ExportImportService.IMPORTABLE_FIELDS:
        return jsonify({'error': 'Unknown import'}), 404
    upload = request.files.get('file')
    content = upload.read().decode('utf-8') if upload else request.get_data(as_text=True)
    if not content.strip():
        raise InvalidInput('Provide a CSV file or body')

    if kind == 'events':
        count, errors = ExportImportService.import_events_from_csv(content, inventory())
    else:
        count, errors = ExportImportService.import_people_from_csv(content, directory())
    return jsonify({'imported': count, 'errors': errors})
