"""Export/Import service for CSV and XLSX formats."""
from __future__ import annotations

import csv
import io
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ticketdesk.domain import Event, Person, TicketRequest, Workspace
from ticketdesk.services.events import EventInventory
from ticketdesk.services.people import PersonDirectory


class ExportImportService:
    """Flat record exports of a workspace and CSV imports of events and people."""

    EXPORTABLE_FIELDS = {
        'events': ['id', 'team_id', 'team_name', 'opponent', 'date', 'time', 'is_playoff',
                   'total_tickets', 'assigned_tickets', 'created_at'],
        'tickets': ['id', 'event_id', 'event_date', 'opponent', 'seat_type', 'custom_name',
                    'section', 'row', 'seat', 'value', 'source', 'assigned_to', 'assigned_company',
                    'assignment_type', 'status', 'price', 'confirmed', 'parking'],
        'people': ['id', 'name', 'company', 'email', 'phone', 'total_assignments', 'created_at'],
        'assignments': ['person_name', 'person_company', 'event_id', 'event_name', 'date',
                        'seat_type', 'assignment_type', 'price', 'confirmed', 'created_at'],
        'requests': ['id', 'event_id', 'user_id', 'user_name', 'user_email', 'user_company',
                     'user_phone', 'priority', 'message', 'requested_quantities', 'status',
                     'requested_at', 'processed_at', 'processed_by', 'assigned_ticket_id'],
    }

    # Columns accepted by the CSV importers; also used for downloadable templates
    IMPORTABLE_FIELDS = {
        'events': ['team_id', 'opponent', 'date', 'time', 'is_playoff'],
        'people': ['name', 'company', 'email', 'phone'],
    }

    TEMPLATE_ROWS = {
        'events': {'team_id': 'nuggets', 'opponent': 'Lakers', 'date': '2025-01-15',
                   'time': '19:00', 'is_playoff': 'false'},
        'people': {'name': 'John Doe', 'company': 'Example Corp',
                   'email': 'john@example.com', 'phone': ''},
    }

    @staticmethod
    def _cell(value: Any) -> Any:
        """Flatten a value for a spreadsheet cell."""
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, (list, tuple)):
            return ','.join(str(v) for v in value)
        if value is None:
            return ''
        return value

    @staticmethod
    def collect_rows(
        kind: str,
        workspace: Workspace | None = None,
        events: Iterable[Event] = (),
        people: Iterable[Person] = (),
        requests: Iterable[TicketRequest] = (),
    ) -> list[dict]:
        """Build flat records for one export kind."""
        if kind not in ExportImportService.EXPORTABLE_FIELDS:
            raise ValueError(f"No exportable fields defined for {kind}")

        def team_name(team_id: str) -> str:
            return workspace.team_name(team_id) if workspace else team_id

        rows: list[dict] = []
        if kind == 'events':
            for event in events:
                tickets = event.tickets or ()
                rows.append({
                    'id': event.id,
                    'team_id': event.team_id,
                    'team_name': team_name(event.team_id),
                    'opponent': event.opponent,
                    'date': event.date,
                    'time': event.time.strftime('%H:%M'),
                    'is_playoff': event.is_playoff,
                    'total_tickets': len(tickets),
                    'assigned_tickets': sum(1 for t in tickets if t.is_assigned),
                    'created_at': event.created_at,
                })
        elif kind == 'tickets':
            for event in events:
                for ticket in event.tickets or ():
                    rows.append({
                        'id': ticket.id,
                        'event_id': event.id,
                        'event_date': event.date,
                        'opponent': event.opponent,
                        'seat_type': ticket.seat_type,
                        'custom_name': ticket.custom_name,
                        'section': ticket.section,
                        'row': ticket.row,
                        'seat': ticket.seat,
                        'value': ticket.value,
                        'source': ticket.source,
                        'assigned_to': ticket.assigned_to,
                        'assigned_company': ticket.assigned_company,
                        'assignment_type': ticket.assignment_type,
                        'status': ticket.status,
                        'price': ticket.price,
                        'confirmed': ticket.confirmed,
                        'parking': ticket.parking,
                    })
        elif kind == 'people':
            for person in people:
                rows.append({
                    'id': person.id,
                    'name': person.name,
                    'company': person.company,
                    'email': person.email,
                    'phone': person.phone,
                    'total_assignments': len(person.assignment_history),
                    'created_at': person.created_at,
                })
        elif kind == 'assignments':
            for person in people:
                for entry in person.assignment_history:
                    rows.append({
                        'person_name': person.name,
                        'person_company': person.company,
                        'event_id': entry.event_id,
                        'event_name': entry.event_name,
                        'date': entry.date,
                        'seat_type': entry.seat_type,
                        'assignment_type': entry.assignment_type,
                        'price': entry.price,
                        'confirmed': entry.confirmed,
                        'created_at': entry.created_at,
                    })
        else:
            for req in requests:
                rows.append({
                    field: getattr(req, field)
                    for field in ExportImportService.EXPORTABLE_FIELDS['requests']
                })
        return rows

    @staticmethod
    def export_to_csv(rows: Iterable[Mapping[str, Any]], fields: list[str]) -> str:
        """
        Serialize flat records to CSV.

        Values containing commas, quotes or newlines are quoted and embedded
        quotes are doubled.

        Returns:
            CSV string
        """
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=fields, extrasaction='ignore', lineterminator='\n')
        writer.writeheader()
        for row in rows:
            writer.writerow({field: ExportImportService._cell(row.get(field)) for field in fields})
        return output.getvalue()

    @staticmethod
    def export_to_xlsx(rows: Iterable[Mapping[str, Any]], fields: list[str], title: str) -> bytes:
        """
        Serialize flat records to an XLSX workbook with one sheet.

        Returns:
            XLSX bytes
        """
        workbook = openpyxl.Workbook()
        sheet = workbook.active
        sheet.title = title[:31]

        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF")
        for col_idx, field in enumerate(fields, start=1):
            cell = sheet.cell(row=1, column=col_idx, value=field)
            cell.fill = header_fill
            cell.font = header_font

        widths = [len(field) for field in fields]
        for row_idx, row in enumerate(rows, start=2):
            for col_idx, field in enumerate(fields, start=1):
                value = ExportImportService._cell(row.get(field))
                sheet.cell(row=row_idx, column=col_idx, value=value)
                widths[col_idx - 1] = max(widths[col_idx - 1], len(str(value)))

        for col_idx, width in enumerate(widths, start=1):
            letter = get_column_letter(col_idx)
            sheet.column_dimensions[letter].width = min(width + 2, 50)

        output = io.BytesIO()
        workbook.save(output)
        output.seek(0)
        return output.read()

    @staticmethod
    def export_kind(kind: str, fmt: str = 'csv', **sources) -> str | bytes:
        rows = ExportImportService.collect_rows(kind, **sources)
        fields = ExportImportService.EXPORTABLE_FIELDS[kind]
        if fmt == 'xlsx':
            return ExportImportService.export_to_xlsx(rows, fields, kind)
        return ExportImportService.export_to_csv(rows, fields)

    @staticmethod
    def template_csv(kind: str) -> str:
        fields = ExportImportService.IMPORTABLE_FIELDS.get(kind)
        if not fields:
            raise ValueError(f"No import template for {kind}")
        return ExportImportService.export_to_csv([ExportImportService.TEMPLATE_ROWS[kind]], fields)

    @staticmethod
    def _read_csv(file_content: str) -> list[tuple[int, dict]]:
        """Return (line number, row) pairs, skipping blank rows."""
        reader = csv.DictReader(io.StringIO(file_content.lstrip('\ufeff')))
        rows = []
        for row in reader:
            # Cells past the header row land under the None key
            cleaned = {
                key.strip(): (value or '').strip()
                for key, value in row.items()
                if key is not None
            }
            if any(cleaned.values()):
                rows.append((reader.line_num, cleaned))
        return rows

    @staticmethod
    def import_events_from_csv(
        file_content: str, inventory: EventInventory
    ) -> tuple[int, list[str]]:
        """
        Create one event per CSV row.

        Returns:
            Tuple of (created_count, errors)
        """
        created = 0
        errors: list[str] = []
        for row_num, row in ExportImportService._read_csv(file_content):
            try:
                event = inventory.create_event(row)
            except ValueError as e:
                errors.append(f"Row {row_num}: {e}")
                continue
            if event is None:
                errors.append(f"Row {row_num}: team_id, opponent, date and time are required")
                continue
            created += 1
        return created, errors

    @staticmethod
    def import_people_from_csv(
        file_content: str, directory: PersonDirectory
    ) -> tuple[int, list[str]]:
        """
        Add or update one person per CSV row.

        Returns:
            Tuple of (imported_count, errors)
        """
        imported = 0
        errors: list[str] = []
        for row_num, row in ExportImportService._read_csv(file_content):
            if not row.get('name'):
                errors.append(f"Row {row_num}: name is required")
                continue
            directory.add_or_update_person(
                row['name'],
                row.get('company', ''),
                email=row.get('email') or None,
                phone=row.get('phone') or None,
            )
            imported += 1
        return imported, errors
