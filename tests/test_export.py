"""
Export and import tests for CSV and XLSX.
"""

import csv
import io

import openpyxl
import pytest

from ticketdesk.services.export_import import ExportImportService


class TestCsvExport:
    """Flat CSV output."""

    def test_quotes_commas_and_quotes(self):
        rows = [{"name": 'Jane "JD" Doe', "company": "Acme, Inc.", "email": None}]
        output = ExportImportService.export_to_csv(rows, ["name", "company", "email"])
        assert output == 'name,company,email\n"Jane ""JD"" Doe","Acme, Inc.",\n'

    def test_ticket_export(self, inventory, nuggets_event):
        ticket = nuggets_event.tickets[0]
        inventory.update_ticket_assignment(
            nuggets_event.id, ticket.id,
            {"assigned_to": "Jane Doe", "assigned_company": "Acme, Inc.", "assignment_type": "sold"},
        )
        output = ExportImportService.export_kind(
            "tickets", "csv", events=inventory.list_events()
        )
        rows = list(csv.DictReader(io.StringIO(output)))
        assert len(rows) == 6
        assert rows[0]["seat_type"] == "Suite 1, Row 2, Seat 3"
        assert rows[0]["assigned_company"] == "Acme, Inc."
        assert rows[0]["assignment_type"] == "sold"
        assert rows[0]["price"] == "350"
        assert rows[0]["status"] == "tentative"
        assert rows[1]["assigned_to"] == ""

    def test_event_export_uses_team_names(self, inventory, ftm_workspace, nuggets_event):
        output = ExportImportService.export_kind(
            "events", workspace=ftm_workspace, events=[nuggets_event]
        )
        (row,) = csv.DictReader(io.StringIO(output))
        assert row["team_name"] == "Denver Nuggets"
        assert row["date"] == "2025-11-20"
        assert row["time"] == "19:00"
        assert row["total_tickets"] == "6"

    def test_assignment_and_request_export(self, directory, queue):
        directory.add_or_update_person("Jane Doe", "Acme")
        directory.add_assignment_history("Jane Doe", "Acme", {
            "event_id": "e1", "event_name": "Denver Nuggets vs Lakers", "date": "2025-11-20",
            "seat_type": "Suite", "assignment_type": "sold", "price": "350", "confirmed": True,
        })
        output = ExportImportService.export_kind("assignments", people=directory.list_people())
        (row,) = csv.DictReader(io.StringIO(output))
        assert row["person_name"] == "Jane Doe"
        assert row["confirmed"] == "True"

        queue.create_request({"event_id": "e1", "user_id": "u1", "user_name": "Jane",
                              "requested_quantities": [2, 4]})
        output = ExportImportService.export_kind("requests", requests=queue.list_requests())
        (row,) = csv.DictReader(io.StringIO(output))
        assert row["requested_quantities"] == "2,4"
        assert row["processed_at"] == ""

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="games"):
            ExportImportService.collect_rows("games")


class TestXlsxExport:
    """Workbook output."""

    def test_workbook_layout(self, directory):
        directory.add_or_update_person("Jane Doe", "Acme", email="jane@acme.test")
        data = ExportImportService.export_kind("people", "xlsx", people=directory.list_people())
        workbook = openpyxl.load_workbook(io.BytesIO(data))
        sheet = workbook.active
        assert sheet.title == "people"
        header = [cell.value for cell in sheet[1]]
        assert header == ExportImportService.EXPORTABLE_FIELDS["people"]
        assert sheet["B2"].value == "Jane Doe"
        assert sheet["A1"].font.bold is True


class TestCsvImport:
    """Creating events and people from CSV uploads."""

    def test_template(self):
        template = ExportImportService.template_csv("events")
        assert template.splitlines()[0] == "team_id,opponent,date,time,is_playoff"

    def test_import_events(self, inventory):
        content = (
            "\ufeffteam_id,opponent,date,time,is_playoff\n"
            "nuggets,Lakers,2025-11-20,19:00,false\n"
            "broncos,Chiefs,2025-12-07,14:25,true\n"
            "nuggets,,2025-11-22,19:00,false\n"
            "nuggets,Jazz,someday,19:00,false\n"
            ",,,,\n"
        )
        created, errors = ExportImportService.import_events_from_csv(content, inventory)
        assert created == 2
        assert len(errors) == 2
        assert errors[0].startswith("Row 4:")
        assert errors[1].startswith("Row 5:")
        playoff = next(e for e in inventory.list_events() if e.team_id == "broncos")
        assert playoff.is_playoff is True
        assert len(playoff.tickets) == 8

    def test_import_people_updates_existing(self, directory):
        existing = directory.add_or_update_person("Jane Doe", "Acme")
        content = (
            "name,company,email,phone\n"
            "jane doe,ACME,jane@acme.test,\n"
            "John Smith,Globex,,555-0100\n"
            ",Nobody Inc,,\n"
        )
        imported, errors = ExportImportService.import_people_from_csv(content, directory)
        assert imported == 2
        assert errors == ["Row 4: name is required"]
        assert directory.get_person(existing.id).email == "jane@acme.test"
        assert len(directory.list_people()) == 2

    def test_error_rows_count_blank_lines(self, directory):
        content = (
            "name,company,email,phone\n"
            "Jane Doe,Acme,,\n"
            "\n"
            ",,,\n"
            ",Nobody Inc,,\n"
        )
        imported, errors = ExportImportService.import_people_from_csv(content, directory)
        assert imported == 1
        assert errors == ["Row 5: name is required"]
