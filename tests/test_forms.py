"""Tests for form management over HTTP.

Covers:
- Admin-only create/edit, members and outsiders forbidden
- Field definitions rejected at save time with a structured error
- Edits after responses exist are accepted without migrating old values
- Ticket subjects must be a single line
"""
import pytest

from ticketing.models.form_response import FormResponse
from tests.conftest import (
    SIZE_FORM_FIELDS,
    add_test_member,
    auth,
    create_test_community,
    create_test_event,
    create_test_form,
    create_test_user,
)


def _setup(client):
    admin = create_test_user(client, name="Admin")
    volunteer = create_test_user(client, name="Volunteer")
    community = create_test_community(client, admin)
    add_test_member(client, community, admin, volunteer)
    event = create_test_event(client, admin, community)
    return admin, volunteer, event


class TestFormCreate:

    def test_admin_creates_form(self, client):
        admin, _, event = _setup(client)
        form = create_test_form(client, admin, event, fields=SIZE_FORM_FIELDS)
        assert form["event_id"] == event["event_id"]
        assert [f["id"] for f in form["fields"]] == ["Name", "Size"]
        assert form["include_qr"] is True

    def test_member_cannot_create_form(self, client):
        _, volunteer, event = _setup(client)
        resp = client.post(
            f"/api/events/{event['event_id']}/forms/",
            json={"title": "Reg", "fields": []},
            headers=auth(volunteer),
        )
        assert resp.status_code == 403
        assert resp.json()["detail"]["kind"] == "forbidden"

    def test_unknown_event(self, client):
        admin, _, _ = _setup(client)
        resp = client.post(
            "/api/events/00000000-0000-0000-0000-000000000000/forms/",
            json={"title": "Reg"},
            headers=auth(admin),
        )
        assert resp.status_code == 404
        assert resp.json()["detail"]["kind"] == "event_not_found"

    def test_select_without_options_rejected(self, client):
        admin, _, event = _setup(client)
        resp = client.post(
            f"/api/events/{event['event_id']}/forms/",
            json={"title": "Reg", "fields": [{"id": "size", "label": "Size", "type": "select", "options": [""]}]},
            headers=auth(admin),
        )
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert detail["kind"] == "invalid_field_definition"
        assert detail["field_id"] == "size"

    def test_file_size_out_of_range_rejected(self, client):
        admin, _, event = _setup(client)
        resp = client.post(
            f"/api/events/{event['event_id']}/forms/",
            json={"title": "Reg", "fields": [
                {"id": "cv", "label": "CV", "type": "file", "file_types": ["pdf"], "max_file_size": 80},
            ]},
            headers=auth(admin),
        )
        assert resp.status_code == 422
        assert resp.json()["detail"]["kind"] == "invalid_field_definition"

    def test_list_and_get(self, client):
        admin, _, event = _setup(client)
        form = create_test_form(client, admin, event, fields=SIZE_FORM_FIELDS)
        listed = client.get(f"/api/events/{event['event_id']}/forms/").json()
        assert [f["form_id"] for f in listed] == [form["form_id"]]
        fetched = client.get(f"/api/events/{event['event_id']}/forms/{form['form_id']}")
        assert fetched.status_code == 200
        assert fetched.json()["fields"][1]["options"] == ["S", "M", "L"]

    def test_get_malformed_form_id(self, client):
        _, _, event = _setup(client)
        resp = client.get(f"/api/events/{event['event_id']}/forms/not-a-uuid")
        assert resp.status_code == 400
        assert resp.json()["detail"]["kind"] == "malformed_identifier"


    @pytest.mark.parametrize("subject", ["Hi\nBcc: x@y.z", "Line one\r\nLine two"])
    def test_multiline_ticket_subject_rejected(self, client, subject):
        admin, _, event = _setup(client)
        resp = client.post(
            f"/api/events/{event['event_id']}/forms/",
            json={"title": "Reg", "ticket_subject": subject},
            headers=auth(admin),
        )
        assert resp.status_code == 422
        assert client.get(f"/api/events/{event['event_id']}/forms/").json() == []


class TestFormUpdate:

    def test_admin_edits_fields_after_responses(self, client, db):
        admin, _, event = _setup(client)
        form = create_test_form(client, admin, event, fields=SIZE_FORM_FIELDS)
        base = f"/api/events/{event['event_id']}/forms/{form['form_id']}"
        registered = client.post(f"{base}/responses", json={
            "name": "Ana", "email": "ana@example.com", "values": {"Name": "Ana", "Size": "M"},
        })
        assert registered.status_code == 201

        resp = client.put(base, json={
            "title": "Registration v2",
            "fields": [{"id": "Name", "label": "Full name", "type": "text", "required": True}],
        }, headers=auth(admin))
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Registration v2"
        assert [f["id"] for f in data["fields"]] == ["Name"]

        # Stored values keep the removed field
        stored = db.get(FormResponse, registered.json()["response_id"])
        assert stored.values == {"Name": "Ana", "Size": "M"}

    def test_member_cannot_edit(self, client):
        admin, volunteer, event = _setup(client)
        form = create_test_form(client, admin, event)
        resp = client.put(
            f"/api/events/{event['event_id']}/forms/{form['form_id']}",
            json={"title": "Hijacked"},
            headers=auth(volunteer),
        )
        assert resp.status_code == 403

    def test_multiline_ticket_subject_rejected_on_edit(self, client):
        admin, _, event = _setup(client)
        form = create_test_form(client, admin, event, ticket_subject="Your ticket")
        base = f"/api/events/{event['event_id']}/forms/{form['form_id']}"
        resp = client.put(base, json={"ticket_subject": "Hi\nBcc: x@y.z"}, headers=auth(admin))
        assert resp.status_code == 422
        assert client.get(base).json()["ticket_subject"] == "Your ticket"

    def test_invalid_edit_leaves_form_unchanged(self, client):
        admin, _, event = _setup(client)
        form = create_test_form(client, admin, event, fields=SIZE_FORM_FIELDS)
        base = f"/api/events/{event['event_id']}/forms/{form['form_id']}"
        resp = client.put(base, json={
            "fields": [{"id": "a", "label": "A", "type": "text"}, {"id": "a", "label": "B", "type": "text"}],
        }, headers=auth(admin))
        assert resp.status_code == 422
        assert [f["id"] for f in client.get(base).json()["fields"]] == ["Name", "Size"]
