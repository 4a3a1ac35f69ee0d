"""
Local handler tests.

Requests go through the single router against the in-memory backend, so no
AWS service or database is touched.

Run with: pytest tests/unit/test_handlers_local.py -v
"""

import base64
import json

import pytest

from ticksolve.handlers import dependencies, main
from ticksolve.handlers.dependencies import DEMO_PASSWORD


@pytest.fixture(autouse=True)
def fresh_services():
    dependencies.reset()
    yield
    dependencies.reset()


def _event(method, path, body=None, token=None, query=None, ip="10.0.0.1"):
    event = {
        "requestContext": {"http": {"method": method, "path": path, "sourceIp": ip}},
        "headers": {},
    }
    if body is not None:
        event["body"] = json.dumps(body)
    if token:
        event["headers"]["authorization"] = f"Bearer {token}"
    if query:
        event["queryStringParameters"] = query
    return event


def _call(*args, **kwargs):
    resp = main.lambda_handler(_event(*args, **kwargs), None)
    return resp["statusCode"], json.loads(resp["body"])


def _login(password=DEMO_PASSWORD, ip="10.0.0.1"):
    return _call("POST", "/auth/login", {"studentId": "S12345", "password": password}, ip=ip)


@pytest.fixture
def token():
    status, body = _login()
    assert status == 200
    return body["token"]


class TestLogin:
    def test_login_returns_token_and_profile(self):
        status, body = _login()
        assert status == 200
        assert body["redirect"] == "/dashboard"
        assert body["student"]["name"] == "John Doe"
        assert "password_hash" not in body["student"]
        assert body["correlation_id"]

    def test_blank_fields(self):
        status, body = _call("POST", "/auth/login", {"studentId": " ", "password": ""})
        assert status == 422
        assert body["message"] == "Please enter both student ID and password"

    def test_invalid_json_body(self):
        event = _event("POST", "/auth/login")
        event["body"] = "{not json"
        resp = main.lambda_handler(event, None)
        assert resp["statusCode"] == 422

    def test_base64_body(self):
        event = _event("POST", "/auth/login")
        raw = json.dumps({"studentId": "S12345", "password": DEMO_PASSWORD}).encode()
        event["body"] = base64.b64encode(raw).decode()
        event["isBase64Encoded"] = True
        assert main.lambda_handler(event, None)["statusCode"] == 200

    def test_lockout_after_five_failures(self):
        for _ in range(4):
            status, body = _login("wrong")
            assert status == 401
            assert body["message"] == "Invalid credentials"

        resp = main.lambda_handler(
            _event("POST", "/auth/login", {"studentId": "S12345", "password": "wrong"}), None
        )
        assert resp["statusCode"] == 429
        assert resp["headers"]["Retry-After"] == "60"

        status, body = _login()
        assert status == 429
        assert body["retry_after"] >= 1

    def test_lockout_is_per_source(self):
        for _ in range(5):
            _login("wrong", ip="10.0.0.1")
        status, _ = _login(ip="10.0.0.2")
        assert status == 200


class TestTickets:
    def test_requires_session(self):
        status, body = _call("GET", "/tickets")
        assert status == 401
        assert body["message"] == "Login required"

    def test_rejects_forged_token(self):
        status, _ = _call("GET", "/tickets", token="not-a-jwt")
        assert status == 401

    def test_list_defaults_to_newest_first(self, token):
        status, body = _call("GET", "/tickets", token=token)
        assert status == 200
        assert [t["id"] for t in body["tickets"]] == ["T-001", "T-002", "T-003", "T-004"]
        assert body["message"] == "4 of 4 tickets"

    def test_list_filters_and_search(self, token):
        _, body = _call("GET", "/tickets", token=token, query={"status": "open"})
        assert [t["id"] for t in body["tickets"]] == ["T-001"]
        assert body["total"] == 4
        assert body["status_counts"] == {"open": 1, "in_progress": 1, "resolved": 1, "closed": 1}

        _, body = _call("GET", "/tickets", token=token, query={"search": "BIOLOGY"})
        assert [t["id"] for t in body["tickets"]] == ["T-002"]

        _, body = _call("GET", "/tickets", token=token, query={"sort": "status", "direction": "asc"})
        assert [t["status"] for t in body["tickets"]] == ["open", "in_progress", "resolved", "closed"]

    def test_list_unknown_filter(self, token):
        status, _ = _call("GET", "/tickets", token=token, query={"status": "pending"})
        assert status == 422

    def test_create_then_fetch(self, token):
        status, created = _call(
            "POST",
            "/tickets",
            {"category": "facility_issue", "title": "Broken heater", "description": "Room 204"},
            token=token,
        )
        assert status == 201
        assert created["status"] == "open"
        assert created["id"].startswith("T-")
        assert len(created["status_history"]) == 1

        status, fetched = _call("GET", f"/tickets/{created['id']}", token=token)
        assert status == 200
        assert fetched["title"] == "Broken heater"

    def test_create_requires_category_and_title(self, token):
        status, _ = _call("POST", "/tickets", {"title": "No category"}, token=token)
        assert status == 422
        status, _ = _call("POST", "/tickets", {"category": "other", "title": "   "}, token=token)
        assert status == 422

    def test_unknown_ticket(self, token):
        status, body = _call("GET", "/tickets/T-404", token=token)
        assert status == 404
        assert body["message"] == "Ticket T-404 not found"

    def test_comment(self, token):
        status, comment = _call("POST", "/tickets/T-002/comments", {"content": "Thanks"}, token=token)
        assert status == 201
        assert comment["author"] == "Student"

        _, ticket = _call("GET", "/tickets/T-002", token=token)
        assert [c["id"] for c in ticket["comments"]][-1] == comment["id"]

    def test_empty_comment(self, token):
        status, _ = _call("POST", "/tickets/T-002/comments", {"content": "  "}, token=token)
        assert status == 422

    def test_non_text_comment(self, token):
        status, body = _call("POST", "/tickets/T-001/comments", {"content": 123}, token=token)
        assert status == 422
        assert body["message"] == "content must be text"

    def test_status_change(self, token):
        status, ticket = _call(
            "POST", "/tickets/T-001/status", {"status": "closed", "comment": "Resolved in person"}, token=token
        )
        assert status == 200
        assert ticket["status"] == "closed"
        assert ticket["status_history"][-1]["comment"] == "Resolved in person"

    def test_status_change_rejects_unknown_and_same_status(self, token):
        status, _ = _call("POST", "/tickets/T-001/status", {"status": "archived"}, token=token)
        assert status == 422
        status, _ = _call("POST", "/tickets/T-001/status", {"status": "open"}, token=token)
        assert status == 422
