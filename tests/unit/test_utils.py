"""
Error mapping, HTTP helpers and settings.

Run with: pytest tests/unit/test_utils.py -v
"""

import json
from unittest.mock import patch

import pytest

from ticksolve.config.settings import AppSettings
from ticksolve.utils.clock import Deadline
from ticksolve.utils.error_handling import NotFoundError, RateLimitError, to_response
from ticksolve.utils.http import api_handler, bearer_token, json_response, query_param


class TestErrorResponses:
    def test_not_found(self):
        resp = to_response(NotFoundError("Ticket T-1 not found"), "cid-1")
        assert resp["statusCode"] == 404
        assert json.loads(resp["body"]) == {
            "message": "Ticket T-1 not found",
            "status": "error",
            "correlation_id": "cid-1",
        }

    def test_rate_limit_carries_retry_after(self):
        resp = to_response(RateLimitError("locked", retry_after_seconds=42))
        assert resp["statusCode"] == 429
        assert resp["headers"]["Retry-After"] == "42"
        assert json.loads(resp["body"])["retry_after"] == 42


class TestApiHandler:
    def test_unexpected_error_is_500(self):
        @api_handler("Explode")
        def handler(event, correlation_id):
            raise RuntimeError("boom")

        resp = handler({}, None)
        body = json.loads(resp["body"])
        assert resp["statusCode"] == 500
        assert body["message"] == "Internal server error"
        assert body["correlation_id"]

    def test_app_error_keeps_status(self):
        @api_handler("Lookup")
        def handler(event, correlation_id):
            raise NotFoundError("gone")

        assert handler({}, None)["statusCode"] == 404

    def test_success_passes_through(self):
        @api_handler("Echo")
        def handler(event, correlation_id):
            return json_response(200, {"cid": correlation_id})

        assert json.loads(handler({}, None)["body"])["cid"]


def test_bearer_token_is_case_insensitive():
    assert bearer_token({"headers": {"Authorization": "Bearer abc"}}) == "abc"
    assert bearer_token({"headers": {"authorization": "bearer abc"}}) == "abc"
    assert bearer_token({"headers": {"authorization": "Basic abc"}}) is None
    assert bearer_token({}) is None


def test_query_param_default_for_blank():
    assert query_param({"queryStringParameters": {"status": ""}}, "status", "all") == "all"
    assert query_param({"queryStringParameters": None}, "status", "all") == "all"


def test_deadline(clock):
    deadline = Deadline(clock=clock)
    assert not deadline.expired()
    deadline.schedule(2)
    assert deadline.pending
    clock.advance(1.5)
    assert deadline.remaining() == 0.5
    assert not deadline.expired()
    clock.advance(0.5)
    assert deadline.expired()
    deadline.cancel()
    assert not deadline.pending


class TestSettings:
    def test_defaults_from_test_environment(self):
        settings = AppSettings.from_environment()
        assert settings.storage_backend == "memory"
        assert settings.session_secret == "test-session-secret"
        assert settings.max_login_attempts == 5
        assert settings.lockout_seconds == 60

    def test_prod_requires_real_secret(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.delenv("SESSION_SECRET")
        with pytest.raises(ValueError):
            AppSettings.from_environment()

    def test_prod_forces_dynamodb(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "prod")
        settings = AppSettings.from_environment()
        assert settings.storage_backend == "dynamodb"

    def test_secret_loaded_from_secrets_manager(self, monkeypatch):
        monkeypatch.delenv("SESSION_SECRET")
        monkeypatch.setenv("SESSION_SECRET_ARN", "arn:aws:secretsmanager:eu-west-2:1:secret:s")
        with patch.object(AppSettings, "_secret_string", return_value="from-secrets-manager") as fetch:
            settings = AppSettings.from_environment()
        assert settings.session_secret == "from-secrets-manager"
        fetch.assert_called_once_with("arn:aws:secretsmanager:eu-west-2:1:secret:s")
