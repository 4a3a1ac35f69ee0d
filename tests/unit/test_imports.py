"""
Import validation tests.

These tests ensure all modules can be imported successfully, catching
issues like missing dependencies or circular imports BEFORE deployment.

Run with: pytest tests/unit/test_imports.py -v
"""

import importlib

import pytest


class TestHandlerImports:
    """Verify all handler modules can be imported without errors."""

    @pytest.mark.parametrize(
        "module_name,entrypoint",
        [
            ("ticksolve.handlers.main", "lambda_handler"),
            ("ticksolve.handlers.health_check", "lambda_handler"),
            ("ticksolve.handlers.auth", "lambda_handler"),
            ("ticksolve.handlers.comments", "lambda_handler"),
            ("ticksolve.handlers.tickets", "list_handler"),
        ],
    )
    def test_handler_import(self, module_name: str, entrypoint: str):
        """Each handler module should import without errors."""
        try:
            module = importlib.import_module(module_name)
            assert hasattr(module, entrypoint), f"{module_name} missing {entrypoint}"
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


@pytest.mark.parametrize(
    "module_name",
    [
        "ticksolve.services.auth_service",
        "ticksolve.services.board",
        "ticksolve.services.composer",
        "ticksolve.services.dashboard",
        "ticksolve.services.login_throttle",
        "ticksolve.services.ticket_service",
        "ticksolve.clients.gateway",
        "ticksolve.clients.auth_client",
        "ticksolve.repositories.memory_repo",
        "ticksolve.repositories.dynamodb_repo",
        "ticksolve.repositories.postgres_repo",
        "ticksolve.models",
        "ticksolve.config.settings",
        "ticksolve.utils.http",
        "ticksolve.utils.security",
    ],
)
def test_module_import(module_name: str):
    try:
        importlib.import_module(module_name)
    except ImportError as e:
        pytest.fail(f"Failed to import {module_name}: {e}")
