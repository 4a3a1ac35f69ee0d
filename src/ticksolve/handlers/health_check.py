"""GET /health: liveness plus the deployment facts worth checking after a release."""

import os
from datetime import datetime, timezone

from ticksolve import __version__
from ticksolve.utils.http import json_response


def lambda_handler(event, context):
    """
    Report the running version and storage backend.

    Reads the environment directly so a misconfigured deployment still answers
    without building any service.
    """
    return json_response(
        200,
        {
            "status": "ok",
            "service": "ticksolve",
            "version": __version__,
            "environment": os.environ.get("ENVIRONMENT", "dev"),
            "storage_backend": os.environ.get("STORAGE_BACKEND", "memory").lower(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
