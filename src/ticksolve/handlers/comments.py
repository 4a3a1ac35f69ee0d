"""Handler for POST /tickets/{id}/comments."""

from ticksolve.handlers import dependencies
from ticksolve.utils.http import api_handler, json_response, parse_json_body, path_param
from ticksolve.utils.logging_config import get_logger

logger = get_logger(__name__)


@api_handler("Comment")
def lambda_handler(event, correlation_id):
    """Append a comment; the id in the response is the persisted one."""
    student_id = dependencies.authenticated_student(event)
    content = parse_json_body(event).get("content") or ""

    comment = dependencies.get_ticket_service().add_comment(
        student_id, path_param(event, "id"), content
    )

    logger.info(
        "Comment stored",
        extra={"correlation_id": correlation_id, "comment_id": comment.id},
    )
    return json_response(201, comment.model_dump_json())
