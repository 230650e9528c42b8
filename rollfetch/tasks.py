"""
Celery tasks for background processing.

These tasks act as stateless wrappers over the service layer logic.
"""

import logging
from typing import Any, Dict

from rollfetch.core.exceptions import ServiceError
from rollfetch.services.result_service import result_service
from rollfetch.worker import celery_app

logger = logging.getLogger(__name__)


def _task_failure(exc: Exception, operation_name: str) -> Dict[str, Any]:
    """Log a failed run and turn it into a task result."""
    if isinstance(exc, ServiceError):
        logger.error("Service error in %s: %s", operation_name, str(exc))
    else:
        logger.error(
            "Task %s failed: %s", operation_name, str(exc), exc_info=True
        )
    return {"status": "error", "error": str(exc)}


@celery_app.task(name="generate_results_pdf")
def generate_results_pdf(
    start_roll: str, end_roll: str, website_url: str
) -> Dict[str, Any]:
    """
    Celery task running a full fetch-and-merge batch.

    A batch is never retried as a whole; each roll number gets exactly one
    attempt inside the batch.

    Args:
        start_roll: First roll number of the range
        end_roll: Last roll number of the range
        website_url: URL of the portal's lookup form

    Returns:
        Dict with status "success" plus the response fields on success,
        or status "error" and the error message on failure
    """
    operation_name = f"Generate results PDF {start_roll}..{end_roll}"
    logger.info("Starting %s", operation_name)

    try:
        response = result_service.generate(start_roll, end_roll, website_url)
    except Exception as exc:
        return _task_failure(exc, operation_name)

    logger.info("Completed %s successfully", operation_name)
    return {"status": "success", **response.model_dump(by_alias=True)}
