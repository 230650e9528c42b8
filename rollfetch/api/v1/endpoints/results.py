import logging

from celery.result import AsyncResult
from fastapi import APIRouter, HTTPException, status

from rollfetch.core.exceptions import ValidationError
from rollfetch.schemas.results import (
    GeneratePdfRequest,
    GeneratePdfResponse,
    GenerateTaskResponse,
    TaskStatusResponse,
)
from rollfetch.services.result_service import result_service
from rollfetch.tasks import generate_results_pdf
from rollfetch.worker import celery_app

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/generate-pdf",
    response_model=GeneratePdfResponse,
    responses={
        200: {"description": "Run finished; merged PDF and missing rolls"},
        400: {"description": "Bad Request - Missing or malformed fields"},
        500: {"description": "Internal Server Error - Run aborted"},
    },
)
def generate_pdf(request: GeneratePdfRequest):
    """
    Fetch the result PDF of every roll number in a range and merge them.

    Runs synchronously: the response is sent once the whole range has been
    processed.
    """
    return result_service.generate_pdf_endpoint(request)


@router.post(
    "/generate-pdf/async",
    response_model=GenerateTaskResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        202: {"description": "Accepted - Run queued"},
        400: {"description": "Bad Request - Missing or malformed fields"},
    },
)
def generate_pdf_async(request: GeneratePdfRequest):
    """
    Queue a fetch-and-merge run on the Celery worker.

    The request is validated before it is queued; poll the task endpoint
    for the result.
    """
    try:
        result_service.validate_request(
            request.start_roll, request.end_roll, request.website_url
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        )

    try:
        task = generate_results_pdf.delay(
            request.start_roll.strip(),
            request.end_roll.strip(),
            request.website_url.strip(),
        )
    except Exception as e:
        logger.error("Error queueing generate task: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to queue task",
        ) from e

    logger.info("Queued generate task %s", task.id)
    return GenerateTaskResponse(task_id=task.id)


@router.get("/tasks/{task_id}", response_model=TaskStatusResponse)
def get_task_status(task_id: str):
    """
    Check the status of a queued run.

    The result is only present once the task has finished.
    """
    task_result = AsyncResult(task_id, app=celery_app)
    result = None
    if task_result.ready() and isinstance(task_result.result, dict):
        result = task_result.result
    logger.info("Task %s status: %s", task_id, task_result.status)
    return TaskStatusResponse(
        task_id=task_id, status=task_result.status, result=result
    )
