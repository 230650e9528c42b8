"""Pydantic schemas for the result PDF endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GeneratePdfRequest(BaseModel):
    """Request model for generating a merged result PDF.

    All fields are optional at the schema level so that a missing field is
    reported with the service's own 400 message instead of a 422.

    Attributes:
        start_roll: First roll number of the range (``startRoll``)
        end_roll: Last roll number of the range (``endRoll``)
        website_url: URL of the portal's lookup form (``websiteURL``)
    """

    start_roll: Optional[str] = Field(default=None, alias="startRoll")
    end_roll: Optional[str] = Field(default=None, alias="endRoll")
    website_url: Optional[str] = Field(default=None, alias="websiteURL")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "startRoll": "A2021B0001",
                "endRoll": "A2021B0003",
                "websiteURL": "https://results.example.edu/lookup.aspx",
            }
        },
    )


class GeneratePdfResponse(BaseModel):
    """Response model for a completed run.

    Attributes:
        download_url: Relative URL of the merged PDF, or None when no
            document could be merged (``downloadURL``)
        not_found: Roll numbers with no retrievable document (``notFound``)
        skipped: Roll numbers whose downloaded document could not be read
    """

    download_url: Optional[str] = Field(default=None, alias="downloadURL")
    not_found: List[str] = Field(default_factory=list, alias="notFound")
    skipped: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class GenerateTaskResponse(BaseModel):
    """Response model for a queued run.

    Attributes:
        task_id: ID of the Celery task processing the run
    """

    task_id: str


class TaskStatusResponse(BaseModel):
    """Status of a queued run."""

    task_id: str
    status: str
    result: Optional[Dict[str, Any]] = None
