"""Pydantic models for HTTP API requests and responses."""

from pydantic import BaseModel, Field

from nodemanager.models.status import ProcessStatus
from nodemanager.services.status_controller import StatusSnapshot


class StatusRequest(BaseModel):
    """PUT /api/v1.0/status payload.

    Sets the target process status. The process converges within one pause
    delay.

    Example:
        {
            "target_status": "paused"
        }
    """

    target_status: ProcessStatus = Field(
        ...,
        description="Requested process status",
        examples=["paused", "running"],
    )


class StatusResponse(BaseModel):
    """GET/PUT /api/v1.0/status response."""

    code: int = Field(default=200, description="Application-level status code (200)")
    msg: str = Field(default="success", description="Status message")
    data: StatusSnapshot = Field(..., description="Current process status")

