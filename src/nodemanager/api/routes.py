"""API route handlers for the pause/resume control surface."""

from fastapi import APIRouter

from nodemanager.api.models import StatusRequest, StatusResponse
from nodemanager.models.status import ProcessStatus
from nodemanager.services.status_controller import StatusController

router = APIRouter(prefix="/api/v1.0")


@router.get("/status", response_model=StatusResponse)
async def get_status():
    """GET /api/v1.0/status - Query process status.

    Response format:
        {
            "code": 200,
            "msg": "success",
            "data": {
                "current": "running",
                "target": "paused",
                "updates_pending": false
            }
        }

    ``current`` lags ``target`` until the scheduler reaches its next pause gate.
    """
    status = StatusController()
    return StatusResponse(data=status.snapshot())


@router.put("/status", response_model=StatusResponse)
async def put_status(request: StatusRequest):
    """PUT /api/v1.0/status - Request pause or resume.

    Args:
        request: StatusRequest with the target status

    Returns:
        StatusResponse with the snapshot after the target was set
    """
    status = StatusController()
    if request.target_status == ProcessStatus.PAUSED:
        status.request_pause()
    else:
        status.request_resume()

    return StatusResponse(data=status.snapshot())
