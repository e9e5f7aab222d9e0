"""Health endpoint."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    pipelines: int


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Liveness probe — always returns ok if process is running."""
    return HealthResponse(status="ok", pipelines=len(request.app.state.registry))
