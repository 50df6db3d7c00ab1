"""
Health Check Router
==================
Liveness endpoints; not part of the push contract.
"""
from fastapi import APIRouter, Response
from pydantic import BaseModel

from push_release import __version__

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str


@router.head("/")
async def root_head():
    """Load-balancer probe."""
    return Response(status_code=200)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.
    Returns OK if the service is running.
    """
    return HealthResponse(status="ok", version=__version__)
