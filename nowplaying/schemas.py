from enum import Enum

from pydantic import BaseModel, Field


class PayloadType(str, Enum):
    """Response mode of the now-playing endpoint"""
    status = "status"
    schedule = "schedule"


class ServiceInfo(BaseModel):
    """Root endpoint payload"""
    service: str
    version: str
    channels: list[str] = Field(..., description="Registered channel ids in registry order")
    next_scheduled_refresh: str | None = Field(None, description="ISO8601 time of the next background refresh")
    endpoints: dict[str, str]


class HealthResponse(BaseModel):
    """Health check payload"""
    status: str
    channels: int
    refresher_running: bool
