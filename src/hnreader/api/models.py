"""Pydantic models for API responses."""

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Response model for acknowledgement and health endpoints."""

    status: str = Field(description="Status of the operation")
    timestamp: str = Field(description="Server time in RFC 3339 format")


class ApiDataResponse(BaseModel):
    """Response model for the diagnostic data endpoint."""

    message: str = Field(description="Fixed greeting")
    timestamp: str = Field(description="Server time in RFC 3339 format")
    method: str = Field(description="HTTP method of the request")
