"""Shared base schemas and common models."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    detail: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
