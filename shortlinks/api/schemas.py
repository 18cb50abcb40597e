"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.

The url field is a plain string on purpose: the URL format rule is enforced
by the link service so that a rejected URL produces the service's
{"field", "message"} error instead of a generic 422.
"""

from pydantic import BaseModel, ConfigDict, Field


class UrlRequest(BaseModel):
    """Request model for link creation."""
    url: str = Field(..., description="The long URL to shorten")


class LinkResponse(BaseModel):
    """A stored link."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique storage id of the link")
    url: str = Field(..., description="The original long URL")
    short_url: str = Field(..., description="The generated short code")


class DeleteResponse(BaseModel):
    """Response model for link deletion."""
    message: str = "deleted"
    deleted: int = Field(..., description="Rows removed (0 or 1)")


class ValidationErrorResponse(BaseModel):
    """Body returned when a submitted field is rejected."""
    field: str
    message: str
