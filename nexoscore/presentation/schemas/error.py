"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["MERCHANT_NOT_FOUND"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["No merchant registered for identifier: +595981234567"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "INVALID_IDENTIFIER",
                    "message": "Invalid identifier. Provide a national id (e.g. 4523871) "
                               "or a phone number (e.g. +595981234567)",
                    "request_id": "abc123",
                }
            ]
        }
    }
