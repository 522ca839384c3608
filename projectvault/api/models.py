"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON field names are camelCase.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SendCodeRequest(CamelModel):
    """Request model for passcode issuance."""

    email: str = Field(..., min_length=1, description="Institutional student email")


class SendCodeResponse(CamelModel):
    """Response model for successful passcode issuance."""

    message: str
    development_code: str | None = Field(
        default=None, description="Issued passcode; only present in development deployments"
    )


class VerifyCodeRequest(CamelModel):
    """Request model for passcode verification."""

    email: str = Field(..., min_length=1, description="Institutional student email")
    code: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^[0-9]{6}$",
        description="6-digit passcode",
    )


class UserResponse(CamelModel):
    """Public projection of a student profile."""

    id: UUID
    email: str
    admission_year: int
    student_sequence: int


class VerifyCodeResponse(CamelModel):
    """Response model for successful verification."""

    message: str
    user: UserResponse


class MessageResponse(CamelModel):
    """Response carrying only a message."""

    message: str


class ErrorResponse(CamelModel):
    """Standard error response model."""

    detail: str
    retry_after_seconds: int | None = None
