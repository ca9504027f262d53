"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Presence and format rules live in the domain validator, so every request
field is optional here: a missing field must produce the domain's 400
"Missing required fields." rather than a framework 422.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(default=None, description="Unique display name")
    email_or_phone: str | None = Field(
        default=None, description="Email address or E.164 phone number"
    )
    password: str | None = Field(default=None, description="Password (min 8 characters)")
    captcha_token: str | None = Field(
        default=None, alias="captchaToken", description="CAPTCHA token (optional)"
    )


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
