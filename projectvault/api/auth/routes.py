"""
Auth routes.

Defines the passcode login endpoints of the project vault API.
Domain errors propagate to the handlers in projectvault.api.errors.
"""

from fastapi import APIRouter, Depends, Response, status

from projectvault.api.dependencies import get_auth_service, get_session_handle
from projectvault.api.models import (
    ErrorResponse,
    MessageResponse,
    SendCodeRequest,
    SendCodeResponse,
    UserResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from projectvault.config.settings import Settings, get_settings
from projectvault.domain.auth import AuthService
from projectvault.domain.models import PublicProfile

router = APIRouter(tags=["auth"])


def _user(profile: PublicProfile) -> UserResponse:
    return UserResponse(
        id=profile.id,
        email=profile.email,
        admission_year=profile.admission_year,
        student_sequence=profile.student_sequence,
    )


@router.post(
    "/send-code",
    response_model=SendCodeResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse, "description": "Email format or range error"},
        429: {"model": ErrorResponse, "description": "Rate limited or cooling down"},
        500: {"model": ErrorResponse, "description": "Delivery or internal failure"},
    },
    summary="Request a login passcode",
    description="Send a 6-digit passcode to an institutional student email. "
    "The passcode is valid for 10 minutes and can be used once.",
)
async def send_code(
    request_data: SendCodeRequest,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> SendCodeResponse:
    """
    Issue a passcode.

    - **email**: Institutional email, e.g. 22-ORG045@students.example.edu
    """
    issued = service.send_code(request_data.email)
    return SendCodeResponse(
        message="Passcode sent successfully",
        development_code=issued.code if settings.expose_development_code else None,
    )


@router.post(
    "/verify-code",
    response_model=VerifyCodeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or invalid/expired passcode"},
    },
    summary="Verify a login passcode",
    description="Consume a passcode and start a session. The session handle "
    "is returned in a cookie.",
)
async def verify_code(
    request_data: VerifyCodeRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> VerifyCodeResponse:
    """
    Verify a passcode and log in.

    - **email**: The email the passcode was sent to
    - **code**: 6-digit passcode
    """
    result = service.verify_code(request_data.email, request_data.code)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=result.session.handle,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return VerifyCodeResponse(message="Authentication successful", user=_user(result.profile))


@router.get(
    "/profile",
    response_model=UserResponse,
    responses={
        401: {"model": ErrorResponse, "description": "No session"},
        404: {"model": ErrorResponse, "description": "Profile missing"},
    },
    summary="Current profile",
)
async def profile(
    handle: str | None = Depends(get_session_handle),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Return the profile of the logged-in student."""
    return _user(service.current_profile(handle))


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No active session"},
        500: {"model": ErrorResponse, "description": "Session teardown failed"},
    },
    status_code=status.HTTP_200_OK,
    summary="Log out",
)
async def logout(
    response: Response,
    handle: str | None = Depends(get_session_handle),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    """Destroy the current session and clear its cookie."""
    service.logout(handle)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out successfully")
