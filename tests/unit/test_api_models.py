"""
Unit tests for API request/response models.

Tests Pydantic model validation and camelCase serialization.
"""

import uuid

import pytest
from pydantic import ValidationError

from projectvault.api.models import (
    ErrorResponse,
    SendCodeRequest,
    SendCodeResponse,
    UserResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)


class TestSendCodeRequest:
    """Tests for SendCodeRequest model."""

    def test_valid_request(self) -> None:
        request = SendCodeRequest(email="22-ORG045@students.example.edu")
        assert request.email == "22-ORG045@students.example.edu"

    def test_shape_is_not_checked_here(self) -> None:
        """Institutional shape is the domain's concern, not the model's."""
        assert SendCodeRequest(email="anything").email == "anything"

    def test_empty_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SendCodeRequest(email="")

    def test_missing_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SendCodeRequest()  # type: ignore[call-arg]


class TestVerifyCodeRequest:
    """Tests for VerifyCodeRequest model."""

    def test_valid_request(self) -> None:
        request = VerifyCodeRequest(email="22-ORG045@students.example.edu", code="012345")
        assert request.code == "012345"

    @pytest.mark.parametrize(
        "code",
        ["12345", "1234567", "12a456", "      ", "", "\u0661\u0662\u0663\u0664\u0665\u0666", "12345\uff16"],
    )
    def test_code_must_be_six_digits(self, code: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            VerifyCodeRequest(email="22-ORG045@students.example.edu", code=code)
        assert "code" in str(exc_info.value)

    def test_numeric_code_rejected(self) -> None:
        """Codes are text; a JSON number would lose leading zeros."""
        with pytest.raises(ValidationError):
            VerifyCodeRequest(email="22-ORG045@students.example.edu", code=123456)  # type: ignore[arg-type]


class TestResponses:
    """Tests for response serialization."""

    def test_send_code_response_uses_camel_case(self) -> None:
        response = SendCodeResponse(message="Passcode sent successfully", development_code="123456")
        assert response.model_dump(by_alias=True) == {
            "message": "Passcode sent successfully",
            "developmentCode": "123456",
        }

    def test_send_code_response_omits_code_by_default(self) -> None:
        response = SendCodeResponse(message="Passcode sent successfully")
        assert response.model_dump(by_alias=True, exclude_none=True) == {
            "message": "Passcode sent successfully"
        }

    def test_user_response_fields(self) -> None:
        profile_id = uuid.uuid4()
        user = UserResponse(
            id=profile_id,
            email="22-ORG045@students.example.edu",
            admission_year=2022,
            student_sequence=45,
        )
        dumped = user.model_dump(by_alias=True, mode="json")
        assert dumped == {
            "id": str(profile_id),
            "email": "22-ORG045@students.example.edu",
            "admissionYear": 2022,
            "studentSequence": 45,
        }

    def test_verify_response_nests_user(self) -> None:
        user = UserResponse(
            id=uuid.uuid4(),
            email="22-ORG045@students.example.edu",
            admission_year=2022,
            student_sequence=45,
        )
        response = VerifyCodeResponse(message="Authentication successful", user=user)
        assert response.model_dump(by_alias=True)["user"]["admissionYear"] == 2022

    def test_error_response(self) -> None:
        error = ErrorResponse(detail="Invalid or expired passcode")
        assert error.detail == "Invalid or expired passcode"
        assert error.retry_after_seconds is None
