"""
Institutional email policy.

Addresses look like ``22-ORG045@students.example.edu``: a two-digit
admission year, a fixed tag, a three-digit student sequence and the
students subdomain of the institution.
"""

import re
from dataclasses import dataclass

from .exceptions import FormatError, RangeError
from .models import Identity


@dataclass(frozen=True)
class EmailValidation:
    """Outcome of validating one candidate email."""

    valid: bool
    email: str | None = None
    admission_year: int | None = None
    student_sequence: int | None = None
    error: str | None = None


class EmailPolicy:
    """
    Validates institutional emails and extracts their identity attributes.

    Validation is pure: the same input and current year always give the
    same result.
    """

    def __init__(
        self,
        tag: str = "ORG",
        domain: str = "example.edu",
        min_year: int = 2015,
    ) -> None:
        self.tag = tag
        self.domain = domain.lower()
        self.min_year = min_year
        self._pattern = re.compile(
            rf"^([0-9]{{2}})-{re.escape(tag)}([0-9]{{3}})@students\.{re.escape(self.domain)}$",
            re.ASCII,
        )

    @property
    def example(self) -> str:
        return f"YY-{self.tag}001@students.{self.domain}"

    def canonicalize(self, email: str) -> str:
        """Strip whitespace and lowercase the domain part."""
        local, sep, domain = email.strip().rpartition("@")
        if not sep:
            return email.strip()
        return f"{local}@{domain.lower()}"

    def require(self, email: str, current_year: int) -> Identity:
        """
        Validate email and return its Identity.

        Raises:
            FormatError: If the address does not have the institutional shape
            RangeError: If the admission year or sequence is out of range
        """
        canonical = self.canonicalize(email)
        match = self._pattern.match(canonical)
        if match is None:
            raise FormatError(f"Email must follow the format: {self.example}")

        admission_year = 2000 + int(match.group(1))
        if not self.min_year <= admission_year <= current_year:
            raise RangeError(
                f"Admission year must be between {self.min_year} and {current_year}"
            )

        student_sequence = int(match.group(2))
        if not 1 <= student_sequence <= 999:
            raise RangeError("Student sequence must be between 001 and 999")

        return Identity(
            email=canonical,
            admission_year=admission_year,
            student_sequence=student_sequence,
        )

    def validate(self, email: str, current_year: int) -> EmailValidation:
        """Non-raising form of require()."""
        try:
            identity = self.require(email, current_year)
        except (FormatError, RangeError) as e:
            return EmailValidation(valid=False, error=str(e))
        return EmailValidation(
            valid=True,
            email=identity.email,
            admission_year=identity.admission_year,
            student_sequence=identity.student_sequence,
        )
