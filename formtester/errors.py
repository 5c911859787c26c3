"""Error types raised and absorbed by formtester.

Two kinds of errors live here:

- Outcome signals raised by ``FormRequest.validate_resolved``:
  AuthorizationException when the request is not authorized and
  ValidationException, carrying per-field FieldError details, when its input
  is rejected. The tester captures both as assertable outcomes.
- Setup defects (FormTesterError and subclasses). These mean the test itself
  is misconfigured and are never captured.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from formtester.types import FieldErrorCode


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        path: Dot-notation field path (e.g., "email", "address.city")
        code: Specific validation error code
        message: Human-readable error description
        expected: Optional - what was expected (type, format, enum values, etc.)
        received: Optional - what was actually received

    Examples:
        >>> err = FieldError(
        ...     path="email",
        ...     code=FieldErrorCode.REQUIRED,
        ...     message="Email is required",
        ... )
        >>> err.to_dict()
        {'path': 'email', 'code': 'required', 'message': 'Email is required'}
    """
    path: str
    code: FieldErrorCode
    message: str
    expected: Optional[Any] = None
    received: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "path": self.path,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }
        if self.expected is not None:
            result["expected"] = self.expected
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(
            path=data["path"],
            code=code,
            message=data["message"],
            expected=data.get("expected"),
            received=data.get("received"),
        )


def group_messages(field_errors: List[FieldError]) -> Dict[str, List[str]]:
    """Group error messages by field path, keeping first-seen field order."""
    grouped: Dict[str, List[str]] = {}
    for error in field_errors:
        grouped.setdefault(error.path, []).append(error.message)
    return grouped


class FormTesterError(Exception):
    """Base class for misconfigured tests and form requests."""


class FormRequestNotConfiguredError(FormTesterError):
    """Raised when a tester is evaluated without a form request type."""


class AuthorizationException(Exception):
    """Raised by a form request whose ``authorize()`` check denies access."""

    def __init__(self, message: str = "This action is unauthorized."):
        self.message = message
        super().__init__(message)


class ValidationException(Exception):
    """Raised by a form request whose input failed validation.

    Attributes:
        field_errors: The individual field failures, in validator order
        redirect_to: Where a real response would redirect the client, if anywhere

    Examples:
        >>> exc = ValidationException([
        ...     FieldError(path="email", code=FieldErrorCode.REQUIRED, message="Email is required"),
        ... ])
        >>> exc.errors()
        {'email': ['Email is required']}
    """

    def __init__(
        self,
        field_errors: List[FieldError],
        redirect_to: Optional[str] = None,
        message: str = "The given data was invalid.",
    ):
        self.field_errors = list(field_errors)
        self.redirect_to = redirect_to
        super().__init__(message)

    def errors(self) -> Dict[str, List[str]]:
        """Field path -> ordered list of messages."""
        return group_messages(self.field_errors)


__all__ = [
    "FieldError",
    "group_messages",
    "FormTesterError",
    "FormRequestNotConfiguredError",
    "AuthorizationException",
    "ValidationException",
]
