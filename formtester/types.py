"""Core type definitions for formtester.

This module defines the fundamental types used throughout the package:
- HttpMethod: Request methods a scenario can simulate
- EvaluationState: Lifecycle states of a tester's form request
- FieldErrorCode: Validation error codes for individual fields
- Scenario: The simulated request a tester is configured with
- ValidationOutcome: The memoized result of authorizing and validating it
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class HttpMethod(str, Enum):
    """HTTP methods a scenario can simulate."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


class EvaluationState(str, Enum):
    """Lifecycle of the form request owned by a tester.

    A tester starts with nothing built, builds its form request lazily on the
    first assertion and evaluates it exactly once.
    Terminal state: evaluated.
    """
    NOT_BUILT = "not_built"
    BUILT_NOT_EVALUATED = "built_not_evaluated"
    EVALUATED = "evaluated"


class FieldErrorCode(str, Enum):
    """Validation error codes for individual field failures.

    Used in FieldError objects so callers can tell a missing field from a
    malformed one without parsing messages.
    """
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"
    TOO_LONG = "too_long"
    TOO_SHORT = "too_short"
    CUSTOM = "custom"


def normalize_method(method: Any) -> str:
    """Return the upper-case method name for a string or HttpMethod."""
    if isinstance(method, HttpMethod):
        return method.value
    return str(method).upper()


@dataclass
class Scenario:
    """A simulated request, built incrementally by the tester's setters.

    Attributes:
        form_request_type: FormRequest subclass, or its dotted import path
        method: Upper-case HTTP method name
        route: Request path used to simulate routing context
        payload: Simulated request input (field name -> value)

    Examples:
        >>> Scenario(method="POST", payload={"name": "Ada"}) == Scenario(
        ...     method="POST", payload={"name": "Ada"})
        True
    """
    form_request_type: Any = None
    method: str = HttpMethod.GET.value
    route: str = "/"
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationOutcome:
    """Result of authorizing and validating a form request.

    Attributes:
        authorized: False once the form request denied authorization
        errors: Field path -> ordered messages. None until validation ran
            (and stays None when authorization was denied), empty when it
            ran without errors.
        evaluated: Whether the form request has been evaluated

    Examples:
        >>> outcome = ValidationOutcome(errors={"email": ["Email is required"]}, evaluated=True)
        >>> outcome.has_error("email")
        True
        >>> outcome.flattened_messages()
        ['Email is required']
    """
    authorized: bool = True
    errors: Optional[Dict[str, List[str]]] = None
    evaluated: bool = False

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_error(self, key: str) -> bool:
        return self.errors is not None and key in self.errors

    def flattened_messages(self) -> List[str]:
        """All recorded messages across every field, in field order."""
        if not self.errors:
            return []
        return [message for messages in self.errors.values() for message in messages]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "authorized": self.authorized,
            "errors": self.errors,
            "evaluated": self.evaluated,
        }


__all__ = [
    "HttpMethod",
    "EvaluationState",
    "FieldErrorCode",
    "normalize_method",
    "Scenario",
    "ValidationOutcome",
]
