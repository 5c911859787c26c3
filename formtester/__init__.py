"""formtester: fluent assertions for form requests, without an HTTP round trip.

A form request bundles an authorization check and input validation rules for
one route. formtester builds a form request for a simulated request, runs its
authorization and validation once, and lets tests assert on the outcome:
- Validation passed or failed
- Which fields have (or lack) errors
- Which error messages were produced
- Whether the request was authorized

Basic usage:
    >>> from formtester import FormRequest, FormRequestTester
    >>> class StoreUserRequest(FormRequest):
    ...     def rules(self):
    ...         return {"type": "object", "required": ["email"]}
    ...     def messages(self):
    ...         return {"email.required": "Email is required"}
    >>> tester = FormRequestTester().set_form_request(StoreUserRequest).post({})
    >>> tester.assert_validation_failed().outcome.errors
    {'email': ['Email is required']}
"""

import logging

__version__ = "0.1.0"

# Version info
VERSION = (0, 1, 0)

from formtester.application import Application, AuthManager
from formtester.errors import AuthorizationException, ValidationException
from formtester.form_request import FormRequest
from formtester.routing import RouteTable
from formtester.tester import FormRequestTester, form_request

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "VERSION",
    "Application",
    "AuthManager",
    "AuthorizationException",
    "ValidationException",
    "FormRequest",
    "RouteTable",
    "FormRequestTester",
    "form_request",
]
