"""FormRequestTester: fluent assertions against a single form request.

The tester simulates a request to one FormRequest without running an HTTP
request/response cycle. Configure the scenario, then assert; the form
request is built and evaluated on the first assertion and the outcome is
reused by every assertion after it.

Usage:
    >>> tester = FormRequestTester(app)  # doctest: +SKIP
    >>> (tester.set_form_request(StoreUserRequest)  # doctest: +SKIP
    ...     .with_route("/users")
    ...     .post({"name": "Ada"})
    ...     .assert_authorized()
    ...     .assert_validation_failed()
    ...     .assert_validation_errors(["email"])
    ...     .assert_validation_messages(["Email is required"]))
"""

import importlib
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from formtester.application import Application
from formtester.errors import (
    AuthorizationException,
    FormRequestNotConfiguredError,
    FormTesterError,
    ValidationException,
)
from formtester.form_request import FormRequest
from formtester.lifecycle import EvaluationLifecycle
from formtester.reporting import AssertionReporter, default_reporter
from formtester.stand_ins import AuthUserResolver, BestEffortRouteResolver, NullRedirector
from formtester.types import EvaluationState, HttpMethod, Scenario, ValidationOutcome, normalize_method

logger = logging.getLogger(__name__)

NOT_AUTHORIZED_MESSAGE = "Form request is not authorized"

Keys = Union[str, Iterable[str]]


def _wrap(value: Any) -> List[Any]:
    """Wrap a single value in a list; lists and other iterables are copied."""
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return [value]
    try:
        return list(value)
    except TypeError:
        return [value]


def resolve_form_request_type(reference: Any) -> Type[FormRequest]:
    """Turn a FormRequest subclass or its dotted path into the class.

    Both "package.module.ClassName" and "package.module:ClassName" are accepted.

    Raises:
        FormRequestNotConfiguredError: No form request type was set
        FormTesterError: The reference does not name a FormRequest subclass
        ImportError: The module cannot be imported
    """
    if reference is None:
        raise FormRequestNotConfiguredError(
            "No form request type set; call set_form_request() before asserting"
        )

    if isinstance(reference, str):
        if ":" in reference:
            module_name, _, attribute = reference.partition(":")
        else:
            module_name, _, attribute = reference.rpartition(".")
        if not module_name or not attribute:
            raise FormTesterError(f"Invalid form request reference: {reference!r}")
        reference = getattr(importlib.import_module(module_name), attribute)

    if not (isinstance(reference, type) and issubclass(reference, FormRequest)):
        raise FormTesterError(f"{reference!r} is not a FormRequest subclass")
    return reference


class FormRequestTester:
    """Simulates one request to a form request and asserts on the outcome.

    Use a fresh tester per scenario. Setters called after the first
    assertion do not re-run the evaluation.

    Attributes:
        app: Application context (route table, auth manager) for the form request
        reporter: Where assertion results are reported
        scenario: The simulated request
        outcome: Memoized authorization and validation result
    """

    def __init__(
        self,
        app: Optional[Application] = None,
        reporter: Optional[AssertionReporter] = None,
        test_case: Any = None,
    ):
        """Initialize the tester.

        Args:
            app: Application context; a fresh one when omitted
            reporter: Assertion reporter; defaults to a UnitTestReporter when
                ``test_case`` is given, a PytestReporter otherwise
            test_case: Optional unittest.TestCase to report through
        """
        self.app = app if app is not None else Application()
        self.reporter = reporter if reporter is not None else default_reporter(test_case)
        self.scenario = Scenario()
        self.outcome = ValidationOutcome()
        self._lifecycle = EvaluationLifecycle()
        self._form_request: Optional[FormRequest] = None

    # -----------------------------------------------------------------
    # Scenario setters
    # -----------------------------------------------------------------

    def set_form_request(self, form_request_type: Any) -> "FormRequestTester":
        """Set the FormRequest subclass (or its dotted import path) under test."""
        self._warn_if_evaluated("set_form_request")
        self.scenario.form_request_type = form_request_type
        return self

    def with_route(self, route: str) -> "FormRequestTester":
        """Set the path of the simulated request."""
        self._warn_if_evaluated("with_route")
        self.scenario.route = route
        return self

    def with_named_route(self, name: str, **parameters: Any) -> "FormRequestTester":
        """Set the path of the simulated request from a named route."""
        return self.with_route(self.app.routes.url_for(name, **parameters))

    def method(self, method: Union[str, HttpMethod], data: Optional[Dict[str, Any]] = None) -> "FormRequestTester":
        """Set the HTTP method and input of the simulated request."""
        self._warn_if_evaluated("method")
        self.scenario.method = normalize_method(method)
        self.scenario.payload = dict(data or {})
        return self

    def get(self) -> "FormRequestTester":
        return self.method(HttpMethod.GET, {})

    def post(self, data: Optional[Dict[str, Any]] = None) -> "FormRequestTester":
        return self.method(HttpMethod.POST, data)

    def put(self, data: Optional[Dict[str, Any]] = None) -> "FormRequestTester":
        return self.method(HttpMethod.PUT, data)

    def patch(self, data: Optional[Dict[str, Any]] = None) -> "FormRequestTester":
        return self.method(HttpMethod.PATCH, data)

    def delete(self, data: Optional[Dict[str, Any]] = None) -> "FormRequestTester":
        return self.method(HttpMethod.DELETE, data)

    def _warn_if_evaluated(self, setter: str) -> None:
        if self._lifecycle.is_evaluated():
            logger.warning(
                "%s() called after the form request was evaluated; the outcome will not change",
                setter,
            )

    # -----------------------------------------------------------------
    # Building and evaluating the form request
    # -----------------------------------------------------------------

    @property
    def state(self) -> EvaluationState:
        return self._lifecycle.state

    def get_current_form_request(self) -> Optional[FormRequest]:
        return self._form_request

    def ensure_evaluated(self) -> None:
        """Build and evaluate the form request unless that already happened."""
        if self._lifecycle.is_evaluated():
            return

        if not self._lifecycle.is_built():
            self.build_form_request()

        self._evaluate()

    def build_form_request(self) -> FormRequest:
        """Create the form request for the scenario and wire in its collaborators."""
        form_request_type = resolve_form_request_type(self.scenario.form_request_type)

        form_request = form_request_type.create(
            self.scenario.route, self.scenario.method, self.scenario.payload
        )
        form_request.set_container(self.app).set_redirector(NullRedirector())
        form_request.set_route_resolver(BestEffortRouteResolver(self.app.routes, form_request.environ))
        form_request.set_user_resolver(AuthUserResolver(self.app.auth))

        # Raises when already built, leaving the current form request in place
        self._lifecycle.transition_to(EvaluationState.BUILT_NOT_EVALUATED)
        self._form_request = form_request
        logger.debug(
            "Built %s for %s %s",
            form_request_type.__name__,
            self.scenario.method,
            self.scenario.route,
        )
        return form_request

    def _evaluate(self) -> None:
        if self._form_request is None:
            raise FormTesterError("Form request must be built before it is evaluated")
        try:
            self._form_request.validate_resolved()
        except ValidationException as exc:
            self.outcome.errors = exc.errors()
        except AuthorizationException:
            self.outcome.authorized = False
        else:
            self.outcome.errors = {}

        self.outcome.evaluated = True
        self._lifecycle.transition_to(EvaluationState.EVALUATED)
        logger.debug(
            "Evaluated %s: authorized=%s errors=%s",
            type(self._form_request).__name__,
            self.outcome.authorized,
            self.outcome.errors,
        )

    # -----------------------------------------------------------------
    # Assertions
    # -----------------------------------------------------------------

    def _check_authorized(self) -> None:
        if not self.outcome.authorized:
            self.reporter.fail(NOT_AUTHORIZED_MESSAGE)

    def assert_validation_passed(self) -> "FormRequestTester":
        """Assert the request was authorized and produced no validation errors."""
        self.ensure_evaluated()
        self._check_authorized()

        if self.outcome.has_errors():
            self.reporter.fail(f"Validation failed: {json.dumps(self.outcome.errors, default=str)}")
            return self

        self.succeed("Validation passed successfully")
        return self

    def assert_validation_failed(self) -> "FormRequestTester":
        """Assert the request was authorized and produced validation errors."""
        self.ensure_evaluated()
        self._check_authorized()

        if self.outcome.has_errors():
            self.succeed("Validation failed")
            return self

        self.reporter.fail("Validation passed, expected it to fail")
        return self

    def assert_validation_errors(self, keys: Keys) -> "FormRequestTester":
        """Assert every given field has at least one validation error."""
        self.ensure_evaluated()
        self._check_authorized()

        for key in _wrap(keys):
            self.reporter.assert_true(
                self.outcome.has_error(key),
                f"Failed to find a validation error for key: '{key}'",
            )
        return self

    def assert_validation_errors_missing(self, keys: Keys) -> "FormRequestTester":
        """Assert none of the given fields has a validation error."""
        self.ensure_evaluated()
        self._check_authorized()

        for key in _wrap(keys):
            self.reporter.assert_true(
                not self.outcome.has_error(key),
                f"Validation error for key: '{key}' was found in the errors",
            )
        return self

    def assert_validation_messages(self, messages: Keys) -> "FormRequestTester":
        """Assert each message appears among the errors of any field.

        Authorization is not checked here; an unauthorized request has no
        messages, so any expected message is reported as missing.
        """
        self.ensure_evaluated()

        recorded = self.outcome.flattened_messages()
        for message in _wrap(messages):
            self.reporter.assert_contains(
                message,
                recorded,
                f"Failed to find the validation message '{message}' in the validation messages",
            )
        return self

    def assert_authorized(self) -> "FormRequestTester":
        self.ensure_evaluated()
        self.reporter.assert_true(self.outcome.authorized, "Form request was not authorized")
        return self

    def assert_not_authorized(self) -> "FormRequestTester":
        self.ensure_evaluated()
        self.reporter.assert_false(self.outcome.authorized, "Form request was authorized")
        return self

    def succeed(self, message: str = "") -> None:
        """Report an unconditional pass."""
        self.reporter.succeed(message)


def form_request(
    form_request_type: Any,
    data: Optional[Dict[str, Any]] = None,
    method: Union[str, HttpMethod] = HttpMethod.POST,
    route: Optional[str] = None,
    app: Optional[Application] = None,
    reporter: Optional[AssertionReporter] = None,
) -> FormRequestTester:
    """Create a tester for ``form_request_type`` in one call.

    Examples:
        >>> form_request(StoreUserRequest, {"email": ""}).assert_validation_failed()  # doctest: +SKIP
    """
    tester = FormRequestTester(app=app, reporter=reporter)
    tester.set_form_request(form_request_type).method(method, data)
    if route is not None:
        tester.with_route(route)
    return tester


__all__ = [
    "FormRequestTester",
    "form_request",
    "resolve_form_request_type",
    "NOT_AUTHORIZED_MESSAGE",
]
