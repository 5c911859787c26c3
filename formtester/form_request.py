"""FormRequest base type: authorization and validation rules for one route.

Subclasses describe a single incoming request:

    >>> class StorePostRequest(FormRequest):
    ...     def authorize(self):
    ...         return self.user() is not None
    ...
    ...     def rules(self):
    ...         return {
    ...             "type": "object",
    ...             "properties": {"title": {"type": "string", "minLength": 1}},
    ...             "required": ["title"],
    ...         }
    ...
    ...     def messages(self):
    ...         return {"title.required": "A title is required"}

``validate_resolved()`` checks authorization, then validates the input. It
returns normally when both pass, raises AuthorizationException when
``authorize()`` denies the request and ValidationException when the input
breaks the rules.
"""

import logging
from typing import Any, Dict, Optional

from werkzeug.test import EnvironBuilder

from formtester.errors import AuthorizationException, FormTesterError, ValidationException
from formtester.routing import MatchedRoute
from formtester.stand_ins import Redirector, RouteResolver, UserResolver
from formtester.types import normalize_method
from formtester.validation import ValidationEngine, ValidationResult

logger = logging.getLogger(__name__)

_MISSING = object()


class FormRequest:
    """Base class for form requests.

    Class attributes:
        redirect: URL to redirect to after failed validation
        redirect_route: Route name to redirect to after failed validation
        redirect_action: Controller action to redirect to after failed validation
    """

    redirect: Optional[str] = None
    redirect_route: Optional[str] = None
    redirect_action: Optional[str] = None

    def __init__(self, path: str = "/", method: str = "GET", data: Optional[Dict[str, Any]] = None):
        self.path = path
        self.method = normalize_method(method)
        self._input: Dict[str, Any] = dict(data or {})
        self._validated: Optional[Dict[str, Any]] = None
        self.container: Any = None
        self.redirector: Optional[Redirector] = None
        self.route_resolver: Optional[RouteResolver] = None
        self.user_resolver: Optional[UserResolver] = None

        builder = EnvironBuilder(path=path, method=self.method)
        try:
            self.environ: Dict[str, Any] = builder.get_environ()
        finally:
            builder.close()

    @classmethod
    def create(cls, path: Optional[str], method: Optional[str], data: Optional[Dict[str, Any]] = None) -> "FormRequest":
        """Build a form request for a simulated request."""
        return cls(path=path or "/", method=method or "GET", data=data)

    # -- collaborators ------------------------------------------------------

    def set_container(self, container: Any) -> "FormRequest":
        self.container = container
        return self

    def set_redirector(self, redirector: Redirector) -> "FormRequest":
        self.redirector = redirector
        return self

    def set_route_resolver(self, resolver: RouteResolver) -> "FormRequest":
        self.route_resolver = resolver
        return self

    def set_user_resolver(self, resolver: UserResolver) -> "FormRequest":
        self.user_resolver = resolver
        return self

    # -- request input ------------------------------------------------------

    def all(self) -> Dict[str, Any]:
        return dict(self._input)

    def input(self, key: str, default: Any = None) -> Any:
        return self._input.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._input

    def merge(self, data: Dict[str, Any]) -> "FormRequest":
        """Add or replace input values, typically from prepare_for_validation."""
        self._input.update(data)
        return self

    def route(self, param: Optional[str] = None, default: Any = None) -> Any:
        """The matched route, or one of its parameters when ``param`` is given."""
        matched: Optional[MatchedRoute] = None
        if self.route_resolver is not None:
            matched = self.route_resolver.resolve_route()
        if param is None:
            return matched
        if matched is None:
            return default
        return matched.parameter(param, default)

    def user(self) -> Any:
        if self.user_resolver is None:
            return None
        return self.user_resolver.resolve_user()

    # -- hooks for subclasses -----------------------------------------------

    def authorize(self) -> bool:
        return True

    def rules(self) -> Dict[str, Any]:
        return {"type": "object"}

    def messages(self) -> Dict[str, str]:
        return {}

    def prepare_for_validation(self) -> None:
        pass

    def passed_validation(self) -> None:
        pass

    # -- validation ---------------------------------------------------------

    def validate_resolved(self) -> None:
        """Authorize the request, then validate its input.

        Raises:
            AuthorizationException: ``authorize()`` returned a falsy value
            ValidationException: The input does not satisfy ``rules()``
        """
        self.prepare_for_validation()

        if not self.authorize():
            self.failed_authorization()

        result = self.get_validator().validate(self.all())
        if not result.is_valid:
            self.failed_validation(result)

        self._validated = self._validated_subset()
        self.passed_validation()

    def get_validator(self) -> ValidationEngine:
        if self.container is not None and hasattr(self.container, "make_validator"):
            return self.container.make_validator(self.rules(), self.messages())
        return ValidationEngine(self.rules(), self.messages())

    def failed_authorization(self) -> None:
        raise AuthorizationException()

    def failed_validation(self, result: ValidationResult) -> None:
        logger.debug("%s failed validation: %s", type(self).__name__, result.messages())
        raise ValidationException(result.errors, redirect_to=self.get_redirect_url())

    def get_redirect_url(self) -> Optional[str]:
        """Where a real response would send the client after failed validation."""
        if self.redirector is None:
            return None
        url = self.redirector.get_url_generator()
        if self.redirect:
            return url.to(self.redirect)
        if self.redirect_route:
            return url.route(self.redirect_route)
        if self.redirect_action:
            return url.action(self.redirect_action)
        return url.previous()

    def validated(self, key: Optional[str] = None, default: Any = _MISSING) -> Any:
        """The validated input, or one validated value when ``key`` is given.

        Raises:
            FormTesterError: The request has not passed validation
        """
        if self._validated is None:
            raise FormTesterError(f"{type(self).__name__} has not passed validation")
        if key is None:
            return dict(self._validated)
        if default is _MISSING:
            return self._validated[key]
        return self._validated.get(key, default)

    def _validated_subset(self) -> Dict[str, Any]:
        properties = self.rules().get("properties")
        if not properties:
            return self.all()
        return {key: value for key, value in self._input.items() if key in properties}


__all__ = [
    "FormRequest",
]
