"""Collaborator interfaces and the stand-ins a tester injects into form requests.

A form request built outside a live HTTP request still needs a redirector,
a way to resolve its route and a way to resolve the acting user. The
protocols below name those capabilities; the classes implement them without
needing an HTTP response context.
"""

import logging
from typing import Any, Dict, Optional

from typing_extensions import Protocol

from formtester.routing import MatchedRoute, RouteTable

logger = logging.getLogger(__name__)


class UrlGenerator(Protocol):
    def to(self, *args: Any, **kwargs: Any) -> Optional[str]: ...

    def route(self, *args: Any, **kwargs: Any) -> Optional[str]: ...

    def action(self, *args: Any, **kwargs: Any) -> Optional[str]: ...

    def previous(self, *args: Any, **kwargs: Any) -> Optional[str]: ...


class Redirector(Protocol):
    def get_url_generator(self) -> UrlGenerator: ...

    def to(self, *args: Any, **kwargs: Any) -> Any: ...

    def route(self, *args: Any, **kwargs: Any) -> Any: ...

    def action(self, *args: Any, **kwargs: Any) -> Any: ...

    def back(self, *args: Any, **kwargs: Any) -> Any: ...


class RouteResolver(Protocol):
    def resolve_route(self) -> Optional[MatchedRoute]: ...


class UserResolver(Protocol):
    def resolve_user(self) -> Any: ...


class NullUrlGenerator:
    """URL generator that accepts anything and generates nothing."""

    def to(self, *args: Any, **kwargs: Any) -> None:
        return None

    def route(self, *args: Any, **kwargs: Any) -> None:
        return None

    def action(self, *args: Any, **kwargs: Any) -> None:
        return None

    def previous(self, *args: Any, **kwargs: Any) -> None:
        return None


class NullRedirector:
    """Redirector that never builds a response.

    Its URL generator is a NullUrlGenerator, so a form request computing its
    redirect target after failed validation gets None back.
    """

    def __init__(self, url_generator: Optional[UrlGenerator] = None) -> None:
        self._url_generator = url_generator or NullUrlGenerator()

    def get_url_generator(self) -> UrlGenerator:
        return self._url_generator

    def to(self, *args: Any, **kwargs: Any) -> None:
        return None

    def route(self, *args: Any, **kwargs: Any) -> None:
        return None

    def action(self, *args: Any, **kwargs: Any) -> None:
        return None

    def back(self, *args: Any, **kwargs: Any) -> None:
        return None


class BestEffortRouteResolver:
    """Matches a simulated request against the route table.

    Matching is context for the form request, not something a test asserts
    on: any error raised while matching resolves to no route.

    Attributes:
        routes: The application's route table
        environ: WSGI environ of the simulated request
    """

    def __init__(self, routes: RouteTable, environ: Dict[str, Any]) -> None:
        self.routes = routes
        self.environ = environ

    def resolve_route(self) -> Optional[MatchedRoute]:
        try:
            return self.routes.match(self.environ)
        except Exception as exc:
            logger.debug(
                "No route for %s %s: %s",
                self.environ.get("REQUEST_METHOD"),
                self.environ.get("PATH_INFO"),
                exc,
            )
            return None


class AuthUserResolver:
    """Resolves the acting user from the application's auth manager on each call."""

    def __init__(self, auth: Any) -> None:
        self.auth = auth

    def resolve_user(self) -> Any:
        return self.auth.user()


__all__ = [
    "UrlGenerator",
    "Redirector",
    "RouteResolver",
    "UserResolver",
    "NullUrlGenerator",
    "NullRedirector",
    "BestEffortRouteResolver",
    "AuthUserResolver",
]
