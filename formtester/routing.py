"""Route table used to give form requests their routing context.

Form requests often read route parameters (``self.route("post")``) inside
``authorize()`` or ``rules()``. The RouteTable wraps a werkzeug ``Map`` so a
simulated request can be matched against the application's routes the same
way a live request would be.

Usage:
    >>> routes = RouteTable().add("/posts/<int:post>", "posts.update", methods=["PUT"])
    >>> routes.url_for("posts.update", post=7)
    '/posts/7'
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from werkzeug.routing import Map, Rule


@dataclass(frozen=True)
class MatchedRoute:
    """A route the simulated request matched.

    Attributes:
        name: Endpoint name the route was registered under
        rule: The route's path pattern
        parameters: Converted values of the path placeholders
    """
    name: str
    rule: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def parameter(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)


class RouteTable:
    """Named application routes, matched and built with werkzeug.

    Examples:
        >>> from werkzeug.test import EnvironBuilder
        >>> routes = RouteTable().add("/users/<int:user>", "users.show")
        >>> routes.match(EnvironBuilder(path="/users/3").get_environ())
        MatchedRoute(name='users.show', rule='/users/<int:user>', parameters={'user': 3})
    """

    def __init__(self, server_name: str = "localhost") -> None:
        self.server_name = server_name
        self._map = Map()

    def add(self, rule: str, name: str, methods: Optional[Iterable[str]] = None) -> "RouteTable":
        """Register a route.

        Args:
            rule: werkzeug path pattern, e.g. "/posts/<int:post>"
            name: Endpoint name used by ``url_for`` and reported on matches
            methods: Allowed HTTP methods; any method when omitted
        """
        allowed = [m.upper() for m in methods] if methods is not None else None
        self._map.add(Rule(rule, endpoint=name, methods=allowed))
        return self

    def match(self, environ: Dict[str, Any]) -> MatchedRoute:
        """Match a WSGI environ against the table.

        The host comes from the environ; ``server_name`` only applies to ``url_for``.

        Raises:
            werkzeug.exceptions.NotFound: No route matches the path
            werkzeug.exceptions.MethodNotAllowed: The path matches under another method
            werkzeug.routing.RequestRedirect: The path only matches with a trailing slash
        """
        adapter = self._map.bind_to_environ(environ)
        rule, parameters = adapter.match(return_rule=True)
        return MatchedRoute(name=rule.endpoint, rule=rule.rule, parameters=dict(parameters))

    def url_for(self, name: str, **parameters: Any) -> str:
        """Build the path of a named route.

        Raises:
            werkzeug.routing.BuildError: Unknown name or missing parameters
        """
        adapter = self._map.bind(self.server_name)
        return adapter.build(name, parameters)

    def __len__(self) -> int:
        return len(list(self._map.iter_rules()))

    def __contains__(self, name: object) -> bool:
        return any(rule.endpoint == name for rule in self._map.iter_rules())


__all__ = [
    "MatchedRoute",
    "RouteTable",
]
