"""Host application context handed to form requests.

The Application bundles what a form request needs from its surroundings:
the route table, the auth manager that knows the acting user, and a factory
for validators. Tests create one explicitly and pass it to the tester
instead of reaching for global state.

Usage:
    >>> app = Application()
    >>> app.routes.add("/posts", "posts.store", methods=["POST"])  # doctest: +ELLIPSIS
    <formtester.routing.RouteTable object at ...>
    >>> app.auth.acting_as({"id": 1}).user()
    {'id': 1}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from formtester.routing import RouteTable
from formtester.validation import ValidationEngine


class AuthManager:
    """Holds the currently authenticated user, if any."""

    def __init__(self, user: Any = None) -> None:
        self._user = user

    def user(self) -> Any:
        return self._user

    def check(self) -> bool:
        return self._user is not None

    def acting_as(self, user: Any) -> "AuthManager":
        self._user = user
        return self

    def logout(self) -> "AuthManager":
        self._user = None
        return self


@dataclass
class Application:
    """Application context shared by the form requests a test builds.

    Attributes:
        routes: Route table simulated requests are matched against
        auth: Auth manager resolving the acting user
    """
    routes: RouteTable = field(default_factory=RouteTable)
    auth: AuthManager = field(default_factory=AuthManager)

    def make_validator(
        self, schema: Dict[str, Any], messages: Optional[Dict[str, str]] = None
    ) -> ValidationEngine:
        return ValidationEngine(schema, messages)


__all__ = [
    "AuthManager",
    "Application",
]
