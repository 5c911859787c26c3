"""Unit tests for the route table and the collaborator stand-ins."""

import pytest
from werkzeug.exceptions import MethodNotAllowed, NotFound
from werkzeug.routing import BuildError
from werkzeug.test import EnvironBuilder

from formtester.application import Application, AuthManager
from formtester.routing import MatchedRoute, RouteTable
from formtester.stand_ins import (
    AuthUserResolver,
    BestEffortRouteResolver,
    NullRedirector,
    NullUrlGenerator,
)


def environ(path, method="GET"):
    return EnvironBuilder(path=path, method=method).get_environ()


@pytest.fixture
def routes():
    return (
        RouteTable()
        .add("/users", "users.store", methods=["POST"])
        .add("/users/<int:user>", "users.update", methods=["put", "patch"])
        .add("/pages/<slug>", "pages.show")
    )


class TestRouteTable:
    """Test matching and building routes."""

    def test_match_returns_name_and_parameters(self, routes):
        """Should report the endpoint and converted parameters."""
        matched = routes.match(environ("/users/12", "PUT"))
        assert matched == MatchedRoute(name="users.update", rule="/users/<int:user>", parameters={"user": 12})
        assert matched.parameter("user") == 12
        assert matched.parameter("missing", "fallback") == "fallback"

    def test_route_without_methods_accepts_any(self, routes):
        """Should match any method when none were given."""
        assert routes.match(environ("/pages/about", "DELETE")).parameter("slug") == "about"

    def test_unknown_path(self, routes):
        """Should raise NotFound for unmatched paths."""
        with pytest.raises(NotFound):
            routes.match(environ("/nowhere"))

    def test_wrong_method(self, routes):
        """Should raise MethodNotAllowed when only the path matches."""
        with pytest.raises(MethodNotAllowed):
            routes.match(environ("/users", "GET"))

    def test_url_for(self, routes):
        """Should build paths for named routes."""
        assert routes.url_for("users.update", user=3) == "/users/3"
        assert routes.url_for("users.store") == "/users"

    def test_url_for_unknown_name(self, routes):
        """Should raise BuildError for unknown route names."""
        with pytest.raises(BuildError):
            routes.url_for("nope")

    def test_len_and_contains(self, routes):
        """Should count routes and look them up by name."""
        assert len(routes) == 3
        assert "users.store" in routes
        assert "users.destroy" not in routes

    def test_custom_server_name(self):
        """Should match simulated requests whatever server name the table builds URLs for."""
        routes = RouteTable(server_name="example.com").add("/posts/<int:post>", "posts.update")

        matched = routes.match(environ("/posts/4", "PUT"))

        assert matched.parameter("post") == 4
        assert routes.url_for("posts.update", post=4) == "/posts/4"
        assert BestEffortRouteResolver(routes, environ("/posts/4")).resolve_route() == matched


class TestNullRedirector:
    """Test the redirector stand-in."""

    @pytest.mark.parametrize("name", ["to", "route", "action", "previous"])
    def test_url_generator_returns_none(self, name):
        """Should accept any arguments and return None."""
        generator = NullRedirector().get_url_generator()
        assert isinstance(generator, NullUrlGenerator)
        assert getattr(generator, name)("anything", 1, key="value") is None

    @pytest.mark.parametrize("name", ["to", "route", "action", "back"])
    def test_redirects_return_none(self, name):
        """Should never build a redirect."""
        assert getattr(NullRedirector(), name)("/somewhere", status=302) is None

    def test_custom_url_generator(self):
        """Should hand out the URL generator it was given."""
        generator = NullUrlGenerator()
        assert NullRedirector(generator).get_url_generator() is generator


class TestResolvers:
    """Test the route and user resolvers."""

    def test_route_resolver_match(self, routes):
        """Should resolve the matching route."""
        resolver = BestEffortRouteResolver(routes, environ("/users", "POST"))
        assert resolver.resolve_route().name == "users.store"

    @pytest.mark.parametrize("path,method", [
        ("/nowhere", "GET"),
        ("/users", "DELETE"),
        ("/users/abc", "PUT"),
    ])
    def test_route_resolver_swallows_errors(self, routes, path, method):
        """Should resolve to None instead of raising."""
        assert BestEffortRouteResolver(routes, environ(path, method)).resolve_route() is None

    def test_route_resolver_swallows_any_exception(self):
        """Should resolve to None even for errors unrelated to routing."""

        class ExplodingTable(RouteTable):
            def match(self, environ):
                raise RuntimeError("boom")

        assert BestEffortRouteResolver(ExplodingTable(), environ("/")).resolve_route() is None

    def test_user_resolver_reads_auth_at_call_time(self):
        """Should return whoever is acting when asked."""
        auth = AuthManager()
        resolver = AuthUserResolver(auth)
        assert resolver.resolve_user() is None

        auth.acting_as({"id": 1})
        assert resolver.resolve_user() == {"id": 1}

        auth.logout()
        assert resolver.resolve_user() is None
        assert auth.check() is False


class TestApplication:
    """Test the application context."""

    def test_defaults(self):
        """Should create an empty route table and a guest auth manager."""
        app = Application()
        assert len(app.routes) == 0
        assert app.auth.user() is None

    def test_make_validator(self):
        """Should build validators with the given messages."""
        validator = Application().make_validator(
            {"type": "object", "required": ["email"]}, {"email": "Email is required"}
        )
        assert validator.validate({}).messages() == {"email": ["Email is required"]}
