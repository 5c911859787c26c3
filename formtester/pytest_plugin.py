"""Pytest fixtures for formtester.

Enable them from a conftest.py:

    pytest_plugins = ["formtester.pytest_plugin"]

then:

    def test_store_user(form_app, form_request_tester):
        form_app.auth.acting_as(admin)
        form_request_tester(StoreUserRequest, {"name": "Ada"}).assert_validation_errors("email")
"""

from typing import Any, Callable, Dict, Optional

import pytest

from formtester.application import Application
from formtester.tester import FormRequestTester, form_request


@pytest.fixture
def form_app() -> Application:
    """A fresh application context per test."""
    return Application()


@pytest.fixture
def form_request_tester(form_app: Application) -> Callable[..., FormRequestTester]:
    """Factory building testers bound to ``form_app``."""

    def factory(
        form_request_type: Any,
        data: Optional[Dict[str, Any]] = None,
        method: str = "post",
        route: Optional[str] = None,
    ) -> FormRequestTester:
        return form_request(form_request_type, data, method=method, route=route, app=form_app)

    return factory
