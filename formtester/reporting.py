"""Assertion reporters: how a tester surfaces pass/fail to the test framework.

PytestReporter fails through ``pytest.fail``. UnitTestReporter wraps a
``unittest.TestCase`` and uses its assertion methods, so failures show up as
that test's failures.
"""

from typing import Any, Container, Optional

import pytest
from typing_extensions import Protocol


class AssertionReporter(Protocol):
    def fail(self, message: str) -> None: ...

    def assert_true(self, condition: bool, message: str) -> None: ...

    def assert_false(self, condition: bool, message: str) -> None: ...

    def assert_contains(self, needle: Any, haystack: Container[Any], message: str) -> None: ...

    def succeed(self, message: str = "") -> None: ...


class PytestReporter:
    """Reports through pytest.

    Attributes:
        assertion_count: Number of assertions that passed
    """

    def __init__(self) -> None:
        self.assertion_count = 0

    def fail(self, message: str) -> None:
        pytest.fail(message, pytrace=False)

    def assert_true(self, condition: bool, message: str) -> None:
        if not condition:
            self.fail(message)
        self.assertion_count += 1

    def assert_false(self, condition: bool, message: str) -> None:
        self.assert_true(not condition, message)

    def assert_contains(self, needle: Any, haystack: Container[Any], message: str) -> None:
        self.assert_true(needle in haystack, message)

    def succeed(self, message: str = "") -> None:
        self.assertion_count += 1


class UnitTestReporter:
    """Reports through a ``unittest.TestCase``'s assertion methods."""

    def __init__(self, test_case: Any) -> None:
        self.test_case = test_case

    def fail(self, message: str) -> None:
        self.test_case.fail(message)

    def assert_true(self, condition: bool, message: str) -> None:
        self.test_case.assertTrue(condition, message)

    def assert_false(self, condition: bool, message: str) -> None:
        self.test_case.assertFalse(condition, message)

    def assert_contains(self, needle: Any, haystack: Container[Any], message: str) -> None:
        self.test_case.assertIn(needle, haystack, message)

    def succeed(self, message: str = "") -> None:
        self.test_case.assertTrue(True, message)


def default_reporter(test_case: Optional[Any] = None) -> AssertionReporter:
    """UnitTestReporter for a given TestCase, PytestReporter otherwise."""
    if test_case is not None:
        return UnitTestReporter(test_case)
    return PytestReporter()


__all__ = [
    "AssertionReporter",
    "PytestReporter",
    "UnitTestReporter",
    "default_reporter",
]
