"""Tests for panestack.errors — exception hierarchy."""

import pytest

from panestack.errors import (
    ConfigurationError,
    DuplicateRouteError,
    InvalidRouteError,
    PanestackError,
)


class TestHierarchy:
    @pytest.mark.parametrize("exc_type", [ConfigurationError, InvalidRouteError, DuplicateRouteError])
    def test_rooted_at_panestack_error(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, PanestackError)

    def test_route_errors_are_configuration_errors(self) -> None:
        assert issubclass(InvalidRouteError, ConfigurationError)
        assert issubclass(DuplicateRouteError, ConfigurationError)


class TestInvalidRouteError:
    def test_carries_path_and_reason(self) -> None:
        err = InvalidRouteError("users", "path must start with '/'")

        assert err.path == "users"
        assert err.reason == "path must start with '/'"
        assert str(err) == "Invalid route 'users': path must start with '/'"


class TestDuplicateRouteError:
    def test_message_names_path_and_fix(self) -> None:
        err = DuplicateRouteError("/a")

        assert err.path == "/a"
        assert "'/a'" in str(err)
        assert "duplicate_routes" in str(err)
