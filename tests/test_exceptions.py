"""Tests for exception classes."""

import pytest

from schedule_gcal.exceptions import (
    AuthError,
    ConfigurationError,
    DocumentNotFoundError,
    GatewayError,
    ParseError,
    PersistenceError,
    ScheduleSyncError,
)


def test_schedule_sync_error():
    """Test ScheduleSyncError base exception."""
    error = ScheduleSyncError("Test error")
    assert str(error) == "Test error"
    assert isinstance(error, Exception)


@pytest.mark.parametrize(
    "exc_class",
    [ParseError, DocumentNotFoundError, ConfigurationError, PersistenceError, AuthError, GatewayError],
)
def test_subclasses_share_base(exc_class):
    """Test every error can be caught as ScheduleSyncError."""
    with pytest.raises(ScheduleSyncError):
        raise exc_class("boom")


def test_gateway_error_carries_status_and_body():
    """Test HTTP errors keep the status code and body."""
    error = GatewayError("Request failed", status_code=500, body="backend error")
    assert str(error) == "Request failed"
    assert error.status_code == 500
    assert error.body == "backend error"


def test_auth_error_defaults():
    """Test status and body are optional."""
    error = AuthError("Invalid key")
    assert error.status_code is None
    assert error.body == ""
    assert not isinstance(error, GatewayError)
