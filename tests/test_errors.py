"""
Tests for the error hierarchy.

This module contains tests for the error hierarchy of sockwire.
"""

import pytest

from sockwire.errors import (
    ConfigurationError,
    ConnectionError,
    ConnectionFailedError,
    ConnectionTimeoutError,
    DeserializationError,
    EncoderError,
    EncoderStateError,
    MissingFieldError,
    OutOfRangeError,
    ReceiveError,
    SerializationError,
    SockwireError,
    TimeoutError,
    TransportError,
)


def test_error_hierarchy():
    """Test that the error hierarchy is correctly implemented."""
    assert issubclass(ConfigurationError, SockwireError)
    assert issubclass(TimeoutError, SockwireError)
    assert issubclass(TransportError, SockwireError)
    assert issubclass(ConnectionError, TransportError)
    assert issubclass(ConnectionFailedError, ConnectionError)
    assert issubclass(ConnectionTimeoutError, ConnectionError)
    assert issubclass(ReceiveError, TransportError)
    assert issubclass(EncoderError, SockwireError)
    assert issubclass(EncoderStateError, EncoderError)
    assert issubclass(OutOfRangeError, EncoderError)
    assert issubclass(MissingFieldError, EncoderError)
    assert issubclass(SerializationError, EncoderError)
    assert issubclass(DeserializationError, EncoderError)


def test_error_payloads():
    failed = ConnectionFailedError("Connection to host:1 failed: 111", code=111)
    assert failed.code == 111
    assert str(failed) == "Connection to host:1 failed: 111"

    timed_out = ConnectionTimeoutError("timed out", elapsed_ms=50.2)
    assert timed_out.elapsed_ms == 50.2

    receive = ReceiveError("Couldn't read response: 0", code=0)
    assert receive.code == 0

    missing = MissingFieldError("name")
    assert missing.field == "name"
    assert "name" in str(missing)


def test_error_handling():
    """Test error handling in a typical use case."""
    try:
        raise ConnectionTimeoutError("Connection timed out after 50ms")
    except ConnectionError as e:
        assert "timed out" in str(e)
    except TransportError:
        pytest.fail("ConnectionTimeoutError should be caught by ConnectionError")

    try:
        raise OutOfRangeError("past the end")
    except EncoderError as e:
        assert "past the end" in str(e)
    except SockwireError:
        pytest.fail("OutOfRangeError should be caught by EncoderError")
