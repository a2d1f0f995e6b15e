"""
Tests for the Encoder protocol.

This module contains tests for the Encoder protocol interface.
"""

import inspect

from sockwire.encoder.protocol import Encoder, to_bytes

OPERATIONS = [
    "set_input_buffer",
    "read",
    "write",
    "get_output_bytes",
    "write_string",
    "write_short",
    "write_integer",
    "write_boolean",
    "write_byte",
    "write_byte_array",
    "read_string",
    "read_short",
    "read_integer",
    "read_boolean",
    "read_byte",
    "read_byte_array",
]


def test_encoder_protocol_methods():
    """Test that the Encoder protocol has all required methods."""
    for name in OPERATIONS:
        assert hasattr(Encoder, name)
        assert not inspect.iscoroutinefunction(getattr(Encoder, name))

    assert Encoder.get_output_bytes.__annotations__.get("return") is bytes


def test_every_write_and_read_accepts_a_name():
    for name in OPERATIONS:
        if name.startswith(("write_", "read_")):
            assert "name" in inspect.signature(getattr(Encoder, name)).parameters


class IncompleteEncoder:
    def read(self) -> None:
        pass


def test_incomplete_implementation_is_rejected():
    assert not isinstance(IncompleteEncoder(), Encoder)


def test_to_bytes():
    assert to_bytes("é") == b"\xc3\xa9"
    assert to_bytes("é", "latin-1") == b"\xe9"
    assert to_bytes(bytearray(b"ab")) == b"ab"
    assert to_bytes(memoryview(b"cd")) == b"cd"
