"""
sockwire: a TCP client with pluggable wire encoders.
"""

from sockwire.connection import Connection, ConnectionState
from sockwire.encoder import (
    BigEndianEncoder,
    BinaryEncoder,
    Encoder,
    JSONEncoder,
    LittleEndianEncoder,
    SecureEncoder,
    StringEncoder,
)
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
from sockwire.packet import Packet

__version__ = "0.1.0"

__all__ = [
    "Connection",
    "ConnectionState",
    "Packet",
    "Encoder",
    "BinaryEncoder",
    "BigEndianEncoder",
    "LittleEndianEncoder",
    "StringEncoder",
    "JSONEncoder",
    "SecureEncoder",
    "SockwireError",
    "ConfigurationError",
    "TimeoutError",
    "TransportError",
    "ConnectionError",
    "ConnectionFailedError",
    "ConnectionTimeoutError",
    "ReceiveError",
    "EncoderError",
    "EncoderStateError",
    "OutOfRangeError",
    "MissingFieldError",
    "SerializationError",
    "DeserializationError",
]
