"""
Error hierarchy for sockwire.

Every error raised by the package derives from SockwireError, so callers can
catch a single base class or narrow down to the transport or encoder branch.
"""

from typing import Optional


class SockwireError(Exception):
    """Base class for all sockwire errors."""

    pass


class ConfigurationError(SockwireError):
    """Error raised when a configuration value is missing or invalid."""

    pass


class TimeoutError(SockwireError):
    """Error raised when an operation run on a worker misses its deadline."""

    pass


class TransportError(SockwireError):
    """Base class for socket-level errors."""

    pass


class ConnectionError(TransportError):
    """Error establishing a connection."""

    pass


class ConnectionFailedError(ConnectionError):
    """The connect call reported an error other than 'in progress'."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ConnectionTimeoutError(ConnectionError):
    """The connect window elapsed without the socket becoming connected."""

    def __init__(self, message: str, elapsed_ms: float = 0.0):
        super().__init__(message)
        self.elapsed_ms = elapsed_ms


class ReceiveError(TransportError):
    """No response payload could be read from the socket."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class EncoderError(SockwireError):
    """Base class for encoder errors."""

    pass


class EncoderStateError(EncoderError):
    """An input accessor was used before read() parsed the raw input."""

    pass


class OutOfRangeError(EncoderError):
    """A positional read went past the end of the input buffer."""

    pass


class MissingFieldError(EncoderError):
    """A named read found no matching entry in the input buffer."""

    def __init__(self, field: str):
        super().__init__(f"Field {field!r} is not present in the input buffer")
        self.field = field


class SerializationError(EncoderError):
    """A value could not be rendered into the encoder's wire format."""

    pass


class DeserializationError(EncoderError):
    """Raw input could not be parsed by the encoder."""

    pass
