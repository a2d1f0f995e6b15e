"""
Registry for encoder factories.

This module provides a registry for encoder factories, allowing an encoder to
be chosen by name, for example from configuration.
"""

from typing import Any, Callable, Dict, List, Optional

from sockwire.encoder.binary import BigEndianEncoder, LittleEndianEncoder
from sockwire.encoder.delimited import StringEncoder
from sockwire.encoder.json import JSONEncoder
from sockwire.encoder.protocol import Encoder
from sockwire.encoder.secure import SecureEncoder

EncoderFactory = Callable[..., Encoder]


class EncoderRegistry:
    """Registry for encoder factories."""

    def __init__(self):
        """Initialize a new encoder registry."""
        self._factories: Dict[str, EncoderFactory] = {}

    def register(self, name: str, factory: EncoderFactory) -> None:
        """Register an encoder factory.

        Args:
            name: The name to register the factory under.
            factory: Callable returning a new encoder instance.
        """
        self._factories[name] = factory

    def get(self, name: str) -> EncoderFactory:
        """Get an encoder factory by name.

        Args:
            name: The name of the factory to get.

        Returns:
            The factory.

        Raises:
            KeyError: If no factory is registered with the given name.
        """
        return self._factories[name]

    def get_registered_names(self) -> List[str]:
        return list(self._factories)

    def create_encoder(self, name: str, **kwargs: Any) -> Encoder:
        """Create an encoder using a registered factory.

        Args:
            name: The name of the factory to use.
            **kwargs: Encoder-specific options.

        Returns:
            A new encoder instance.

        Raises:
            KeyError: If no factory is registered with the given name.
        """
        return self.get(name)(**kwargs)


def _create_secure(inner: str = "big_endian", transform: Any = "base64", **kwargs: Any) -> Encoder:
    return SecureEncoder(get_encoder_registry().create_encoder(inner, **kwargs), transform)


_registry: Optional[EncoderRegistry] = None


def get_encoder_registry() -> EncoderRegistry:
    """Get the process-wide registry, populated with the built-in encoders."""
    global _registry
    if _registry is None:
        _registry = EncoderRegistry()
        _registry.register("big_endian", BigEndianEncoder)
        _registry.register("little_endian", LittleEndianEncoder)
        _registry.register("string", StringEncoder)
        _registry.register("json", JSONEncoder)
        _registry.register("secure", _create_secure)
    return _registry
