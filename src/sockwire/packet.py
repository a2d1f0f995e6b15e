"""
Packet base class.

A packet owns exactly one encoder and two hooks. ``on_instance`` runs once the
encoder is in place and receives the constructor's ``args``; ``on_response``
runs after a connection has fed the response into the encoder::

    class SetUserName(Packet):
        def on_instance(self, name):
            self.encoder.write()
            self.encoder.write_short(1, "id")
            self.encoder.write_string(name, "name")

        def on_response(self):
            self.id = self.encoder.read_short("id")
            self.name = self.encoder.read_string("name")

    packet = SetUserName(JSONEncoder(), args=["test"])
    connection.send(packet)
"""

from typing import Any, Dict, Optional, Sequence

from sockwire.config import resolve_config
from sockwire.encoder.delimited import StringEncoder
from sockwire.encoder.protocol import Encoder
from sockwire.encoder.registry import get_encoder_registry
from sockwire.errors import ConfigurationError


def default_encoder(config: Optional[Dict[str, Any]] = None) -> Encoder:
    """Create the encoder named by the ``encoder`` config key.

    Falls back to a StringEncoder when no encoder is configured.

    Raises:
        ConfigurationError: If the configured name is not registered.
    """
    name = resolve_config(config, "encoder", None, str)
    if name is None:
        return StringEncoder()
    registry = get_encoder_registry()
    try:
        return registry.create_encoder(name)
    except KeyError as e:
        raise ConfigurationError(
            f"Invalid encoder: {name}. "
            f"Available encoders: {', '.join(registry.get_registered_names())}"
        ) from e


class Packet:
    """A request/response unit bound to one encoder."""

    wait_for_response = True

    def __init__(
        self,
        encoder: Optional[Encoder] = None,
        args: Sequence[Any] = (),
        config: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the packet.

        Args:
            encoder: Encoder used to write the request and read the response.
                Defaults to the configured encoder, or a StringEncoder.
            args: Ordered arguments handed to ``on_instance``.
            config: Configuration options consulted for the default encoder.
        """
        self.encoder = encoder if encoder is not None else default_encoder(config)
        self.on_instance(*args)

    def on_instance(self, *args: Any) -> None:
        """Hook run at the end of construction."""
        pass

    def on_response(self) -> None:
        """Hook run after the response has been decoded into the encoder."""
        pass
