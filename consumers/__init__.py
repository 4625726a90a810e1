"""Consumer implementations for the companion.

Importing this package registers all built-in consumer types.
"""

from consumers.encoder_consumer import EncoderConsumer

__all__ = ["EncoderConsumer"]
