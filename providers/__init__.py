"""Provider implementations for the companion.

Importing this package registers all built-in provider types.
"""

from providers.date_provider import DateProvider
from providers.media_provider import MediaProvider
from providers.system_provider import SystemProvider

__all__ = ["DateProvider", "MediaProvider", "SystemProvider"]
