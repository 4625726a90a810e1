"""Worker type names, as used by the ``type:`` key of companion.yaml.

Each provider module tags its class with ``@register_provider("name")``
and each consumer module with ``@register_consumer("name")``. Importing
the ``providers`` and ``consumers`` packages fills both tables; the
Companion then resolves config entries against them.

Providers publish on the outbound bus and consumers read the inbound
one, so the tables are kept apart: a consumer class registered as a
provider would be handed the wrong bus.
"""

import logging
from typing import Dict, List, Type

from core.consumer import Consumer
from core.provider import Provider

logger = logging.getLogger(__name__)

PROVIDER_REGISTRY: Dict[str, Type[Provider]] = {}
CONSUMER_REGISTRY: Dict[str, Type[Consumer]] = {}


def _registrar(table: Dict, base: type, name: str):
    def decorator(cls):
        if not (isinstance(cls, type) and issubclass(cls, base)):
            raise TypeError(f"{cls!r} is not a {base.__name__} subclass")
        existing = table.get(name)
        if existing is not None and existing.__qualname__ != cls.__qualname__:
            raise ValueError(
                f"{base.kind} type {name!r} already taken by {existing.__name__}"
            )
        table[name] = cls
        logger.debug("%s type %s -> %s", base.kind.capitalize(), name, cls.__name__)
        return cls
    return decorator


def register_provider(name: str):
    """Make a Provider subclass available as ``type: <name>``."""
    return _registrar(PROVIDER_REGISTRY, Provider, name)


def register_consumer(name: str):
    """Make a Consumer subclass available as ``type: <name>``."""
    return _registrar(CONSUMER_REGISTRY, Consumer, name)


def worker_types() -> Dict[str, List[str]]:
    """Registered type names per role, sorted, for ``main.py --list``."""
    return {
        "providers": sorted(PROVIDER_REGISTRY),
        "consumers": sorted(CONSUMER_REGISTRY),
    }
