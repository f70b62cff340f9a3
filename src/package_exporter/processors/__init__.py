"""Registry of processors notified before and after a package export."""

from __future__ import annotations

import logging
from collections.abc import Callable
from importlib import metadata
from typing import Protocol, TypeVar, runtime_checkable

__all__ = [
    "ENTRY_POINT_GROUP",
    "Processor",
    "ProcessorFactory",
    "clear_processors",
    "discover",
    "discover_processors",
    "iter_factories",
    "register_processor",
    "unregister_processor",
]

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "package_exporter.processors"
"""Entry point group used to discover third-party processor factories."""


@runtime_checkable
class Processor(Protocol):
    """Protocol implemented by export processors."""

    def on_pre_process(self) -> None:
        """Called before any asset is touched."""

    def on_post_process(self) -> None:
        """Called once the project has been restored after the export."""


ProcessorFactory = Callable[[], Processor]
"""Zero-argument callable producing a fresh :class:`Processor`."""

_F = TypeVar("_F", bound=Callable[[], object])

_FACTORY_REGISTRY: list[ProcessorFactory] = []
_ENTRY_POINTS_LOADED = False


def register_processor(factory: _F) -> _F:
    """Register *factory* so each export run gets an instance of its processor.

    Processor classes can be passed directly, which also allows using this
    function as a class decorator.
    """

    if not callable(factory):
        message = f"Processor factories must be callable; received {type(factory)!r}"
        raise TypeError(message)

    if not any(existing is factory for existing in _FACTORY_REGISTRY):
        _FACTORY_REGISTRY.append(factory)
        logger.debug("Registered processor factory %r", factory)

    return factory


def unregister_processor(factory: ProcessorFactory) -> None:
    """Remove *factory* from the registry when present."""

    try:
        _FACTORY_REGISTRY.remove(factory)
    except ValueError:
        return


def clear_processors() -> None:
    """Remove all registered factories and reset discovery state."""

    _FACTORY_REGISTRY.clear()
    global _ENTRY_POINTS_LOADED
    _ENTRY_POINTS_LOADED = False


def discover_processors(force: bool = False) -> None:
    """Register factories exposed via :mod:`importlib.metadata` entry points."""

    global _ENTRY_POINTS_LOADED
    if _ENTRY_POINTS_LOADED and not force:
        return

    if force:
        clear_processors()

    for entry_point in metadata.entry_points(group=ENTRY_POINT_GROUP):
        try:
            factory = entry_point.load()
        except Exception:  # pragma: no cover - defensive logging
            logger.exception("Failed to load processor %s", entry_point.name)
            continue

        try:
            register_processor(factory)
        except TypeError:  # pragma: no cover - defensive logging
            logger.exception(
                "Entry point %s returned an incompatible processor factory: %r",
                entry_point.name,
                factory,
            )

    _ENTRY_POINTS_LOADED = True


def iter_factories() -> tuple[ProcessorFactory, ...]:
    """Return the currently registered processor factories."""

    discover_processors()
    return tuple(_FACTORY_REGISTRY)


def discover() -> tuple[Processor, ...]:
    """Instantiate one processor per registered factory, in registration order."""

    processors: list[Processor] = []
    for factory in iter_factories():
        processor = factory()
        if not isinstance(processor, Processor):
            message = (
                "Processor factories must return objects implementing the Processor "
                f"protocol; {factory!r} returned {type(processor)!r}"
            )
            raise TypeError(message)
        processors.append(processor)
    return tuple(processors)
