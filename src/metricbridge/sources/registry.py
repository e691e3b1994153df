"""Source registry - maps data source names to factories."""

import keyword
import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional, Type

from .base import DataSource, DisabledSource

logger = logging.getLogger(__name__)

Factory = Callable[..., Any]


class RegistryError(RuntimeError):
    """Generic registry error."""


class DuplicateSourceError(RegistryError):
    """A name was registered twice."""


class RegistryClosedError(RegistryError):
    """The registry was already exported."""


class InvalidRegistrationError(RegistryError):
    """The name or factory is not usable."""


class RegistryState(str, Enum):
    """Lifecycle of a registry."""
    EMPTY = "empty"
    POPULATING = "populating"
    EXPORTED = "exported"


class DataSourceRegistry:
    """
    Registry for data source factories.

    Sources register here at startup, in any order. ``export_all`` then binds
    every entry into a scripting environment, once; after that the registry
    is read-only.

    Registering a name that already exists raises DuplicateSourceError.
    """

    def __init__(self):
        self._factories: dict[str, Factory] = {}
        self._state = RegistryState.EMPTY
        self._lock = threading.Lock()

    @property
    def state(self) -> RegistryState:
        return self._state

    def register(self, name: str, factory: Factory):
        """Register a factory under ``name``. The name must be callable from a script."""
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise InvalidRegistrationError(f"data source name must be a Python identifier, got {name!r}")
        if not callable(factory):
            raise InvalidRegistrationError(f"factory for {name!r} is not callable")

        with self._lock:
            if self._state is RegistryState.EXPORTED:
                raise RegistryClosedError(f"cannot register {name!r}: registry already exported")
            if name in self._factories:
                raise DuplicateSourceError(f"data source {name!r} is already registered")
            self._factories[name] = factory
            self._state = RegistryState.POPULATING
        logger.debug(f"Registered data source: {name}")

    def export_all(self, env):
        """Bind every registered factory as a global callable in ``env``."""
        with self._lock:
            if self._state is RegistryState.EXPORTED:
                raise RegistryClosedError("registry already exported")
            clashes = sorted(name for name in self._factories if name in env.globals)
            if clashes:
                raise InvalidRegistrationError(f"cannot export, names already bound: {', '.join(clashes)}")

            for name, factory in self._factories.items():
                env.bind(name, _constructor(env, factory))
            self._state = RegistryState.EXPORTED

        logger.debug(f"Exported {len(self._factories)} data sources")

    def list_names(self) -> list[str]:
        """List all registered names."""
        return sorted(self._factories)

    def is_registered(self, name: str) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def _constructor(env, factory: Factory) -> Callable[..., Any]:
    def construct(*script_args):
        return factory(env, *script_args)

    construct.__name__ = getattr(factory, "__name__", "construct")
    return construct


def make_factory(source_class: Type[DataSource], name: str, *args: Any) -> Factory:
    """
    Build a factory for ``source_class``.

    The factory constructs ``source_class(env, name, *args)`` and hands the
    instance to the environment, which tags it with the shared type
    descriptor of its class.
    """
    def factory(env, *script_args):
        source = source_class(env, name, *args, script_args=script_args)
        return env.wrap(source)

    factory.__name__ = name
    factory.__qualname__ = f"{source_class.__name__}.factory[{name}]"
    return factory


_default_registry = DataSourceRegistry()


def init_registry() -> DataSourceRegistry:
    """Replace the process-wide registry with a fresh, empty one."""
    global _default_registry
    _default_registry = DataSourceRegistry()
    return _default_registry


def get_registry() -> DataSourceRegistry:
    """Get the process-wide registry."""
    return _default_registry


def register_data_source(
    source_class: Type[DataSource],
    name: str,
    *args: Any,
    registry: Optional[DataSourceRegistry] = None,
):
    """
    Register a data source with the given name and constructor arguments.

    Usage:
        cpu = LiveValue()
        register_data_source(NumericSource, "cpu", cpu)
    """
    registry = registry if registry is not None else _default_registry
    registry.register(name, make_factory(source_class, name, *args))


def register_disabled_data_source(
    name: str,
    setting: str,
    registry: Optional[DataSourceRegistry] = None,
):
    """Register a source that is not available, naming the setting that enables it."""
    register_data_source(DisabledSource, name, setting, registry=registry)


def export_data_sources(env, registry: Optional[DataSourceRegistry] = None):
    """Export the process-wide (or given) registry into ``env``."""
    registry = registry if registry is not None else _default_registry
    registry.export_all(env)
