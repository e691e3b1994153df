"""Data sources - named live values exposed to scripts."""

from .base import (
    DataSource,
    DisabledSource,
    LiveValue,
    NumericSource,
    TextSource,
    UNAVAILABLE_TEXT,
    format_number,
)
from .registry import (
    DataSourceRegistry,
    DuplicateSourceError,
    InvalidRegistrationError,
    RegistryClosedError,
    RegistryError,
    RegistryState,
    export_data_sources,
    get_registry,
    init_registry,
    make_factory,
    register_data_source,
    register_disabled_data_source,
)

__all__ = [
    "DataSource",
    "DisabledSource",
    "LiveValue",
    "NumericSource",
    "TextSource",
    "UNAVAILABLE_TEXT",
    "format_number",
    "DataSourceRegistry",
    "DuplicateSourceError",
    "InvalidRegistrationError",
    "RegistryClosedError",
    "RegistryError",
    "RegistryState",
    "export_data_sources",
    "get_registry",
    "init_registry",
    "make_factory",
    "register_data_source",
    "register_disabled_data_source",
]
