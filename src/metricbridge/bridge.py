"""Scripting bridge - the restricted namespace user scripts run in."""

import logging
import math
from types import MappingProxyType
from typing import Any, Callable, Mapping, Type

from .sources.base import DataSource

logger = logging.getLogger(__name__)

SAFE_BUILTINS = {
    "abs": abs,
    "float": float,
    "int": int,
    "isinstance": isinstance,
    "len": len,
    "max": max,
    "min": min,
    "print": print,
    "range": range,
    "round": round,
    "sorted": sorted,
    "str": str,
    "sum": sum,
}


class ScriptError(RuntimeError):
    """A script, or a native call made from it, failed."""


class SourceType:
    """
    Type descriptor shared by every handle of one DataSource class.

    Maps the script-visible method names to the class's implementations.
    Used for dispatch only; the instance lives in the handle.
    """

    __slots__ = ("name", "methods")

    def __init__(self, source_class: Type[DataSource]):
        self.name = source_class.__name__
        self.methods: dict[str, Callable[[DataSource], Any]] = {
            "numeric": source_class.get_number,
            "text": source_class.get_text,
        }

    def dispatch(self, method: str, source: DataSource) -> Any:
        return self.methods[method](source)

    def __repr__(self) -> str:
        return f"SourceType({self.name})"


class DataSourceHandle:
    """Opaque handle a script gets back from calling a data source by name."""

    __slots__ = ("_source", "_type")

    def __init__(self, source: DataSource, source_type: SourceType):
        self._source = source
        self._type = source_type

    @property
    def name(self) -> str:
        return self._source.name

    @property
    def kind(self) -> str:
        """Name of the source's type descriptor, e.g. ``NumericSource``."""
        return self._type.name

    def numeric(self) -> float:
        return self._type.dispatch("numeric", self._source)

    def text(self) -> str:
        return self._type.dispatch("text", self._source)

    def __repr__(self) -> str:
        return f"<{self._type.name} {self._source.name!r}>"


class ScriptEnvironment:
    """
    Globals for user scripts.

    Scripts see a small set of builtins, ``math``, ``nan`` and whatever was
    bound with ``bind()`` (normally every exported data source).
    """

    def __init__(self):
        self._globals: dict[str, Any] = {
            "__builtins__": dict(SAFE_BUILTINS),
            "math": math,
            "nan": math.nan,
        }
        self._types: dict[type, SourceType] = {}

    @property
    def globals(self) -> Mapping[str, Any]:
        return MappingProxyType(self._globals)

    def bind(self, name: str, value: Callable[..., Any]):
        """Bind a global callable. Names can be bound only once."""
        if name in self._globals:
            raise ScriptError(f"global {name!r} is already bound")
        self._globals[name] = value
        logger.debug(f"Bound global: {name}")

    def type_descriptor(self, source_class: Type[DataSource]) -> SourceType:
        """Get the shared descriptor for a class, creating it on first use."""
        source_type = self._types.get(source_class)
        if source_type is None:
            source_type = SourceType(source_class)
            self._types[source_class] = source_type
        return source_type

    def wrap(self, source: DataSource) -> DataSourceHandle:
        """Tag a freshly constructed source so scripts can call it."""
        return DataSourceHandle(source, self.type_descriptor(type(source)))

    def run(self, code: str, filename: str = "<script>"):
        """Execute a script in the environment."""
        try:
            exec(compile(code, filename, "exec"), self._globals)
        except Exception as e:
            raise ScriptError(f"{filename}: {type(e).__name__}: {e}") from e

    def evaluate(self, expression: str) -> Any:
        """Evaluate a single expression and return its value."""
        try:
            return eval(compile(expression, "<expression>", "eval"), self._globals)
        except Exception as e:
            raise ScriptError(f"{expression!r}: {type(e).__name__}: {e}") from e
