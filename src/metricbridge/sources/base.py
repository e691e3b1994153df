"""Base interface for all data sources."""

import logging
import math
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

NUMBER_FORMAT = "{:.6f}"
UNAVAILABLE_TEXT = "n/a"


def format_number(value: float) -> str:
    """Render a number the way data sources show it to scripts."""
    if math.isnan(value):
        return UNAVAILABLE_TEXT
    return NUMBER_FORMAT.format(value)


class LiveValue:
    """
    A mutable scalar shared between a collector and the sources reading it.

    Collectors call ``set()``; sources hold the cell itself (it is callable)
    and read the current value on every query.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any = math.nan):
        self.value = value

    def set(self, value: Any):
        self.value = value

    def __call__(self) -> Any:
        return self.value

    def __repr__(self) -> str:
        return f"LiveValue({self.value!r})"


class DataSource:
    """
    Base class for all data sources.

    API consists of two methods:
    - get_number returns the numeric representation of the data, used for
      graphs and bars. The default returns NaN.
    - get_text returns the textual representation, used when simply showing
      the value. The default formats get_number(); override to add units or
      return anything else.

    Constructors take the scripting environment first, then the name, then
    the variant's own arguments. Arguments from the script call arrive in
    ``script_args``.
    """

    def __init__(self, env, name: str, script_args: tuple = ()):
        self._name = name
        self.script_args = script_args

    @property
    def name(self) -> str:
        return self._name

    def get_number(self) -> float:
        return math.nan

    def get_text(self) -> str:
        return format_number(self.get_number())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


class NumericSource(DataSource):
    """
    Returns the current value of some external scalar.

    ``source`` is a borrowed accessor: a zero-argument callable (usually a
    LiveValue) whose result must be convertible to float. It is read on every
    call and never copied, so it must stay valid for as long as the source
    lives.
    """

    def __init__(
        self,
        env,
        name: str,
        source: Callable[[], Any],
        script_args: tuple = (),
    ):
        if not callable(source):
            raise TypeError(
                f"source for {name!r} must be callable, got {type(source).__name__}"
            )
        super().__init__(env, name, script_args)
        self._source = source

    def get_number(self) -> float:
        return float(self._source())


class TextSource(DataSource):
    """Returns the current value of some external string. Has no number."""

    def __init__(
        self,
        env,
        name: str,
        source: Callable[[], Optional[str]],
        script_args: tuple = (),
    ):
        if not callable(source):
            raise TypeError(
                f"source for {name!r} must be callable, got {type(source).__name__}"
            )
        super().__init__(env, name, script_args)
        self._source = source

    def get_text(self) -> str:
        value = self._source()
        return UNAVAILABLE_TEXT if value is None else str(value)


class DisabledSource(DataSource):
    """
    Stands in for a data source whose feature is not available.

    Always reports NaN, and its text tells the user which setting to enable.
    """

    MESSAGE = "{name}: this data source requires `{setting}` to be enabled"

    def __init__(self, env, name: str, setting: str, script_args: tuple = ()):
        super().__init__(env, name, script_args)
        self._setting = setting
        logger.warning(self.get_text())

    @property
    def setting(self) -> str:
        return self._setting

    def get_text(self) -> str:
        return self.MESSAGE.format(name=self.name, setting=self._setting)
