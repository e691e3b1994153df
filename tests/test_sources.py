"""Tests for the data source variants."""

import logging
import math

import pytest

from metricbridge.sources import (
    DataSource,
    DisabledSource,
    LiveValue,
    NumericSource,
    TextSource,
    UNAVAILABLE_TEXT,
    format_number,
)


class FixedSource(DataSource):
    """Source returning a constant, for testing the default text."""

    def __init__(self, env, name, value, script_args=()):
        super().__init__(env, name, script_args)
        self.value = value

    def get_number(self):
        return self.value


class TestDataSource:
    """Tests for the DataSource defaults."""

    def test_default_number_is_nan(self):
        """Base class has no number."""
        source = DataSource(None, "plain")
        assert math.isnan(source.get_number())

    def test_default_text_when_nan(self):
        """NaN renders as the unavailability marker."""
        source = DataSource(None, "plain")
        assert source.get_text() == UNAVAILABLE_TEXT

    @pytest.mark.parametrize("value,expected", [
        (120.5, "120.500000"),
        (0.0, "0.000000"),
        (-3.25, "-3.250000"),
        (1e6, "1000000.000000"),
    ])
    def test_default_text_formats_number(self, value, expected):
        """Finite numbers render with six decimals."""
        assert FixedSource(None, "fixed", value).get_text() == expected

    def test_name_is_read_only(self):
        """The name is fixed at construction."""
        source = DataSource(None, "plain")
        with pytest.raises(AttributeError):
            source.name = "other"
        assert source.name == "plain"

    def test_format_number_nan(self):
        assert format_number(math.nan) == UNAVAILABLE_TEXT


class TestNumericSource:
    """Tests for NumericSource."""

    def test_reads_current_value(self):
        """Mutating the scalar is visible without reconstructing."""
        cell = LiveValue(2400.0)
        source = NumericSource(None, "cpu_freq", cell)
        assert source.get_number() == 2400.0

        cell.set(2600.0)
        assert source.get_number() == 2600.0
        assert source.get_text() == "2600.000000"

    def test_converts_ints(self):
        """Any numeric type is read as float."""
        source = NumericSource(None, "count", LiveValue(7))
        assert source.get_number() == 7.0
        assert isinstance(source.get_number(), float)

    def test_accepts_plain_callable(self):
        """An accessor closure works as well as a LiveValue."""
        state = {"value": 1.5}
        source = NumericSource(None, "closure", lambda: state["value"])
        state["value"] = 2.5
        assert source.get_number() == 2.5

    def test_rejects_non_callable(self):
        """A bare number cannot be borrowed."""
        with pytest.raises(TypeError, match="must be callable"):
            NumericSource(None, "bad", 3.0)

    def test_unset_value_is_nan(self):
        """A LiveValue that was never set reads as unavailable."""
        source = NumericSource(None, "pending", LiveValue())
        assert math.isnan(source.get_number())
        assert source.get_text() == UNAVAILABLE_TEXT


class TestTextSource:
    """Tests for TextSource."""

    def test_text_and_no_number(self):
        cell = LiveValue("host-a")
        source = TextSource(None, "hostname", cell)
        assert source.get_text() == "host-a"
        assert math.isnan(source.get_number())

        cell.set("host-b")
        assert source.get_text() == "host-b"

    def test_none_is_unavailable(self):
        source = TextSource(None, "hostname", LiveValue(None))
        assert source.get_text() == UNAVAILABLE_TEXT


class TestDisabledSource:
    """Tests for DisabledSource."""

    def test_always_unavailable(self):
        """Number is NaN and text names the setting, every call."""
        source = DisabledSource(None, "nvidia_temp", "BUILD_NVIDIA")
        for _ in range(3):
            assert math.isnan(source.get_number())
            assert "BUILD_NVIDIA" in source.get_text()

    def test_message(self):
        source = DisabledSource(None, "battery", "features.battery")
        assert source.get_text() == (
            "battery: this data source requires `features.battery` to be enabled"
        )
        assert source.setting == "features.battery"

    def test_logs_warning_on_construction(self, caplog):
        """Constructing a disabled source tells the user what to enable."""
        with caplog.at_level(logging.WARNING, logger="metricbridge.sources.base"):
            DisabledSource(None, "nvidia_temp", "BUILD_NVIDIA")
        assert "BUILD_NVIDIA" in caplog.text
