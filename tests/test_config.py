"""Tests for configuration loading."""

import pytest

from metricbridge.config import BridgeConfig, load_config


class TestBridgeConfig:
    """Tests for BridgeConfig."""

    def test_defaults(self, monkeypatch):
        for var in ("METRICBRIDGE_SCRIPT", "METRICBRIDGE_INTERVAL", "METRICBRIDGE_LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)
        config = BridgeConfig.from_dict({})
        assert config.script is None
        assert config.interval == 1.0
        assert config.log_level == "INFO"
        assert config.features == {}

    def test_from_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("METRICBRIDGE_INTERVAL", raising=False)
        path = tmp_path / "metricbridge.yaml"
        path.write_text(
            "script: conky.py\n"
            "interval: 2.5\n"
            "features:\n"
            "  network: true\n"
            "  battery: false\n"
        )
        config = load_config(str(path))
        assert config.script == "conky.py"
        assert config.interval == 2.5
        assert config.features == {"network": True, "battery": False}

    def test_unknown_feature(self):
        with pytest.raises(ValueError, match="nvidia"):
            BridgeConfig.from_dict({"features": {"nvidia": True}})

    def test_bad_interval(self, monkeypatch):
        monkeypatch.delenv("METRICBRIDGE_INTERVAL", raising=False)
        with pytest.raises(ValueError, match="interval"):
            BridgeConfig.from_dict({"interval": 0})

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("METRICBRIDGE_INTERVAL", "5")
        monkeypatch.setenv("METRICBRIDGE_LOG_LEVEL", "DEBUG")
        config = BridgeConfig.from_dict({"interval": 1})
        assert config.interval == 5.0
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_env_interval_is_validated(self, monkeypatch, value):
        """An interval from the environment is checked like one from the file."""
        monkeypatch.setenv("METRICBRIDGE_INTERVAL", value)
        with pytest.raises(ValueError, match="interval"):
            BridgeConfig.from_dict({})
        with pytest.raises(ValueError, match="interval"):
            BridgeConfig.from_env()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("METRICBRIDGE_SCRIPT", "/tmp/script.py")
        assert BridgeConfig.from_env().script == "/tmp/script.py"
