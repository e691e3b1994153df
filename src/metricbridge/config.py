"""Configuration management for metricbridge."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .sources.system import FEATURE_SOURCES


@dataclass
class BridgeConfig:
    """Main configuration."""
    
    # User script run on every tick
    script: Optional[str] = None
    interval: float = 1.0  # seconds
    log_level: str = "INFO"
    
    # Optional collectors, see FEATURE_SOURCES
    features: dict[str, bool] = field(default_factory=dict)
    disk_path: str = "/"
    
    @classmethod
    def from_file(cls, path: str | Path) -> "BridgeConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})
    
    @classmethod
    def from_dict(cls, data: dict) -> "BridgeConfig":
        """Create config from dictionary."""
        config = cls()
        
        config.script = data.get("script", config.script)
        config.interval = float(data.get("interval", config.interval))
        config.log_level = data.get("log_level", config.log_level)
        config.disk_path = data.get("disk_path", config.disk_path)
        
        features = data.get("features") or {}
        unknown = set(features) - set(FEATURE_SOURCES)
        if unknown:
            raise ValueError(f"Unknown features: {', '.join(sorted(unknown))}")
        config.features = {name: bool(enabled) for name, enabled in features.items()}
        
        config.apply_env()
        config.validate()
        return config
    
    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Create config from environment variables."""
        config = cls()
        config.apply_env()
        config.validate()
        return config
    
    def apply_env(self):
        """Override settings from METRICBRIDGE_* environment variables."""
        if os.environ.get("METRICBRIDGE_SCRIPT"):
            self.script = os.environ["METRICBRIDGE_SCRIPT"]
        if os.environ.get("METRICBRIDGE_INTERVAL"):
            self.interval = float(os.environ["METRICBRIDGE_INTERVAL"])
        if os.environ.get("METRICBRIDGE_LOG_LEVEL"):
            self.log_level = os.environ["METRICBRIDGE_LOG_LEVEL"]
    
    def validate(self):
        """Check settings once every source of them has been applied."""
        if self.interval <= 0:
            raise ValueError(f"interval must be positive, got {self.interval}")


def load_config(config_path: Optional[str] = None) -> BridgeConfig:
    """Load configuration from file or environment."""
    if config_path and Path(config_path).exists():
        return BridgeConfig.from_file(config_path)
    
    default_paths = [
        Path("metricbridge.yaml"),
        Path("metricbridge.yml"),
        Path.home() / ".metricbridge" / "config.yaml",
        Path("/etc/metricbridge/config.yaml"),
    ]
    
    for path in default_paths:
        if path.exists():
            return BridgeConfig.from_file(path)
    
    return BridgeConfig.from_env()
