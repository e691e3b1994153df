"""System collector - keeps host-level values current via psutil."""

import logging
import socket
import time
from typing import Optional

import psutil

from .base import LiveValue, NumericSource, TextSource
from .registry import DataSourceRegistry, register_data_source, register_disabled_data_source

logger = logging.getLogger(__name__)

# Optional feature -> the sources it provides
FEATURE_SOURCES = {
    "network": ["net_recv", "net_sent"],
    "battery": ["battery"],
    "sensors": ["cpu_temp"],
}


class SystemCollector:
    """
    Sample host metrics from psutil into LiveValue cells.

    Always collected: cpu, memory, memory_used, swap, disk, uptime,
    processes and hostname. Optional features (see FEATURE_SOURCES) are
    collected only when enabled and supported by the platform.
    """

    def __init__(self, features: Optional[dict[str, bool]] = None, disk_path: str = "/"):
        self.disk_path = disk_path
        self.values: dict[str, LiveValue] = {
            name: LiveValue()
            for name in ("cpu", "memory", "memory_used", "swap", "disk", "uptime", "processes")
        }
        self.hostname = LiveValue(socket.gethostname())

        requested = features or {}
        self.features: dict[str, bool] = {}
        for feature, names in FEATURE_SOURCES.items():
            enabled = bool(requested.get(feature, False)) and self._supported(feature)
            self.features[feature] = enabled
            if enabled:
                for name in names:
                    self.values[name] = LiveValue()

        # Prime the cpu counter so the first sample is meaningful
        psutil.cpu_percent(interval=None)

    @staticmethod
    def _supported(feature: str) -> bool:
        if feature == "battery":
            return hasattr(psutil, "sensors_battery")
        if feature == "sensors":
            return hasattr(psutil, "sensors_temperatures")
        return True

    def sample(self):
        """Refresh every cell from psutil."""
        v = self.values
        v["cpu"].set(psutil.cpu_percent(interval=None))

        mem = psutil.virtual_memory()
        v["memory"].set(mem.percent)
        v["memory_used"].set(mem.used)
        v["swap"].set(psutil.swap_memory().percent)

        try:
            v["disk"].set(psutil.disk_usage(self.disk_path).percent)
        except OSError as e:
            logger.debug(f"Disk usage unavailable for {self.disk_path}: {e}")
            v["disk"].set(float("nan"))

        v["uptime"].set(time.time() - psutil.boot_time())
        v["processes"].set(len(psutil.pids()))

        if self.features["network"]:
            net = psutil.net_io_counters()
            v["net_recv"].set(net.bytes_recv)
            v["net_sent"].set(net.bytes_sent)

        if self.features["battery"]:
            battery = psutil.sensors_battery()
            v["battery"].set(battery.percent if battery else float("nan"))

        if self.features["sensors"]:
            v["cpu_temp"].set(self._cpu_temperature())

    @staticmethod
    def _cpu_temperature() -> float:
        temps = psutil.sensors_temperatures()
        for key in ("coretemp", "k10temp", "cpu_thermal", "acpitz"):
            if temps.get(key):
                return temps[key][0].current
        return float("nan")


def register_system_sources(collector: SystemCollector, registry: Optional[DataSourceRegistry] = None):
    """Register every value of ``collector``; disabled features get DisabledSources."""
    for name, cell in collector.values.items():
        register_data_source(NumericSource, name, cell, registry=registry)
    register_data_source(TextSource, "hostname", collector.hostname, registry=registry)

    for feature, enabled in collector.features.items():
        if enabled:
            continue
        for name in FEATURE_SOURCES[feature]:
            register_disabled_data_source(name, f"features.{feature}", registry=registry)
