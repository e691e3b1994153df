"""Monitor - samples the host and re-runs the user script on an interval."""

import asyncio
import logging
import signal
from pathlib import Path
from typing import Optional

from .bridge import ScriptEnvironment, ScriptError
from .config import BridgeConfig
from .sources import DataSourceRegistry
from .sources.system import SystemCollector, register_system_sources

logger = logging.getLogger(__name__)


class Monitor:
    """
    Wires a collector, a registry and a script environment together.
    
    ``setup()`` registers every source and exports them, so the script can
    call e.g. ``cpu().text()``. Each ``tick()`` refreshes the collector and
    runs the script once.
    """
    
    def __init__(self, config: BridgeConfig):
        self.config = config
        self.registry = DataSourceRegistry()
        self.env = ScriptEnvironment()
        self.collector: Optional[SystemCollector] = None
        self._script: Optional[str] = None
        self._running = False
    
    def setup(self):
        """Register and export sources, then load the script."""
        self.collector = SystemCollector(self.config.features, disk_path=self.config.disk_path)
        register_system_sources(self.collector, registry=self.registry)
        self.registry.export_all(self.env)
        logger.info(f"Exported {len(self.registry)} data sources")
        
        if self.config.script:
            self._script = Path(self.config.script).read_text()
            logger.info(f"Loaded script: {self.config.script}")
    
    def tick(self):
        """Sample once and run the script."""
        if self.collector is None:
            raise RuntimeError("Monitor.setup() must be called before tick()")
        self.collector.sample()
        if self._script is not None:
            self.env.run(self._script, filename=self.config.script)
    
    def snapshot(self) -> dict[str, tuple[str, float, str]]:
        """Query every exported source: ``{name: (kind, number, text)}``."""
        readings = {}
        for name in self.registry.list_names():
            handle = self.env.globals[name]()
            readings[name] = (handle.kind, handle.numeric(), handle.text())
        return readings
    
    async def run(self):
        """Run the main loop until stopped."""
        self._running = True
        logger.info("Starting monitor...")
        
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
            except NotImplementedError:
                # Windows doesn't support add_signal_handler
                pass
        
        while self._running:
            try:
                self.tick()
            except ScriptError as e:
                logger.error(f"Script failed: {e}")
            await asyncio.sleep(self.config.interval)
        
        logger.info("Monitor stopped")
    
    def stop(self):
        """Stop the loop after the current tick."""
        logger.info("Stopping monitor...")
        self._running = False
