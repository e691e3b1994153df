"""metricbridge CLI - expose live host metrics to scripts."""

import asyncio
import logging
import math
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .bridge import ScriptError
from .config import load_config
from .monitor import Monitor

console = Console()


def setup_logging(level: str):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def _start(config_path: Optional[str]) -> Monitor:
    config = load_config(config_path)
    monitor = Monitor(config)
    monitor.setup()
    return monitor


@click.group()
@click.version_option(version=__version__, prog_name="metricbridge")
def main():
    """metricbridge - live, named host metrics for user scripts."""
    pass


@main.command()
@click.option("--config", "-c", "config_path", help="Path to config file")
@click.option("--script", "-s", type=click.Path(exists=True), help="Script to run on every tick")
@click.option("--interval", type=click.FloatRange(min=0, min_open=True), help="Seconds between ticks")
@click.option("--log-level", default=None, help="Log level")
@click.option("--once", is_flag=True, help="Run the script once and exit")
def run(
    config_path: Optional[str],
    script: Optional[str],
    interval: Optional[float],
    log_level: Optional[str],
    once: bool,
):
    """Run a script against live data sources."""
    config = load_config(config_path)
    
    # Override with CLI options
    if script:
        config.script = script
    if interval is not None:
        config.interval = interval
    if log_level:
        config.log_level = log_level
    
    setup_logging(config.log_level)
    
    monitor = Monitor(config)
    monitor.setup()
    
    if once:
        try:
            monitor.tick()
        except ScriptError as e:
            raise click.ClickException(str(e))
        return
    
    console.print(Panel(
        f"[bold green]metricbridge v{__version__}[/bold green]\n"
        f"Script: {config.script or '(none)'}\n"
        f"Sources: {len(monitor.registry)}\n"
        f"Interval: {config.interval}s",
        title="Starting",
    ))
    asyncio.run(monitor.run())


@main.command()
@click.option("--config", "-c", "config_path", help="Path to config file")
def sources(config_path: Optional[str]):
    """List data sources and their current values."""
    monitor = _start(config_path)
    monitor.collector.sample()
    
    table = Table(title=f"{len(monitor.registry)} Data Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="green", no_wrap=True)
    table.add_column("Numeric", justify="right")
    table.add_column("Text")
    
    for name, (kind, number, text) in monitor.snapshot().items():
        style = "dim" if math.isnan(number) else None
        table.add_row(name, kind, f"{number:g}", text, style=style)
    
    console.print(table)


@main.command(name="eval")
@click.argument("expression")
@click.option("--config", "-c", "config_path", help="Path to config file")
def evaluate(expression: str, config_path: Optional[str]):
    """Evaluate EXPRESSION once, e.g. 'cpu().text()'."""
    monitor = _start(config_path)
    monitor.collector.sample()
    try:
        result = monitor.env.evaluate(expression)
    except ScriptError as e:
        raise click.ClickException(str(e))
    click.echo(result)


@main.command()
@click.option("--output", "-o", type=click.Path(), help="Output file path")
def init(output: Optional[str]):
    """Generate a sample configuration file."""
    sample_config = """# metricbridge configuration

# Script run on every tick. Every data source is a global callable:
#   print(cpu().text(), memory().numeric())
script: null

# Seconds between ticks
interval: 1.0

# Optional collectors. Sources of a disabled feature still exist but
# report n/a and name the setting that enables them.
features:
  network: true
  battery: false
  sensors: false

disk_path: /
log_level: INFO
"""
    
    output_path = output or "metricbridge.yaml"
    
    with open(output_path, "w") as f:
        f.write(sample_config)
    
    console.print(f"[green]+ Created config file: {output_path}[/green]")
    console.print("\nPoint `script` at your script, then run:")
    console.print(f"  [cyan]metricbridge run -c {output_path}[/cyan]")


if __name__ == "__main__":
    main()
