"""metserve CLI."""

import asyncio
import os

import typer
from rich.console import Console
from rich.table import Table

from metserve import __version__
from metserve.config import DEFAULT_HOST, DEFAULT_PORT, Settings

app = typer.Typer(
    name="metserve",
    help="metserve - Apple Silicon GPU, memory and thermal metrics over HTTP",
    no_args_is_help=True,
)
console = Console()


def _warn_if_not_root() -> None:
    if os.geteuid() != 0:
        console.print(
            "[yellow]Note: not running as root. If GPU stats or temperatures are "
            "missing, re-run with: sudo metserve serve[/yellow]"
        )


@app.command()
def serve(
    host: str = typer.Option(
        DEFAULT_HOST, "--host", "-h", envvar="METSERVE_HOST", help="Host to bind to"
    ),
    port: int = typer.Option(
        DEFAULT_PORT,
        "--port",
        "-p",
        envvar="METSERVE_PORT",
        min=1,
        max=65535,
        help="Port to bind to",
    ),
):
    """Start the metrics server."""
    import uvicorn

    from metserve.main import create_app

    settings = Settings(host=host, port=port)
    base = f"http://{host}:{port}"

    console.print(f"[green]Metrics server running on {base}[/green]")
    console.print(f"- Dashboard: {base}/")
    console.print(f"- Metrics:   {base}/metrics")
    console.print(f"- Raw:       {base}/raw")
    _warn_if_not_root()

    uvicorn.run(create_app(settings), host=host, port=port)


@app.command()
def snapshot(
    raw: bool = typer.Option(False, "--raw", help="Print raw command output instead of JSON"),
):
    """Probe once locally and print the result."""
    from metserve.config import get_settings
    from metserve.services.probes import ProbeCollector

    collector = ProbeCollector(sensor_helper=get_settings().sensor_helper)
    if raw:
        console.print(asyncio.run(collector.collect_raw()), markup=False, highlight=False)
        return

    console.print_json(asyncio.run(collector.collect()).model_dump_json())


def _fmt(value: object, unit: str = "") -> str:
    if value is None:
        return "[dim]n/a[/dim]"
    if isinstance(value, float):
        return f"{value:.1f}{unit}"
    return f"{value}{unit}"


@app.command()
def status(
    host: str = typer.Option(
        DEFAULT_HOST, "--host", "-h", envvar="METSERVE_HOST", help="Server host"
    ),
    port: int = typer.Option(
        DEFAULT_PORT, "--port", "-p", envvar="METSERVE_PORT", help="Server port"
    ),
):
    """Show the metrics reported by a running server."""
    import httpx

    try:
        response = httpx.get(f"http://{host}:{port}/metrics", timeout=15.0)
        response.raise_for_status()
        data = response.json()
    except httpx.ConnectError:
        console.print("[red]metserve is not running[/red]")
        console.print("Start it with: sudo metserve serve")
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    gpu, memory, thermal = data["gpu"], data["memory"], data["thermal"]

    table = Table(title=f"metserve @ {data['timestamp']}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("GPU frequency", _fmt(gpu["freq_mhz"], " MHz"))
    table.add_row("GPU active", _fmt(gpu["active_pct"], " %"))
    table.add_row("GPU idle", _fmt(gpu["idle_pct"], " %"))
    table.add_row("GPU power", _fmt(gpu["power_mw"], " mW"))
    table.add_row("GPU pinned", _fmt(data["derived"]["gpu_pinned"]))
    table.add_row("Memory pressure", _fmt(memory["pressure"]))
    table.add_row("Swap used", _fmt(memory["swap_gb"], " GB"))
    table.add_row("Thermal pressure", _fmt(thermal["thermal_pressure"]))
    table.add_row("CPU speed limit", _fmt(thermal["cpu_speed_limit_pct"], " %"))
    table.add_row("GPU speed limit", _fmt(thermal["gpu_speed_limit_pct"], " %"))
    table.add_row("CPU temperature", _fmt(thermal["cpu_temp_c"], " °C"))
    table.add_row("GPU temperature", _fmt(thermal["gpu_temp_c"], " °C"))
    table.add_row("SoC temperature", _fmt(thermal["soc_temp_c"], " °C"))
    console.print(table)

    for warning in data["warnings"]:
        console.print(f"[yellow]! {warning}[/yellow]")


@app.command()
def version():
    """Show version information."""
    console.print(f"metserve v{__version__}")
