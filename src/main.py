"""Entry point for the health prober."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from src.config import settings
from src.probing.handler import create_health_app
from src.probing.registry import ProbeRegistry
from src.probing.status import StatusSnapshot
from src.probing.targets import load_targets, register_targets

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


def run_server() -> None:
    """Serve GET /health so this process can be probed."""
    console.print(Panel(f"Serving health endpoint: {settings.health_name}", style="bold green"))
    uvicorn.run(
        create_health_app(settings.health_name),
        host=settings.health_host,
        port=settings.health_port,
        log_level=settings.log_level.lower(),
    )


def render_table(statuses: dict[str, StatusSnapshot]) -> Table:
    table = Table(title="Targets")
    table.add_column("Target")
    table.add_column("Health")
    table.add_column("Checks", justify="right")
    table.add_column("Failures", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Latency", justify="right")
    table.add_column("SRTT", justify="right")
    table.add_column("Remote time")

    for target_id, s in sorted(statuses.items()):
        health = "[green]up[/green]" if s.healthy else "[red]down[/red]"
        if s.total_checks == 0:
            health = "[dim]pending[/dim]"
        table.add_row(
            target_id,
            health,
            str(s.total_checks),
            str(s.total_failures),
            str(s.consecutive_failures),
            f"{s.last_latency_ms:.1f}ms",
            f"{s.srtt_ms:.1f}ms",
            str(s.last_success_at or "-"),
        )
    return table


def statuses_to_json(statuses: dict[str, StatusSnapshot]) -> str:
    """One JSON line mapping each target id to its snapshot."""
    return json.dumps({tid: s.to_dict() for tid, s in sorted(statuses.items())}, default=str)


def run_watch(targets_file: str, refresh: float, as_json: bool = False) -> None:
    """Probe every target in the file and show a live status table (or JSON lines)."""
    targets = load_targets(Path(targets_file))
    if not targets:
        console.print(f"[yellow]No targets loaded from {targets_file}[/yellow]")
        sys.exit(1)

    with ProbeRegistry() as registry:
        register_targets(registry, targets)
        try:
            if as_json:
                while True:
                    time.sleep(refresh)
                    print(statuses_to_json(registry.statuses()), flush=True)
            else:
                with Live(render_table(registry.statuses()), console=console) as live:
                    while True:
                        time.sleep(refresh)
                        live.update(render_table(registry.statuses()))
        except KeyboardInterrupt:
            console.print("[dim]Stopping probes...[/dim]")


def main() -> None:
    parser = argparse.ArgumentParser(description="Concurrent health prober")
    sub = parser.add_subparsers(dest="command")

    # Probed side
    sub.add_parser("serve", help="Serve a /health endpoint")

    # Prober side
    watch_parser = sub.add_parser("watch", help="Probe targets and show their status")
    watch_parser.add_argument(
        "--targets", default=settings.probe_targets_file, help="Path to targets.yaml",
    )
    watch_parser.add_argument(
        "--refresh", type=float, default=1.0, help="Table refresh period (seconds)",
    )
    watch_parser.add_argument(
        "--json", action="store_true", help="Print one JSON line per refresh instead of a table",
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "watch":
        run_watch(args.targets, args.refresh, as_json=args.json)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
