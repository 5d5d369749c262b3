"""Entry point for the Sentinel health aggregator."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sentinel.config import settings
from sentinel.health.checks import PARAMETER_QUICK
from sentinel.health.service import Status

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

EXIT_CODES = {
    Status.HEALTHY: 0,
    Status.UNHEALTHY: 1,
    Status.FAILED: 2,
}

STATUS_STYLES = {
    Status.HEALTHY: "bold green",
    Status.UNHEALTHY: "bold yellow",
    Status.FAILED: "bold red",
}


def run_server() -> None:
    """Start the FastAPI server."""
    console.print(Panel("Starting Sentinel API Server", style="bold green"))
    uvicorn.run(
        "sentinel.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


def run_check(quick: bool = False) -> int:
    """Evaluate all checks once and print the outcome. Returns the exit code."""
    from sentinel.api.server import build_health_components

    components = build_health_components(settings)
    try:
        with console.status("[bold green]Running health checks..."):
            report = components.service.report({PARAMETER_QUICK: str(quick).lower()})
    finally:
        components.close()

    table = Table(title="Health checks")
    table.add_column("Check")
    table.add_column("Result")
    for check, healthy in report.outcomes.items():
        table.add_row(str(check), "[green]healthy[/green]" if healthy else "[red]unhealthy[/red]")
    for check in report.skipped:
        table.add_row(str(check), "[dim]skipped[/dim]")
    console.print(table)

    console.print(Panel(report.status.value.upper(), style=STATUS_STYLES[report.status]))
    return EXIT_CODES[report.status]


def main() -> None:
    parser = argparse.ArgumentParser(description="Sentinel Health Aggregator")
    sub = parser.add_subparsers(dest="command")

    # Server mode
    sub.add_parser("serve", help="Start the API server")

    # One-shot check
    check_parser = sub.add_parser("check", help="Run all health checks once")
    check_parser.add_argument("--quick", action="store_true", help="Request fast checks")

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "check":
        sys.exit(run_check(quick=args.quick))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
