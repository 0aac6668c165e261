from __future__ import annotations

import importlib
import json
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from thriftreg.classpath.scope import resolve_scan_packages
from thriftreg.config import get_settings
from thriftreg.domain.markers import enable_thrift_controllers, find_enable_marker
from thriftreg.logging_config import configure_logging
from thriftreg.orchestrator.pipeline import bootstrap


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


def _load_origin(target: str, packages: List[str]) -> Any:
    """
    ``module:ClassName`` loads a configuration class; anything else is a
    package name used as the scan origin.
    """
    if ":" in target:
        module_name, _, attr = target.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise typer.BadParameter(f"Cannot import {module_name}: {e}") from e
        origin = getattr(module, attr, None)
        if not isinstance(origin, type):
            raise typer.BadParameter(f"{target} is not a class")
    else:
        origin = target

    if packages:
        # extra packages are scanned after the origin's own roots
        marker = find_enable_marker(origin) if isinstance(origin, type) else None
        roots = resolve_scan_packages(marker, origin) + list(packages)
        origin = enable_thrift_controllers(base_packages=tuple(roots))(
            type("CommandLineConfiguration", (), {"__module__": __name__})
        )
    return origin


@app.command()
def scan(
    target: str = typer.Argument(..., help="module:ConfigClass or a package to scan"),
    package: Optional[List[str]] = typer.Option(None, "--package", "-p", help="Extra base package (repeatable)"),
    format: str = typer.Option("table", help="Output format: table|json"),
    fail_fast: bool = typer.Option(False, help="Stop at the first misconfigured controller"),
    eager: bool = typer.Option(True, help="Build every registration after scanning"),
    debug: bool = typer.Option(False, help="Verbose console logging"),
) -> None:
    settings = get_settings().model_copy(update={"fail_fast": fail_fast, "eager_init": eager, "debug": debug})
    configure_logging(settings.debug)

    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    origin = _load_origin(target, package or [])
    registry, report = bootstrap(origin, settings=settings)

    rows = []
    for entry in report.registered:
        row = {"entry": entry, "initialized": registry.is_initialized(entry)}
        if registry.is_initialized(entry):
            reg = registry.get(entry)
            row.update(
                {
                    "name": reg.name,
                    "url_mappings": list(reg.url_mappings),
                    "dispatcher": type(reg.dispatcher).__qualname__,
                    "codec": type(reg.codec).__qualname__,
                    "load_on_startup": reg.load_on_startup,
                }
            )
        rows.append(row)

    failures = [
        {"error_type": getattr(f, "error_type", type(f).__name__), "message": str(f), **getattr(f, "details", {})}
        for f in report.failures
    ]

    if fmt == "json":
        typer.echo(json.dumps({"packages": report.packages, "registered": rows, "failures": failures}, indent=2))
    else:
        console.print(f"[bold green]thriftreg[/bold green] scan: {', '.join(report.packages)}")

        table = Table(show_header=True, header_style="bold")
        table.add_column("ENTRY")
        table.add_column("NAME", no_wrap=True)
        table.add_column("MAPPINGS")
        table.add_column("DISPATCHER", no_wrap=True)
        table.add_column("CODEC", no_wrap=True)

        for r in rows:
            table.add_row(
                r["entry"],
                r.get("name", "-"),
                ", ".join(r.get("url_mappings", [])) or "-",
                r.get("dispatcher", "-"),
                r.get("codec", "-"),
            )
        console.print(table)

        if failures:
            console.print("")
            console.print(f"[bold red]Failures:[/bold red] {len(failures)}")
            for f in failures:
                console.print(f"  {f['error_type']:<20} {f['message']}")

    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
