"""claimcheck CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from itertools import groupby
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.status import Status
from rich.traceback import Traceback

from claimcheck.checks.models import CheckResult, Report
from claimcheck.config.models import ClaimcheckConfig
from claimcheck.events.emitter import (
    CHECK_STARTED,
    REPORT_COMPLETED,
    SERVICE_CHECKING,
    SERVICE_RESULT,
    CheckEvent,
)
from claimcheck.services.base import ServiceDescriptor

app = typer.Typer(
    name="claimcheck",
    help="claimcheck: is your name still free out there?",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

STATUS_STYLES = {
    "available": ("AVAILABLE", "green"),
    "taken": ("TAKEN", "yellow"),
    "unknown": ("UNKNOWN", "yellow"),
    "failed": ("FAILED", "red"),
}


def _label(descriptor: ServiceDescriptor) -> str:
    return f"{descriptor.category} > {descriptor.title}"


def _print_exception(exc: BaseException) -> None:
    err_console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))


class ConsoleProgress:
    """Renders check events as they arrive. Implements EventListener protocol."""

    def __init__(self, out: Console, show_stack: bool = False) -> None:
        self._console = out
        self._show_stack = show_stack
        self._width = 0
        self._status: Status | None = None

    async def on_event(self, event: CheckEvent) -> None:
        if event.event_type == CHECK_STARTED:
            services: list[ServiceDescriptor] = event.data["services"]
            self._console.print(f"Checking availability of name: [bold]{event.name}[/bold]\n")
            self._width = max((len(_label(d)) for d in services), default=0)
        elif event.event_type == SERVICE_CHECKING:
            self._start_status(event.data["descriptor"])
        elif event.event_type == SERVICE_RESULT:
            self._stop_status()
            self._print_result(event.data["result"])
        elif event.event_type == REPORT_COMPLETED:
            self._print_summary(event.data["report"])

    def _start_status(self, descriptor: ServiceDescriptor) -> None:
        self._stop_status()
        self._status = self._console.status(f"[dim]Checking {_label(descriptor)}[/dim]")
        self._status.start()

    def _stop_status(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def _print_result(self, result: CheckResult) -> None:
        text, style = STATUS_STYLES[result.status_label]
        line = _label(result.descriptor).ljust(self._width + 6, ".")
        self._console.print(f"{line}[bold {style}]{text}[/bold {style}]", highlight=False)
        if result.detail:
            self._console.print(f"  [dim]{result.detail}[/dim]")
        if result.error is not None:
            if self._show_stack:
                _print_exception(result.error)
            else:
                self._console.print(f"  [red]{escape(str(result.error))}[/red]", highlight=False)

    def _print_summary(self, report: Report) -> None:
        stats = report.stats
        self._console.print("\n[underline]Summary:[/underline]")
        self._console.print(f"Available on {stats.available}/{stats.total} services")
        if stats.unknown:
            self._console.print(f"{stats.unknown}/{stats.total} services gave no clear answer")
        if stats.failed:
            self._console.print(f"[red]{stats.failed}/{stats.total} services failed![/red]")
            if not self._show_stack:
                self._console.print("Try again with the --stack option to print the full stack traces")
        else:
            self._console.print("No services failed!")
        if report.unique:
            self._console.print("[green bold]It's truly unique. Grab it quick![/green bold]")


def _load_config(path: Path | None) -> ClaimcheckConfig:
    from claimcheck.config.loader import load_config_or_default

    try:
        return load_config_or_default(path)
    except (FileNotFoundError, ValueError) as exc:
        # ValueError covers ConfigError and ConfigSyntaxError
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)


@app.callback()
def main_options(
    debug: bool = typer.Option(False, "--debug", help="Log every request and verdict"),
) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


@app.command()
def check(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name to check"),
    category: list[str] | None = typer.Option(None, "--category", "-c", help="Filter services by category name"),
    service: list[str] | None = typer.Option(None, "--service", "-s", help="Filter services by title"),
    timeout: int | None = typer.Option(None, "--timeout", "-t", min=1, help="Timeout for each check in milliseconds"),
    stack: bool = typer.Option(False, "--stack", help="Print stack traces for errors"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to .claimcheck.yaml"),
) -> None:
    """Check name availability."""
    from claimcheck.checks.orchestrator import NameChecker, normalize_name
    from claimcheck.errors import StructuralError
    from claimcheck.events.emitter import EventEmitter, create_cli_emitter
    from claimcheck.registry.filters import create_filter

    if not normalize_name(name):
        typer.echo(ctx.get_help())
        raise typer.Exit(1)

    config = _load_config(config_path)
    name_filter = create_filter(
        category or config.filters.categories,
        service or config.filters.services,
    )
    timeout_ms = timeout if timeout is not None else config.check.timeout_ms

    emitter = create_cli_emitter(config) or EventEmitter()
    emitter.add_listener(ConsoleProgress(console, show_stack=stack))

    async def _run() -> Report:
        try:
            return await NameChecker(emitter=emitter).check(name, filter=name_filter, timeout=timeout_ms)
        finally:
            await emitter.aclose()

    try:
        asyncio.run(_run())
    except StructuralError as exc:
        err_console.print(f"[red]claimcheck failed: {escape(str(exc))}[/red]")
        if stack:
            _print_exception(exc)
        else:
            console.print("Try again with the --stack option to print the full stack trace")
        raise typer.Exit(1)


@app.command("list")
def list_command(
    category: list[str] | None = typer.Option(None, "--category", "-c", help="Filter services by category name"),
    service: list[str] | None = typer.Option(None, "--service", "-s", help="Filter services by title"),
    stack: bool = typer.Option(False, "--stack", help="Print stack traces for errors"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to .claimcheck.yaml"),
) -> None:
    """List the services a check would run, grouped by category."""
    from claimcheck.checks.orchestrator import NameChecker
    from claimcheck.errors import StructuralError
    from claimcheck.registry.filters import create_filter

    config = _load_config(config_path)
    name_filter = create_filter(
        category or config.filters.categories,
        service or config.filters.services,
    )
    try:
        descriptors = asyncio.run(NameChecker().list_services(name_filter))
    except StructuralError as exc:
        err_console.print(f"[red]claimcheck failed: {escape(str(exc))}[/red]")
        if stack:
            _print_exception(exc)
        raise typer.Exit(1)

    grouped = [(cat, list(items)) for cat, items in groupby(descriptors, key=lambda d: d.category)]
    console.print(f"{len(descriptors)} services found within {len(grouped)} categories!\n")
    for cat, items in grouped:
        console.print(f"[bold]{cat}[/bold]:")
        for descriptor in items:
            console.print(f" - {descriptor.title}", highlight=False)


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .claimcheck.yaml"),
) -> None:
    """Validate configuration file."""
    from urllib.parse import urlparse

    from claimcheck.config.loader import load_config, unknown_filter_terms
    from claimcheck.errors import ConfigSyntaxError
    from claimcheck.events.emitter import EVENT_TYPES
    from claimcheck.registry.registry import get_registry

    errors: list[str] = []
    warnings: list[str] = []
    try:
        config = load_config(path=path)
        console.print("[green]✓[/green] YAML parses correctly")
        console.print("[green]✓[/green] Pydantic validation passes")
    except FileNotFoundError as exc:
        console.print(f"[red]✗ {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    except ConfigSyntaxError as exc:
        console.print(f"[red]✗ YAML parsing failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print("[green]✓[/green] YAML parses correctly")
        console.print(f"[red]✗ Pydantic validation failed: {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    # Filter terms that match nothing silently select nothing
    warnings.extend(unknown_filter_terms(config.filters, (s.descriptor for s in get_registry().load())))

    known_event_types = {*EVENT_TYPES, "*"}
    for i, wh in enumerate(config.webhooks):
        parsed = urlparse(wh.url)
        if not parsed.scheme or not parsed.netloc:
            errors.append(f"Webhook {i}: invalid URL '{wh.url}'")
        for evt in wh.events:
            if evt not in known_event_types:
                warnings.append(f"Webhook {i}: unrecognized event type '{evt}'")

    if not errors:
        if config.webhooks:
            console.print(f"[green]✓[/green] {len(config.webhooks)} webhook(s) configured")
        for w in warnings:
            console.print(f"[yellow]! {escape(w)}[/yellow]")
        console.print("\n[green bold]Configuration is valid.[/green bold]")
    else:
        for err in errors:
            console.print(f"[red]✗ {escape(err)}[/red]")
        console.print(f"\n[red bold]{len(errors)} validation error(s) found.[/red bold]")
        raise typer.Exit(1)


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .claimcheck.yaml"),
) -> None:
    """Print resolved configuration."""
    config = _load_config(path)

    timeout = f"{config.check.timeout_ms}ms" if config.check.timeout_ms else "none"
    console.print("[bold]Check:[/bold]")
    console.print(f"  Timeout per service: {timeout}\n")

    console.print("[bold]Filters:[/bold]")
    console.print(f"  Categories: {', '.join(config.filters.categories) or 'all'}")
    console.print(f"  Services: {', '.join(config.filters.services) or 'all'}\n")

    console.print("[bold]Webhooks:[/bold]")
    if not config.webhooks:
        console.print("  none")
    for wh in config.webhooks:
        signed = " (signed)" if wh.secret else ""
        console.print(escape(f"  {wh.url} [{', '.join(wh.events)}]{signed}"), highlight=False)


def main() -> None:
    app()
