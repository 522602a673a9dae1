"""
Pinpoint CLI - Resolve locators from the command line.
"""

import json
import logging
import sys
from dataclasses import replace

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pinpoint import __version__
from pinpoint.core.config import ResolverConfig
from pinpoint.core.exceptions import PinpointError

console = Console()


def _build_config(order):
    if order:
        return ResolverConfig.from_env(strategy_order=order)
    return ResolverConfig.from_env()


def _build_spec(locator, within, index):
    from pinpoint.core.locator import parse_locator

    if within:
        locator = f"{locator} within {within}"
    spec = parse_locator(locator)
    if index is not None:
        spec = replace(spec, index=index)
    return spec


@click.group()
@click.version_option(version=__version__, prog_name="pinpoint")
@click.option("-v", "--verbose", count=True, help="Log strategy decisions (-v info, -vv debug)")
def cli(verbose):
    """🎯 Pinpoint - Locator Resolution Engine

    Resolve element locators with a prioritized strategy chain and see
    exactly which strategy matched, or why none did.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("locator")
@click.option("--within", default=None, help="Locator for an ancestor the target must be inside")
@click.option("--index", default=None, type=click.IntRange(min=0), help="0-based index among candidates")
@click.option("--order", default=None, help="Comma-separated strategy order (overrides PINPOINT_STRATEGY_ORDER)")
@click.option("--json", "as_json", is_flag=True, help="Print the outcome as JSON")
@click.option("--report", default=None, type=click.Path(dir_okay=False), help="Also write a JSON report to this path")
def resolve(html_file, locator, within, index, order, as_json, report):
    """
    Resolve LOCATOR against a saved HTML file.

    Exits with status 1 when nothing, or more than one element, matches.

    \b
    Examples:

        pinpoint resolve page.html 'input[placeholder="Username"]'

        pinpoint resolve page.html 'input[type=text]' --within '#login-form'

        pinpoint resolve page.html '#signup' --order id,builtin,name --json
    """
    from pinpoint.layers.intelligence.resolver import LocatorResolver
    from pinpoint.layers.sense.html_snapshot import snapshot_from_file
    from pinpoint.reporters.result_reporter import build_report, render_outcome, save_report

    try:
        config = _build_config(order)
        spec = _build_spec(locator, within, index)
        document = snapshot_from_file(html_file)
        outcome = LocatorResolver(config).resolve(spec, document)
    except PinpointError as e:
        console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        sys.exit(2)

    if as_json:
        click.echo(json.dumps(build_report(outcome, spec), indent=2))
    else:
        console.print(f"[bold]Locator:[/bold] {escape(str(spec))}")
        render_outcome(outcome, console)

    if report:
        save_report(outcome, report, spec)
        if not as_json:
            console.print(f"[dim]Report: {escape(report)}[/dim]")

    if not outcome.success:
        sys.exit(1)


@cli.command()
@click.argument("url")
@click.argument("locator")
@click.option("--click", "do_click", is_flag=True, help="Click the resolved element")
@click.option("--type", "text", default=None, help="Type TEXT into the resolved element")
@click.option("--headless/--headed", default=True, help="Run browser in headless mode")
@click.option("--order", default=None, help="Comma-separated strategy order")
def live(url, locator, do_click, text, headless, order):
    """
    Resolve LOCATOR on a live page, optionally clicking or typing.

    \b
    Examples:

        pinpoint live https://example.com 'link=More information...' --click

        pinpoint live https://example.com/login 'input[name=user]' --type alice --headed
    """
    if do_click and text is not None:
        raise click.UsageError("Use either --click or --type, not both")

    console.print(Panel.fit(
        f"[bold blue]🎯 Pinpoint Live[/bold blue]\n"
        f"[dim]{escape(url)}[/dim]",
        border_style="blue"
    ))

    from pinpoint.core.driver_factory import driver_session
    from pinpoint.layers.action.executor import ActionExecutor
    from pinpoint.layers.intelligence.resolver import LocatorResolver
    from pinpoint.layers.sense.live_snapshot import LiveSnapshotter
    from pinpoint.reporters.result_reporter import render_outcome

    try:
        config = _build_config(order)
        spec = _build_spec(locator, None, None)
    except PinpointError as e:
        console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        sys.exit(2)

    resolver = LocatorResolver(config)
    with driver_session(headless=headless) as driver:
        executor = ActionExecutor(driver, resolver=resolver)
        if not executor.navigate(url):
            console.print(f"[red]❌ Could not open {escape(url)}[/red]")
            sys.exit(2)

        if do_click or text is not None:
            result = executor.click(spec) if do_click else executor.type_text(spec, text)
            if result.success:
                console.print(f"[green]✅ {result.action} on {escape(result.selector)} via {result.strategy} ({result.duration_ms:.0f}ms)[/green]")
            else:
                console.print(f"[red]❌ {result.action} failed: {escape(result.error or '')}[/red]")
                sys.exit(1)
        else:
            outcome = resolver.resolve(spec, LiveSnapshotter(driver).capture())
            render_outcome(outcome, console)
            if not outcome.success:
                sys.exit(1)


@cli.command()
@click.option("--order", default=None, help="Comma-separated strategy order")
def strategies(order):
    """Show the strategy chain in the order it is tried."""
    from pinpoint.layers.intelligence.strategies.chain import StrategyChain

    try:
        config = _build_config(order)
    except PinpointError as e:
        console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        sys.exit(2)

    chain = StrategyChain.from_config(config)
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Priority", style="dim", width=8)
    table.add_column("Strategy", style="blue")
    table.add_column("Implementation", style="green")

    for i, strategy in enumerate(chain, 1):
        table.add_row(str(i), strategy.strategy_id, escape(repr(strategy)))

    console.print(table)
    console.print(f"[dim]Test attributes: {', '.join(config.test_attributes)}[/dim]")


@cli.command()
def doctor():
    """
    Check that the libraries Pinpoint needs are installed.
    """
    console.print(Panel.fit(
        f"[bold cyan]🩺 Pinpoint Doctor[/bold cyan]\n"
        f"[dim]Dependency Check[/dim]",
        border_style="cyan"
    ))
    console.print()

    dependencies = [
        ("bs4", "Sense - HTML snapshots"),
        ("selenium", "Sense/Action - Live pages"),
        ("click", "CLI"),
        ("rich", "Reporting"),
    ]

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Package", style="blue")
    table.add_column("Role", style="dim")
    table.add_column("Status", justify="center")

    all_good = True

    for package, role in dependencies:
        try:
            __import__(package)
            status = "[green]✅ Installed[/green]"
        except ImportError:
            status = "[red]❌ Missing[/red]"
            all_good = False

        table.add_row(package, role, status)

    console.print(table)
    console.print()

    if all_good:
        console.print("[bold green]✅ All dependencies installed! Pinpoint is ready.[/bold green]")
    else:
        console.print("[yellow]⚠️ Some dependencies are missing.[/yellow]")
        console.print("[dim]Reinstall with: pip install pinpoint-locators[/dim]")
        sys.exit(1)


@cli.command()
def version():
    """Show version information."""
    console.print(f"Pinpoint v{__version__}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
