"""CLI entry point for api-catalog."""

import asyncio
import logging
from pathlib import Path

import click

from api_catalog.catalog_file import CatalogEntry, load_catalog, valid_descriptors
from api_catalog.config import LOG_FORMAT, SAMPLE_CATALOG
from api_catalog.console import render
from api_catalog.console.actions import Console, compute_stats, filter_descriptors
from api_catalog.console.shell import Shell
from api_catalog.errors import CatalogFileError
from api_catalog.schema.base import API_METHODS
from api_catalog.schema.validate import Invalid
from api_catalog.service import DescriptorService


def _load_entries(file_path: Path) -> list[CatalogEntry]:
    """Load a catalog file, turning file errors into CLI errors."""
    try:
        return load_catalog(file_path)
    except CatalogFileError as e:
        raise click.ClickException(str(e)) from e


def _report_invalid(entries: list[CatalogEntry]) -> int:
    invalid = [e for e in entries if isinstance(e.result, Invalid)]
    for entry in invalid:
        click.echo(click.style(f"  {entry.label}: invalid", fg="red"))
        click.echo(render.render_violations(entry.result.violations))
    return len(invalid)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output, including simulated requests.")
def main(verbose: bool):
    """API Catalog — define and catalogue HTTP API descriptors."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


@main.command()
@click.option("--seed", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Catalog file to start from (YAML or JSON).")
@click.option("--empty", is_flag=True, help="Start with no APIs instead of the bundled samples.")
def console(seed: Path | None, empty: bool):
    """Open the interactive catalog console."""
    descriptors = []
    if seed is not None or not empty:
        entries = _load_entries(seed or SAMPLE_CATALOG)
        skipped = _report_invalid(entries)
        if skipped:
            click.echo(f"Skipped {skipped} invalid entries.")
        descriptors = valid_descriptors(entries)

    Shell(Console.with_descriptors(descriptors)).run()


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(catalog_path: Path):
    """Validate every API in a catalog file."""
    entries = _load_entries(catalog_path)
    click.echo(f"Checked {len(entries)} APIs in {catalog_path}.")
    invalid = _report_invalid(entries)
    if invalid:
        raise SystemExit(1)
    click.echo(click.style("All APIs are valid.", fg="green"))


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--filter", "patterns", multiple=True, help='Only show matching APIs: "METHOD /path" or "/path" (globs allowed).')
def show(catalog_path: Path, patterns: tuple[str, ...]):
    """Render the dashboard and API list for a catalog file."""
    entries = _load_entries(catalog_path)
    _report_invalid(entries)
    descriptors = filter_descriptors(valid_descriptors(entries), patterns)
    click.echo(render.render_stats(compute_stats(descriptors)))
    click.echo()
    for descriptor in descriptors:
        click.echo(render.render_descriptor(descriptor))
    if not descriptors:
        click.echo("No APIs defined.")


@main.command("check-endpoint")
@click.argument("endpoint")
@click.option("--method", default="GET", type=click.Choice(API_METHODS), help="HTTP method.")
def check_endpoint(endpoint: str, method: str):
    """Check that an endpoint path is well formed."""
    if asyncio.run(DescriptorService().validate_endpoint(endpoint, method)):
        click.echo(click.style(f"{method} {endpoint} is a valid endpoint", fg="green"))
    else:
        click.echo(click.style(f"{method} {endpoint} is not a valid endpoint", fg="red"))
        raise SystemExit(1)
