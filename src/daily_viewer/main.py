"""CLI entry point."""

import asyncio
import logging

import click

from .config import Config, ConfigProvider
from .matching.matcher import aggregate, match
from .matching.pattern import DatePattern
from .storage.models import SortDirection
from .storage.vault import VaultStore

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SORT_CHOICES = [s.value for s in SortDirection]


def load_config(path: str) -> Config:
    try:
        return Config.from_yaml(path)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def cli() -> None:
    """Daily Viewer - Read dated notes as one chronological page."""
    pass


@cli.command()
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", "-p", default=5002, type=int, help="Port to bind")
@click.option("--debug/--no-debug", default=False, help="Enable debug mode")
def web(config: str, host: str, port: int, debug: bool) -> None:
    """Open the daily view in a web interface."""
    from .web.app import create_app

    load_config(config)
    app = create_app(config)
    click.echo(f"Starting daily view at http://{host}:{port}")
    try:
        app.run(host=host, port=port, debug=debug)
    finally:
        asyncio.run(app.config["DAILY_VIEW"].close())


@cli.command("list")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
@click.option("--format", "-f", "date_format", help="Override the configured date format")
@click.option("--order", type=click.Choice(SORT_CHOICES), help="Override the configured sort order")
def list_notes(config: str, date_format: str | None, order: str | None) -> None:
    """List dated notes in display order."""
    cfg = load_config(config)
    pattern = DatePattern(date_format or cfg.date_format)
    direction = SortDirection(order) if order else cfg.sort_order

    if not pattern.has_date_tokens:
        logger.warning(f"Date format {pattern.template!r} has no date tokens")

    store = VaultStore(cfg.vault_path)
    documents = asyncio.run(store.list_documents(cfg.extension))
    dated = aggregate(documents, pattern, direction)

    if not dated:
        click.echo(f"No notes match the date format {pattern.template}.")
        return

    click.echo(f"{len(dated)} notes ({direction.value}):\n")
    for entry in dated:
        click.echo(f"[{entry.key.date().isoformat()}] {entry.document.path}")


@cli.command()
@click.argument("date_format")
@click.argument("names", nargs=-1, required=True)
def check(date_format: str, names: tuple[str, ...]) -> None:
    """Check whether note names match a date format."""
    pattern = DatePattern(date_format)
    if not pattern.has_date_tokens:
        click.echo(f"Warning: {date_format!r} has no year, month or day tokens.")

    for name in names:
        key = match(name, pattern)
        if key is None:
            click.echo(f"{name}: no match")
        else:
            click.echo(f"{name}: {key.isoformat(sep=' ')}")


@cli.group()
def settings() -> None:
    """Show or change view settings."""
    pass


@settings.command("show")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def settings_show(config: str) -> None:
    """Show current settings."""
    cfg = load_config(config)
    click.echo("Daily Viewer Settings:")
    click.echo(f"  Vault:        {cfg.vault_path}")
    click.echo(f"  Date format:  {cfg.date_format}")
    click.echo(f"  Sort order:   {cfg.sort_order.value}")
    click.echo(f"  Extension:    {cfg.extension}")


@settings.command("set-format")
@click.argument("date_format")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def settings_set_format(date_format: str, config: str) -> None:
    """Set the date format of daily note filenames."""
    provider = ConfigProvider(load_config(config), config)
    try:
        asyncio.run(provider.update(date_format=date_format))
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Date format set to {date_format}")


@settings.command("set-order")
@click.argument("order", type=click.Choice(SORT_CHOICES))
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def settings_set_order(order: str, config: str) -> None:
    """Set the sort order of the view."""
    provider = ConfigProvider(load_config(config), config)
    asyncio.run(provider.update(sort_order=order))
    click.echo(f"Sort order set to {order}")


if __name__ == "__main__":
    cli()
