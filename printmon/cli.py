import json
import click

from .db import init_db, connect_db
from .repository import get_config, set_config, load_settings
from .logs import configure_logging
from .service import CollectorService
from .shell import CommandShell
from .sources import JobSourceError, default_source


@click.group(help="printmon: local print job monitor")
def cli():
    # Ensure the settings DB exists before any command runs
    init_db()


def _load_settings():
    conn = connect_db()
    try:
        return load_settings(conn)
    except ValueError as e:
        click.secho(f"Error: invalid configuration ({e})", fg="red")
        raise SystemExit(1)
    finally:
        conn.close()


# ---------- Monitor ----------
@cli.command("run", help="Start the interactive monitor")
@click.option("--autostart/--no-autostart", default=False, show_default=True,
              help="Begin collecting immediately instead of waiting for `start`")
def run_cmd(autostart):
    settings = _load_settings()
    log = configure_logging(settings.log_file)
    service = CollectorService(default_source(), settings)
    log.info("Initializing Print Job Monitoring System...")
    try:
        service.open()
        if autostart:
            service.start()
        CommandShell(service).run()
    except Exception as e:
        log.error(f"Uncaught exception in main: {e}")
        raise SystemExit(1)
    finally:
        service.close()
    log.info("Print Job Monitoring System exited normally.")


@cli.command("export", help="Collect for a number of sweeps, then export to FILE")
@click.argument("filename")
@click.option("--sweeps", default=1, type=click.IntRange(min=1), show_default=True,
              help="Number of sweeps to run before exporting")
def export_cmd(filename, sweeps):
    settings = _load_settings()
    configure_logging(settings.log_file)
    service = CollectorService(default_source(), settings)
    for _ in range(sweeps):
        service.sweep_once()
    if not service.export(filename):
        raise SystemExit(1)
    click.secho(f"Exported {len(service.ledger)} job(s) to {filename}", fg="green")


@cli.command("printers", help="List printers visible to the job source")
def printers_cmd():
    try:
        printers = default_source().list_printers()
    except JobSourceError as e:
        click.secho(f"Error: {e}", fg="red")
        raise SystemExit(1)

    if not printers:
        click.echo("No printers.")
        return

    for p in printers:
        click.echo(p.name)


# ---------- Config ----------
@cli.group("config", help="Configuration")
def config_group():
    pass


@config_group.command("get")
def config_get():
    conn = connect_db()
    try:
        click.echo(json.dumps(get_config(conn), indent=2))
    finally:
        conn.close()


@config_group.command("set")
@click.argument("key")
@click.argument("value")
def config_set_cmd(key, value):
    conn = connect_db()
    try:
        set_config(conn, key, value)
        click.secho(f"Config updated: {key}={value}", fg="green")
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red")
        raise SystemExit(1)
    finally:
        conn.close()


def main():
    cli()
