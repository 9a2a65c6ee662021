import logging
from pathlib import Path
from typing import Optional

import typer
from flask import Flask

from config import Config
from logging_config import setup_logging
from models.errors import StoreFormatError
from routes.dashboard import dashboard_bp
from routes.api import api_bp
from services.geolocator import IpGeolocator
from services.logparser import HubLogMonitor, process_hub_log

logger = logging.getLogger(__name__)

cli = typer.Typer(help="Map of hub instances around the world.")


def create_app(geolocator, hub_log_file=None, watch=False, refresh_seconds=None):
    """Application factory"""
    app = Flask(__name__)

    monitor = None
    if watch and hub_log_file:
        monitor = HubLogMonitor(hub_log_file)
        # the caller has already processed the current contents
        monitor.changed()

    app.extensions['hubble'] = {
        'geolocator': geolocator,
        'hub_log_file': hub_log_file,
        'monitor': monitor,
        'refresh_seconds': refresh_seconds or Config.MAP_REFRESH_SECONDS,
    }

    # Register blueprints
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(api_bp)

    return app


def _fail(ctx, message, code):
    typer.echo(message, err=True)
    if code == 2:
        typer.echo(ctx.get_help(), err=True)
    raise typer.Exit(code=code)


@cli.command()
def serve(
        ctx: typer.Context,
        hub_log_file: Optional[Path] = typer.Option(
            None,
            "--hub-log-file",
            help="Path to the hub log file",
        ),
        geoip_data_file: Optional[Path] = typer.Option(
            None,
            "--geoip-data-file",
            help="Path to the GeoIP data file",
        ),
        watch: bool = typer.Option(
            False,
            "--watch",
            help="Watch the hub log file for changes",
        ),
        api: bool = typer.Option(
            True,
            "--api/--no-api",
            help="Enable or disable the IP geolocation API",
        ),
        host: str = typer.Option(Config.MAP_HOST, "--host", help="Map server host"),
        port: int = typer.Option(Config.MAP_PORT, "--port", help="Map server port"),
) -> None:
    """
    Look up hub locations and serve them on a world map.

    The GeoIP data file is saved when the server stops.
    """
    setup_logging()

    hub_log = str(hub_log_file) if hub_log_file else (Config.HUB_LOG_FILE or None)
    data_file = str(geoip_data_file) if geoip_data_file else Config.GEOIP_DATA_FILE

    try:
        geoip = IpGeolocator(
            data_file,
            enable_api=api,
            max_concurrency=Config.GEOIP_MAX_CONCURRENCY,
        )
    except StoreFormatError as e:
        _fail(ctx, f"Failed to load GeoIP data: {e.message}", 1)

    if geoip.has_error():
        _fail(ctx, f"Failed to initialize GeoIP: {geoip.get_error().message}", 1)

    if hub_log is None and geoip.size() == 0:
        _fail(ctx, "No hub log file or GeoIP data specified.", 2)

    if watch and hub_log is None:
        _fail(ctx, "Cannot watch for changes without a hub log file.", 2)

    try:
        if hub_log is not None:
            # addresses cannot be mapped without the API
            if not api:
                _fail(ctx, "API disabled, cannot map IP addresses to locations.", 1)
            try:
                keys = process_hub_log(geoip, hub_log)
            except FileNotFoundError as e:
                _fail(ctx, f"Error processing log file: {e}", 1)
            logger.info("%d hub locations known", len(keys))
            if watch:
                logger.info("Watching %s for changes", hub_log)

        app = create_app(geoip, hub_log_file=hub_log, watch=watch)
        # single-threaded so the cache is only touched from one flow
        app.run(host=host, port=port, threaded=False)
    finally:
        geoip.save()


if __name__ == '__main__':
    cli()
