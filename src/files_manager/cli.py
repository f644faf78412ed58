# cli.py
import logging

import click
import uvicorn

from files_manager.config.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@click.group()
def cli():
    """CLI commands for the Files Manager API"""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", type=int, default=None, help="Port to bind (defaults to PORT)")
@click.option("--reload/--no-reload", default=False, help="Reload on code changes")
def serve(host, port, reload):
    """Start the HTTP API with uvicorn"""
    settings = get_settings()
    configure_logging(settings.log_level)

    port = port or settings.port
    logger.info(f"Starting Files Manager in {settings.deployment_mode} mode on {host}:{port}")
    uvicorn.run(
        "files_manager.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Deployment Mode: {settings.deployment_mode}")
    print(f"  Storage Folder: {settings.folder_path}")
    print(f"  Database: {settings.db_host}:{settings.db_port}/{settings.db_database}")
    print(f"  SQLite Path: {settings.sqlite_path}")
    print(f"  Redis: {settings.redis_host}:{settings.redis_port}")
    print(f"  Queue Name: {settings.queue_name}")
    print(f"  SQS Queue URL: {settings.sqs_queue_url}")
    print(f"  AWS Region: {settings.aws_region}")
    print(f"  Port: {settings.port}")


if __name__ == "__main__":
    cli()
