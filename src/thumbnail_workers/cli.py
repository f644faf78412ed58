"""
CLI commands for the thumbnail worker.

Kept apart from files_manager/cli.py so worker processes can be deployed and
scaled separately from the API.
"""

import asyncio
import logging

import click

from database.local import get_nosql_adapter
from files_manager.adapters.queue import QueueFactory
from files_manager.adapters.storage import LocalStorage
from files_manager.cli import configure_logging
from files_manager.config.settings import get_settings
from files_manager.db_layer import FileService
from thumbnail_workers.worker import Worker

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for Thumbnail Worker management"""
    pass


@cli.command()
@click.option("--concurrency", type=click.IntRange(min=1), default=1,
              help="Number of jobs processed in parallel")
@click.option("--max-attempts", type=click.IntRange(min=1), default=None,
              help="Attempts before a failing job is dropped (defaults to JOB_MAX_ATTEMPTS)")
def worker(concurrency, max_attempts):
    """Start the thumbnail worker"""
    settings = get_settings()
    configure_logging(settings.log_level)

    print(f"Starting thumbnail worker in {settings.deployment_mode} mode...")
    print(f"  Storage folder: {settings.folder_path}")
    print(f"  Concurrency: {concurrency}")

    metadata_store = get_nosql_adapter(settings)
    metadata_store.connect()

    queue = QueueFactory.get_queue_handler(settings)
    print(f"Queue handler initialized: {type(queue).__name__}")

    storage = LocalStorage(settings.folder_path)
    worker_instance = Worker(
        queue,
        FileService(metadata_store, storage),
        storage,
        max_attempts=max_attempts or settings.job_max_attempts,
    )

    try:
        print("Worker ready to process tasks")
        asyncio.run(worker_instance.run(concurrency))
    except KeyboardInterrupt:
        print("Received shutdown signal...")
        worker_instance.stop()
    finally:
        metadata_store.close()
        print("Worker shutdown complete")


if __name__ == "__main__":
    cli()
