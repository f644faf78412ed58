import asyncio
import io
import logging
from typing import Any, Dict, Optional, Tuple

from PIL import Image

from database.schemas import FileType
from files_manager.adapters.queue import THUMBNAIL_TASK_TYPE, BaseQueue
from files_manager.adapters.storage import LocalStorage
from files_manager.db_layer import FileService
from files_manager.db_layer.file_service import THUMBNAIL_WIDTHS
from files_manager.errors import NotFound

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class ThumbnailJobError(Exception):
    """A job whose file does not resolve; eligible for retry."""


class ThumbnailGenerator:
    """Resizes image bytes to a target width, keeping the aspect ratio and format."""

    def resize(self, content: bytes, width: int) -> bytes:
        with Image.open(io.BytesIO(content)) as image:
            image_format = image.format or "PNG"
            original_width, original_height = image.size
            height = max(1, round(original_height * width / original_width))
            resized = image.resize((width, height))

        output = io.BytesIO()
        if image_format == "JPEG" and resized.mode not in ("RGB", "L"):
            resized = resized.convert("RGB")
        resized.save(output, format=image_format)
        return output.getvalue()


class Worker:
    def __init__(
        self,
        queue: BaseQueue,
        file_service: FileService,
        storage: LocalStorage,
        generator: Optional[ThumbnailGenerator] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """Initialize worker with queue"""
        self.queue = queue
        self.file_service = file_service
        self.storage = storage
        self.generator = generator or ThumbnailGenerator()
        self.max_attempts = max_attempts
        self.running = True
        logger.info(f"Thumbnail worker initialized (max attempts: {max_attempts})")

    def _generate_size(self, local_path: str, width: int) -> str:
        content = self.storage.read(local_path)
        thumbnail = self.generator.resize(content, width)
        return self.storage.save_thumbnail(local_path, width, thumbnail)

    def _resolve_image(self, task: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        user_id = task.get('userId')
        file_id = task.get('fileId')
        if not user_id:
            raise ThumbnailJobError("Missing userId")
        if not file_id:
            raise ThumbnailJobError("Missing fileId")
        try:
            document = self.file_service.get(user_id, file_id)
        except NotFound:
            raise ThumbnailJobError(f"File {file_id} not found for user {user_id}")
        return document, document["type"] == FileType.IMAGE.value

    async def process_task(self, task: Dict[str, Any]) -> str:
        """Generate every thumbnail width for the image a task points at.

        Widths are generated concurrently and independently: a failure on one
        width is logged and does not affect the others or the job's outcome.
        """
        logger.info(f"Processing task: {task}")

        if task.get('task_type') != THUMBNAIL_TASK_TYPE:
            logger.warning(f"Unknown task type: {task.get('task_type')}")
            return f"Unknown task type: {task.get('task_type')}"

        document, is_image = self._resolve_image(task)
        if not is_image:
            return f"File {document['id']} is not an image, nothing to do"

        local_path = document["localPath"]
        results = await asyncio.gather(
            *(asyncio.to_thread(self._generate_size, local_path, width) for width in THUMBNAIL_WIDTHS),
            return_exceptions=True,
        )

        generated = 0
        for width, result in zip(THUMBNAIL_WIDTHS, results):
            if isinstance(result, Exception):
                logger.error(f"Thumbnail {width} failed for file {document['id']}: {result}")
            else:
                generated += 1
                logger.info(f"Wrote thumbnail {result}")

        return f"Generated {generated}/{len(THUMBNAIL_WIDTHS)} thumbnails for file {document['id']}"

    async def handle_task(self, task: Dict[str, Any]) -> Optional[str]:
        """Process a task, putting it back on the queue when it fails.

        Any error that escapes process_task (an unresolvable file, an
        unreachable document store) counts as one failed attempt.
        """
        try:
            return await self.process_task(task)
        except ThumbnailJobError as e:
            await self._retry_or_drop(task, e)
        except Exception as e:
            logger.error(f"Error processing task {task}: {str(e)}", exc_info=True)
            await self._retry_or_drop(task, e)
        return None

    async def _retry_or_drop(self, task: Dict[str, Any], error: Exception) -> None:
        attempts = int(task.get('attempts', 0)) + 1
        if attempts >= self.max_attempts:
            logger.error(f"Dropping task after {attempts} attempts: {error}")
            return
        logger.warning(f"Task failed ({error}), retrying (attempt {attempts + 1}/{self.max_attempts})")
        if not await self.queue.add_task({**task, 'attempts': attempts}):
            logger.error(f"Could not re-enqueue task {task}")

    async def listen_for_tasks(self):
        """Listen for tasks until stopped"""
        logger.info("Worker started listening for tasks")
        consecutive_errors = 0

        while self.running:
            try:
                task = await self.queue.get_task()
                if task:
                    logger.info(f"Received task: {task}")
                    result = await self.handle_task(task)
                    if result:
                        logger.info(result)
                    consecutive_errors = 0
            except Exception as e:
                consecutive_errors += 1
                logger.error(f"Error in task processing loop: {str(e)}", exc_info=True)

                backoff_time = min(30, 2 ** consecutive_errors)
                logger.warning(f"Backing off for {backoff_time} seconds after error...")
                await asyncio.sleep(backoff_time)

    async def run(self, concurrency: int = 1):
        """Run `concurrency` listening slots against the same queue."""
        await asyncio.gather(*(self.listen_for_tasks() for _ in range(max(1, concurrency))))

    def stop(self):
        """Stop the worker gracefully"""
        logger.info("Stopping worker...")
        self.running = False
