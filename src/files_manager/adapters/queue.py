import asyncio
import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

import boto3
from redis import Redis

logger = logging.getLogger(__name__)

THUMBNAIL_TASK_TYPE = "generate_thumbnails"


class BaseQueue:
    """Base class for queue handling (to be extended by specific implementations)"""
    async def add_task(self, task: Dict[str, Any]) -> bool:
        raise NotImplementedError

    async def get_task(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class LocalQueue(BaseQueue):
    """Handles local queue using file system for IPC"""
    def __init__(self, queue_dir):
        self.queue_dir = Path(queue_dir)
        self.queue_dir.mkdir(parents=True, exist_ok=True)
        self._seq = 0
        logger.info("LocalQueue initialized at: %s", self.queue_dir)

    async def add_task(self, task):
        """Add task to queue"""
        try:
            # Timestamp first so sorting by name keeps FIFO order
            self._seq += 1
            filename = f"{time.time_ns()}_{os.getpid()}_{self._seq:06d}.json"
            filepath = self.queue_dir / filename

            with open(filepath, 'w') as f:
                json.dump(task, f)

            logger.info("Added task to queue: %s", task)
            return True
        except OSError as e:
            logger.error("Error adding task to queue: %s", str(e))
            return False

    async def get_task(self):
        """Get next task from queue"""
        files = sorted(self.queue_dir.glob("*.json"))

        if not files:
            await asyncio.sleep(0.1)  # Prevent busy waiting
            return None

        task_file = files[0]
        try:
            with open(task_file, 'r') as f:
                task = json.load(f)
            task_file.unlink()
        except FileNotFoundError:
            # Another worker slot claimed it first
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error reading task file %s: %s", task_file, str(e))
            # Move problematic file to error directory
            error_dir = self.queue_dir / "errors"
            error_dir.mkdir(exist_ok=True)
            task_file.rename(error_dir / task_file.name)
            return None

        logger.info("Retrieved task from queue: %s", task)
        return task


class RedisQueue(BaseQueue):
    """Handles a Redis list used as a FIFO job queue"""
    def __init__(self, client: Redis, name: str = "fileQueue"):
        self._r = client
        self.name = name
        logger.info("RedisQueue initialized on list: %s", self.name)

    async def add_task(self, task):
        """Add a task to the Redis list."""
        try:
            self._r.lpush(self.name, json.dumps(task))
            logger.info("Added task to Redis queue: %s", task)
            return True
        except Exception as e:
            logger.error("Error adding task to Redis queue: %s", str(e))
            return False

    async def get_task(self):
        raw = self._r.rpop(self.name)
        if raw is None:
            await asyncio.sleep(0.1)
            return None
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode()
        task = json.loads(raw)
        logger.info("Retrieved task from Redis queue: %s", task)
        return task


class SQSQueue(BaseQueue):
    """Handles AWS SQS queue"""
    def __init__(self, queue_url: str, region_name: str = "us-east-1", endpoint_url: Optional[str] = None):
        self.sqs = boto3.client(
            "sqs",
            endpoint_url=endpoint_url,
            region_name=region_name
        )
        self.queue_url = queue_url

        logger.info("SQSQueue initialized")
        logger.info(f"  Endpoint: {endpoint_url}")
        logger.info(f"  Queue URL: {self.queue_url}")
        logger.info(f"  Region: {region_name}")

    async def add_task(self, task):
        """Add a task to the SQS queue."""
        try:
            response = self.sqs.send_message(
                QueueUrl=self.queue_url,
                MessageBody=json.dumps(task),
            )
            logger.info(f"Task added to SQS queue with ID: {response.get('MessageId')}")
            return True
        except Exception as e:
            logger.error(f"Error adding task to SQS queue: {str(e)}")
            return False

    async def get_task(self):
        messages = self.sqs.receive_message(
            QueueUrl=self.queue_url,
            MaxNumberOfMessages=1,
            WaitTimeSeconds=5,
        )
        if "Messages" in messages:
            message = messages["Messages"][0]
            self.sqs.delete_message(
                QueueUrl=self.queue_url,
                ReceiptHandle=message["ReceiptHandle"],
            )
            task = json.loads(message["Body"])
            logger.info(f"Retrieved task from SQS queue: {task}")
            return task
        return None


class QueueFactory:
    """Factory to initialize the correct queue handler based on deployment mode"""

    @staticmethod
    def get_queue_handler(settings, redis_client: Optional[Redis] = None) -> BaseQueue:
        deployment_mode = settings.deployment_mode
        logger.info(f"Creating queue handler for mode: {deployment_mode}")

        if deployment_mode == "local-dev":
            return LocalQueue(Path(settings.folder_path) / "queue_data")
        if deployment_mode == "redis":
            client = redis_client or Redis(host=settings.redis_host, port=settings.redis_port, decode_responses=True)
            return RedisQueue(client, name=settings.queue_name)
        if deployment_mode == "aws-prod":
            if not settings.sqs_queue_url:
                raise ValueError("SQS_QUEUE_URL must be set in aws-prod mode")
            return SQSQueue(
                settings.sqs_queue_url,
                region_name=settings.aws_region,
                endpoint_url=settings.aws_endpoint_url,
            )
        raise ValueError(f"Invalid deployment_mode: {deployment_mode}")
