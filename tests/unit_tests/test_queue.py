"""
Tests for the job queue transports and the factory that picks one.
"""

import pytest

from files_manager.adapters.queue import (
    LocalQueue,
    QueueFactory,
    RedisQueue,
    SQSQueue,
)
from files_manager.config.settings import Settings

TASKS = [
    {"task_type": "generate_thumbnails", "userId": "u1", "fileId": f"f{i}", "attempts": 0}
    for i in range(3)
]


async def drain(queue, expected: int):
    received = []
    for _ in range(expected * 3):
        task = await queue.get_task()
        if task:
            received.append(task)
        if len(received) == expected:
            break
    return received


async def test_local_queue_is_fifo(tmp_path):
    queue = LocalQueue(tmp_path / "queue_data")
    for task in TASKS:
        assert await queue.add_task(task) is True

    assert await drain(queue, len(TASKS)) == TASKS
    assert await queue.get_task() is None


async def test_local_queue_quarantines_bad_files(tmp_path):
    queue = LocalQueue(tmp_path / "queue_data")
    (queue.queue_dir / "0_broken.json").write_text("{not json")

    assert await queue.get_task() is None
    assert (queue.queue_dir / "errors" / "0_broken.json").exists()


async def test_redis_queue_is_fifo(redis_client):
    queue = RedisQueue(redis_client, name="fileQueue")
    for task in TASKS:
        assert await queue.add_task(task) is True

    assert redis_client.llen("fileQueue") == len(TASKS)
    assert await drain(queue, len(TASKS)) == TASKS
    assert await queue.get_task() is None


async def test_sqs_queue_round_trip(mocked_aws):
    queue = SQSQueue(mocked_aws, region_name="us-east-1")

    assert await queue.add_task(TASKS[0]) is True
    assert await queue.get_task() == TASKS[0]


class TestQueueFactory:

    def test_local_dev_uses_the_file_system(self, tmp_path):
        settings = Settings(deployment_mode="local-dev", folder_path=str(tmp_path))

        queue = QueueFactory.get_queue_handler(settings)

        assert isinstance(queue, LocalQueue)
        assert queue.queue_dir == tmp_path / "queue_data"

    def test_redis_mode(self, redis_client):
        settings = Settings(deployment_mode="redis", queue_name="jobs")

        queue = QueueFactory.get_queue_handler(settings, redis_client=redis_client)

        assert isinstance(queue, RedisQueue)
        assert queue.name == "jobs"

    def test_aws_prod_needs_a_queue_url(self, mocked_aws):
        with pytest.raises(ValueError, match="SQS_QUEUE_URL"):
            QueueFactory.get_queue_handler(Settings(deployment_mode="aws-prod"))

        queue = QueueFactory.get_queue_handler(Settings(deployment_mode="aws-prod", sqs_queue_url=mocked_aws))
        assert isinstance(queue, SQSQueue)
        assert queue.queue_url == mocked_aws

    def test_unknown_mode_is_rejected_by_settings(self):
        with pytest.raises(ValueError):
            Settings(deployment_mode="carrier-pigeon")
