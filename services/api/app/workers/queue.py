from __future__ import annotations

from app.core.config import settings
from app.workers.redis_conn import get_redis_connection
from rq import Queue
from rq.job import Job


def get_queue() -> Queue:
    conn = get_redis_connection()
    return Queue("default", connection=conn)


def enqueue_catalog_preload() -> Job:
    # No retry: a partial snapshot is still written when some pages fail.
    q = get_queue()
    return q.enqueue(
        "app.workers.jobs.preload_catalog_job",
        job_timeout=settings.worker_job_timeout_secs,
    )
