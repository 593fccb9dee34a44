import os
import threading
import traceback
from typing import Iterable, List, Optional

from prometheus_client import start_http_server

import platform_monitoring

from solo.codec import JobItem
from solo.policy.registry import PolicyRegistry
from solo.unique_queue import UniqueQueue


class Worker:
    """Worker that pulls jobs through the unique queue and runs their handlers.

    Responsibilities:
    - dequeue from each queue in order (lock released or held by the dequeue hook)
    - resolve handler = registry.handler(job_type)
    - call handler.perform(*args) for classes, handler(*args) for callables
    - release held locks once the handler returns or raises
    - emit platform_monitoring events at start/success/error
    """

    def __init__(self, unique_queue: UniqueQueue, registry: PolicyRegistry, queues: Optional[Iterable[str]] = None):
        self.unique_queue = unique_queue
        self.registry = registry
        self.queues: List[str] = list(queues or ["default"])
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self, timeout: float = 0) -> Optional[JobItem]:
        """Process at most one job. Returns the job run, or None if every queue was empty."""
        for queue in self.queues:
            item = self.unique_queue.dequeue(queue, timeout=timeout)
            if item is not None:
                self.perform(queue, item)
                return item
        return None

    def perform(self, queue: str, item: JobItem) -> bool:
        job_type = item.job_type
        platform_monitoring.log_event("worker.job.start", {"queue": queue, "job_type": job_type})
        policy = self.registry.resolve(job_type)
        try:
            handler = self.registry.handler(job_type)
            if handler is None:
                raise RuntimeError(f"unknown job type: {job_type}")
            if isinstance(handler, type):
                handler.perform(*item.args)
            else:
                handler(*item.args)
            platform_monitoring.log_event("worker.job.success", {"queue": queue, "job_type": job_type})
            platform_monitoring.prometheus_metric("solo_worker_jobs", labels={"queue": queue, "outcome": "success"})
            return True
        except Exception as exc:
            platform_monitoring.log_event("worker.job.error", {"queue": queue, "job_type": job_type, "error": str(exc)})
            platform_monitoring.log_event("worker.job.trace", {"job_type": job_type, "trace": traceback.format_exc()})
            platform_monitoring.prometheus_metric("solo_worker_jobs", labels={"queue": queue, "outcome": "error"})
            return False
        finally:
            if policy.unique and policy.release_after_completion:
                self.unique_queue.release(queue, job_type, *item.args)

    def start(self, poll_interval: float = 0.5):
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run_loop, args=(poll_interval,), daemon=True)
        self._thread.start()
        port = os.environ.get("SOLO_METRICS_PORT")
        if port:
            start_http_server(int(port))

    def _run_loop(self, poll_interval: float):
        while not self._stop.is_set():
            try:
                self.run_once(timeout=poll_interval)
            except Exception:
                platform_monitoring.log_event("worker.loop.error", {"error": traceback.format_exc()})
                self._stop.wait(poll_interval)

    def stop(self):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)


__all__ = ["Worker"]
