"""Run a worker against redis.

Usage:
    python -m solo.worker --jobs myapp.jobs --queue default --queue mail

The jobs module must expose a ``registry`` (PolicyRegistry) with the job
types this worker can run.

Environment:
    - REDIS_URL or REDIS_HOST/PORT/DB/PASSWORD
    - REDIS_NAMESPACE (default: solo)
    - SOLO_METRICS_PORT (optional) exposes prometheus metrics
"""
from __future__ import annotations

import argparse
import importlib
import logging
import time

from dotenv import load_dotenv

load_dotenv()

from solo.queue.adapters.redis_list_broker import RedisListBroker  # noqa: E402
from solo.store.client import LockStore  # noqa: E402
from solo.unique_queue import UniqueQueue  # noqa: E402
from solo.worker.worker import Worker  # noqa: E402


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--jobs", required=True, help="Module exposing a `registry` of job types")
    ap.add_argument("--queue", action="append", dest="queues", help="Queue to consume (repeatable)")
    ap.add_argument("--poll", type=float, default=1.0, help="Seconds to block per queue")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO)
    registry = getattr(importlib.import_module(args.jobs), "registry")
    store = LockStore()
    uq = UniqueQueue(RedisListBroker(store.client), store, registry)
    worker = Worker(uq, registry, queues=args.queues or ["default"])
    worker.start(poll_interval=args.poll)
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        worker.stop()
        store.close()


if __name__ == "__main__":
    main()
