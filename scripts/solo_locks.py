"""Inspect or purge unique-job lock entries for a queue.

What this helper does:
- list: print every lock key of a queue with its ttl and stored value.
- cleanup: delete every lock key of a queue (items in the queue are untouched).

Use cleanup when a queue is decommissioned or its items were removed by
hand, otherwise held locks linger until their ttl runs out.

Usage:
  python scripts/solo_locks.py list --queue mail
  python scripts/solo_locks.py cleanup --queue mail --yes

Options:
  --queue NAME     Queue whose lock keys to operate on (required)
  --prefix PREFIX  Lock key prefix (default: SOLO_LOCK_PREFIX or solo:queue)
  --yes            Skip interactive confirmation for cleanup
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from solo import config  # noqa: E402
from solo.locks import lock_pattern  # noqa: E402
from solo.store.client import LockStore  # noqa: E402


def list_locks(store: LockStore, queue: str, prefix: str) -> int:
    keys = sorted(store.scan_keys(lock_pattern(queue, prefix)))
    for key in keys:
        print(f"  - {key} ttl={store.ttl(key)} value={store.get(key)}")
    print(f"{len(keys)} lock(s) for queue '{queue}'")
    return len(keys)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("action", choices=["list", "cleanup"])
    ap.add_argument("--queue", required=True)
    ap.add_argument("--prefix", default=config.LOCK_PREFIX)
    ap.add_argument("--yes", action="store_true", help="Skip interactive confirmation")
    args = ap.parse_args()

    store = LockStore()
    print("Using REDIS_URL:", os.getenv("REDIS_URL", "(default / local)"))
    print("Pattern:", lock_pattern(args.queue, args.prefix))

    count = list_locks(store, args.queue, args.prefix)
    if args.action == "cleanup" and count:
        if not args.yes:
            resp = input("Delete these locks? Type 'yes' to continue: ").strip().lower()
            if resp != "yes":
                print("Aborted.")
                return
        keys = store.scan_keys(lock_pattern(args.queue, args.prefix))
        deleted = store.delete(*keys)
        print(f"Deleted {deleted} lock(s)")

    store.close()


if __name__ == "__main__":
    main()
