#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from ansible_watches.constants import (
    DEFAULT_ANSIBLE_VERBOSITY,
    DEFAULT_MAX_WORKERS,
    WATCHES_FILE_DEFAULT,
)
from ansible_watches.errors import WatchesError
from ansible_watches.services.loader import load_watches
from ansible_watches.utils.duration import format_duration


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a watches.yaml file")
    parser.add_argument("--watches-file", default=WATCHES_FILE_DEFAULT)
    parser.add_argument("--max-workers", type=int, default=DEFAULT_MAX_WORKERS)
    parser.add_argument("--ansible-verbosity", type=int, default=DEFAULT_ANSIBLE_VERBOSITY)
    args = parser.parse_args(argv)

    try:
        watches = load_watches(args.watches_file, args.max_workers, args.ansible_verbosity)
    except (OSError, WatchesError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    for watch in watches:
        target = f"playbook={watch.playbook}" if watch.playbook else f"role={watch.role}"
        print(
            f"{watch.gvk}: {target} workers={watch.max_workers} "
            f"verbosity={watch.ansible_verbosity} "
            f"reconcilePeriod={format_duration(watch.reconcile_period)}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
