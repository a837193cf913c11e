from __future__ import annotations

from contextlib import suppress
from typing import Any

import kopf
from prometheus_client import start_http_server

from . import logging as structured_logging
from .config import load_operator_config
from .services.loader import load_watches


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Load watches.yaml and size the operator from it.

    A watches file that fails to load fails the startup handler, which
    stops the operator.
    """
    config = load_operator_config()
    structured_logging.setup_structured_logging(config.log_level)

    with suppress(Exception):
        start_http_server(config.metrics_port)

    watches = load_watches(
        config.watches_file,
        config.max_workers,
        config.ansible_verbosity,
    )
    memo.watches = watches

    settings.execution.max_workers = max(
        (watch.max_workers for watch in watches), default=config.max_workers
    )

    for watch in watches:
        structured_logging.logger.info(
            "Watching resource",
            gvk=watch.gvk,
            event="startup",
            reason="WatchRegistered",
            playbook=watch.playbook or None,
            role=watch.role or None,
            max_workers=watch.max_workers,
            ansible_verbosity=watch.ansible_verbosity,
            reconcile_period=watch.reconcile_period.total_seconds(),
        )
