"""Loading of watches.yaml into validated Watch entries."""

from __future__ import annotations

from collections.abc import Mapping
from time import monotonic

import yaml

from .. import logging as structured_logging
from .. import metrics
from ..builders.watch_builder import build_watch
from ..errors import DuplicateGVKError, WatchesError, WatchesParseError
from ..models import GroupVersionKind, Watch


def parse_watches(
    content: str | bytes,
    max_workers: int,
    ansible_verbosity: int,
    *,
    environ: Mapping[str, str] | None = None,
    source: str = "<string>",
) -> list[Watch]:
    """Decode, de-duplicate and validate the watches in a YAML document.

    The document must be a sequence of watch entries. Decoding every
    entry happens before the duplicate check, and validation stops at
    the first invalid watch; nothing is returned unless every entry is
    valid.

    Raises:
        WatchesParseError: If the document or an entry cannot be decoded
        InvalidGVKError: If an entry has no version or kind
        DuplicateGVKError: If two entries share a GroupVersionKind
        AnsiblePathError: If an entry has no usable playbook or role
        FinalizerError: If an entry has an invalid finalizer
    """
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as e:
        structured_logging.logger.error(
            f"Failed to unmarshal watches: {e}",
            path=source,
            event="parse",
            reason="InvalidYAML",
        )
        raise WatchesParseError(f"failed to parse {source}: {e}") from e

    if document is None:
        document = []

    try:
        if not isinstance(document, list):
            raise WatchesParseError(
                f"failed to parse {source}: expected a list of watches, "
                f"got {type(document).__name__}"
            )

        watches = [
            build_watch(
                entry,
                max_workers=max_workers,
                ansible_verbosity=ansible_verbosity,
                environ=environ,
            )
            for entry in document
        ]
    except WatchesError as e:
        structured_logging.logger.error(
            f"Failed to unmarshal watches: {e}",
            path=source,
            event="parse",
            reason="DecodeFailed",
        )
        raise

    seen: set[GroupVersionKind] = set()
    for watch in watches:
        if watch.gvk in seen:
            structured_logging.logger.error(
                "Duplicate GVK in watches",
                gvk=watch.gvk,
                path=source,
                event="validate",
                reason="DuplicateGVK",
            )
            raise DuplicateGVKError(watch.gvk)
        seen.add(watch.gvk)

    for watch in watches:
        try:
            watch.validate()
        except WatchesError:
            structured_logging.logger.error(
                "Watch failed validation",
                gvk=watch.gvk,
                path=source,
                event="validate",
                reason="ValidateFailed",
            )
            raise

    return watches


def load_watches(
    path: str,
    max_workers: int,
    ansible_verbosity: int,
    *,
    environ: Mapping[str, str] | None = None,
) -> list[Watch]:
    """Load the watches file at ``path``.

    ``max_workers`` and ``ansible_verbosity`` are the operator-wide
    defaults used for any GVK without a WORKER_* / ANSIBLE_VERBOSITY_*
    environment override. They are passed down explicitly, so concurrent
    loads with different defaults do not affect each other.

    Raises:
        OSError: If the file cannot be read
        WatchesError: If the file is not a valid set of watches
    """
    started_at = monotonic()
    try:
        structured_logging.logger.info(
            "Loading watches",
            path=path,
            event="load",
            reason="LoadStarted",
        )
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            structured_logging.logger.error(
                f"Failed to read watches file: {e}",
                path=path,
                event="load",
                reason="ReadFailed",
            )
            raise

        watches = parse_watches(
            content,
            max_workers,
            ansible_verbosity,
            environ=environ,
            source=path,
        )

        structured_logging.logger.info(
            "Watches loaded successfully",
            path=path,
            event="load",
            reason="LoadSucceeded",
            count=len(watches),
        )
        metrics.WATCHES_LOAD_TOTAL.labels(result="success").inc()
        metrics.WATCHES_LOADED.set(len(watches))
        return watches
    except Exception:
        metrics.WATCHES_LOAD_TOTAL.labels(result="error").inc()
        raise
    finally:
        metrics.WATCHES_LOAD_DURATION.observe(monotonic() - started_at)
