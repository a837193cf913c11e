from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .. import logging as structured_logging
from ..constants import (
    DEFAULT_ANSIBLE_VERBOSITY,
    DEFAULT_MAX_WORKERS,
    ENV_ONLY_KEYS,
    MANAGE_STATUS_DEFAULT,
    MAX_RUNNER_ARTIFACTS_DEFAULT,
    RECONCILE_PERIOD_DEFAULT,
    WATCH_CLUSTER_SCOPED_RESOURCES_DEFAULT,
    WATCH_DEPENDENT_RESOURCES_DEFAULT,
)
from ..errors import DurationParseError, WatchesParseError
from ..models import Finalizer, GroupVersionKind, Watch, verify_gvk
from ..utils.duration import parse_duration
from ..utils.env import get_ansible_verbosity, get_max_workers


def _defaults() -> dict[str, Any]:
    """Values for every optional watches.yaml field, before the document is applied."""
    return {
        "group": "",
        "version": "",
        "kind": "",
        "playbook": "",
        "role": "",
        "vars": {},
        "maxRunnerArtifacts": MAX_RUNNER_ARTIFACTS_DEFAULT,
        "reconcilePeriod": RECONCILE_PERIOD_DEFAULT,
        "manageStatus": MANAGE_STATUS_DEFAULT,
        "watchDependentResources": WATCH_DEPENDENT_RESOURCES_DEFAULT,
        "watchClusterScopedResources": WATCH_CLUSTER_SCOPED_RESOURCES_DEFAULT,
        "blacklist": [],
        "finalizer": None,
    }


def _as_string(key: str, value: Any) -> str:
    if isinstance(value, (dict, list)):
        raise WatchesParseError(f"field '{key}': cannot decode {value!r} as a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise WatchesParseError(f"field '{key}': cannot decode {value!r} as an integer")
    return value


def _as_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise WatchesParseError(f"field '{key}': cannot decode {value!r} as a boolean")
    return value


def _as_vars(key: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise WatchesParseError(f"field '{key}': cannot decode {value!r} as a mapping")
    return {_as_string(f"{key} key", k): v for k, v in value.items()}


def _as_blacklist(value: Any) -> tuple[GroupVersionKind, ...]:
    if not isinstance(value, list):
        raise WatchesParseError(f"field 'blacklist': cannot decode {value!r} as a list")
    blacklist = []
    for item in value:
        if not isinstance(item, dict):
            raise WatchesParseError(
                f"field 'blacklist': cannot decode {item!r} as a GroupVersionKind"
            )
        blacklist.append(
            GroupVersionKind(
                group=_as_string("blacklist.group", item.get("group") or ""),
                version=_as_string("blacklist.version", item.get("version") or ""),
                kind=_as_string("blacklist.kind", item.get("kind") or ""),
            )
        )
    return tuple(blacklist)


def _as_finalizer(value: Any) -> Finalizer:
    if not isinstance(value, dict):
        raise WatchesParseError(f"field 'finalizer': cannot decode {value!r} as a mapping")

    def _field(name: str, default: Any) -> Any:
        raw = value.get(name)
        return default if raw is None else raw

    return Finalizer(
        name=_as_string("finalizer.name", _field("name", "")),
        playbook=_as_string("finalizer.playbook", _field("playbook", "")),
        role=_as_string("finalizer.role", _field("role", "")),
        vars=_as_vars("finalizer.vars", _field("vars", {})),
    )


def build_watch(
    raw: Any,
    *,
    max_workers: int,
    ansible_verbosity: int,
    environ: Mapping[str, str] | None = None,
) -> Watch:
    """Decode one watches.yaml entry into a Watch.

    Defaults are filled in first and the entry's fields are applied on
    top, so an omitted (or null) field keeps its default. max_workers and
    ansible_verbosity are resolved from the environment for the entry's
    GVK, falling back to the values passed in.

    Raises:
        WatchesParseError: If the entry or one of its fields cannot be decoded
        DurationParseError: If reconcilePeriod is not a valid duration
        InvalidGVKError: If version or kind is empty
    """
    if not isinstance(raw, dict):
        raise WatchesParseError(f"cannot decode {raw!r} as a watch entry")

    fields = _defaults()
    for key, value in raw.items():
        if key in ENV_ONLY_KEYS:
            structured_logging.logger.debug(
                f"Ignoring '{key}' in watches file; it is only configurable via environment",
                event="parse",
                reason="EnvOnlyField",
            )
            continue
        if key in fields and value is not None:
            fields[key] = value

    gvk = GroupVersionKind(
        group=_as_string("group", fields["group"]),
        version=_as_string("version", fields["version"]),
        kind=_as_string("kind", fields["kind"]),
    )

    reconcile_period_raw = _as_string("reconcilePeriod", fields["reconcilePeriod"])
    try:
        reconcile_period = parse_duration(reconcile_period_raw)
    except DurationParseError as e:
        raise DurationParseError(
            reconcile_period_raw,
            f"failed to parse '{reconcile_period_raw}' to a duration: {e}",
        ) from e

    verify_gvk(gvk)

    finalizer = fields["finalizer"]
    return Watch(
        gvk=gvk,
        blacklist=_as_blacklist(fields["blacklist"]),
        playbook=_as_string("playbook", fields["playbook"]),
        role=_as_string("role", fields["role"]),
        vars=_as_vars("vars", fields["vars"]),
        max_runner_artifacts=_as_int("maxRunnerArtifacts", fields["maxRunnerArtifacts"]),
        reconcile_period=reconcile_period,
        finalizer=None if finalizer is None else _as_finalizer(finalizer),
        manage_status=_as_bool("manageStatus", fields["manageStatus"]),
        watch_dependent_resources=_as_bool(
            "watchDependentResources", fields["watchDependentResources"]
        ),
        watch_cluster_scoped_resources=_as_bool(
            "watchClusterScopedResources", fields["watchClusterScopedResources"]
        ),
        max_workers=get_max_workers(gvk, max_workers, environ),
        ansible_verbosity=get_ansible_verbosity(gvk, ansible_verbosity, environ),
    )


def new_watch(
    gvk: GroupVersionKind,
    role: str = "",
    playbook: str = "",
    vars: dict[str, Any] | None = None,
    finalizer: Finalizer | None = None,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
    ansible_verbosity: int = DEFAULT_ANSIBLE_VERBOSITY,
) -> Watch:
    """Return a Watch with the same defaults the watches.yaml parser applies."""
    defaults = _defaults()
    return Watch(
        gvk=gvk,
        blacklist=(),
        playbook=playbook,
        role=role,
        vars=dict(vars or {}),
        max_runner_artifacts=defaults["maxRunnerArtifacts"],
        reconcile_period=parse_duration(defaults["reconcilePeriod"]),
        finalizer=finalizer,
        manage_status=defaults["manageStatus"],
        watch_dependent_resources=defaults["watchDependentResources"],
        watch_cluster_scoped_resources=defaults["watchClusterScopedResources"],
        max_workers=max_workers,
        ansible_verbosity=ansible_verbosity,
    )
