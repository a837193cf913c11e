from __future__ import annotations

import os
import re
from collections.abc import Mapping

from .. import logging as structured_logging
from .. import metrics
from ..constants import (
    ANSIBLE_VERBOSITY_ENV_PREFIX,
    MAX_ANSIBLE_VERBOSITY,
    MIN_ANSIBLE_VERBOSITY,
    WORKER_ENV_PREFIX,
)
from ..models import GroupVersionKind

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)


def env_var_name(prefix: str, gvk: GroupVersionKind) -> str:
    """Return the per-GVK variable name, e.g. WORKER_MEMCACHED_CACHE_EXAMPLE_COM."""
    return f"{prefix}_{gvk.kind}_{gvk.group}".replace(".", "_").upper()


def parse_int(value: str) -> int | None:
    """Parse a base-10 integer strictly (sign and ASCII digits only); None if invalid."""
    if not _INTEGER.fullmatch(value):
        return None
    parsed = int(value)
    if parsed < _INT64_MIN or parsed > _INT64_MAX:
        return None
    return parsed


def _lookup_int(env_var: str, environ: Mapping[str, str] | None) -> tuple[int | None, str]:
    env = os.environ if environ is None else environ
    raw = env.get(env_var)
    if raw is None:
        structured_logging.logger.debug(
            "Environment variable not set; using default value",
            event="env_override",
            reason="Unset",
            env_var=env_var,
        )
        return None, "unset"

    value = parse_int(raw)
    if value is None:
        structured_logging.logger.info(
            "Could not parse environment variable as an integer; using default value",
            event="env_override",
            reason="Invalid",
            env_var=env_var,
            value=raw,
        )
        return None, "invalid"
    return value, "applied"


def get_max_workers(
    gvk: GroupVersionKind, default: int, environ: Mapping[str, str] | None = None
) -> int:
    """Resolve the worker count for a GVK from WORKER_<KIND>_<GROUP>.

    The environment wins over the operator default so cluster admins can
    size workers to their cluster without editing watches.yaml. Unset,
    non-integer or non-positive values fall back to ``default``.
    """
    env_var = env_var_name(WORKER_ENV_PREFIX, gvk)
    value, result = _lookup_int(env_var, environ)
    if value is not None and value <= 0:
        structured_logging.logger.info(
            f"Value {value} not valid. Using default {default}",
            gvk=gvk,
            event="env_override",
            reason="OutOfRange",
            env_var=env_var,
        )
        value, result = None, "out_of_range"

    metrics.ENV_OVERRIDE_TOTAL.labels(setting="max_workers", result=result).inc()
    return default if value is None else value


def get_ansible_verbosity(
    gvk: GroupVersionKind, default: int, environ: Mapping[str, str] | None = None
) -> int:
    """Resolve the Ansible verbosity for a GVK from ANSIBLE_VERBOSITY_<KIND>_<GROUP>.

    Values outside 0-7 fall back to ``default``.
    """
    env_var = env_var_name(ANSIBLE_VERBOSITY_ENV_PREFIX, gvk)
    value, result = _lookup_int(env_var, environ)
    if value is not None and not MIN_ANSIBLE_VERBOSITY <= value <= MAX_ANSIBLE_VERBOSITY:
        structured_logging.logger.info(
            f"Value {value} not valid. Using default {default}",
            gvk=gvk,
            event="env_override",
            reason="OutOfRange",
            env_var=env_var,
        )
        value, result = None, "out_of_range"

    metrics.ENV_OVERRIDE_TOTAL.labels(setting="ansible_verbosity", result=result).inc()
    return default if value is None else value
