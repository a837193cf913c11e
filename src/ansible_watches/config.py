"""Operator-wide settings read from the process environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import (
    ANSIBLE_VERBOSITY_ENV,
    DEFAULT_ANSIBLE_VERBOSITY,
    DEFAULT_MAX_WORKERS,
    LOG_LEVEL_DEFAULT,
    LOG_LEVEL_ENV,
    MAX_ANSIBLE_VERBOSITY,
    MAX_CONCURRENT_RECONCILES_ENV,
    METRICS_PORT_DEFAULT,
    METRICS_PORT_ENV,
    MIN_ANSIBLE_VERBOSITY,
    WATCHES_FILE_DEFAULT,
    WATCHES_FILE_ENV,
)
from .utils.env import parse_int


@dataclass(frozen=True)
class OperatorConfig:
    watches_file: str = WATCHES_FILE_DEFAULT
    max_workers: int = DEFAULT_MAX_WORKERS
    ansible_verbosity: int = DEFAULT_ANSIBLE_VERBOSITY
    metrics_port: int = METRICS_PORT_DEFAULT
    log_level: str = LOG_LEVEL_DEFAULT


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    value = parse_int(raw)
    if value is None:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    return value


def load_operator_config(environ: Mapping[str, str] | None = None) -> OperatorConfig:
    """Build the operator configuration from environment variables.

    Raises:
        ValueError: If a numeric setting is not an integer or is out of range,
            or LOG_LEVEL is not a logging level name
    """
    env = os.environ if environ is None else environ

    max_workers = _int_setting(env, MAX_CONCURRENT_RECONCILES_ENV, DEFAULT_MAX_WORKERS)
    if max_workers <= 0:
        raise ValueError(f"{MAX_CONCURRENT_RECONCILES_ENV} must be positive, got {max_workers}")

    ansible_verbosity = _int_setting(env, ANSIBLE_VERBOSITY_ENV, DEFAULT_ANSIBLE_VERBOSITY)
    if not MIN_ANSIBLE_VERBOSITY <= ansible_verbosity <= MAX_ANSIBLE_VERBOSITY:
        raise ValueError(
            f"{ANSIBLE_VERBOSITY_ENV} must be between {MIN_ANSIBLE_VERBOSITY} and "
            f"{MAX_ANSIBLE_VERBOSITY}, got {ansible_verbosity}"
        )

    log_level = (env.get(LOG_LEVEL_ENV) or LOG_LEVEL_DEFAULT).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"{LOG_LEVEL_ENV} must be a logging level name, got {log_level!r}")

    return OperatorConfig(
        watches_file=env.get(WATCHES_FILE_ENV) or WATCHES_FILE_DEFAULT,
        max_workers=max_workers,
        ansible_verbosity=ansible_verbosity,
        metrics_port=_int_setting(env, METRICS_PORT_ENV, METRICS_PORT_DEFAULT),
        log_level=log_level,
    )
