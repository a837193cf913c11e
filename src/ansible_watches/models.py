"""Watch model: the mapping of a GroupVersionKind to an Ansible playbook or role."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import Any

from . import logging as structured_logging
from .constants import (
    DEFAULT_ANSIBLE_VERBOSITY,
    DEFAULT_MAX_WORKERS,
    MANAGE_STATUS_DEFAULT,
    MAX_RUNNER_ARTIFACTS_DEFAULT,
    WATCH_CLUSTER_SCOPED_RESOURCES_DEFAULT,
    WATCH_DEPENDENT_RESOURCES_DEFAULT,
)
from .errors import AnsiblePathError, FinalizerError, InvalidGVKError


@dataclass(frozen=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


@dataclass(frozen=True)
class Finalizer:
    """Automation run when a watched resource is deleted."""

    name: str
    playbook: str = ""
    role: str = ""
    vars: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "vars", MappingProxyType(dict(self.vars)))


@dataclass(frozen=True)
class Watch:
    """Binding of a GroupVersionKind to the automation that reconciles it.

    max_workers and ansible_verbosity are never read from watches.yaml;
    they are resolved from WORKER_* / ANSIBLE_VERBOSITY_* environment
    variables at load time.
    """

    gvk: GroupVersionKind
    blacklist: tuple[GroupVersionKind, ...] = ()
    playbook: str = ""
    role: str = ""
    vars: Mapping[str, Any] = field(default_factory=dict, hash=False)
    max_runner_artifacts: int = MAX_RUNNER_ARTIFACTS_DEFAULT
    reconcile_period: timedelta = timedelta(0)
    finalizer: Finalizer | None = None
    manage_status: bool = MANAGE_STATUS_DEFAULT
    watch_dependent_resources: bool = WATCH_DEPENDENT_RESOURCES_DEFAULT
    watch_cluster_scoped_resources: bool = WATCH_CLUSTER_SCOPED_RESOURCES_DEFAULT
    max_workers: int = DEFAULT_MAX_WORKERS
    ansible_verbosity: int = DEFAULT_ANSIBLE_VERBOSITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "vars", MappingProxyType(dict(self.vars)))

    def validate(self) -> None:
        """Check that the watch points at usable automation.

        A watch is valid if it:
        - specifies an absolute, existing path to a role or playbook
        - has a finalizer with a name and either a valid role/playbook
          path or non-empty vars, when a finalizer is set

        Raises:
            AnsiblePathError: If the playbook/role path is unusable
            FinalizerError: If the finalizer is invalid
        """
        try:
            verify_ansible_path(self.playbook, self.role)
        except AnsiblePathError as e:
            structured_logging.logger.error(
                f"Invalid ansible path: {e}",
                gvk=self.gvk,
                event="validate",
                reason="InvalidAnsiblePath",
            )
            raise

        if self.finalizer is None:
            return

        if not self.finalizer.name:
            structured_logging.logger.error(
                "Invalid finalizer: finalizer must have name",
                gvk=self.gvk,
                event="validate",
                reason="FinalizerNameMissing",
            )
            raise FinalizerError(f"finalizer must have name (GVK: {self.gvk})")

        try:
            verify_ansible_path(self.finalizer.playbook, self.finalizer.role)
        except AnsiblePathError as e:
            # Inline vars stand in for a finalizer playbook/role
            if self.finalizer.vars:
                return
            structured_logging.logger.error(
                f"Invalid ansible path on finalizer: {e}",
                gvk=self.gvk,
                event="validate",
                reason="InvalidFinalizerPath",
                finalizer=self.finalizer.name,
            )
            raise FinalizerError(f"finalizer {self.finalizer.name}: {e}") from e


def verify_gvk(gvk: GroupVersionKind) -> None:
    """Check that a GroupVersionKind has a version and a kind.

    An empty group is accepted (core API kinds have none), though a
    group-less kind may still fail later during operator startup.
    """
    if not gvk.version:
        raise InvalidGVKError(f"invalid GVK: {gvk}: version must not be empty")
    if not gvk.kind:
        raise InvalidGVKError(f"invalid GVK: {gvk}: kind must not be empty")


def verify_ansible_path(playbook: str, role: str) -> None:
    """Check that a playbook, or failing that a role, is an absolute existing path."""
    if playbook:
        if not os.path.isabs(playbook):
            raise AnsiblePathError("playbook path must be absolute")
        if not os.path.exists(playbook):
            raise AnsiblePathError(f"playbook: {playbook} was not found")
    elif role:
        if not os.path.isabs(role):
            raise AnsiblePathError("role path must be absolute")
        if not os.path.exists(role):
            raise AnsiblePathError(f"role path: {role} was not found")
    else:
        raise AnsiblePathError("must specify Role or Playbook")
