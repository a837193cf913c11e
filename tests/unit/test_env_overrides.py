"""Unit tests for per-GVK WORKER_* and ANSIBLE_VERBOSITY_* overrides."""

import os
from unittest.mock import patch

import pytest

from ansible_watches import metrics
from ansible_watches.models import GroupVersionKind
from ansible_watches.utils.env import (
    env_var_name,
    get_ansible_verbosity,
    get_max_workers,
    parse_int,
)

GVK = GroupVersionKind(group="cache.example.com", version="v1alpha1", kind="Memcached")


def _override_count(setting: str, result: str) -> float:
    for sample in metrics.ENV_OVERRIDE_TOTAL.collect()[0].samples:
        if (
            sample.name.endswith("_total")
            and sample.labels["setting"] == setting
            and sample.labels["result"] == result
        ):
            return sample.value
    return 0.0


def test_env_var_name_uppercases_and_replaces_dots():
    """Test environment variable naming for a dotted group."""
    assert env_var_name("WORKER", GVK) == "WORKER_MEMCACHED_CACHE_EXAMPLE_COM"
    assert env_var_name("ANSIBLE_VERBOSITY", GVK) == "ANSIBLE_VERBOSITY_MEMCACHED_CACHE_EXAMPLE_COM"


def test_env_var_name_with_empty_group():
    """Test that an empty group leaves a trailing underscore."""
    gvk = GroupVersionKind(group="", version="v1", kind="ConfigMap")
    assert env_var_name("WORKER", gvk) == "WORKER_CONFIGMAP_"


@pytest.mark.parametrize(
    "raw,expected",
    [("4", 4), ("-3", -3), ("+7", 7), ("007", 7), ("", None), ("4.0", None), (" 4", None), ("four", None)],
)
def test_parse_int(raw, expected):
    """Test strict base-10 integer parsing."""
    assert parse_int(raw) == expected


class TestMaxWorkers:
    """Test per-GVK WORKER_* resolution."""

    def test_unset_uses_default(self):
        """Test that the default is used when the variable is unset."""
        assert get_max_workers(GVK, 3, environ={}) == 3

    def test_valid_value(self):
        """Test that a positive override is applied."""
        environ = {"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": "4"}
        assert get_max_workers(GVK, 1, environ=environ) == 4

    @pytest.mark.parametrize("raw", ["0", "-3"])
    def test_non_positive_falls_back(self, raw):
        """Test that zero and negative worker counts fall back to the default."""
        environ = {"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": raw}
        assert get_max_workers(GVK, 2, environ=environ) == 2

    def test_unparsable_falls_back(self):
        """Test that a non-integer value falls back to the default."""
        environ = {"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": "many"}
        assert get_max_workers(GVK, 2, environ=environ) == 2

    def test_reads_process_environment_by_default(self):
        """Test that os.environ is consulted when no mapping is passed."""
        with patch.dict(os.environ, {"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": "6"}):
            assert get_max_workers(GVK, 1) == 6

    def test_other_gvk_is_not_affected(self):
        """Test that an override only applies to its own GVK."""
        other = GroupVersionKind(group="cache.example.com", version="v1alpha1", kind="Redis")
        environ = {"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": "4"}
        assert get_max_workers(other, 1, environ=environ) == 1

    def test_records_override_metrics(self):
        """Test that each resolution outcome is counted."""
        metrics.ENV_OVERRIDE_TOTAL.clear()
        get_max_workers(GVK, 1, environ={"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": "4"})
        get_max_workers(GVK, 1, environ={"WORKER_MEMCACHED_CACHE_EXAMPLE_COM": "0"})
        get_max_workers(GVK, 1, environ={})
        assert _override_count("max_workers", "applied") == 1.0
        assert _override_count("max_workers", "out_of_range") == 1.0
        assert _override_count("max_workers", "unset") == 1.0


class TestAnsibleVerbosity:
    """Test per-GVK ANSIBLE_VERBOSITY_* resolution."""

    def test_unset_uses_default(self):
        """Test that the default is used when the variable is unset."""
        assert get_ansible_verbosity(GVK, 2, environ={}) == 2

    def test_valid_value(self):
        """Test that an in-range override is applied."""
        environ = {"ANSIBLE_VERBOSITY_MEMCACHED_CACHE_EXAMPLE_COM": "5"}
        assert get_ansible_verbosity(GVK, 2, environ=environ) == 5

    @pytest.mark.parametrize("raw", ["0", "7"])
    def test_bounds_are_inclusive(self, raw):
        """Test that 0 and 7 are both accepted."""
        environ = {"ANSIBLE_VERBOSITY_MEMCACHED_CACHE_EXAMPLE_COM": raw}
        assert get_ansible_verbosity(GVK, 2, environ=environ) == int(raw)

    @pytest.mark.parametrize("raw", ["9", "8", "-1"])
    def test_out_of_range_falls_back(self, raw):
        """Test that verbosity outside 0-7 falls back to the default."""
        environ = {"ANSIBLE_VERBOSITY_MEMCACHED_CACHE_EXAMPLE_COM": raw}
        assert get_ansible_verbosity(GVK, 2, environ=environ) == 2

    def test_unparsable_falls_back(self):
        """Test that a non-integer value falls back to the default."""
        environ = {"ANSIBLE_VERBOSITY_MEMCACHED_CACHE_EXAMPLE_COM": "vvv"}
        assert get_ansible_verbosity(GVK, 2, environ=environ) == 2

    def test_records_invalid_metric(self):
        """Test that an unparsable override is counted as invalid."""
        metrics.ENV_OVERRIDE_TOTAL.clear()
        get_ansible_verbosity(GVK, 2, environ={"ANSIBLE_VERBOSITY_MEMCACHED_CACHE_EXAMPLE_COM": "x"})
        assert _override_count("ansible_verbosity", "invalid") == 1.0
