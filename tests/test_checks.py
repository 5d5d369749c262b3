"""Tests for the health check contract, quick flag and registry."""

from __future__ import annotations

import pytest

from sentinel.health.checks import (
    PARAMETER_QUICK,
    DuplicateCheckError,
    HealthCheck,
    HealthCheckRegistry,
    is_quick,
)


class AlwaysHealthy(HealthCheck):
    def is_healthy(self, parameters) -> bool:
        return True


# ── Quick flag ───────────────────────────────────────────────────────────────


class TestIsQuick:
    def test_scalar_true(self) -> None:
        assert is_quick({"quick": "true"}) is True

    def test_first_element_of_list(self) -> None:
        assert is_quick({"quick": ["true", "false"]}) is True
        assert is_quick({"quick": ["false", "true"]}) is False

    def test_missing(self) -> None:
        assert is_quick({}) is False

    def test_unparsable(self) -> None:
        assert is_quick({"quick": "banana"}) is False

    def test_case_insensitive(self) -> None:
        assert is_quick({"quick": "TRUE"}) is True

    def test_empty_collection(self) -> None:
        assert is_quick({"quick": []}) is False

    def test_tuple_and_bool(self) -> None:
        assert is_quick({"quick": ("true",)}) is True
        assert is_quick({"quick": True}) is True

    def test_reserved_key(self) -> None:
        assert PARAMETER_QUICK == "quick"
        assert is_quick({"fast": "true"}) is False


# ── Contract defaults ────────────────────────────────────────────────────────


class TestHealthCheck:
    def test_should_run_defaults_to_true(self) -> None:
        assert AlwaysHealthy().should_run({}) is True

    def test_is_healthy_must_be_implemented(self) -> None:
        with pytest.raises(NotImplementedError):
            HealthCheck().is_healthy({})

    def test_str_uses_class_name(self) -> None:
        assert str(AlwaysHealthy()) == "AlwaysHealthy"

    def test_str_uses_name_when_set(self) -> None:
        check = AlwaysHealthy()
        check.name = "cache"
        assert str(check) == "cache"


# ── Registry ─────────────────────────────────────────────────────────────────


class TestHealthCheckRegistry:
    def test_keeps_registration_order(self) -> None:
        a, b, c = AlwaysHealthy(), AlwaysHealthy(), AlwaysHealthy()
        registry = HealthCheckRegistry([a, b])
        registry.register(c)
        assert list(registry) == [a, b, c]
        assert len(registry) == 3

    def test_register_returns_check(self) -> None:
        registry = HealthCheckRegistry()
        check = AlwaysHealthy()
        assert registry.register(check) is check

    def test_same_instance_twice_rejected(self) -> None:
        check = AlwaysHealthy()
        registry = HealthCheckRegistry([check])
        with pytest.raises(DuplicateCheckError):
            registry.register(check)
        assert len(registry) == 1

    def test_same_class_allowed(self) -> None:
        registry = HealthCheckRegistry([AlwaysHealthy(), AlwaysHealthy()])
        assert len(registry) == 2
