"""Tests for quantile targets and their rank-error bounds."""

import dataclasses

import pytest

from ckmsquantile import DEFAULT_TARGETS, QuantileTarget


class TestQuantileTargetCreation:
    """Tests for target construction and derived coefficients."""

    def test_derives_coefficients(self):
        """u and v are derived from quantile and error."""
        target = QuantileTarget(0.5, 0.05)

        assert target.u == pytest.approx(0.2)
        assert target.v == pytest.approx(0.2)

    def test_high_quantile_coefficients(self):
        """A p99 target is tight above its rank and loose below it."""
        target = QuantileTarget(0.99, 0.001)

        assert target.u == pytest.approx(0.2)
        assert target.v == pytest.approx(0.002 / 0.99)

    def test_is_immutable(self):
        """Targets cannot be modified after construction."""
        target = QuantileTarget(0.9, 0.01)

        with pytest.raises(dataclasses.FrozenInstanceError):
            target.quantile = 0.5

    def test_equality_ignores_derived_fields(self):
        """Targets compare and hash by quantile and error."""
        assert QuantileTarget(0.9, 0.01) == QuantileTarget(0.9, 0.01)
        assert len({QuantileTarget(0.9, 0.01), QuantileTarget(0.9, 0.01)}) == 1

    def test_str(self):
        """String form shows quantile and error."""
        assert str(QuantileTarget(0.5, 0.05)) == "Q{q=0.500000, eps=0.050000}"


class TestRankErrorBound:
    """Tests for the per-target bound."""

    def test_below_target_rank_uses_u(self):
        """At or below quantile * n the bound shrinks towards n."""
        target = QuantileTarget(0.5, 0.05)

        assert target.rank_error_bound(10, 100) == pytest.approx(0.2 * 90)
        assert target.rank_error_bound(50, 100) == pytest.approx(0.2 * 50)

    def test_above_target_rank_uses_v(self):
        """Above quantile * n the bound grows with rank."""
        target = QuantileTarget(0.5, 0.05)

        assert target.rank_error_bound(60, 100) == pytest.approx(0.2 * 60)

    def test_tight_near_high_quantile(self):
        """A p99 target allows very little error near the top ranks."""
        target = QuantileTarget(0.99, 0.001)

        assert target.rank_error_bound(995, 1000) < 3
        assert target.rank_error_bound(100, 1000) == pytest.approx(0.2 * 900)


class TestDefaultTargets:
    """Tests for the default target set."""

    def test_median_and_p99(self):
        """Defaults are the median at 5% and p99 at 0.1%."""
        assert DEFAULT_TARGETS == (QuantileTarget(0.50, 0.05), QuantileTarget(0.99, 0.001))
