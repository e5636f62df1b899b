"""
Unit tests for wastebank_impact/impact.py

calculate_emission_breakdown is the per-transaction path (linear transport,
unknown types at 0.001); compute_impact is the aggregate path (selectable
transport, unknown types neutral, landfill and credits).
"""
import logging
from unittest.mock import patch

import pytest

from wastebank_impact.config import Settings
from wastebank_impact.impact import (
    CreditsMode,
    EmissionBreakdown,
    EnvironmentalImpact,
    calculate_emission_breakdown,
    compute_impact,
)
from wastebank_impact.transport import TransportModel

MIXED = {"aluminium": {"weight": 10}, "botol-bening": {"weight": 5}}


# ─────────────────────────────────────────────────────────────────────────────
# 1. calculate_emission_breakdown
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateEmissionBreakdown:

    def test_returns_breakdown(self):
        assert isinstance(calculate_emission_breakdown(MIXED, 20), EmissionBreakdown)

    def test_mixed_map_with_distance(self):
        # transport = 0.0000191 × (15 / 2500) × 20
        result = calculate_emission_breakdown(MIXED, 20)
        expected_transport = 0.0000191 * (15 / 2500) * 20
        assert result.waste_management_emission == pytest.approx(2.83)
        assert result.recycling_savings == pytest.approx(5.2)
        assert result.transport_emission == pytest.approx(expected_transport)
        assert result.total_emission == pytest.approx(2.83 + expected_transport - 5.2)
        assert result.total_emission == pytest.approx(-2.37, abs=1e-4)
        assert result.total_weight == 15

    def test_unknown_type_uses_transaction_default(self):
        result = calculate_emission_breakdown({"mystery-waste": {"weight": 10}})
        assert result.processing_emission == pytest.approx(0.01)

    def test_invalid_distance_treated_as_zero(self):
        for distance in (None, float("nan"), -3, "far"):
            assert calculate_emission_breakdown(MIXED, distance).transport_emission == 0.0

    def test_settings_override_capacity(self):
        result = calculate_emission_breakdown(MIXED, 20, settings=Settings(vehicle_capacity_kg=15))
        assert result.transport_emission == pytest.approx(0.0000191 * 20)

    def test_settings_override_factor_table(self):
        settings = Settings(emission_factors={"aluminium": -1.0})
        result = calculate_emission_breakdown({"aluminium": 10}, settings=settings)
        assert result.recycling_savings == pytest.approx(10.0)
        assert result.waste_management_emission == 0.0

    def test_to_dict(self):
        data = calculate_emission_breakdown(MIXED).to_dict()
        assert set(data) == {
            "waste_management_emission", "transport_emission",
            "recycling_savings", "total_emission", "total_weight",
        }


# ─────────────────────────────────────────────────────────────────────────────
# 2. compute_impact – emission figures
# ─────────────────────────────────────────────────────────────────────────────

class TestComputeImpactEmissions:

    def test_unknown_type_is_neutral(self):
        result = compute_impact({"mystery-waste": {"weight": 10}})
        assert result.waste_management_emission == 0.0
        assert result.total_weight == 10

    def test_defaults_to_tripped_transport(self):
        # 15 kg still costs one whole truck trip
        result = compute_impact(MIXED, 20)
        assert result.transport_emission == pytest.approx(0.0000191 * 20 * 1)

    def test_tripped_counts_extra_trips(self):
        result = compute_impact({"aluminium": 2600}, 10)
        assert result.transport_emission == pytest.approx(0.0000191 * 10 * 2)

    def test_linear_transport_selectable(self):
        result = compute_impact(MIXED, 20, transport_model=TransportModel.LINEAR)
        assert result.transport_emission == pytest.approx(0.0000191 * (15 / 2500) * 20)

    @pytest.mark.parametrize("wastes, distance", [
        (MIXED, 20),
        ({"ps-kaca": 3000, "duplek": 12}, 7.5),
        ({"mystery-waste": 4}, 0),
        ({}, 100),
    ])
    def test_net_emission_identity(self, wastes, distance):
        r = compute_impact(wastes, distance)
        assert r.total_emission == r.waste_management_emission + r.transport_emission - r.recycling_savings

    def test_carbon_excludes_transport(self):
        r = compute_impact(MIXED, 20)
        assert r.carbon == pytest.approx(2.83 - 5.2)
        assert r.carbon != r.total_emission

    def test_carbon_offset_equals_savings(self):
        r = compute_impact(MIXED, 20)
        assert r.carbon_offset == r.recycling_savings


# ─────────────────────────────────────────────────────────────────────────────
# 3. compute_impact – landfill volume and potential credits
# ─────────────────────────────────────────────────────────────────────────────

class TestComputeImpactLandfillAndCredits:

    def test_landfill_volume(self):
        # kardus 10 × 0.15 + plastic 2 × 0.10 + aluminium 1 × 0.20 (no keyword)
        wastes = {"kardus-bagus": 10, "plastic-bottle": 2, "aluminium": 1}
        assert compute_impact(wastes).landfill_volume == pytest.approx(1.9)

    def test_credits_accumulate_running_savings_per_entry(self):
        # koran: savings 30.3 → credits += 0.0303
        # botol-bening: savings 35.5 → credits += 0.0355
        wastes = {"koran": 10, "botol-bening": 5}
        result = compute_impact(wastes)
        assert result.potential_credits == pytest.approx(0.0303 + 0.0355)

    def test_credits_final_total_mode(self):
        wastes = {"koran": 10, "botol-bening": 5}
        result = compute_impact(wastes, credits_mode=CreditsMode.FINAL_TOTAL)
        assert result.potential_credits == pytest.approx(0.0355)

    def test_credit_modes_agree_for_single_entry(self):
        running = compute_impact({"koran": 10})
        final = compute_impact({"koran": 10}, credits_mode="final_total")
        assert running.potential_credits == pytest.approx(final.potential_credits)

    def test_running_credits_depend_on_entry_order(self):
        a = compute_impact({"koran": 10, "aluminium": 5})
        b = compute_impact({"aluminium": 5, "koran": 10})
        assert a.potential_credits == pytest.approx(0.0303 * 2)
        assert b.potential_credits == pytest.approx(0.0303)

    def test_credit_rate_from_settings(self):
        result = compute_impact({"koran": 10}, settings=Settings(credit_rate=0.01))
        assert result.potential_credits == pytest.approx(0.303)


# ─────────────────────────────────────────────────────────────────────────────
# 4. compute_impact – failure guard
# ─────────────────────────────────────────────────────────────────────────────

class TestComputeImpactGuard:

    def test_exception_returns_zero_impact(self, caplog):
        with patch("wastebank_impact.impact.transport_emission", side_effect=RuntimeError("boom")):
            with caplog.at_level(logging.ERROR, logger="wastebank_impact.impact"):
                result = compute_impact(MIXED, 20)
        assert result == EnvironmentalImpact.zero()
        assert "boom" in caplog.text

    def test_malformed_waste_map_returns_zero_impact(self):
        assert compute_impact("not a map", 10) == EnvironmentalImpact.zero()

    def test_unknown_credits_mode_returns_zero_impact(self):
        assert compute_impact(MIXED, credits_mode="sometimes") == EnvironmentalImpact.zero()

    def test_none_wastes_is_empty_not_error(self):
        result = compute_impact(None, 10)
        assert result.total_weight == 0
        assert result.transport_emission == 0.0
