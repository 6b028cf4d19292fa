"""Regime catalogue lookups."""
from __future__ import annotations

import math

import pytest

from taxcompare.engine.errors import RegimeConfigError, UnknownRegimeError
from taxcompare.engine.regimes import (
    derive_regime,
    get_regime,
    get_regime_pair,
    list_financial_years,
)


def test_financial_years_listed_oldest_first() -> None:
    assert list_financial_years() == ["FY2023-24", "FY2024-25", "FY2025-26"]


@pytest.mark.parametrize("year", ["FY2023-24", "FY2024-25", "FY2025-26"])
def test_every_year_has_a_valid_pair(year: str) -> None:
    old_config, new_config = get_regime_pair(year)
    assert (old_config.name, new_config.name) == ("old", "new")
    assert old_config.financial_year == new_config.financial_year == year
    assert old_config.allows_itemized_deductions is True
    assert new_config.allows_itemized_deductions is False
    assert math.isinf(new_config.slabs[-1].upper_bound)


def test_fy2024_25_values() -> None:
    old_config, new_config = get_regime_pair("FY2024-25")
    assert old_config.standard_deduction == 50_000
    assert old_config.rebate_threshold == 500_000
    assert [s.upper_bound for s in old_config.slabs[:-1]] == [250_000, 500_000, 1_000_000]
    assert new_config.standard_deduction == 75_000
    assert new_config.rebate_threshold == 700_000
    assert [s.upper_bound for s in new_config.slabs[:-1]] == [
        300_000, 600_000, 900_000, 1_200_000, 1_500_000,
    ]
    assert new_config.age_exemptions == ()


def test_fy2023_24_new_regime_values() -> None:
    new_config = get_regime("FY2023-24", "new")
    assert new_config.standard_deduction == 50_000
    assert new_config.age_exemptions[0].first_slab_bound == 350_000


def test_fy2025_26_new_regime_values() -> None:
    new_config = get_regime("FY2025-26", "new")
    assert new_config.rebate_threshold == 1_200_000
    assert [s.rate for s in new_config.slabs] == [0.0, 0.05, 0.10, 0.15, 0.20, 0.25, 0.30]


def test_each_lookup_builds_a_fresh_config() -> None:
    first = get_regime("FY2024-25", "old")
    second = get_regime("FY2024-25", "old")
    assert first == second
    assert first is not second


def test_unknown_financial_year() -> None:
    with pytest.raises(UnknownRegimeError, match="FY1999-00"):
        get_regime("FY1999-00", "new")


def test_unknown_regime_name() -> None:
    with pytest.raises(UnknownRegimeError, match="flat"):
        get_regime("FY2024-25", "flat")


@pytest.mark.parametrize(
    "attribute, broken_slabs, message",
    [
        pytest.param(
            "NEW_REGIME_SLABS_FY2024_25",
            ((300_000, 0.10), (float("inf"), 0.05)),
            "non-decreasing",
            id="regressive_new_regime",
        ),
        pytest.param(
            "OLD_REGIME_SLABS",
            ((250_000, 0.0), (500_000, 0.05)),
            "unbounded",
            id="bounded_old_regime",
        ),
    ],
)
def test_malformed_dataset_raises_regime_config_error(
    monkeypatch, attribute: str, broken_slabs, message: str,
) -> None:
    monkeypatch.setattr(f"taxcompare.engine.regimes.{attribute}", broken_slabs)
    name = "new" if attribute.startswith("NEW") else "old"

    with pytest.raises(RegimeConfigError, match=message) as exc_info:
        get_regime("FY2024-25", name)
    assert "FY2024-25" in str(exc_info.value)


# ---------------------------------------------------------------------------
# derive_regime — standard deduction / 87A toggles
# ---------------------------------------------------------------------------

def test_derive_regime_without_toggles_returns_config() -> None:
    config = get_regime("FY2024-25", "new")
    assert derive_regime(config) is config


@pytest.mark.parametrize(
    "apply_standard_deduction, apply_rebate, expected_std, expected_rebate",
    [
        pytest.param(False, True, 0.0, True, id="no_standard_deduction"),
        pytest.param(True, False, 75_000, False, id="no_rebate"),
        pytest.param(False, False, 0.0, False, id="neither"),
    ],
)
def test_derive_regime_toggles(
    apply_standard_deduction: bool,
    apply_rebate: bool,
    expected_std: float,
    expected_rebate: bool,
) -> None:
    config = get_regime("FY2024-25", "new")
    derived = derive_regime(
        config,
        apply_standard_deduction=apply_standard_deduction,
        apply_rebate=apply_rebate,
    )

    assert derived is not config
    assert derived.standard_deduction == expected_std
    assert derived.rebate_enabled is expected_rebate
    assert derived.rebate_threshold == config.rebate_threshold
    assert derived.slabs == config.slabs
    # Source config is untouched
    assert config.standard_deduction == 75_000
    assert config.rebate_enabled is True


def test_derive_regime_keeps_age_exemptions() -> None:
    config = get_regime("FY2024-25", "old")
    derived = derive_regime(config, apply_standard_deduction=False)
    assert derived.age_exemptions == config.age_exemptions
    assert derived.allows_itemized_deductions is True
