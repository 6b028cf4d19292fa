"""
regimes.py — versioned RegimeConfig datasets.

The engine never encodes year- or age-specific numbers; they live here as
lookup tables keyed by financial year and regime name. Each lookup builds a
fresh RegimeConfig, so no caller ever holds a shared, mutable slab template.

Datasets:
  FY2023-24  new regime: std ₹50K, 87A ≤ ₹7L, senior basic exemption ₹3.5L
             (the figures the original single-regime calculator used)
  FY2024-25  new regime: std ₹75K, 87A ≤ ₹7L, no senior raise   ← default
  FY2025-26  new regime: Budget 2025 slabs 4L/8L/12L/16L/20L/24L, 87A ≤ ₹12L

The old regime is unchanged across all three: 2.5L/5L/10L, std ₹50K,
87A ≤ ₹5L, basic exemption ₹3L at 60 and ₹5L at 80.

Whether 80C/80D/HRA apply under the new regime is a per-config choice
(allows_itemized_deductions); every shipped new-regime config disallows them.
"""
from __future__ import annotations

from typing import Callable

from pydantic import ValidationError

from taxcompare.engine.errors import RegimeConfigError, UnknownRegimeError
from taxcompare.engine.schemas import AgeExemption, RegimeConfig

INF = float("inf")

# ===========================================================================
# SLAB TABLES — (ceiling, rate)
# ===========================================================================

OLD_REGIME_SLABS: tuple[tuple[float, float], ...] = (
    (250_000,   0.00),   # 0–2.5L: 0%
    (500_000,   0.05),   # 2.5–5L: 5%
    (1_000_000, 0.20),   # 5–10L: 20%
    (INF,       0.30),   # >10L: 30%
)

NEW_REGIME_SLABS_FY2023_24: tuple[tuple[float, float], ...] = (
    (300_000,   0.00),   # 0–3L: 0%
    (600_000,   0.05),   # 3–6L: 5%
    (900_000,   0.10),   # 6–9L: 10%
    (1_200_000, 0.15),   # 9–12L: 15%
    (1_500_000, 0.20),   # 12–15L: 20%
    (INF,       0.30),   # >15L: 30%
)

# FY2024-25 kept the FY2023-24 breakpoints.
NEW_REGIME_SLABS_FY2024_25 = NEW_REGIME_SLABS_FY2023_24

NEW_REGIME_SLABS_FY2025_26: tuple[tuple[float, float], ...] = (
    (400_000,   0.00),   # 0–4L: 0%
    (800_000,   0.05),   # 4–8L: 5%
    (1_200_000, 0.10),   # 8–12L: 10%
    (1_600_000, 0.15),   # 12–16L: 15%
    (2_000_000, 0.20),   # 16–20L: 20%
    (2_400_000, 0.25),   # 20–24L: 25%
    (INF,       0.30),   # >24L: 30%
)

OLD_STD_DEDUCTION = 50_000
OLD_87A_THRESHOLD = 500_000

SENIOR_CITIZEN_AGE       = 60
SUPER_SENIOR_CITIZEN_AGE = 80


# ===========================================================================
# CONFIG FACTORIES
# ===========================================================================

def _old_regime(financial_year: str) -> RegimeConfig:
    return RegimeConfig(
        name="old",
        financial_year=financial_year,
        slabs=OLD_REGIME_SLABS,
        standard_deduction=OLD_STD_DEDUCTION,
        allows_itemized_deductions=True,
        rebate_enabled=True,
        rebate_threshold=OLD_87A_THRESHOLD,
        age_exemptions=(
            AgeExemption(min_age=SENIOR_CITIZEN_AGE, first_slab_bound=300_000),
            AgeExemption(min_age=SUPER_SENIOR_CITIZEN_AGE, first_slab_bound=500_000),
        ),
    )


def _new_regime_fy2023_24() -> RegimeConfig:
    return RegimeConfig(
        name="new",
        financial_year="FY2023-24",
        slabs=NEW_REGIME_SLABS_FY2023_24,
        standard_deduction=50_000,
        rebate_enabled=True,
        rebate_threshold=700_000,
        age_exemptions=(
            AgeExemption(min_age=SENIOR_CITIZEN_AGE, first_slab_bound=350_000),
        ),
    )


def _new_regime_fy2024_25() -> RegimeConfig:
    return RegimeConfig(
        name="new",
        financial_year="FY2024-25",
        slabs=NEW_REGIME_SLABS_FY2024_25,
        standard_deduction=75_000,
        rebate_enabled=True,
        rebate_threshold=700_000,
    )


def _new_regime_fy2025_26() -> RegimeConfig:
    return RegimeConfig(
        name="new",
        financial_year="FY2025-26",
        slabs=NEW_REGIME_SLABS_FY2025_26,
        standard_deduction=75_000,
        rebate_enabled=True,
        rebate_threshold=1_200_000,
    )


_CATALOG: dict[str, dict[str, Callable[[], RegimeConfig]]] = {
    "FY2023-24": {
        "old": lambda: _old_regime("FY2023-24"),
        "new": _new_regime_fy2023_24,
    },
    "FY2024-25": {
        "old": lambda: _old_regime("FY2024-25"),
        "new": _new_regime_fy2024_25,
    },
    "FY2025-26": {
        "old": lambda: _old_regime("FY2025-26"),
        "new": _new_regime_fy2025_26,
    },
}


# ===========================================================================
# LOOKUPS — public API
# ===========================================================================

def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


def list_financial_years() -> list[str]:
    """Financial years with a registered old/new pair, oldest first."""
    return sorted(_CATALOG)


def get_regime(financial_year: str, name: str) -> RegimeConfig:
    """
    Build the RegimeConfig for (financial_year, name).

    Raises:
        UnknownRegimeError: if either key is not registered.
        RegimeConfigError: if the registered dataset is malformed.
    """
    year_entry = _CATALOG.get(financial_year)
    if year_entry is None:
        raise UnknownRegimeError(
            f"No tax regimes registered for financial year '{financial_year}'. "
            f"Available: {', '.join(list_financial_years())}"
        )
    factory = year_entry.get(name)
    if factory is None:
        raise UnknownRegimeError(
            f"Unknown regime '{name}' for {financial_year}; expected 'old' or 'new'"
        )
    try:
        return factory()
    except ValidationError as exc:
        raise RegimeConfigError(
            f"Regime dataset {financial_year}/{name} is invalid: {_first_error(exc)}"
        ) from exc


def get_regime_pair(financial_year: str) -> tuple[RegimeConfig, RegimeConfig]:
    """(old, new) configs for one financial year, ready for compare_regimes()."""
    return get_regime(financial_year, "old"), get_regime(financial_year, "new")


def derive_regime(
    config: RegimeConfig,
    *,
    apply_standard_deduction: bool = True,
    apply_rebate: bool = True,
) -> RegimeConfig:
    """
    Copy of config with the standard deduction and/or the 87A rebate switched off.

    The copy is re-validated from scratch; config itself is never touched.

    Raises:
        RegimeConfigError: if the derived config is malformed.
    """
    if apply_standard_deduction and apply_rebate:
        return config

    fields = config.model_dump()
    if not apply_standard_deduction:
        fields["standard_deduction"] = 0.0
    if not apply_rebate:
        fields["rebate_enabled"] = False
    try:
        return RegimeConfig.model_validate(fields)
    except ValidationError as exc:
        raise RegimeConfigError(
            f"Derived {config.name} regime for {config.financial_year} is invalid: "
            f"{_first_error(exc)}"
        ) from exc


__all__ = [
    "OLD_REGIME_SLABS",
    "NEW_REGIME_SLABS_FY2023_24",
    "NEW_REGIME_SLABS_FY2024_25",
    "NEW_REGIME_SLABS_FY2025_26",
    "SENIOR_CITIZEN_AGE",
    "SUPER_SENIOR_CITIZEN_AGE",
    "list_financial_years",
    "get_regime",
    "get_regime_pair",
    "derive_regime",
]
