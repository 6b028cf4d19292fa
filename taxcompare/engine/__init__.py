"""Regime tax engine: slab tax, HRA exemption, deductions, 87A rebate, comparison."""
from taxcompare.engine.errors import RegimeConfigError, UnknownRegimeError
from taxcompare.engine.regimes import (
    derive_regime,
    get_regime,
    get_regime_pair,
    list_financial_years,
)
from taxcompare.engine.schemas import (
    AgeExemption,
    DeductionSummary,
    RegimeComparison,
    RegimeConfig,
    TaxInput,
    TaxResult,
    TaxSlab,
)
from taxcompare.engine.tax_engine import (
    aggregate_deductions,
    apply_rebate,
    compare_regimes,
    compute_hra_exemption,
    compute_regime_tax,
    compute_slab_tax,
)

__all__ = [
    "RegimeConfigError",
    "UnknownRegimeError",
    "get_regime",
    "get_regime_pair",
    "derive_regime",
    "list_financial_years",
    "AgeExemption",
    "DeductionSummary",
    "RegimeComparison",
    "RegimeConfig",
    "TaxInput",
    "TaxResult",
    "TaxSlab",
    "aggregate_deductions",
    "apply_rebate",
    "compare_regimes",
    "compute_hra_exemption",
    "compute_regime_tax",
    "compute_slab_tax",
]
