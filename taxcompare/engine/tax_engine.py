"""
Tax engine — Old vs New regime.
Pure Python, deterministic. Same input → same output.

Pipeline for one regime:
  1. aggregate_deductions     (regime-specific: itemised or standard-only)
  2. taxable income           = max(0, gross + other income - deductions)
  3. compute_slab_tax         (age-adjusted slab table from the RegimeConfig)
  4. apply_rebate             (Section 87A cliff — all or nothing)
  5. round tax_payable        (whole rupees, half-up; nothing earlier is rounded)

No slab boundaries or thresholds are hard-coded here: every number comes from
a RegimeConfig (see regimes.py for the versioned datasets). The only statutory
constants are the HRA Rule 2A percentages.
"""
from __future__ import annotations

import logging
import math
import sys
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Sequence

from taxcompare.engine.errors import RegimeConfigError
from taxcompare.engine.schemas import (
    DeductionSummary,
    RegimeComparison,
    RegimeConfig,
    TaxInput,
    TaxResult,
    TaxSlab,
    validate_slab_table,
)

logger = logging.getLogger(__name__)

# ===========================================================================
# HRA RULE 2A CONSTANTS (non-metro rate only)
# ===========================================================================

HRA_RENT_EXCESS_PCT = 0.10   # rent paid minus 10% of basic
HRA_BASIC_CAP_PCT   = 0.40   # 40% of basic (metro 50% not modelled)

# Amounts are clamped here so sums of huge inputs stay finite
MAX_AMOUNT = sys.float_info.max

# Enough digits for any finite float written out in full
_ROUNDING_CONTEXT = Context(prec=400)


# ===========================================================================
# INTERNAL HELPERS
# ===========================================================================

def _non_negative(value: Any) -> float:
    """Clamp an amount to [0, MAX_AMOUNT]. NaN and None count as 0."""
    if value is None:
        return 0.0
    amount = float(value)
    if math.isnan(amount) or amount < 0:
        return 0.0
    return min(amount, MAX_AMOUNT)


def _round_rupees(amount: float) -> int:
    """Round half-up to whole rupees (Python's round() is half-even)."""
    return int(
        Decimal(repr(amount)).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT,
        )
    )


# ===========================================================================
# PROGRESSIVE SLAB TAX
# ===========================================================================

def compute_slab_tax(taxable_income: float, slabs: Sequence[Any]) -> float:
    """
    Apply a progressive slab table to taxable_income.

    Each slab taxes only the part of income between the previous bound and its
    own upper bound, so crossing a boundary changes the marginal rate but never
    the tax already accrued below it. Negative income is treated as 0.

    Raises:
        RegimeConfigError: if the slab table is malformed.
    """
    table = validate_slab_table(slabs)
    income = _non_negative(taxable_income)

    tax = 0.0
    previous_bound = 0.0
    for slab in table:
        taxed = max(min(slab.upper_bound, income) - previous_bound, 0.0)
        tax += taxed * slab.rate
        previous_bound = slab.upper_bound
        if income <= slab.upper_bound:
            break
    return tax


def marginal_rate_at(taxable_income: float, slabs: Sequence[Any]) -> float:
    """Rate of the slab containing taxable_income (a boundary belongs to the lower slab)."""
    table = validate_slab_table(slabs)
    income = _non_negative(taxable_income)
    for slab in table:
        if income <= slab.upper_bound:
            return slab.rate
    return table[-1].rate


def effective_slabs(regime: RegimeConfig, age: int) -> tuple[TaxSlab, ...]:
    """
    Slab table for a taxpayer of the given age.

    Picks the age exemption with the highest min_age not above age and raises
    the first slab's bound to it. Slabs ending at or below the raised bound are
    absorbed. Returns a new tuple; regime.slabs is left untouched.
    """
    applicable = [e for e in regime.age_exemptions if age >= e.min_age]
    if not applicable:
        return regime.slabs

    exemption = max(applicable, key=lambda e: e.min_age)
    raised_bound = exemption.first_slab_bound
    first = regime.slabs[0]
    rest = tuple(s for s in regime.slabs[1:] if s.upper_bound > raised_bound)
    return (TaxSlab(upper_bound=raised_bound, rate=first.rate),) + rest


# ===========================================================================
# HRA EXEMPTION — Section 10(13A), Rule 2A
# ===========================================================================

def compute_hra_exemption(hra_received: float, rent_paid: float, basic_salary: float) -> float:
    """
    Least of:
      1. HRA actually received
      2. Rent paid minus 10% of basic salary  (never below 0)
      3. 40% of basic salary

    All three inputs are annual. Any zero input gives a zero exemption.
    """
    hra = _non_negative(hra_received)
    rent = _non_negative(rent_paid)
    basic = _non_negative(basic_salary)

    rent_excess = max(rent - HRA_RENT_EXCESS_PCT * basic, 0.0)
    return min(hra, rent_excess, HRA_BASIC_CAP_PCT * basic)


# ===========================================================================
# DEDUCTIONS
# ===========================================================================

def aggregate_deductions(tax_input: TaxInput, regime: RegimeConfig) -> DeductionSummary:
    """
    Total deductions allowed by the regime.

    Itemised regime: standard deduction + 80C + 80D + HRA exemption (uncapped).
    Standard-only regime: the standard deduction; itemised inputs are ignored.
    """
    standard = _non_negative(regime.standard_deduction)
    if not regime.allows_itemized_deductions:
        return DeductionSummary(standard_deduction=standard, total_deductions=standard)

    section_80c = _non_negative(tax_input.section_80c)
    section_80d = _non_negative(tax_input.section_80d)
    hra_exemption = compute_hra_exemption(
        tax_input.hra_received, tax_input.rent_paid, tax_input.basic_salary,
    )
    return DeductionSummary(
        standard_deduction=standard,
        section_80c=section_80c,
        section_80d=section_80d,
        hra_exemption=hra_exemption,
        total_deductions=_non_negative(standard + section_80c + section_80d + hra_exemption),
    )


# ===========================================================================
# SECTION 87A REBATE
# ===========================================================================

def apply_rebate(tax_before_rebate: float, taxable_income: float, regime: RegimeConfig) -> float:
    """
    Full rebate at or below the threshold, none above it.

    This is a cliff: one rupee over the threshold brings back the whole slab
    tax. Marginal relief is not modelled.
    """
    if regime.rebate_enabled and _non_negative(taxable_income) <= regime.rebate_threshold:
        return 0.0
    return tax_before_rebate


# ===========================================================================
# SINGLE-REGIME PIPELINE
# ===========================================================================

def compute_regime_tax(tax_input: TaxInput, regime: RegimeConfig) -> TaxResult:
    """Run the full pipeline for one regime."""
    gross_income = _non_negative(
        _non_negative(tax_input.gross_income) + _non_negative(tax_input.other_income)
    )

    deductions = aggregate_deductions(tax_input, regime)
    taxable_income = max(gross_income - deductions.total_deductions, 0.0)

    slabs = effective_slabs(regime, tax_input.age)
    tax_before_rebate = compute_slab_tax(taxable_income, slabs)
    tax_after_rebate = apply_rebate(tax_before_rebate, taxable_income, regime)
    tax_payable = _round_rupees(tax_after_rebate)

    return TaxResult(
        regime=regime.name,
        financial_year=regime.financial_year,
        gross_income=gross_income,
        total_deductions=deductions.total_deductions,
        hra_exemption=deductions.hra_exemption,
        taxable_income=taxable_income,
        tax_before_rebate=tax_before_rebate,
        rebate_applied=tax_before_rebate > 0 and tax_after_rebate == 0.0,
        marginal_rate=marginal_rate_at(taxable_income, slabs),
        tax_payable=tax_payable,
        post_tax_income=max(gross_income - tax_payable, 0.0),
        deductions=deductions,
    )


# ===========================================================================
# COMPARE REGIMES — public API
# ===========================================================================

def compare_regimes(
    tax_input: TaxInput,
    old_config: RegimeConfig,
    new_config: RegimeConfig,
) -> RegimeComparison:
    """
    Run both regimes independently and report the cheaper one.

    "equal" only when the rounded tax_payable values are identical; otherwise
    the strictly smaller wins.

    Raises:
        RegimeConfigError: if the configs are passed in the wrong slots.
    """
    if old_config.name != "old" or new_config.name != "new":
        raise RegimeConfigError(
            f"compare_regimes expects (old, new) configs, got "
            f"({old_config.name!r}, {new_config.name!r})"
        )

    old = compute_regime_tax(tax_input, old_config)
    new = compute_regime_tax(tax_input, new_config)

    if old.tax_payable < new.tax_payable:
        cheaper = "old"
    elif new.tax_payable < old.tax_payable:
        cheaper = "new"
    else:
        cheaper = "equal"

    logger.debug(
        "Compared regimes old_fy=%s new_fy=%s cheaper=%s",
        old_config.financial_year, new_config.financial_year, cheaper,
    )
    return RegimeComparison(
        old=old,
        new=new,
        cheaper=cheaper,
        savings_amount=abs(old.tax_payable - new.tax_payable),
    )


__all__ = [
    "HRA_RENT_EXCESS_PCT",
    "HRA_BASIC_CAP_PCT",
    "compute_slab_tax",
    "marginal_rate_at",
    "effective_slabs",
    "compute_hra_exemption",
    "aggregate_deductions",
    "apply_rebate",
    "compute_regime_tax",
    "compare_regimes",
]
