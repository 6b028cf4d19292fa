"""
schemas.py — engine Pydantic v2 data contracts.

Defines:
  - TaxSlab, AgeExemption, RegimeConfig  (regime definition — trusted configuration)
  - TaxInput                             (user figures — coerced, never rejected)
  - DeductionSummary, TaxResult          (one regime's computation)
  - RegimeComparison                     (old vs new — public output of compare_regimes)

Every model is frozen. A TaxInput is built fresh per user action and a
TaxResult is only ever replaced, never edited.

Two validation policies live side by side here:
  - Configuration (slabs, thresholds) fails fast with RegimeConfigError.
  - User amounts are coerced: blank, non-numeric, non-finite or negative → 0.
"""
from __future__ import annotations

import math
from typing import Annotated, Any, Literal, Mapping, Optional, Sequence

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from taxcompare.engine.errors import RegimeConfigError


# ---------------------------------------------------------------------------
# Input coercion — the presentation layer hands us whatever the form held
# ---------------------------------------------------------------------------

def coerce_amount(value: Any) -> float:
    """
    Turn a raw form value into a non-negative rupee amount.

    Accepts numbers and numeric strings, including Indian digit grouping and a
    leading rupee sign ("8,50,000", "₹ 50000"). Anything else becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").replace("₹", "").strip()
        if not value:
            return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def coerce_age(value: Any) -> int:
    """Age in whole years; fractions are truncated, invalid values become 0."""
    return int(coerce_amount(value))


Amount = Annotated[float, BeforeValidator(coerce_amount)]
Age = Annotated[int, BeforeValidator(coerce_age)]


# ---------------------------------------------------------------------------
# Slab table
# ---------------------------------------------------------------------------

class TaxSlab(BaseModel):
    """
    One progressive bracket: income above the previous slab's bound and up to
    upper_bound is taxed at rate. The last slab of a table is unbounded
    (upper_bound = inf, serialised as null).
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    upper_bound: float
    rate: float

    @field_validator("upper_bound", mode="before")
    @classmethod
    def _none_means_unbounded(cls, value: Any) -> Any:
        return math.inf if value is None else value

    @field_serializer("upper_bound", when_used="json")
    def _serialize_upper_bound(self, upper_bound: float) -> Optional[float]:
        return None if math.isinf(upper_bound) else upper_bound


def _as_slab(slab: Any) -> TaxSlab:
    if isinstance(slab, TaxSlab):
        return slab
    if isinstance(slab, Mapping):
        return TaxSlab.model_validate(slab)
    upper_bound, rate = slab
    return TaxSlab(upper_bound=upper_bound, rate=rate)


def validate_slab_table(slabs: Sequence[Any]) -> tuple[TaxSlab, ...]:
    """
    Check a slab table and return it as an immutable tuple of TaxSlab.

    Accepts TaxSlab instances, mappings or (upper_bound, rate) pairs. A table is valid when
    bounds strictly increase from an implicit 0, every rate is in [0, 1], rates
    never decrease, and the last slab is unbounded.

    Raises:
        RegimeConfigError: describing the first slab that breaks an invariant.
    """
    if not slabs:
        raise RegimeConfigError("Slab table is empty; at least one unbounded slab is required")

    table = tuple(_as_slab(slab) for slab in slabs)

    previous_bound = 0.0
    previous_rate = 0.0
    for index, slab in enumerate(table):
        if math.isnan(slab.upper_bound) or slab.upper_bound <= previous_bound:
            raise RegimeConfigError(
                f"Slab {index}: upper bound {slab.upper_bound!r} must be greater than "
                f"the previous bound {previous_bound!r}"
            )
        if not 0.0 <= slab.rate <= 1.0:
            raise RegimeConfigError(
                f"Slab {index}: rate {slab.rate!r} must be between 0 and 1"
            )
        if slab.rate < previous_rate:
            raise RegimeConfigError(
                f"Slab {index}: rate {slab.rate!r} is lower than the previous rate "
                f"{previous_rate!r}; slab rates must be non-decreasing"
            )
        previous_bound = slab.upper_bound
        previous_rate = slab.rate

    if not math.isinf(table[-1].upper_bound):
        raise RegimeConfigError(
            f"Last slab must be unbounded, got upper bound {table[-1].upper_bound!r}"
        )
    return table


# ---------------------------------------------------------------------------
# RegimeConfig — one regime's rules for one financial year
# ---------------------------------------------------------------------------

class AgeExemption(BaseModel):
    """Raised basic-exemption limit for taxpayers aged min_age or above."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    min_age: int = Field(..., ge=0)
    first_slab_bound: float = Field(..., gt=0)


class RegimeConfig(BaseModel):
    """
    Immutable description of one regime.

    allows_itemized_deductions=False means only standard_deduction is applied;
    80C, 80D and HRA inputs are ignored for this regime.
    rebate_threshold is inclusive: taxable income equal to it still gets the
    full Section 87A rebate.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Literal["old", "new"]
    financial_year: str
    slabs: tuple[TaxSlab, ...]
    standard_deduction: float = Field(default=0.0, ge=0)
    allows_itemized_deductions: bool = False
    rebate_enabled: bool = False
    rebate_threshold: float = Field(default=0.0, ge=0)
    age_exemptions: tuple[AgeExemption, ...] = ()

    @field_validator("slabs", mode="before")
    @classmethod
    def _check_slabs(cls, slabs: Any) -> tuple[TaxSlab, ...]:
        return validate_slab_table(slabs)

    @model_validator(mode="after")
    def _check_age_exemptions(self) -> "RegimeConfig":
        first_bound = self.slabs[0].upper_bound
        seen: set[int] = set()
        for exemption in self.age_exemptions:
            if exemption.min_age in seen:
                raise RegimeConfigError(
                    f"Duplicate age exemption for min_age={exemption.min_age}"
                )
            seen.add(exemption.min_age)
            if math.isinf(exemption.first_slab_bound) or exemption.first_slab_bound < first_bound:
                raise RegimeConfigError(
                    f"Age exemption for min_age={exemption.min_age} must raise the first "
                    f"slab bound ({first_bound!r}) to a finite value, "
                    f"got {exemption.first_slab_bound!r}"
                )
        return self


# ---------------------------------------------------------------------------
# TaxInput — user figures, all annual INR
# ---------------------------------------------------------------------------

class TaxInput(BaseModel):
    """
    Raw financial inputs for one estimate.

    gross_income already includes any HRA component; the HRA exemption is
    subtracted later as a deduction. rent_paid is annual.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    gross_income: Amount = 0.0
    other_income: Amount = 0.0
    section_80c: Amount = 0.0
    section_80d: Amount = 0.0
    hra_received: Amount = 0.0
    rent_paid: Amount = 0.0
    basic_salary: Amount = 0.0
    age: Age = 0


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class DeductionSummary(BaseModel):
    """Deductions actually applied in one regime (zero where not allowed)."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    standard_deduction: float = 0
    section_80c: float = 0
    section_80d: float = 0
    hra_exemption: float = 0
    total_deductions: float = 0


class TaxResult(BaseModel):
    """
    One regime's computation.

    Only tax_payable is rounded (whole rupees). Every other figure is the
    unrounded intermediate, so summing slabs never compounds rounding error.
    post_tax_income is gross_income minus tax_payable, floored at 0.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    regime: Literal["old", "new"]
    financial_year: str
    gross_income: float
    total_deductions: float
    hra_exemption: float
    taxable_income: float
    tax_before_rebate: float
    rebate_applied: bool
    marginal_rate: float
    tax_payable: int
    post_tax_income: float
    deductions: DeductionSummary


class RegimeComparison(BaseModel):
    """Output of compare_regimes()."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    old: TaxResult
    new: TaxResult
    cheaper: Literal["old", "new", "equal"]
    savings_amount: int          # abs(old.tax_payable - new.tax_payable)


__all__ = [
    "Amount",
    "Age",
    "coerce_amount",
    "coerce_age",
    "TaxSlab",
    "validate_slab_table",
    "AgeExemption",
    "RegimeConfig",
    "TaxInput",
    "DeductionSummary",
    "TaxResult",
    "RegimeComparison",
]
