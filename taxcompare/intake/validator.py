"""
Input advisories — soft checks on a TaxInput.

The estimator deliberately applies 80C and 80D in full and never rejects a
number, so nothing here raises or alters a figure. These notices tell the user
where the estimate departs from what a real return would allow.

Checks:
  1. section_80c  > ₹1,50,000              (statutory cap not applied)
  2. section_80d  > ₹25,000 / ₹50,000 (60+) (statutory cap not applied)
  3. hra_received > basic_salary
  4. rent_paid with no basic_salary        (HRA exemption will be 0)
"""
from __future__ import annotations

import logging

from taxcompare.engine.regimes import SENIOR_CITIZEN_AGE
from taxcompare.engine.schemas import TaxInput

logger = logging.getLogger(__name__)

# Statutory limits — reported only, never enforced by the engine.
_CAP_80C             = 150_000
_CAP_80D_UNDER60     = 25_000
_CAP_80D_SENIOR      = 50_000


def collect_input_warnings(tax_input: TaxInput) -> list[str]:
    """
    Return human-readable advisories for tax_input (empty when nothing stands out).

    Every check runs, so the caller gets all notices in one pass.
    """
    warnings: list[str] = []

    # ---- 1. Section 80C ----------------------------------------------------
    if tax_input.section_80c > _CAP_80C:
        warnings.append(
            f"Section 80C claim ₹{tax_input.section_80c:,.0f} is above the statutory "
            f"limit of ₹{_CAP_80C:,.0f}. This estimate deducts the full amount under "
            "the Old Regime; a filed return would not."
        )

    # ---- 2. Section 80D, age-dependent -------------------------------------
    cap_80d = _CAP_80D_SENIOR if tax_input.age >= SENIOR_CITIZEN_AGE else _CAP_80D_UNDER60
    if tax_input.section_80d > cap_80d:
        warnings.append(
            f"Section 80D claim ₹{tax_input.section_80d:,.0f} is above the ₹{cap_80d:,.0f} "
            "limit for your age. This estimate deducts the full amount under the Old Regime."
        )

    # ---- 3. HRA above basic ------------------------------------------------
    if tax_input.hra_received > tax_input.basic_salary > 0:
        warnings.append(
            f"HRA received (₹{tax_input.hra_received:,.0f}) is more than basic salary "
            f"(₹{tax_input.basic_salary:,.0f}). Please check both figures."
        )

    # ---- 4. Rent without basic salary --------------------------------------
    if tax_input.rent_paid > 0 and tax_input.basic_salary == 0:
        warnings.append(
            "Rent paid was entered without a basic salary, so the HRA exemption is ₹0. "
            "Enter your annual basic salary to claim it."
        )

    if warnings:
        # Count only — no income figures in logs
        logger.info("Input advisories raised: %d", len(warnings))
    return warnings


__all__ = ["collect_input_warnings"]
