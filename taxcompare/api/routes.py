"""
Tax engine HTTP routes — GET  /api/regimes,
                         POST /api/calculate,
                         POST /api/compare,
                         POST /api/export

Request bodies are raw TaxInput fields exactly as a form would send them;
blank or non-numeric values are coerced to 0 by the schema, never rejected.

Query parameters shared by the POST routes:
  financial_year            defaults to settings.default_financial_year
  apply_standard_deduction  false → standard deduction of 0 in every regime
  apply_rebate              false → Section 87A rebate switched off
"""
from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict

from taxcompare.config import settings
from taxcompare.engine.errors import UnknownRegimeError
from taxcompare.engine.regimes import (
    derive_regime,
    get_regime,
    get_regime_pair,
    list_financial_years,
)
from taxcompare.engine.schemas import RegimeComparison, RegimeConfig, TaxInput
from taxcompare.engine.tax_engine import compare_regimes, compute_regime_tax
from taxcompare.intake.validator import collect_input_warnings
from taxcompare.report.pdf_generator import generate_tax_report

router = APIRouter(prefix="/api", tags=["tax_engine"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared query options
# ---------------------------------------------------------------------------

class RegimeOptions(BaseModel):
    """Which dataset to use and which of its reliefs to apply."""
    model_config = ConfigDict(frozen=True)

    financial_year: str
    apply_standard_deduction: bool = True
    apply_rebate: bool = True

    def adjust(self, config: RegimeConfig) -> RegimeConfig:
        return derive_regime(
            config,
            apply_standard_deduction=self.apply_standard_deduction,
            apply_rebate=self.apply_rebate,
        )


def regime_options(
    financial_year: Optional[str] = Query(default=None),
    apply_standard_deduction: bool = Query(default=True),
    apply_rebate: bool = Query(default=True),
) -> RegimeOptions:
    return RegimeOptions(
        financial_year=financial_year or settings.default_financial_year,
        apply_standard_deduction=apply_standard_deduction,
        apply_rebate=apply_rebate,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_pair(options: RegimeOptions) -> tuple[RegimeConfig, RegimeConfig]:
    """Resolve the (old, new) configs with the requested toggles, or 404."""
    try:
        old_config, new_config = get_regime_pair(options.financial_year)
    except UnknownRegimeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return options.adjust(old_config), options.adjust(new_config)


def _compare(tax_input: TaxInput, options: RegimeOptions) -> RegimeComparison:
    old_config, new_config = _load_pair(options)
    return compare_regimes(tax_input, old_config, new_config)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/regimes")
async def list_regimes() -> JSONResponse:
    """Every registered financial year with its old and new regime definitions."""
    regimes = []
    for year in list_financial_years():
        old_config, new_config = get_regime_pair(year)
        regimes.append({
            "financial_year": year,
            "old": old_config.model_dump(mode="json"),
            "new": new_config.model_dump(mode="json"),
        })
    return JSONResponse(
        status_code=200,
        content={
            "default_financial_year": settings.default_financial_year,
            "regimes": regimes,
        },
    )


@router.post("/calculate")
async def calculate_tax(
    tax_input: TaxInput,
    regime: Literal["old", "new"] = Query(default="new"),
    options: RegimeOptions = Depends(regime_options),
) -> JSONResponse:
    """Run the pipeline for a single regime."""
    try:
        config = get_regime(options.financial_year, regime)
    except UnknownRegimeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    result = compute_regime_tax(tax_input, options.adjust(config))
    logger.info(
        "Tax calculated financial_year=%s regime=%s standard_deduction=%s rebate=%s",
        options.financial_year,
        regime,
        options.apply_standard_deduction,
        options.apply_rebate,
    )
    return JSONResponse(status_code=200, content=result.model_dump())


@router.post("/compare")
async def compare_tax(
    tax_input: TaxInput,
    options: RegimeOptions = Depends(regime_options),
) -> JSONResponse:
    """
    Compare both regimes.

    Response: RegimeComparison fields plus financial_year and warnings
    (soft input advisories; they never change the numbers).
    """
    comparison = _compare(tax_input, options)
    warnings = collect_input_warnings(tax_input)

    logger.info(
        "Regimes compared financial_year=%s cheaper=%s warnings=%d",
        options.financial_year,
        comparison.cheaper,
        len(warnings),
    )
    content = comparison.model_dump()
    content["financial_year"] = options.financial_year
    content["warnings"] = warnings
    return JSONResponse(status_code=200, content=content)


@router.post("/export")
async def export_pdf(
    tax_input: TaxInput,
    options: RegimeOptions = Depends(regime_options),
) -> StreamingResponse:
    """Download the comparison as a PDF report."""
    comparison = _compare(tax_input, options)
    buffer = generate_tax_report(tax_input, comparison)
    filename = f"tax_comparison_{options.financial_year}.pdf"
    logger.info("PDF exported filename=%s", filename)

    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
