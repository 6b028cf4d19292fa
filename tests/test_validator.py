"""Soft input advisories — never block, never change numbers."""
from __future__ import annotations

from taxcompare.engine.schemas import TaxInput
from taxcompare.intake.validator import collect_input_warnings
from tests.demo_profiles import SCENARIOS


def test_clean_input_has_no_warnings() -> None:
    assert collect_input_warnings(TaxInput(**SCENARIOS["b"]["input"])) == []


def test_80c_above_statutory_limit() -> None:
    warnings = collect_input_warnings(TaxInput(gross_income=1_500_000, section_80c=200_000))
    assert len(warnings) == 1
    assert "80C" in warnings[0]


def test_80d_limit_depends_on_age() -> None:
    young = TaxInput(gross_income=1_500_000, section_80d=40_000, age=45)
    senior = TaxInput(gross_income=1_500_000, section_80d=40_000, age=65)
    assert len(collect_input_warnings(young)) == 1
    assert collect_input_warnings(senior) == []


def test_hra_above_basic() -> None:
    warnings = collect_input_warnings(
        TaxInput(gross_income=900_000, hra_received=300_000, basic_salary=200_000),
    )
    assert any("HRA received" in w for w in warnings)


def test_rent_without_basic_salary() -> None:
    warnings = collect_input_warnings(
        TaxInput(gross_income=900_000, hra_received=100_000, rent_paid=120_000),
    )
    assert len(warnings) == 1
    assert "basic salary" in warnings[0]


def test_all_checks_reported_together() -> None:
    tax_input = TaxInput(
        gross_income=900_000,
        section_80c=200_000,
        section_80d=30_000,
        rent_paid=120_000,
    )
    assert len(collect_input_warnings(tax_input)) == 3
