"""PDF report generation."""
from __future__ import annotations

from taxcompare.engine.schemas import TaxInput
from taxcompare.engine.tax_engine import compare_regimes
from taxcompare.report.pdf_generator import (
    comparison_rows,
    generate_tax_report,
    tax_distribution,
)
from tests.demo_profiles import SCENARIOS


def test_report_is_a_rewound_pdf(fy2024_25_pair) -> None:
    tax_input = TaxInput(**SCENARIOS["b"]["input"], age=35)
    comparison = compare_regimes(tax_input, *fy2024_25_pair)

    buffer = generate_tax_report(tax_input, comparison)

    assert buffer.tell() == 0
    content = buffer.read()
    assert content.startswith(b"%PDF")
    assert len(content) > 1_000


def test_report_for_equal_regimes(fy2024_25_pair) -> None:
    tax_input = TaxInput()
    comparison = compare_regimes(tax_input, *fy2024_25_pair)
    assert comparison.cheaper == "equal"
    assert generate_tax_report(tax_input, comparison).read(4) == b"%PDF"


def test_tax_distribution_shares(fy2024_25_pair) -> None:
    comparison = compare_regimes(TaxInput(**SCENARIOS["a"]["input"]), *fy2024_25_pair)
    # 72500 / 105000 and 32500 / 105000
    assert tax_distribution(comparison) == (69.0, 31.0)


def test_tax_distribution_when_no_tax(fy2024_25_pair) -> None:
    comparison = compare_regimes(TaxInput(gross_income=400_000), *fy2024_25_pair)
    assert tax_distribution(comparison) == (0.0, 0.0)


def test_comparison_rows_include_post_tax_income(fy2024_25_pair) -> None:
    comparison = compare_regimes(TaxInput(**SCENARIOS["a"]["input"]), *fy2024_25_pair)
    rows = {row[0]: row[1:] for row in comparison_rows(comparison)}

    assert rows["Tax Payable"] == ["Rs. 72,500.00", "Rs. 32,500.00"]
    assert rows["Income After Tax"] == ["Rs. 777,500.00", "Rs. 817,500.00"]


def test_report_for_huge_income(fy2024_25_pair) -> None:
    tax_input = TaxInput(gross_income=1e308, other_income=1e308)
    comparison = compare_regimes(tax_input, *fy2024_25_pair)
    assert generate_tax_report(tax_input, comparison).read(4) == b"%PDF"
