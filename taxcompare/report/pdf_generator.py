"""
pdf_generator.py — regime comparison PDF report.

Builds a one-page summary using reportlab PLATYPUS.
Output is a BytesIO buffer (no temp file on disk).

Entry point:
    generate_tax_report(tax_input, comparison) -> BytesIO

buffer.seek(0) is called after doc.build(story): reportlab leaves the buffer
position at the end after writing, which would otherwise stream 0 bytes.

Sections:
  1. Header (title, financial year, date)
  2. Personal & income details
  3. Regime comparison table (cheaper regime highlighted)
  4. Tax distribution summary (each regime's share of the combined tax)
  5. Footer / disclaimer (8pt)
"""
from __future__ import annotations

import datetime
import logging
from io import BytesIO

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from taxcompare.config import settings
from taxcompare.engine.schemas import RegimeComparison, TaxInput

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Colour constants
# ---------------------------------------------------------------------------

GREEN_LIGHT = HexColor("#D5F5E3")   # Cheaper regime highlight
GREY_LIGHT  = HexColor("#F2F2F2")   # Headers / the other regime


def _rupees(amount: float) -> str:
    # Standard Type 1 fonts have no rupee glyph
    return f"Rs. {amount:,.2f}"


def tax_distribution(comparison: RegimeComparison) -> tuple[float, float]:
    """
    Percentage share of (old, new) in the combined tax, one decimal place.
    Both are 0.0 when neither regime owes anything.
    """
    old_tax = comparison.old.tax_payable
    new_tax = comparison.new.tax_payable
    total = old_tax + new_tax
    if total == 0:
        return 0.0, 0.0
    return round(old_tax / total * 100, 1), round(new_tax / total * 100, 1)


# ---------------------------------------------------------------------------
# Private section builders
# ---------------------------------------------------------------------------

def _build_details_table(tax_input: TaxInput, comparison: RegimeComparison) -> Table:
    """Label | value rows for the figures the user entered."""
    data = [
        ["Annual Income", _rupees(tax_input.gross_income)],
        ["Other Income", _rupees(tax_input.other_income)],
        ["Deductions (80C + 80D)", _rupees(tax_input.section_80c + tax_input.section_80d)],
        ["HRA Exemption", _rupees(comparison.old.hra_exemption)],
        ["Age", str(tax_input.age)],
    ]
    t = Table(data, colWidths=[90 * mm, 80 * mm])
    t.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEBELOW", (0, 0), (-1, -1), 0.25, GREY_LIGHT),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    return t


_TAX_ROW = 6   # "Tax Payable" row of comparison_rows()


def comparison_rows(comparison: RegimeComparison) -> list[list[str]]:
    """Rows of the comparison table: label | Old | New, header first."""
    old = comparison.old
    new = comparison.new
    return [
        ["", "Old Regime", "New Regime"],
        ["Gross Income", _rupees(old.gross_income), _rupees(new.gross_income)],
        ["Total Deductions", _rupees(old.total_deductions), _rupees(new.total_deductions)],
        ["Taxable Income", _rupees(old.taxable_income), _rupees(new.taxable_income)],
        ["Tax Before Rebate", _rupees(old.tax_before_rebate), _rupees(new.tax_before_rebate)],
        ["87A Rebate Applied",
         "Yes" if old.rebate_applied else "No",
         "Yes" if new.rebate_applied else "No"],
        ["Tax Payable", _rupees(old.tax_payable), _rupees(new.tax_payable)],
        ["Income After Tax", _rupees(old.post_tax_income), _rupees(new.post_tax_income)],
    ]


def _build_comparison_table(comparison: RegimeComparison) -> Table:
    """The cheaper regime's header and tax cells get GREEN_LIGHT; on a tie both stay grey."""
    data = comparison_rows(comparison)
    style_cmds = [
        ("BACKGROUND", (1, 0), (-1, 0), GREY_LIGHT),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.5, black),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("ALIGN", (0, 0), (0, -1), "LEFT"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("LEFTPADDING", (0, 0), (0, -1), 6),
        ("FONTNAME", (0, _TAX_ROW), (-1, _TAX_ROW), "Helvetica-Bold"),
    ]
    if comparison.cheaper != "equal":
        col = 1 if comparison.cheaper == "old" else 2
        style_cmds.append(("BACKGROUND", (col, 0), (col, 0), GREEN_LIGHT))
        style_cmds.append(("BACKGROUND", (col, _TAX_ROW), (col, _TAX_ROW), GREEN_LIGHT))

    t = Table(data, colWidths=[80 * mm, 45 * mm, 45 * mm])
    t.setStyle(TableStyle(style_cmds))
    return t


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def generate_tax_report(tax_input: TaxInput, comparison: RegimeComparison) -> BytesIO:
    """
    Generate the comparison PDF.

    Args:
        tax_input: the figures the comparison was computed from.
        comparison: RegimeComparison from compare_regimes().

    Returns:
        BytesIO buffer at position 0, ready for StreamingResponse.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title="Tax Comparison Report",
        author=settings.report_author,
    )

    styles = getSampleStyleSheet()
    story = []

    # 1. Header
    title_style = ParagraphStyle(
        "report_title",
        parent=styles["Heading1"],
        fontSize=18,
        fontName="Helvetica-Bold",
        alignment=1,
    )
    story.append(Paragraph("Tax Comparison Report", title_style))
    story.append(Spacer(1, 2 * mm))
    story.append(Paragraph(f"Financial Year: {comparison.new.financial_year}", styles["Normal"]))
    story.append(
        Paragraph(
            f"Report generated: {datetime.date.today().strftime('%d %B %Y')}",
            styles["Normal"],
        )
    )
    story.append(Spacer(1, 6 * mm))

    # 2. Personal & income details
    story.append(KeepTogether([
        Paragraph("Personal &amp; Income Details", styles["Heading2"]),
        Spacer(1, 2 * mm),
        _build_details_table(tax_input, comparison),
    ]))
    story.append(Spacer(1, 6 * mm))

    # 3. Regime comparison
    story.append(KeepTogether([
        Paragraph("Tax Payable", styles["Heading2"]),
        Spacer(1, 2 * mm),
        _build_comparison_table(comparison),
    ]))
    story.append(Spacer(1, 4 * mm))

    if comparison.cheaper == "equal":
        verdict = "Both regimes result in the same tax."
    else:
        label = "Old" if comparison.cheaper == "old" else "New"
        verdict = f"{label} Regime saves {_rupees(comparison.savings_amount)}."
    story.append(Paragraph(verdict, styles["Normal"]))
    story.append(Spacer(1, 6 * mm))

    # 4. Distribution summary
    percent_old, percent_new = tax_distribution(comparison)
    total = comparison.old.tax_payable + comparison.new.tax_payable
    summary_table = Table(
        [
            [Paragraph("<b>Tax Distribution Summary</b>", styles["Normal"])],
            [f"Old Regime: {_rupees(comparison.old.tax_payable)} ({percent_old}%)"],
            [f"New Regime: {_rupees(comparison.new.tax_payable)} ({percent_new}%)"],
            [f"Total: {_rupees(total)}"],
        ],
        colWidths=[170 * mm],
    )
    summary_table.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 0.5, HexColor("#CCCCCC")),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("LEFTPADDING", (0, 0), (-1, -1), 8),
    ]))
    story.append(summary_table)

    # 5. Footer
    footer_style = ParagraphStyle(
        "footer",
        parent=styles["Normal"],
        fontSize=8,
        textColor=HexColor("#555555"),
        alignment=1,
    )
    story.append(Spacer(1, 10 * mm))
    story.append(
        Paragraph(
            f"Generated by {settings.report_author}. Estimate only: cess, surcharge, "
            "marginal relief and deduction limits are not applied.",
            footer_style,
        )
    )

    doc.build(story)
    buffer.seek(0)

    logger.info(
        "PDF report generated financial_year=%s cheaper=%s",
        comparison.new.financial_year,
        comparison.cheaper,
    )
    return buffer


__all__ = ["comparison_rows", "generate_tax_report", "tax_distribution"]
