# eudr_compliance/report_export.py
from typing import Any, Dict, List
import io

import pandas as pd
from fpdf import FPDF

from .models import ComplianceResult
from .serialization import BREAKDOWN_DISPLAY_FIELDS


def _latin1(text: Any) -> str:
    # Core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def _summary_rows(result: ComplianceResult) -> List[Dict[str, Any]]:
    data = result.data
    return [
        {"Field": "Company", "Value": data.company_name},
        {"Field": "Export Country", "Value": data.export_country},
        {"Field": "Product", "Value": data.product_type},
        {"Field": "Score", "Value": result.score},
        {"Field": "Risk Level", "Value": result.risk_level.value},
        {"Field": "Time to Compliance", "Value": result.time_to_compliance},
        {"Field": "Estimated Days", "Value": result.estimated_time_to_compliance},
        {"Field": "Assessed At", "Value": result.timestamp},
    ]


def _breakdown_rows(result: ComplianceResult) -> List[Dict[str, Any]]:
    breakdown = result.score_breakdown
    rows = [
        {"Factor": "Country risk", "Deduction": breakdown.country_risk},
        {"Factor": "Commodity risk", "Deduction": breakdown.commodity_risk},
        {"Factor": "Supplier risk", "Deduction": breakdown.supplier_risk},
        {"Factor": "Traceability risk", "Deduction": breakdown.traceability_risk},
        {"Factor": "Documentation risk", "Deduction": breakdown.documentation_risk},
    ]
    rows.append({"Factor": "Total", "Deduction": breakdown.total_deductions})
    return rows


def build_breakdown_table(result: ComplianceResult) -> pd.DataFrame:
    return pd.DataFrame(_breakdown_rows(result))


def build_gaps_table(result: ComplianceResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Area": gap.area,
                "Severity": gap.severity.value,
                "Description": gap.description,
                "Impact": gap.impact,
                "Required Action": gap.required_action,
            }
            for gap in result.gaps
        ],
        columns=["Area", "Severity", "Description", "Impact", "Required Action"],
    )


def build_recommendations_table(result: ComplianceResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Priority": rec.priority.value,
                "Category": rec.category.value,
                "Title": rec.title,
                "Description": rec.description,
                "Estimated Cost": rec.estimated_cost,
                "Estimated Time (days)": rec.estimated_time,
            }
            for rec in result.recommendations
        ],
        columns=[
            "Priority",
            "Category",
            "Title",
            "Description",
            "Estimated Cost",
            "Estimated Time (days)",
        ],
    )


def build_csv_summary(result: ComplianceResult) -> bytes:
    """Single-row CSV with the score and per-factor deductions."""
    breakdown = result.score_breakdown
    row = {
        "Company": result.data.company_name,
        "Export Country": result.data.export_country,
        "Product": result.data.product_type,
        "Score": result.score,
        "Risk Level": result.risk_level.value,
        "Country Risk": breakdown.country_risk,
        "Commodity Risk": breakdown.commodity_risk,
        "Supplier Risk": breakdown.supplier_risk,
        "Traceability Risk": breakdown.traceability_risk,
        "Documentation Risk": breakdown.documentation_risk,
        "Gaps": len(result.gaps),
        "Time to Compliance": result.time_to_compliance,
    }
    for name in BREAKDOWN_DISPLAY_FIELDS:
        row[name.replace("_", " ").title() + " Score"] = getattr(breakdown, name)
    return pd.DataFrame([row]).to_csv(index=False).encode("utf-8")


def build_excel_from_result(result: ComplianceResult) -> bytes:
    """Create an Excel workbook with the assessment and return it as bytes."""
    buffer = io.BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(_summary_rows(result)).to_excel(writer, sheet_name="Summary", index=False)
        build_breakdown_table(result).to_excel(writer, sheet_name="Breakdown", index=False)
        build_gaps_table(result).to_excel(writer, sheet_name="Gaps", index=False)
        build_recommendations_table(result).to_excel(
            writer, sheet_name="Recommendations", index=False
        )

    buffer.seek(0)
    return buffer.getvalue()


def render_readiness_pdf(result: ComplianceResult) -> bytes:
    """Generate the EUDR readiness report PDF using FPDF."""
    data = result.data

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    # Effective page width (A4 minus margins)
    epw = pdf.w - 2 * pdf.l_margin

    # Title
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "EUDR Compliance Readiness Report", new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "", 12)
    pdf.ln(5)
    pdf.cell(0, 8, _latin1(f"Exporter: {data.company_name or '-'}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 8, _latin1(f"Country of production: {data.export_country or '-'}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 8, _latin1(f"Commodity: {data.product_type or '-'}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 8, f"Assessed: {result.timestamp[:10]}", new_x="LMARGIN", new_y="NEXT")

    # Score
    pdf.ln(8)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Readiness Score", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 12)
    pdf.ln(2)
    pdf.set_x(pdf.l_margin)
    pdf.multi_cell(
        epw,
        6,
        (
            f"Score: {result.score}/100 ({result.risk_level.value} risk). "
            f"Estimated time to compliance: {result.time_to_compliance}."
        ),
    )

    # Breakdown table
    pdf.ln(6)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Score Breakdown", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)
    pdf.set_font("Helvetica", "B", 10)
    pdf.cell(80, 6, "Risk factor", border=1)
    pdf.cell(30, 6, "Deduction", border=1)
    pdf.ln()
    pdf.set_font("Helvetica", "", 10)
    for row in _breakdown_rows(result):
        pdf.cell(80, 6, row["Factor"], border=1)
        pdf.cell(30, 6, str(row["Deduction"]), border=1)
        pdf.ln()

    # Gaps
    pdf.ln(6)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Compliance Gaps", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 11)
    pdf.ln(2)
    if not result.gaps:
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(epw, 6, "No compliance gaps identified.")
    for gap in result.gaps:
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(
            epw,
            6,
            _latin1(
                f"[{gap.severity.value}] {gap.area}: {gap.description}\n"
                f"Impact: {gap.impact}\n"
                f"Action: {gap.required_action}"
            ),
        )
        pdf.ln(2)

    # Strengths
    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Strengths", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 11)
    pdf.ln(2)
    for strength in result.strengths or ["None recorded yet."]:
        pdf.cell(0, 6, _latin1(f"- {strength}"), new_x="LMARGIN", new_y="NEXT")

    # Next steps
    pdf.ln(6)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Next Steps", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 11)
    pdf.ln(2)
    for step in result.next_steps:
        deadline = f" (by {step.deadline})" if step.deadline else ""
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(epw, 6, _latin1(f"[{step.priority.value}] {step.title}{deadline}"))

    pdf.ln(10)
    pdf.set_font("Helvetica", "I", 9)
    pdf.set_x(pdf.l_margin)
    pdf.multi_cell(
        epw,
        5,
        "This readiness assessment is indicative and does not replace the due "
        "diligence obligations of Regulation (EU) 2023/1115.",
    )

    return bytes(pdf.output())
