# eudr_compliance/history.py
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from .models import AssessmentRecord, RiskLevel

HISTORY_COLUMNS = [
    "record_id",
    "timestamp",
    "company_name",
    "export_country",
    "product_type",
    "score",
    "risk_level",
    "country_risk",
    "commodity_risk",
    "supplier_risk",
    "traceability_risk",
    "documentation_risk",
    "gap_count",
]


def assessments_to_frame(records: Iterable[AssessmentRecord]) -> pd.DataFrame:
    """
    One row per stored assessment, oldest first.

    Used for the history/trend views and the CSV export of past runs.
    """
    rows = []
    for record in records:
        breakdown = record.result.score_breakdown
        rows.append(
            {
                "record_id": record.id,
                "timestamp": record.timestamp,
                "company_name": record.form_data.company_name,
                "export_country": record.form_data.export_country,
                "product_type": record.form_data.product_type,
                "score": record.result.score,
                "risk_level": record.result.risk_level.value,
                "country_risk": breakdown.country_risk,
                "commodity_risk": breakdown.commodity_risk,
                "supplier_risk": breakdown.supplier_risk,
                "traceability_risk": breakdown.traceability_risk,
                "documentation_risk": breakdown.documentation_risk,
                "gap_count": len(record.result.gaps),
            }
        )

    if not rows:
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    return df.sort_values("timestamp", kind="stable").reset_index(drop=True)


def score_trend(
    records: Iterable[AssessmentRecord], company: Optional[str] = None
) -> pd.DataFrame:
    """Timestamp/score series, optionally for one company only."""
    df = assessments_to_frame(records)
    if company is not None:
        df = df[df["company_name"].str.casefold() == company.casefold()]
    return df[["timestamp", "score", "risk_level"]].reset_index(drop=True)


def summarize_history(records: Iterable[AssessmentRecord]) -> Dict[str, Any]:
    df = assessments_to_frame(records)

    risk_counts = {level.value: 0 for level in RiskLevel}
    if df.empty:
        return {
            "count": 0,
            "latest_score": None,
            "average_score": None,
            "best_score": None,
            "risk_levels": risk_counts,
        }

    for level, count in df["risk_level"].value_counts().items():
        risk_counts[level] = int(count)

    return {
        "count": int(len(df)),
        "latest_score": int(df["score"].iloc[-1]),
        "average_score": round(float(df["score"].mean()), 1),
        "best_score": int(df["score"].max()),
        "risk_levels": risk_counts,
    }
