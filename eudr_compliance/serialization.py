# eudr_compliance/serialization.py
"""JSON-safe conversion for form data, results and stored records."""
import json
from dataclasses import asdict, fields
from enum import Enum
from typing import Any, Dict, List, Tuple

from .models import (
    ActionItem,
    AssessmentRecord,
    ComplianceGap,
    ComplianceRecommendation,
    ComplianceResult,
    ExporterFormData,
    PlotSize,
    Priority,
    RecommendationCategory,
    RiskLevel,
    ScoreBreakdown,
    Severity,
    SupplierType,
    TraceabilityLevel,
)

# Derived breakdown values written for report consumers, ignored on load
BREAKDOWN_DISPLAY_FIELDS = ("traceability", "documentation", "risk_mitigation")


def _plain(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}


def _known(cls, payload: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in payload.items() if key in names}


# === TO DICT ===


def form_data_to_dict(form: ExporterFormData) -> Dict[str, Any]:
    return asdict(form, dict_factory=_plain)


def result_to_dict(result: ComplianceResult) -> Dict[str, Any]:
    payload = asdict(result, dict_factory=_plain)
    breakdown = payload["score_breakdown"]
    for name in BREAKDOWN_DISPLAY_FIELDS:
        breakdown[name] = getattr(result.score_breakdown, name)
    return payload


def record_to_dict(record: AssessmentRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "timestamp": record.timestamp,
        "form_data": form_data_to_dict(record.form_data),
        "result": result_to_dict(record.result),
    }


# === FROM DICT ===


def form_data_from_dict(payload: Dict[str, Any]) -> ExporterFormData:
    values = _known(ExporterFormData, payload)
    values["supplier_type"] = SupplierType(values.get("supplier_type", SupplierType.UNKNOWN.value))
    values["plot_size"] = PlotSize(values.get("plot_size", PlotSize.LARGE.value))
    values["traceability_level"] = TraceabilityLevel(
        values.get("traceability_level", TraceabilityLevel.NONE.value)
    )
    return ExporterFormData(**values)


def _gap_from_dict(payload: Dict[str, Any]) -> ComplianceGap:
    values = _known(ComplianceGap, payload)
    values["severity"] = Severity(values["severity"])
    return ComplianceGap(**values)


def _recommendation_from_dict(payload: Dict[str, Any]) -> ComplianceRecommendation:
    values = _known(ComplianceRecommendation, payload)
    values["priority"] = Priority(values["priority"])
    values["category"] = RecommendationCategory(values["category"])
    return ComplianceRecommendation(**values)


def _action_from_dict(payload: Dict[str, Any]) -> ActionItem:
    values = _known(ActionItem, payload)
    values["priority"] = Priority(values["priority"])
    return ActionItem(**values)


def result_from_dict(payload: Dict[str, Any]) -> ComplianceResult:
    values = _known(ComplianceResult, payload)
    values["risk_level"] = RiskLevel(values["risk_level"])
    values["data"] = form_data_from_dict(values["data"])
    values["gaps"] = [_gap_from_dict(g) for g in values.get("gaps", [])]
    values["recommendations"] = [
        _recommendation_from_dict(r) for r in values.get("recommendations", [])
    ]
    values["next_steps"] = [_action_from_dict(a) for a in values.get("next_steps", [])]
    values["score_breakdown"] = ScoreBreakdown(
        **_known(ScoreBreakdown, values.get("score_breakdown", {}))
    )
    return ComplianceResult(**values)


def record_from_dict(payload: Dict[str, Any]) -> AssessmentRecord:
    return AssessmentRecord(
        id=payload["id"],
        timestamp=payload["timestamp"],
        form_data=form_data_from_dict(payload["form_data"]),
        result=result_from_dict(payload["result"]),
    )


# === JSON ===


def result_to_json(result: ComplianceResult, indent: int = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent)


def result_from_json(text: str) -> ComplianceResult:
    return result_from_dict(json.loads(text))
