# eudr_compliance/scoring.py
"""
EUDR readiness scoring engine.

Point-deduction model: every assessment starts at 100 and each risk factor
subtracts a fixed amount. The deductions are reported per bucket in
``ScoreBreakdown`` so report consumers can reconcile them with the score.

The engine is a pure function of its input. It reads only the shared
read-only risk tables and builds a new ``ComplianceResult`` per call.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, List, Mapping, Optional, Tuple, Union

from .models import (
    ActionItem,
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
from .normalization import normalize_form_data
from .risk_tables import (
    COUNTRY_PENALTIES,
    commodity_key,
    commodity_risk,
    country_risk_level,
    is_listed_country,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 100

# Risk level thresholds (score >= threshold)
LOW_RISK_THRESHOLD = 80
MEDIUM_RISK_THRESHOLD = 50

# (upper bound exclusive, label, days)
TIME_TO_COMPLIANCE_BANDS: Tuple[Tuple[int, str, int], ...] = (
    (40, "6+ months", 180),
    (60, "3-5 months", 120),
    (80, "1-2 months", 45),
    (95, "2-4 weeks", 21),
)
READY_LABEL = "Ready for EU Market"

PRIORITY_RANK = {
    Priority.CRITICAL: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}

MAX_NEXT_STEPS = 5
MAX_RECOMMENDED_ACTIONS = 8

ADVANCED_TRACEABILITY = (TraceabilityLevel.ADVANCED, TraceabilityLevel.BLOCKCHAIN)


@dataclass
class _Findings:
    """Accumulates deductions and findings while the factors run."""

    country_risk: int = 0
    commodity_risk: int = 0
    supplier_risk: int = 0
    traceability_risk: int = 0
    documentation_risk: int = 0
    gaps: List[ComplianceGap] = field(default_factory=list)
    recommendations: List[ComplianceRecommendation] = field(default_factory=list)
    missing_gaps: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            self.country_risk
            + self.commodity_risk
            + self.supplier_risk
            + self.traceability_risk
            + self.documentation_risk
        )


# === RISK FACTORS ===


def _country_factor(form: ExporterFormData, found: _Findings) -> RiskLevel:
    level = country_risk_level(form.export_country)
    if not is_listed_country(form.export_country):
        logger.debug("Country %r not in risk table, treating as High", form.export_country)

    found.country_risk = COUNTRY_PENALTIES[level]

    if level == RiskLevel.HIGH:
        country = form.export_country or "an unspecified country"
        found.missing_gaps.append(f"Sourcing from {country} (High Risk Jurisdiction)")
        found.actions.append(
            f"Conduct enhanced due diligence for {country} origins, including "
            "satellite monitoring and third-party verification."
        )
        found.gaps.append(
            ComplianceGap(
                area="Geographic Risk",
                severity=Severity.HIGH,
                description=f"{country} is classified as a high-risk deforestation jurisdiction",
                impact="May result in increased scrutiny, delayed shipments, or rejected exports to EU",
                required_action="Enhanced due diligence required for all shipments from this country",
            )
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.HIGH,
                category=RecommendationCategory.LEGAL,
                title="Enhanced Due Diligence for High-Risk Country",
                description=f"Implement satellite monitoring and third-party audits for all {country} sources",
                estimated_cost=5000,
                estimated_time=30,
            )
        )
    return level


def _commodity_factor(form: ExporterFormData, found: _Findings) -> None:
    key = commodity_key(form.product_type)
    if key == "Other" and form.product_type.casefold() != "other":
        logger.debug("Commodity %r not in risk table, using Other", form.product_type)

    risk = commodity_risk(form.product_type)
    found.commodity_risk = risk.score

    if risk.score >= 20:
        found.missing_gaps.append(f"High-risk commodity: {form.product_type or key}")
        found.gaps.append(
            ComplianceGap(
                area="Commodity Risk",
                severity=Severity.HIGH if risk.score >= 25 else Severity.MEDIUM,
                description=risk.reason,
                impact="Higher compliance requirements and potential market access restrictions",
                required_action="Implement commodity-specific risk mitigation protocols",
            )
        )


def _supplier_factor(form: ExporterFormData, found: _Findings) -> None:
    if not form.is_farm_known:
        found.supplier_risk = 25
        found.missing_gaps.append("Opaque Supply Chain: Unknown Farm Origin")
        found.actions.append("Map supply chain upstream to identify individual production plots.")
        found.gaps.append(
            ComplianceGap(
                area="Traceability",
                severity=Severity.CRITICAL,
                description="Farm-level origin is unknown - EUDR requires traceability to production plot",
                impact="Cannot legally place products on EU market without plot-level traceability",
                required_action="Conduct supply chain mapping to identify all origin farms",
            )
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.CRITICAL,
                category=RecommendationCategory.TRACEABILITY,
                title="Supply Chain Mapping Required",
                description="Trace all products back to origin farms and collect farmer identification data",
                estimated_cost=10000,
                estimated_time=60,
            )
        )
        return

    supplier = form.supplier_type
    if supplier in (SupplierType.TRADER, SupplierType.WHOLESALER):
        found.supplier_risk = 15
        found.missing_gaps.append("Indirect Sourcing: Reliance on Traders/Wholesalers")
        found.actions.append("Obtain 'Supplier Declaration' warranties from all intermediaries.")
        found.gaps.append(
            ComplianceGap(
                area="Supplier Verification",
                severity=Severity.HIGH,
                description="Products are sourced through traders or wholesalers rather than from known farms directly",
                impact="Intermediaries may mix compliant and non-compliant lots",
                required_action="Collect signed supplier declarations covering every intermediary",
            )
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.HIGH,
                category=RecommendationCategory.DOCUMENTATION,
                title="Supplier Declarations Required",
                description="Collect signed supplier declarations from all traders and wholesalers",
                estimated_cost=2000,
                estimated_time=14,
            )
        )
    elif supplier in (SupplierType.SMALLHOLDER, SupplierType.COOPERATIVE):
        found.supplier_risk = 5
        found.actions.append("Verify cooperative membership and individual farmer records.")
    elif supplier == SupplierType.DIRECT_FARMER:
        found.supplier_risk = 0
    else:
        found.supplier_risk = 10
        found.missing_gaps.append("Supplier type not specified")
        found.gaps.append(
            ComplianceGap(
                area="Supplier Verification",
                severity=Severity.MEDIUM,
                description="Supplier relationship type is not specified",
                impact="Sourcing risk cannot be assessed without knowing who supplies the product",
                required_action="Record the supplier type for every sourcing relationship",
            )
        )


def _deforestation_factor(form: ExporterFormData, found: _Findings) -> None:
    if not form.is_high_deforestation_risk:
        return

    # Counted under documentation, there is no separate bucket for it
    found.documentation_risk += 30
    found.missing_gaps.append(
        "CRITICAL: Production overlaps with active deforestation alerts (post-2020)"
    )
    found.actions.append(
        "IMMEDIATE ACTION: Segregate non-compliant plots. Do not ship products "
        "from these plots to the EU."
    )
    found.gaps.append(
        ComplianceGap(
            area="Deforestation Risk",
            severity=Severity.CRITICAL,
            description="Production area shows deforestation activity after December 31, 2020 cutoff date",
            impact="Products from these plots are PROHIBITED from EU market under EUDR Article 3",
            required_action="IMMEDIATE: Remove non-compliant plots from supply chain",
        )
    )
    found.recommendations.append(
        ComplianceRecommendation(
            priority=Priority.CRITICAL,
            category=RecommendationCategory.GPS,
            title="Emergency Plot Segregation",
            description="Conduct satellite analysis to identify and exclude all plots with post-2020 deforestation",
            estimated_cost=15000,
            estimated_time=7,
        )
    )


def _geolocation_factor(form: ExporterFormData, found: _Findings) -> None:
    if not form.is_gps_available:
        found.documentation_risk += 30
        found.missing_gaps.append("Missing Geolocation Coordinates (Mandatory - Article 9)")
        found.actions.append(
            "Collect GPS points for smallholders (<4ha) or polygon coordinates "
            "for large plots (>=4ha)."
        )
        found.gaps.append(
            ComplianceGap(
                area="Documentation",
                severity=Severity.CRITICAL,
                description="No geolocation data provided - mandatory under EUDR Article 9(1)(a)",
                impact="Cannot submit Due Diligence Statement without GPS coordinates - shipments will be blocked",
                required_action="Conduct GPS survey of all production plots using WGS 84 coordinate system",
            )
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.CRITICAL,
                category=RecommendationCategory.GPS,
                title="GPS Data Collection Program",
                description="Deploy mobile GPS collection tools or hire surveyor to map all plots",
                estimated_cost=8000,
                estimated_time=45,
            )
        )
    elif form.plot_size == PlotSize.LARGE:
        # Advisory only, no deduction
        found.actions.append(
            "Verify that large plots (>=4ha) are mapped using GeoJSON Polygon "
            "format, not single GPS points."
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.MEDIUM,
                category=RecommendationCategory.GPS,
                title="Polygon Mapping for Large Plots",
                description="Convert GPS points to polygon coordinates for all plots over 4 hectares",
                estimated_cost=3000,
                estimated_time=14,
            )
        )


def _traceability_factor(form: ExporterFormData, found: _Findings) -> None:
    level = form.traceability_level

    if level in ADVANCED_TRACEABILITY:
        found.traceability_risk = 0
    elif level == TraceabilityLevel.BASIC:
        found.traceability_risk = 15
        found.missing_gaps.append("Weak Traceability (Country/Regional Level Only)")
        found.actions.append("Upgrade traceability to plot-level or polygon-level precision.")
        found.gaps.append(
            ComplianceGap(
                area="Traceability",
                severity=Severity.HIGH,
                description="Traceability stops at country or regional level",
                impact="Shipments cannot be linked to individual production plots",
                required_action="Upgrade to plot-level traceability",
            )
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.HIGH,
                category=RecommendationCategory.TRACEABILITY,
                title="Traceability System Upgrade",
                description="Enhance current system to capture plot-level origin data",
                estimated_cost=6000,
                estimated_time=30,
            )
        )
    else:
        found.traceability_risk = 30
        found.missing_gaps.append("No Traceability System Implemented")
        found.actions.append("Implement a batch-traceability system linking exports to origin plots.")
        found.gaps.append(
            ComplianceGap(
                area="Traceability",
                severity=Severity.CRITICAL,
                description="No traceability system in place to link products to origin farms",
                impact="Cannot demonstrate chain of custody - high risk of audit failure",
                required_action="Implement digital or paper-based traceability system",
            )
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.CRITICAL,
                category=RecommendationCategory.TRACEABILITY,
                title="Traceability System Implementation",
                description="Set up batch coding and chain-of-custody documentation system",
                estimated_cost=12000,
                estimated_time=60,
            )
        )


def _legal_documentation_factor(form: ExporterFormData, found: _Findings) -> None:
    # Findings only, neither check deducts points
    if not form.has_land_records:
        found.missing_gaps.append("Missing land ownership/lease documentation")
        found.actions.append(
            "Collect land titles, cadastral records, or lease agreements for all plots."
        )
        found.gaps.append(
            ComplianceGap(
                area="Documentation",
                severity=Severity.HIGH,
                description="No documented proof of legal land rights",
                impact="Cannot verify legal production requirement under EUDR Article 2(39)",
                required_action="Obtain and verify land title deeds or lease agreements",
            )
        )

    if not form.has_third_party_cert:
        found.actions.append(
            "Consider obtaining third-party certification (e.g., FSC, RSPO, "
            "Rainforest Alliance) to strengthen compliance."
        )
        found.recommendations.append(
            ComplianceRecommendation(
                priority=Priority.LOW,
                category=RecommendationCategory.CERTIFICATION,
                title="Third-Party Certification",
                description="Pursue relevant sustainability certification to enhance credibility",
                estimated_cost=15000,
                estimated_time=180,
            )
        )


# === AGGREGATION ===


def classify_risk(score: int) -> RiskLevel:
    if score < MEDIUM_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if score < LOW_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def estimate_time_to_compliance(score: int) -> Tuple[str, int]:
    """Band label and day estimate for reaching full readiness."""
    for upper, label, days in TIME_TO_COMPLIANCE_BANDS:
        if score < upper:
            return label, days
    return READY_LABEL, 0


def rank_recommendations(
    recommendations: List[ComplianceRecommendation],
) -> List[ComplianceRecommendation]:
    """Order by priority, keeping insertion order within a priority."""
    return sorted(recommendations, key=lambda rec: PRIORITY_RANK[rec.priority])


def build_next_steps(
    recommendations: List[ComplianceRecommendation],
    estimated_days: int,
    today: Optional[date] = None,
) -> List[ActionItem]:
    today = today or date.today()
    deadline = (today + timedelta(days=estimated_days)).isoformat() if estimated_days > 0 else None

    return [
        ActionItem(id=rec.id, title=rec.title, priority=rec.priority, deadline=deadline)
        for rec in rank_recommendations(recommendations)[:MAX_NEXT_STEPS]
    ]


def _strengths(form: ExporterFormData, country_level: RiskLevel) -> List[str]:
    strengths: List[str] = []
    if form.is_gps_available:
        strengths.append("Geolocation data available")
    if form.has_land_records:
        strengths.append("Land ownership documentation present")
    if form.has_third_party_cert:
        strengths.append(f"Third-party certified by {form.certification_body or 'recognized body'}")
    if form.traceability_level in ADVANCED_TRACEABILITY:
        strengths.append("Advanced traceability system implemented")
    if form.is_farm_known and form.supplier_type == SupplierType.DIRECT_FARMER:
        strengths.append("Direct relationship with origin farmers")
    if country_level == RiskLevel.LOW:
        strengths.append("Low-risk origin country")
    return strengths


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


# === PUBLIC API ===


def calculate_compliance_score(
    data: Union[ExporterFormData, Mapping[str, Any]],
    today: Optional[date] = None,
) -> ComplianceResult:
    """
    Score one exporter's EUDR readiness.

    ``data`` may be a canonical ``ExporterFormData`` or raw form state, which
    is normalised first. ``today`` anchors next-step deadlines and defaults
    to the current date.

    Never raises for well-formed input: unknown countries score as High risk,
    unknown commodities as "Other", and unrecognised enum values take their
    worst-case branch.
    """
    form = normalize_form_data(data)
    found = _Findings()

    country_level = _country_factor(form, found)
    _commodity_factor(form, found)
    _supplier_factor(form, found)
    _deforestation_factor(form, found)
    _geolocation_factor(form, found)
    _traceability_factor(form, found)
    _legal_documentation_factor(form, found)

    score = max(0, round(BASE_SCORE - found.total))
    risk_level = classify_risk(score)
    time_label, estimated_days = estimate_time_to_compliance(score)

    breakdown = ScoreBreakdown(
        country_risk=found.country_risk,
        commodity_risk=found.commodity_risk,
        supplier_risk=found.supplier_risk,
        traceability_risk=found.traceability_risk,
        documentation_risk=found.documentation_risk,
        gps_data=100 if form.is_gps_available else 0,
        certification=100 if form.has_third_party_cert else 50,
    )

    result = ComplianceResult(
        score=score,
        risk_level=risk_level,
        data=form,
        gaps=found.gaps,
        recommendations=found.recommendations,
        strengths=_strengths(form, country_level),
        score_breakdown=breakdown,
        next_steps=build_next_steps(found.recommendations, estimated_days, today),
        time_to_compliance=time_label,
        estimated_time_to_compliance=estimated_days,
        missing_gaps=found.missing_gaps,
        recommended_actions=_dedupe(found.actions)[:MAX_RECOMMENDED_ACTIONS],
    )

    logger.info(
        "Assessed %s (%s, %s): score=%d risk=%s gaps=%d",
        form.company_name or "unnamed exporter",
        form.export_country,
        form.product_type,
        score,
        risk_level.value,
        len(found.gaps),
    )
    return result
