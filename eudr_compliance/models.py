# eudr_compliance/models.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# === ENUMS ===


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Severity(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Priority shares its vocabulary with gap severity
Priority = Severity


class SupplierType(str, Enum):
    DIRECT_FARMER = "Direct Farmer"
    SMALLHOLDER = "Smallholder"
    COOPERATIVE = "Cooperative"
    TRADER = "Trader"
    WHOLESALER = "Wholesaler"
    PROCESSOR = "Processor"
    UNKNOWN = "Unknown"


class TraceabilityLevel(str, Enum):
    NONE = "None"
    BASIC = "Basic"  # country / region level
    ADVANCED = "Advanced"  # plot level, full chain of custody
    BLOCKCHAIN = "Blockchain"


class PlotSize(str, Enum):
    SMALL = "Small"  # < 4 ha, a point coordinate is enough
    LARGE = "Large"  # >= 4 ha, polygon boundary required


class RecommendationCategory(str, Enum):
    DOCUMENTATION = "Documentation"
    TRACEABILITY = "Traceability"
    GPS = "GPS"
    CERTIFICATION = "Certification"
    LEGAL = "Legal"


# === INPUT ===


@dataclass(frozen=True)
class ExporterFormData:
    """Canonical exporter questionnaire answers.

    Built by ``normalization.normalize_form_data`` from raw form state, so
    legacy aliases are already resolved and enum fields already hold one of
    their declared members.
    """

    company_name: str
    export_country: str
    product_type: str
    is_farm_known: bool = False
    supplier_type: SupplierType = SupplierType.UNKNOWN
    is_high_deforestation_risk: bool = False
    is_gps_available: bool = False
    plot_size: PlotSize = PlotSize.LARGE
    traceability_level: TraceabilityLevel = TraceabilityLevel.NONE
    has_land_records: bool = False
    has_third_party_cert: bool = False
    certification_body: Optional[str] = None
    certification_date: Optional[str] = None
    annual_volume: Optional[str] = None
    geolocation_data: Optional[str] = None
    supplier_count: Optional[int] = None


# === OUTPUT ===


@dataclass(frozen=True)
class ComplianceGap:
    area: str
    severity: Severity
    description: str
    impact: str
    required_action: str
    id: str = field(default_factory=_new_id, compare=False)


@dataclass(frozen=True)
class ComplianceRecommendation:
    priority: Priority
    category: RecommendationCategory
    title: str
    description: str
    estimated_cost: Optional[int] = None
    estimated_time: Optional[int] = None  # days
    id: str = field(default_factory=_new_id, compare=False)


@dataclass(frozen=True)
class ActionItem:
    title: str
    priority: Priority
    completed: bool = False
    deadline: Optional[str] = None  # ISO date
    id: str = field(default_factory=_new_id, compare=False)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Point deductions per risk bucket.

    The deforestation-region penalty and the missing-GPS penalty both land in
    ``documentation_risk``, so the five buckets always add up to
    ``100 - unfloored score``.
    """

    country_risk: int = 0
    commodity_risk: int = 0
    supplier_risk: int = 0
    traceability_risk: int = 0
    documentation_risk: int = 0
    gps_data: int = 0
    certification: int = 50

    @property
    def total_deductions(self) -> int:
        return (
            self.country_risk
            + self.commodity_risk
            + self.supplier_risk
            + self.traceability_risk
            + self.documentation_risk
        )

    @property
    def traceability(self) -> int:
        return 100 - self.traceability_risk

    @property
    def documentation(self) -> int:
        return 100 - self.documentation_risk

    @property
    def risk_mitigation(self) -> int:
        return 100 - self.supplier_risk - self.country_risk


@dataclass(frozen=True)
class ComplianceResult:
    score: int
    risk_level: RiskLevel
    data: ExporterFormData
    gaps: List[ComplianceGap]
    recommendations: List[ComplianceRecommendation]
    strengths: List[str]
    score_breakdown: ScoreBreakdown
    next_steps: List[ActionItem]
    time_to_compliance: str
    estimated_time_to_compliance: int
    missing_gaps: List[str] = field(default_factory=list)
    recommended_actions: List[str] = field(default_factory=list)
    id: str = field(default_factory=_new_id, compare=False)
    timestamp: str = field(default_factory=_utc_now, compare=False)

    @property
    def compliance_probability(self) -> int:
        return self.score


# === PERSISTENCE / DOCUMENT INPUTS ===


@dataclass(frozen=True)
class AssessmentRecord:
    """One historical entry kept by a RecordStore."""

    form_data: ExporterFormData
    result: ComplianceResult
    id: str = field(default_factory=_new_id)
    timestamp: str = field(default_factory=_utc_now)


@dataclass(frozen=True)
class DDSRequestData:
    """Shipment details entered for a Due Diligence Statement."""

    hs_code: str
    net_mass_kg: float
    invoice_number: str
    buyer_name: str
    buyer_address: str
    shipment_date: Optional[str] = None
    buyer_country: Optional[str] = None
    buyer_eori: Optional[str] = None
    port_of_entry: Optional[str] = None
    transport_mode: Optional[str] = None


@dataclass(frozen=True)
class SatelliteCheck:
    """Outcome of an external tree-cover-loss check for a production plot."""

    deforestation_detected: bool
    last_forest_loss_year: Optional[int] = None
    status: str = "Compliant"
    coordinates: Optional[str] = None
    data_source: Optional[str] = None
