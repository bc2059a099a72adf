from .models import (
    ActionItem,
    AssessmentRecord,
    ComplianceGap,
    ComplianceRecommendation,
    ComplianceResult,
    DDSRequestData,
    ExporterFormData,
    PlotSize,
    Priority,
    RiskLevel,
    SatelliteCheck,
    ScoreBreakdown,
    Severity,
    SupplierType,
    TraceabilityLevel,
)
from .normalization import FormValidationError, normalize_form_data, validate_form_input
from .scoring import calculate_compliance_score

__version__ = "0.1.0"
