# eudr_compliance/normalization.py
"""
Input boundary between the questionnaire and the scoring engine.

Raw form state arrives as a loosely typed mapping (camelCase from the web
form, snake_case from CSV/JSON imports, legacy field names from older saved
assessments). ``normalize_form_data`` maps all of it onto one canonical
``ExporterFormData`` so the engine never has to look at aliases.
"""
import json
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from .models import ExporterFormData, PlotSize, SupplierType, TraceabilityLevel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# === FIELD MAPPING ===

# Incoming key -> canonical field
FIELD_MAPPING = {
    "companyName": "company_name",
    "exportCountry": "export_country",
    "productType": "product_type",
    "annualVolume": "annual_volume",
    "isFarmKnown": "is_farm_known",
    "supplierType": "supplier_type",
    "isHighDeforestationRisk": "is_high_deforestation_risk",
    "isGpsAvailable": "is_gps_available",
    "plotSize": "plot_size",
    "traceabilityLevel": "traceability_level",
    "hasLandRecords": "has_land_records",
    "hasThirdPartyCert": "has_third_party_cert",
    "certificationBody": "certification_body",
    "certificationDate": "certification_date",
    "geolocationData": "geolocation_data",
    "supplierCount": "supplier_count",
}

# Legacy field -> canonical field it stands in for
LEGACY_ALIASES = {
    "hasSupplierList": "is_farm_known",
    "has_supplier_list": "is_farm_known",
    "deforestationRiskRegion": "is_high_deforestation_risk",
    "deforestation_risk_region": "is_high_deforestation_risk",
    "hasGPSData": "is_gps_available",
    "has_gps_data": "is_gps_available",
}

REQUIRED_FIELDS = ["company_name", "export_country", "product_type"]

REQUIRED_DISPLAY_LABELS = {
    "company_name": "Company Name",
    "export_country": "Export Country",
    "product_type": "Product Type",
}

_TRUE_STRINGS = {"yes", "y", "true", "1"}


class FormValidationError(ValueError):
    """Raised when questionnaire answers are not complete enough to score."""

    def __init__(self, missing_fields: List[str], geolocation_error: Optional[str] = None):
        self.missing_fields = list(missing_fields)
        self.geolocation_error = geolocation_error
        problems = []
        if self.missing_fields:
            problems.append("missing required fields: " + ", ".join(self.missing_fields))
        if geolocation_error:
            problems.append(geolocation_error)
        super().__init__("; ".join(problems) or "invalid form data")


# === VALUE COERCION ===


def is_yes(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_STRINGS


def _simplify(text: str) -> str:
    return re.sub(r"[\s_\-]+", "", text).casefold()


def coerce_enum(enum_cls: Type[E], value: Any, fallback: E) -> E:
    """Match ``value`` against member values or names, else ``fallback``.

    Matching ignores case, spaces, hyphens and underscores, so
    ``"Direct Farmer"``, ``"DirectFarmer"`` and ``"direct_farmer"`` all hit
    ``SupplierType.DIRECT_FARMER``.
    """
    if isinstance(value, enum_cls):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return fallback

    wanted = _simplify(str(value))
    for member in enum_cls:
        if wanted in (_simplify(member.value), _simplify(member.name)):
            return member

    logger.debug("Unrecognised %s value %r, using %s", enum_cls.__name__, value, fallback.value)
    return fallback


def _optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def canonical_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename incoming keys to canonical names.

    Canonical fields win over their legacy aliases: a legacy value is only
    used when the canonical field is absent or ``None``.
    """
    canonical: Dict[str, Any] = {}
    legacy: Dict[str, Any] = {}

    for key, value in raw.items():
        if key in LEGACY_ALIASES:
            target = LEGACY_ALIASES[key]
            if legacy.get(target) is None:
                legacy[target] = value
        else:
            canonical[FIELD_MAPPING.get(key, key)] = value

    for target, value in legacy.items():
        if canonical.get(target) is None:
            canonical[target] = value

    return canonical


# === PUBLIC API ===


def normalize_form_data(raw: Mapping[str, Any]) -> ExporterFormData:
    """Build a canonical ``ExporterFormData`` from raw form state."""
    if isinstance(raw, ExporterFormData):
        return raw

    values = canonical_keys(raw)

    return ExporterFormData(
        company_name=str(values.get("company_name") or "").strip(),
        export_country=str(values.get("export_country") or "").strip(),
        product_type=str(values.get("product_type") or "").strip(),
        is_farm_known=is_yes(values.get("is_farm_known")),
        supplier_type=coerce_enum(SupplierType, values.get("supplier_type"), SupplierType.UNKNOWN),
        is_high_deforestation_risk=is_yes(values.get("is_high_deforestation_risk")),
        is_gps_available=is_yes(values.get("is_gps_available")),
        plot_size=coerce_enum(PlotSize, values.get("plot_size"), PlotSize.LARGE),
        traceability_level=coerce_enum(
            TraceabilityLevel, values.get("traceability_level"), TraceabilityLevel.NONE
        ),
        has_land_records=is_yes(values.get("has_land_records")),
        has_third_party_cert=is_yes(values.get("has_third_party_cert")),
        certification_body=_optional_str(values.get("certification_body")),
        certification_date=_optional_str(values.get("certification_date")),
        annual_volume=_optional_str(values.get("annual_volume")),
        geolocation_data=_optional_str(values.get("geolocation_data")),
        supplier_count=_optional_int(values.get("supplier_count")),
    )


def validate_geolocation(data: Optional[str], plot_size: PlotSize) -> Optional[str]:
    """Return an error message for bad geolocation input, or ``None``.

    Small plots take a ``"latitude, longitude"`` pair; large plots need a
    GeoJSON object carrying ``type`` and ``coordinates``.
    """
    if not data or not data.strip():
        return "Please enter GPS coordinates"

    if plot_size == PlotSize.SMALL:
        numbers = re.findall(r"-?\d+(?:\.\d+)?", data)
        if len(numbers) < 2:
            return 'Invalid format. Expected: "Latitude, Longitude" (e.g., 12.34, 56.78)'
        lat, lng = float(numbers[0]), float(numbers[1])
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            return "Coordinates out of range. Lat: -90 to 90, Lng: -180 to 180"
        return None

    try:
        geojson = json.loads(data)
    except (json.JSONDecodeError, RecursionError):
        return "Invalid JSON syntax. Please check your GeoJSON format"
    if not isinstance(geojson, dict) or not geojson.get("type") or not geojson.get("coordinates"):
        return 'Invalid GeoJSON. Must include "type" and "coordinates"'
    return None


def validate_form_input(raw: Mapping[str, Any]) -> ExporterFormData:
    """Normalise ``raw`` and reject it if it cannot be scored.

    This is the only place user-facing validation errors are raised; the
    scoring engine itself accepts any normalised form.
    """
    form = normalize_form_data(raw)

    missing = [
        REQUIRED_DISPLAY_LABELS[name]
        for name in REQUIRED_FIELDS
        if not getattr(form, name)
    ]

    geo_error = None
    if form.is_gps_available:
        geo_error = validate_geolocation(form.geolocation_data, form.plot_size)

    if missing or geo_error:
        raise FormValidationError(missing, geo_error)

    return form
