# eudr_compliance/service.py
"""
Wiring between the questionnaire, the scoring engine and a record store.

    store = default_record_store()
    record = run_assessment(form_state, store)
"""
from datetime import date
from typing import Any, Mapping, Optional

from .config import Settings, get_settings
from .dds_export import build_dds_xml
from .logging_config import configure_logging
from .models import AssessmentRecord, DDSRequestData, SatelliteCheck
from .normalization import validate_form_input
from .record_store import JsonFileRecordStore, RecordStore, new_record
from .satellite import apply_satellite_check
from .scoring import calculate_compliance_score


def default_record_store(settings: Optional[Settings] = None) -> JsonFileRecordStore:
    """File store at the configured path; also applies the configured log level."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    return JsonFileRecordStore(settings.records_path)


def run_assessment(
    raw: Mapping[str, Any],
    store: RecordStore,
    satellite_check: Optional[SatelliteCheck] = None,
    today: Optional[date] = None,
) -> AssessmentRecord:
    """
    Validate questionnaire answers, score them and keep the outcome.

    Raises ``FormValidationError`` before anything is scored or stored when
    required answers are missing.
    """
    form = validate_form_input(raw)
    if satellite_check is not None:
        form = apply_satellite_check(form, satellite_check)

    result = calculate_compliance_score(form, today=today)
    return store.save(new_record(form, result))


def build_statement(
    record: AssessmentRecord,
    request: DDSRequestData,
    settings: Optional[Settings] = None,
    reference: Optional[str] = None,
) -> str:
    """DDS XML for a stored assessment, signed off with the configured operator."""
    settings = settings or get_settings()
    return build_dds_xml(
        record.form_data,
        request,
        reference=reference,
        operator_name=settings.operator_name,
    )
