# eudr_compliance/satellite.py
"""Feed external tree-cover-loss checks into the questionnaire answers."""
import logging
from dataclasses import replace

from .models import ExporterFormData, SatelliteCheck

logger = logging.getLogger(__name__)

CUTOFF_YEAR = 2020
NON_COMPLIANT_STATUS = "NonCompliant"


def is_post_cutoff_loss(check: SatelliteCheck) -> bool:
    """True when the check shows forest loss after 31 December 2020."""
    if check.status == NON_COMPLIANT_STATUS:
        return True
    if not check.deforestation_detected:
        return False
    # Detected loss without a year cannot be placed before the cutoff
    return check.last_forest_loss_year is None or check.last_forest_loss_year > CUTOFF_YEAR


def apply_satellite_check(form: ExporterFormData, check: SatelliteCheck) -> ExporterFormData:
    """
    Copy of ``form`` with the deforestation flag raised if ``check`` finds
    post-cutoff loss. A clean check never clears a flag the exporter set.
    """
    if not is_post_cutoff_loss(check) or form.is_high_deforestation_risk:
        return form

    logger.info(
        "Satellite check flags post-%d forest loss for %s (loss year %s)",
        CUTOFF_YEAR,
        form.company_name or "unnamed exporter",
        check.last_forest_loss_year,
    )
    return replace(form, is_high_deforestation_risk=True)
