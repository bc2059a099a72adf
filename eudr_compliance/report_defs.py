# eudr_compliance/report_defs.py

REPORT_DEFINITIONS = {
    "readiness_report": {
        "label": "EUDR Readiness Report",
        "stakeholder": "Exporters / EU buyers",
        # What formats this report should offer
        "formats": ["pdf", "excel"],
    },
    "due_diligence_statement": {
        "label": "Due Diligence Statement (TRACES XML)",
        "stakeholder": "EU competent authorities",
        "formats": ["xml"],
    },
    "csv_summary": {
        "label": "CSV Assessment Summary",
        "stakeholder": "Advisors, auditors",
        "formats": ["csv"],
    },
}

MIME_TYPES = {
    "pdf": "application/pdf",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
    "xml": "application/xml",
}

FILE_EXTENSIONS = {
    "pdf": "pdf",
    "excel": "xlsx",
    "csv": "csv",
    "xml": "xml",
}


def report_file_name(report_key: str, fmt: str, company_name: str, year: int) -> str:
    """Download file name, e.g. ``acme_coffee_readiness_report_2025.pdf``."""
    if report_key not in REPORT_DEFINITIONS:
        raise KeyError(f"Unknown report: {report_key}")
    if fmt not in REPORT_DEFINITIONS[report_key]["formats"]:
        raise ValueError(f"{report_key} is not offered as {fmt}")

    slug = "".join(ch if ch.isalnum() else "_" for ch in company_name.strip().lower()) or "exporter"
    return f"{slug}_{report_key}_{year}.{FILE_EXTENSIONS[fmt]}"
