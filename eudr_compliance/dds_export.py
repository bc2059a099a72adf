# eudr_compliance/dds_export.py
"""
Due Diligence Statement payload for the EU TRACES information system.

Built deterministically from the exporter's questionnaire answers and the
shipment details; the same inputs plus the same reference and submission
time always give the same XML.
"""
import logging
import secrets
import string
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from .models import DDSRequestData, ExporterFormData

logger = logging.getLogger(__name__)

DDS_NAMESPACE = "http://ec.europa.eu/traces/eudr/v1"
EUDR_CUTOFF_DATE = "2020-12-31"

_TOKEN_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference_number(
    country: Optional[str], year: Optional[int] = None, token: Optional[str] = None
) -> str:
    """TRACES-style reference: two-digit year, country prefix, random token."""
    year = year or datetime.now(timezone.utc).year
    origin = (country or "").strip()[:2].upper() or "XX"
    token = token or "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(7))
    return f"{year % 100:02d}{origin}{token}"


def _sub(parent: ET.Element, tag: str, text: object) -> ET.Element:
    node = ET.SubElement(parent, tag)
    node.text = str(text)
    return node


def _bool(value: bool) -> str:
    return "true" if value else "false"


def format_quantity(value: float) -> str:
    """Plain decimal notation, every digit kept (no exponent)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def build_dds_xml(
    form: ExporterFormData,
    request: DDSRequestData,
    reference: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
    operator_name: str = "",
) -> str:
    submitted_at = submitted_at or datetime.now(timezone.utc)
    reference = reference or generate_reference_number(form.export_country, submitted_at.year)

    ET.register_namespace("", DDS_NAMESPACE)
    root = ET.Element(f"{{{DDS_NAMESPACE}}}EUDR_DueDiligenceStatement", {"version": "1.0"})

    def child(parent: ET.Element, tag: str, text: object = None) -> ET.Element:
        qualified = f"{{{DDS_NAMESPACE}}}{tag}"
        if text is None:
            return ET.SubElement(parent, qualified)
        return _sub(parent, qualified, text)

    header = child(root, "Header")
    child(header, "ReferenceNumber", reference)
    child(header, "SubmissionDate", submitted_at.isoformat())
    child(header, "DocumentType", "DDS")

    operator = child(root, "Operator")
    child(operator, "Name", form.company_name or operator_name or "Unknown")
    child(operator, "Country", form.export_country or "Unknown")
    child(operator, "RegistrationNumber", "TBD")

    product = child(root, "Product")
    child(product, "CommodityType", form.product_type or "Relevant Commodity")
    child(product, "HSCode", request.hs_code)
    quantity = child(product, "Quantity")
    child(quantity, "Value", format_quantity(request.net_mass_kg))
    child(quantity, "Unit", "KG")

    production = child(root, "ProductionInformation")
    child(production, "CountryOfProduction", form.export_country or "Unknown")
    child(production, "GeolocationDataAttached", _bool(form.is_gps_available))
    if form.is_gps_available and form.geolocation_data:
        child(production, "Geolocation", form.geolocation_data)
    child(production, "PlotSize", form.plot_size.value)
    child(production, "DeforestationFree", _bool(not form.is_high_deforestation_risk))
    child(production, "CutoffDate", EUDR_CUTOFF_DATE)
    child(production, "LegalProductionEvidence", _bool(form.has_land_records))

    buyer = child(root, "Buyer")
    child(buyer, "Name", request.buyer_name)
    child(buyer, "Address", request.buyer_address)
    child(buyer, "Country", request.buyer_country or "EU Member State")
    if request.buyer_eori:
        child(buyer, "EORI", request.buyer_eori)

    shipment = child(root, "Shipment")
    child(shipment, "InvoiceNumber", request.invoice_number)
    child(shipment, "ShipmentDate", request.shipment_date or submitted_at.date().isoformat())
    child(shipment, "PortOfEntry", request.port_of_entry or "To be specified")
    if request.transport_mode:
        child(shipment, "TransportMode", request.transport_mode)

    ET.indent(root)
    body = ET.tostring(root, encoding="unicode")

    logger.info("Built DDS %s for %s", reference, form.company_name or operator_name)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
