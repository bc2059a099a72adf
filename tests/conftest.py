"""Shared fixtures for the EUDR compliance tests."""

from datetime import date

import pytest

from eudr_compliance.models import DDSRequestData


@pytest.fixture
def today():
    return date(2025, 3, 1)


@pytest.fixture
def best_case_form():
    """Low-risk country, coffee, direct farmer, full documentation."""
    return {
        "companyName": "Andes Coffee Export",
        "exportCountry": "Uruguay",
        "productType": "Coffee",
        "isFarmKnown": True,
        "supplierType": "Direct Farmer",
        "isHighDeforestationRisk": False,
        "isGpsAvailable": True,
        "plotSize": "Small",
        "traceabilityLevel": "Advanced",
        "hasLandRecords": True,
        "hasThirdPartyCert": True,
        "certificationBody": "Rainforest Alliance",
        "geolocationData": "-34.90, -56.16",
    }


@pytest.fixture
def worst_case_form():
    return {
        "companyName": "Opaque Beef Ltd",
        "exportCountry": "Other",
        "productType": "Cattle",
        "isFarmKnown": False,
        "isHighDeforestationRisk": True,
        "isGpsAvailable": False,
        "traceabilityLevel": "None",
        "hasLandRecords": False,
        "hasThirdPartyCert": False,
    }


@pytest.fixture
def medium_case_form():
    return {
        "companyName": "Borneo Cocoa Co-op",
        "exportCountry": "Malaysia",
        "productType": "Coffee",
        "isFarmKnown": True,
        "supplierType": "Cooperative",
        "isGpsAvailable": True,
        "plotSize": "Small",
        "traceabilityLevel": "Advanced",
        "hasLandRecords": True,
        "hasThirdPartyCert": False,
    }


@pytest.fixture
def dds_request():
    return DDSRequestData(
        hs_code="0901.11",
        net_mass_kg=18000,
        invoice_number="INV-2025-041",
        buyer_name="Hamburg Roasters GmbH",
        buyer_address="Speicherstadt 1, Hamburg",
        buyer_country="Germany",
        buyer_eori="DE123456789012345",
        port_of_entry="Hamburg",
        shipment_date="2025-04-15",
        transport_mode="Sea",
    )
