"""
Tests for eudr_compliance/normalization.py - form-state normalisation and
input validation.
"""

import json

import pytest

from eudr_compliance.models import ExporterFormData, PlotSize, SupplierType, TraceabilityLevel
from eudr_compliance.normalization import (
    FormValidationError,
    canonical_keys,
    coerce_enum,
    is_yes,
    normalize_form_data,
    validate_form_input,
    validate_geolocation,
)


class TestIsYes:
    @pytest.mark.parametrize("value", [True, "yes", "Yes", " y ", "true", "1", 1])
    def test_truthy(self, value):
        assert is_yes(value) is True

    @pytest.mark.parametrize("value", [False, None, "no", "", "0", "maybe", 0])
    def test_falsy(self, value):
        assert is_yes(value) is False


class TestCoerceEnum:
    @pytest.mark.parametrize("raw", ["Direct Farmer", "DirectFarmer", "direct_farmer", "DIRECT-FARMER"])
    def test_spelling_variants(self, raw):
        assert coerce_enum(SupplierType, raw, SupplierType.UNKNOWN) == SupplierType.DIRECT_FARMER

    def test_member_passes_through(self):
        assert coerce_enum(PlotSize, PlotSize.SMALL, PlotSize.LARGE) is PlotSize.SMALL

    @pytest.mark.parametrize("raw", [None, "", "   ", "Galactic"])
    def test_fallback(self, raw):
        assert coerce_enum(TraceabilityLevel, raw, TraceabilityLevel.NONE) == TraceabilityLevel.NONE


class TestCanonicalKeys:
    def test_camel_case_is_mapped(self):
        assert canonical_keys({"companyName": "Acme", "plotSize": "Small"}) == {
            "company_name": "Acme",
            "plot_size": "Small",
        }

    def test_snake_case_passes_through(self):
        assert canonical_keys({"export_country": "Peru"}) == {"export_country": "Peru"}

    def test_canonical_wins_over_legacy(self):
        keys = canonical_keys({"isGpsAvailable": False, "hasGPSData": True})
        assert keys["is_gps_available"] is False

    def test_legacy_fills_missing_canonical(self):
        keys = canonical_keys({"isGpsAvailable": None, "hasGPSData": True})
        assert keys["is_gps_available"] is True


class TestNormalizeFormData:
    def test_defaults_for_missing_answers(self):
        form = normalize_form_data({"companyName": "Acme", "exportCountry": "Peru", "productType": "Cocoa"})

        assert form.supplier_type == SupplierType.UNKNOWN
        assert form.plot_size == PlotSize.LARGE
        assert form.traceability_level == TraceabilityLevel.NONE
        assert form.is_gps_available is False
        assert form.certification_body is None

    def test_strips_and_coerces(self):
        form = normalize_form_data(
            {
                "company_name": "  Acme  ",
                "exportCountry": "Ghana",
                "productType": "Cocoa",
                "isFarmKnown": "yes",
                "supplierCount": "12",
                "certificationBody": "  ",
            }
        )
        assert form.company_name == "Acme"
        assert form.is_farm_known is True
        assert form.supplier_count == 12
        assert form.certification_body is None

    def test_bad_supplier_count_is_dropped(self):
        form = normalize_form_data({"companyName": "A", "supplierCount": "lots"})
        assert form.supplier_count is None

    def test_canonical_instance_is_returned_unchanged(self):
        form = ExporterFormData(company_name="A", export_country="Peru", product_type="Wood")
        assert normalize_form_data(form) is form


class TestValidateGeolocation:
    def test_small_plot_point(self):
        assert validate_geolocation("5.6037, -0.1870", PlotSize.SMALL) is None

    def test_small_plot_needs_two_numbers(self):
        assert "Invalid format" in validate_geolocation("north of the river", PlotSize.SMALL)

    def test_small_plot_out_of_range(self):
        assert "out of range" in validate_geolocation("95.0, 10.0", PlotSize.SMALL)

    def test_large_plot_geojson(self):
        polygon = json.dumps(
            {"type": "Polygon", "coordinates": [[[-0.18, 5.60], [-0.17, 5.60], [-0.17, 5.61], [-0.18, 5.60]]]}
        )
        assert validate_geolocation(polygon, PlotSize.LARGE) is None

    def test_large_plot_bad_json(self):
        assert "Invalid JSON" in validate_geolocation("{not json", PlotSize.LARGE)

    def test_large_plot_missing_coordinates(self):
        assert "Invalid GeoJSON" in validate_geolocation('{"type": "Polygon"}', PlotSize.LARGE)

    @pytest.mark.parametrize("data", [None, "", "   "])
    def test_empty(self, data):
        assert validate_geolocation(data, PlotSize.SMALL) == "Please enter GPS coordinates"


class TestValidateFormInput:
    def test_valid_form(self, best_case_form):
        form = validate_form_input(best_case_form)
        assert form.company_name == "Andes Coffee Export"

    def test_missing_required_fields(self):
        with pytest.raises(FormValidationError) as excinfo:
            validate_form_input({"companyName": "", "productType": "Coffee"})

        assert excinfo.value.missing_fields == ["Company Name", "Export Country"]
        assert "Company Name" in str(excinfo.value)

    def test_gps_claimed_without_coordinates(self, best_case_form):
        form = {**best_case_form, "geolocationData": None}
        with pytest.raises(FormValidationError) as excinfo:
            validate_form_input(form)

        assert excinfo.value.missing_fields == []
        assert excinfo.value.geolocation_error == "Please enter GPS coordinates"

    def test_no_gps_skips_geolocation_check(self, worst_case_form):
        form = validate_form_input(worst_case_form)
        assert form.is_gps_available is False

    def test_deeply_nested_geojson_is_a_validation_error(self, best_case_form):
        form = {**best_case_form, "plotSize": "Large", "geolocationData": "[" * 100000 + "]" * 100000}
        with pytest.raises(FormValidationError) as excinfo:
            validate_form_input(form)

        assert "Invalid JSON" in excinfo.value.geolocation_error

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_form_input({})
