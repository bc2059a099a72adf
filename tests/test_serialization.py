"""Tests for JSON conversion of form data, results and records."""

import json

from eudr_compliance.models import RiskLevel, Severity, SupplierType
from eudr_compliance.record_store import new_record
from eudr_compliance.scoring import calculate_compliance_score
from eudr_compliance.serialization import (
    form_data_from_dict,
    form_data_to_dict,
    record_from_dict,
    record_to_dict,
    result_from_dict,
    result_from_json,
    result_to_dict,
    result_to_json,
)


class TestResultSerialization:
    def test_enums_become_plain_values(self, worst_case_form):
        payload = result_to_dict(calculate_compliance_score(worst_case_form))

        assert payload["risk_level"] == "High"
        assert payload["data"]["supplier_type"] == "Unknown"
        assert payload["gaps"][0]["severity"] in {s.value for s in Severity}
        # Must survive a plain json round trip
        json.dumps(payload)

    def test_breakdown_display_fields_are_written(self, medium_case_form):
        payload = result_to_dict(calculate_compliance_score(medium_case_form))
        breakdown = payload["score_breakdown"]

        assert breakdown["traceability"] == 100
        assert breakdown["documentation"] == 100
        assert breakdown["risk_mitigation"] == 80

    def test_json_round_trip_keeps_ids(self, worst_case_form, today):
        result = calculate_compliance_score(worst_case_form, today=today)
        restored = result_from_json(result_to_json(result))

        assert restored == result
        assert restored.id == result.id
        assert restored.timestamp == result.timestamp
        assert [g.id for g in restored.gaps] == [g.id for g in result.gaps]
        assert restored.risk_level is RiskLevel.HIGH
        assert restored.next_steps[0].deadline == "2025-08-28"

    def test_unknown_keys_are_ignored(self, best_case_form):
        payload = result_to_dict(calculate_compliance_score(best_case_form))
        payload["legacy_field"] = "ignored"
        payload["data"]["something_else"] = 1

        assert result_from_dict(payload).score == 80


class TestFormAndRecordSerialization:
    def test_form_data_round_trip(self, best_case_form):
        form = calculate_compliance_score(best_case_form).data
        restored = form_data_from_dict(form_data_to_dict(form))

        assert restored == form
        assert restored.supplier_type is SupplierType.DIRECT_FARMER

    def test_record_round_trip(self, medium_case_form):
        result = calculate_compliance_score(medium_case_form)
        record = new_record(result.data, result)

        restored = record_from_dict(json.loads(json.dumps(record_to_dict(record))))

        assert restored.id == record.id
        assert restored.timestamp == record.timestamp
        assert restored.form_data == record.form_data
        assert restored.result == record.result
