"""
Tests for settings, logging setup and the assess-and-store workflow.
"""

import logging
import xml.etree.ElementTree as ET
from contextlib import contextmanager
from pathlib import Path

import pytest

from eudr_compliance.config import Settings, get_settings
from eudr_compliance.dds_export import DDS_NAMESPACE
from eudr_compliance.logging_config import configure_logging
from eudr_compliance.models import SatelliteCheck
from eudr_compliance.normalization import FormValidationError
from eudr_compliance.record_store import InMemoryRecordStore, JsonFileRecordStore, new_record
from eudr_compliance.scoring import calculate_compliance_score
from eudr_compliance.service import build_statement, default_record_store, run_assessment


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("EUDR_DATA_DIR", "EUDR_RECORDS_FILE", "EUDR_LOG_LEVEL", "EUDR_OPERATOR_NAME"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()
        assert settings.records_path == Path("data") / "assessments.json"
        assert settings.log_level == "INFO"
        assert settings.operator_name == ""

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EUDR_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("EUDR_RECORDS_FILE", "history.json")
        monkeypatch.setenv("EUDR_LOG_LEVEL", "debug")
        monkeypatch.setenv("EUDR_OPERATOR_NAME", "Andes Coffee Export")

        settings = get_settings()
        assert settings.records_path == tmp_path / "history.json"
        assert settings.log_level == "DEBUG"
        assert settings.operator_name == "Andes Coffee Export"


@contextmanager
def bare_root_logger():
    # pytest attaches its own capture handlers to the root logger
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        yield root
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


class TestConfigureLogging:
    def test_adds_one_handler(self):
        with bare_root_logger() as root:
            configure_logging("warning")
            configure_logging(logging.DEBUG)

            assert len(root.handlers) == 1
            assert root.level == logging.WARNING

    def test_unknown_level_name_falls_back_to_info(self):
        with bare_root_logger() as root:
            configure_logging("chatty")
            assert root.level == logging.INFO

    def test_existing_handlers_left_alone(self):
        with bare_root_logger() as root:
            handler = logging.NullHandler()
            root.addHandler(handler)
            configure_logging()
            assert root.handlers == [handler]


class TestRunAssessment:
    def test_scores_and_stores(self, best_case_form, today):
        store = InMemoryRecordStore()
        record = run_assessment(best_case_form, store, today=today)

        assert record.result.score == 80
        assert record.form_data == record.result.data
        assert store.find_by_id(record.id) is record

    def test_invalid_input_is_not_stored(self):
        store = InMemoryRecordStore()
        with pytest.raises(FormValidationError):
            run_assessment({"companyName": "Acme"}, store)
        assert store.list() == []

    def test_satellite_check_applied(self, best_case_form):
        store = InMemoryRecordStore()
        check = SatelliteCheck(deforestation_detected=True, last_forest_loss_year=2023)

        record = run_assessment(best_case_form, store, satellite_check=check)

        assert record.form_data.is_high_deforestation_risk is True
        assert record.result.score == 50

    def test_default_store_uses_settings(self, tmp_path, best_case_form):
        settings = Settings(data_dir=tmp_path / "data", records_file="runs.json")
        with bare_root_logger():
            store = default_record_store(settings)

        assert isinstance(store, JsonFileRecordStore)
        run_assessment(best_case_form, store)
        assert (tmp_path / "data" / "runs.json").exists()
        assert len(store.list()) == 1

    def test_default_store_applies_configured_log_level(self, tmp_path):
        settings = Settings(data_dir=tmp_path, log_level="DEBUG")
        with bare_root_logger() as root:
            default_record_store(settings)

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1


class TestBuildStatement:
    def test_operator_name_fallback(self, worst_case_form, dds_request):
        form = {**worst_case_form, "companyName": ""}
        result = calculate_compliance_score(form)
        record = new_record(result.data, result)
        settings = Settings(operator_name="Fallback Trading SA")

        xml_text = build_statement(record, dds_request, settings=settings, reference="25OTTEST001")

        root = ET.fromstring(xml_text.encode("utf-8"))
        assert root.findtext("dds:Operator/dds:Name", namespaces={"dds": DDS_NAMESPACE}) == "Fallback Trading SA"
        assert root.findtext("dds:Header/dds:ReferenceNumber", namespaces={"dds": DDS_NAMESPACE}) == "25OTTEST001"
