"""Tests for the pandas history views over stored assessments."""

from dataclasses import replace

import pandas as pd
import pytest

from eudr_compliance.history import (
    HISTORY_COLUMNS,
    assessments_to_frame,
    score_trend,
    summarize_history,
)
from eudr_compliance.models import AssessmentRecord
from eudr_compliance.scoring import calculate_compliance_score


def _record(form, timestamp):
    result = calculate_compliance_score(form)
    return AssessmentRecord(form_data=result.data, result=result, timestamp=timestamp)


@pytest.fixture
def history(best_case_form, worst_case_form, medium_case_form):
    # Deliberately out of order
    return [
        _record(medium_case_form, "2025-02-01T09:00:00+00:00"),
        _record(worst_case_form, "2025-01-01T09:00:00+00:00"),
        _record(best_case_form, "2025-03-01T09:00:00+00:00"),
    ]


class TestAssessmentsToFrame:
    def test_columns_and_order(self, history):
        df = assessments_to_frame(history)

        assert list(df.columns) == HISTORY_COLUMNS
        assert list(df["score"]) == [0, 65, 80]
        assert df["timestamp"].is_monotonic_increasing
        assert str(df["timestamp"].dt.tz) == "UTC"

    def test_breakdown_columns(self, history):
        df = assessments_to_frame(history)
        worst = df.iloc[0]
        assert worst["commodity_risk"] == 30
        assert worst["documentation_risk"] == 60
        assert worst["gap_count"] == 7

    def test_empty(self):
        df = assessments_to_frame([])
        assert df.empty
        assert list(df.columns) == HISTORY_COLUMNS


class TestScoreTrend:
    def test_all_companies(self, history):
        trend = score_trend(history)
        assert list(trend.columns) == ["timestamp", "score", "risk_level"]
        assert list(trend["risk_level"]) == ["High", "Medium", "Low"]

    def test_filtered_by_company(self, history, best_case_form):
        later = _record(
            {**best_case_form, "hasThirdPartyCert": False, "plotSize": "Large"},
            "2025-04-01T09:00:00+00:00",
        )
        trend = score_trend(history + [later], company="andes coffee export")

        assert len(trend) == 2
        assert list(trend["score"]) == [80, 80]


class TestSummarizeHistory:
    def test_summary(self, history):
        summary = summarize_history(history)

        assert summary["count"] == 3
        assert summary["latest_score"] == 80
        assert summary["best_score"] == 80
        assert summary["average_score"] == pytest.approx(48.3)
        assert summary["risk_levels"] == {"Low": 1, "Medium": 1, "High": 1}

    def test_empty_summary(self):
        summary = summarize_history([])
        assert summary["count"] == 0
        assert summary["latest_score"] is None
        assert summary["risk_levels"] == {"Low": 0, "Medium": 0, "High": 0}

    def test_record_timestamp_used_not_result(self, history):
        shifted = replace(history[0], timestamp="2024-06-01T00:00:00+00:00")
        df = assessments_to_frame([shifted] + history[1:])
        assert df.iloc[0]["timestamp"] == pd.Timestamp("2024-06-01T00:00:00+00:00")
