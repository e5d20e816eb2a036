import logging

import pytest

from resilience.assessments.rag.enums import Dimension
from resilience.core.errors import SurveyConfigError, SurveyShapeError
from resilience.core.metrics import get_counters, get_last_runs, get_metrics
from resilience.services.analysis import analyze_workbook, build_analysis_response, run_analysis


def test_run_analysis_records_metrics(survey_rows, survey_config, clean_metrics):
    outcome = run_analysis(survey_rows, survey_config)

    assert outcome.result.total_respondents == 2
    assert outcome.colors[Dimension.LEARN] == "#22c55e"
    counters = get_counters()
    assert counters["analysis.runs"] == 1
    assert counters["analysis.warnings"] == 1
    assert get_metrics()["analysis.aggregate"]["count"] == 1.0
    assert get_last_runs()["analysis.aggregate"]["questions"] == 12


def test_run_analysis_logs_structured_events(survey_rows, survey_config, caplog):
    caplog.set_level(logging.INFO, logger="resilience.services.analysis")
    run_analysis(survey_rows, survey_config)

    events = {record.getMessage(): record for record in caplog.records}
    assert events["unmapped_answers"].structured_data["values"] == ["Maybe"]
    completed = events["analysis_completed"].structured_data
    assert completed["respondents"] == 2
    assert completed["dimension_scores"]["Response"] == 100.0
    assert completed["component"] == "services"


def test_shape_mismatch_stops_before_scoring(survey_config, clean_metrics):
    with pytest.raises(SurveyShapeError):
        run_analysis([["Respondent", "Q1"], ["R1", "Agree"]], survey_config)
    assert "analysis.runs" not in get_counters()
    assert "analysis.aggregate" not in get_metrics()


def test_analyze_workbook(survey_rows, config_sheets):
    outcome = analyze_workbook(survey_rows, config_sheets)
    assert outcome.result.overall_resilience == pytest.approx(152.0 / 3.0)
    assert outcome.config.start_column == 1


def test_analyze_workbook_config_error(survey_rows, config_sheets):
    config_sheets["Likert_Mapping"] = [["Text", "Score"]]
    with pytest.raises(SurveyConfigError) as excinfo:
        analyze_workbook(survey_rows, config_sheets)
    assert excinfo.value.section == "Likert_Mapping"


def test_build_analysis_response_rounds_for_display(survey_rows, survey_config):
    response = build_analysis_response(run_analysis(survey_rows, survey_config))

    assert response.overall_resilience == 50.67
    learn = response.dimensions["Learn"]
    assert learn.score == 2.67
    assert learn.status == "Critical"
    assert learn.color == "#22c55e"
    assert [q.id for q in learn.questions] == [10, 11, 12]
    assert response.dimensions["Response"].max_area == 32.48
    assert response.summary.statuses["Monitor"] == "Fair"
    assert response.warnings == ["Maybe"]


def test_build_analysis_response_custom_decimals(survey_rows, survey_config):
    response = build_analysis_response(run_analysis(survey_rows, survey_config), decimals=0)
    assert response.overall_resilience == 51.0
