from typing import Any, Dict

from fastapi import APIRouter

from resilience.core.config import settings
from resilience.core.errors import PayloadTooLargeError
from resilience.core.metrics import get_counters, get_last_runs, get_metrics
from resilience.schemas.analysis import AnalysisRequest, AnalysisResponse, TableRows, WorkbookAnalysisRequest
from resilience.services.analysis import analyze_workbook, build_analysis_response, run_analysis

router = APIRouter(prefix="/analysis", tags=["analysis"])


def _guard_size(rows: TableRows) -> None:
    if len(rows) > settings.max_survey_rows:
        raise PayloadTooLargeError(
            f"Survey has {len(rows)} rows; at most {settings.max_survey_rows} are accepted.",
            detail={"rows": len(rows), "max_rows": settings.max_survey_rows},
        )


@router.post("", response_model=AnalysisResponse)
def analyze(payload: AnalysisRequest) -> AnalysisResponse:
    _guard_size(payload.survey_rows)
    outcome = run_analysis(payload.survey_rows, payload.config.to_domain())
    return build_analysis_response(outcome)


@router.post("/workbook", response_model=AnalysisResponse)
def analyze_config_workbook(payload: WorkbookAnalysisRequest) -> AnalysisResponse:
    _guard_size(payload.survey_rows)
    outcome = analyze_workbook(payload.survey_rows, payload.config_sheets)
    return build_analysis_response(outcome)


@router.get("/metrics")
def analysis_metrics() -> Dict[str, Any]:
    return {
        "timings": get_metrics(),
        "counters": get_counters(),
        "last_runs": get_last_runs(),
    }
