import pytest
from fastapi.testclient import TestClient

from resilience.assessments.rag.types import SurveyConfig
from resilience.core.metrics import metrics_registry
from resilience.main import app

LIKERT = {
    "Strongly Disagree": 1,
    "Disagree": 2,
    "Neutral": 3,
    "Agree": 4,
    "Strongly Agree": 5,
}

QUESTIONS = [
    ("Response", "Emergency procedures"),
    ("Response", "Resource readiness"),
    ("Response", "Recovery time"),
    ("Monitor", "Leading indicators"),
    ("Monitor", "Alarm review"),
    ("Monitor", "Near-miss tracking"),
    ("Anticipate", "Scenario planning"),
    ("Anticipate", "Risk horizon"),
    ("Anticipate", "Supplier exposure"),
    ("Learn", "Incident reviews"),
    ("Learn", "Lessons shared"),
    ("Learn", "Training updates"),
]

# Per respondent: Response all 5, Monitor all 4, Anticipate all 3,
# Learn 2 / unmapped / 1.
ANSWERS = (
    ["Strongly Agree"] * 3
    + ["Agree"] * 3
    + ["Neutral"] * 3
    + ["Disagree", "Maybe", "Strongly Disagree"]
)


def build_rows(*answer_rows):
    header = ["Respondent"] + [f"Q{i}" for i in range(1, len(QUESTIONS) + 1)]
    return [header] + [[f"R{i}"] + list(answers) for i, answers in enumerate(answer_rows, start=1)]


@pytest.fixture()
def survey_config():
    return SurveyConfig.build(start_column=1, likert_map=LIKERT, questions=QUESTIONS)


@pytest.fixture()
def survey_rows():
    rows = build_rows(ANSWERS, ANSWERS)
    rows.append(["", None, "  "])
    return rows


@pytest.fixture()
def config_payload():
    return {
        "start_column": 1,
        "likert_map": dict(LIKERT),
        "questions": [{"dimension": dim, "focus": focus} for dim, focus in QUESTIONS],
    }


@pytest.fixture()
def config_sheets():
    return {
        "Settings": [["Key", "Value"], ["Start Column", 1]],
        "Likert_Mapping": [["Text", "Score"]] + [[text, score] for text, score in LIKERT.items()],
        "Question_Mapping": [["No", "Potential", "Focus"]]
        + [[i, dim, focus] for i, (dim, focus) in enumerate(QUESTIONS, start=1)],
    }


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def clean_metrics():
    metrics_registry.reset()
    yield
    metrics_registry.reset()
