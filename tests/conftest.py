"""Shared test fixtures for surveygraph tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from surveygraph.models import SurveyRecord
from surveygraph.stages.load import parse_records

HEADER = (
    "Timestamp,Choose your gender,Age,What is your course?,Your current year of Study,"
    "What is your CGPA?,Marital status,Do you have Depression?,Do you have Anxiety?,"
    "Do you have Panic attack?,Did you seek any specialist for a treatment?"
)

# 11 respondents.  r5 ("Mathemathics") matches no course category and
# r11 (age 26) falls outside every age bracket.
SAMPLE_ROWS = [
    "8/7/2020 12:02,Female,18,Engineering,year 1,3.00 - 3.49,No,Yes,No,Yes,No",
    "8/7/2020 12:04,Male,21,Islamic education,year 2,3.00 - 3.49,No,No,Yes,No,No",
    "8/7/2020 12:05,Male,19,BIT,Year 1,3.00 - 3.49,No,Yes,Yes,Yes,No",
    "8/7/2020 12:06,Female,22,Laws,year 3,3.00 - 3.49,Yes,Yes,No,No,No",
    "8/7/2020 12:13,Male,23,Mathemathics,year 4,3.00 - 3.49,No,No,No,No,No",
    "8/7/2020 12:31,Female,19,Engineering,Year 2,3.50 - 4.00,No,No,No,No,No",
    "8/7/2020 12:32,Female,18,Pendidikan islam,year 1,3.50 - 4.00,No,No,No,No,No",
    "8/7/2020 12:33,Female,19,Psychology,year 1,3.50 - 4.00,Yes,Yes,Yes,No,No",
    "8/7/2020 12:35,Male,18,Nursing,year 2,3.50 - 4.00 ,No,No,Yes,No,Yes",
    "8/7/2020 12:39,Female,24,Engineering,Year 3,3.50 - 4.00,Yes,Yes,No,No,Yes",
    "8/7/2020 12:40,Female,26,BCS,year 1,3.00-3.49,No,No,No,No,No",
]

SAMPLE_CSV = "\n".join([HEADER, *SAMPLE_ROWS]) + "\n"


def make_record(**fields: str) -> SurveyRecord:
    """Build a record with sensible "No"/blank defaults for unspecified fields."""
    defaults = {
        "gender": "Female",
        "age": "19",
        "course": "Engineering",
        "year_of_study": "year 1",
        "cgpa": "3.00 - 3.49",
        "marital_status": "No",
        "depression": "No",
        "anxiety": "No",
        "panic_attack": "No",
        "treatment": "No",
    }
    defaults.update(fields)
    return SurveyRecord(**defaults)


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_path(tmp_path: Path) -> Path:
    """Write the sample dataset to a temporary CSV file."""
    path = tmp_path / "StudentMentalhealth.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def sample_records() -> list[SurveyRecord]:
    return parse_records(SAMPLE_CSV, source="sample")


@pytest.fixture
def scenario_records() -> list[SurveyRecord]:
    """Three respondents: depression only, depression + anxiety, nothing."""
    return [
        make_record(age="19", depression="Yes", anxiety="No", panic_attack="No", gender="Male"),
        make_record(age="19", depression="Yes", anxiety="Yes", panic_attack="No", gender="Female"),
        make_record(age="22", depression="No", anxiety="No", panic_attack="No", gender="Male"),
    ]
