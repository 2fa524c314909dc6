"""Tests for surveygraph.analysis.adjacency: age x condition chord matrix."""

from __future__ import annotations

import logging

import pytest

from surveygraph.analysis.adjacency import DEFAULT_AGES, build_matrix
from surveygraph.models import Condition, SurveyRecord


def _record(age: str, depression: str = "No", anxiety: str = "No", panic: str = "No") -> SurveyRecord:
    return SurveyRecord(age=age, depression=depression, anxiety=anxiety, panic_attack=panic)


class TestBuildMatrix:

    def test_names(self) -> None:
        m = build_matrix([])
        assert m.names == (
            "18", "19", "20", "21", "22", "23", "24", "Depression", "Anxiety", "Panic attack",
        )

    def test_empty_is_all_zero(self) -> None:
        m = build_matrix([])
        assert all(v == 0 for row in m.matrix for v in row)
        assert len(m.matrix) == len(DEFAULT_AGES) + 3

    def test_sample_cells(self, sample_records: list[SurveyRecord]) -> None:
        m = build_matrix(sample_records)
        assert m.cell("18", "Depression") == 1
        assert m.cell("18", "Anxiety") == 1
        assert m.cell("18", "Panic attack") == 1
        assert m.cell("19", "Depression") == 2
        assert m.cell("19", "Anxiety") == 2
        assert m.cell("19", "Panic attack") == 1
        assert m.cell("21", "Anxiety") == 1
        assert m.cell("22", "Depression") == 1
        assert m.cell("24", "Depression") == 1

    def test_sample_empty_ages(self, sample_records: list[SurveyRecord]) -> None:
        m = build_matrix(sample_records)
        assert m.matrix[m.index_of("20")] == (0,) * 10
        assert m.matrix[m.index_of("23")] == (0,) * 10

    def test_symmetric(self, sample_records: list[SurveyRecord]) -> None:
        m = build_matrix(sample_records)
        size = len(m.names)
        for i in range(size):
            for j in range(size):
                assert m.matrix[i][j] == m.matrix[j][i]

    def test_diagonal_zero(self, sample_records: list[SurveyRecord]) -> None:
        m = build_matrix(sample_records)
        assert all(m.matrix[i][i] == 0 for i in range(len(m.names)))

    def test_age_age_and_condition_condition_zero(self, sample_records: list[SurveyRecord]) -> None:
        m = build_matrix(sample_records)
        ages = [str(a) for a in DEFAULT_AGES]
        conditions = [c.value for c in Condition]
        assert all(m.cell(a, b) == 0 for a in ages for b in ages)
        assert all(m.cell(a, b) == 0 for a in conditions for b in conditions)

    def test_out_of_range_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="surveygraph.analysis.adjacency"):
            m = build_matrix([_record("26", depression="Yes"), _record("", anxiety="Yes")])
        assert all(v == 0 for row in m.matrix for v in row)
        assert "2 record(s) outside the age range" in caplog.text

    def test_custom_ages_and_conditions(self) -> None:
        m = build_matrix(
            [_record("30", anxiety="Yes", depression="Yes")],
            ages=[30, 31],
            conditions=[Condition.ANXIETY],
        )
        assert m.names == ("30", "31", "Anxiety")
        assert m.matrix == ((0, 0, 1), (0, 0, 0), (1, 0, 0))

    def test_to_dict(self) -> None:
        data = build_matrix([_record("18", panic="Yes")], ages=[18], conditions=[Condition.PANIC_ATTACK]).to_dict()
        assert data == {"names": ["18", "Panic attack"], "matrix": [[0, 1], [1, 0]]}
