"""Tests for surveygraph.models (record schema and selection values)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from surveygraph.models import (
    DEFAULT_CATEGORIES,
    HEADER_FIELDS,
    Condition,
    SurveyField,
    SurveyRecord,
    find_category,
)


class TestSurveyRecord:

    def test_frozen(self) -> None:
        record = SurveyRecord(age="19")
        with pytest.raises(ValidationError):
            record.age = "20"  # type: ignore[misc]

    def test_defaults_are_blank(self) -> None:
        assert SurveyRecord().course == ""

    def test_header_table_covers_every_field(self) -> None:
        assert set(HEADER_FIELDS.values()) == set(SurveyRecord.model_fields)


class TestSurveyField:

    @pytest.mark.parametrize("name", ["CGPA", "cgpa", "  Cgpa ", "CGPA"])
    def test_from_name_case_insensitive(self, name: str) -> None:
        assert SurveyField.from_name(name) is SurveyField.CGPA

    def test_from_name_accepts_enum_and_attribute_names(self) -> None:
        assert SurveyField.from_name("year_of_study") is SurveyField.YEAR_OF_STUDY
        assert SurveyField.from_name("PANIC_ATTACK") is SurveyField.PANIC_ATTACK

    def test_from_name_unknown(self) -> None:
        with pytest.raises(KeyError):
            SurveyField.from_name("Shoe size")

    def test_value_of_year_is_canonical(self) -> None:
        record = SurveyRecord(year_of_study=" year1 ")
        assert SurveyField.YEAR_OF_STUDY.value_of(record) == "Year 1"

    def test_value_of_cgpa_is_canonical(self) -> None:
        record = SurveyRecord(cgpa="3.50-4.00 ")
        assert SurveyField.CGPA.value_of(record) == "3.50 - 4.00"

    def test_value_of_other_fields_lowercased(self) -> None:
        record = SurveyRecord(gender=" Female", depression="YES")
        assert SurveyField.GENDER.value_of(record) == "female"
        assert SurveyField.DEPRESSION.value_of(record) == "yes"

    def test_value_of_blank_is_empty(self) -> None:
        assert SurveyField.MARITAL_STATUS.value_of(SurveyRecord(marital_status="  ")) == ""

    def test_every_field_has_an_attribute(self) -> None:
        for field in SurveyField:
            assert field.attribute in SurveyRecord.model_fields


class TestCondition:

    def test_short_names(self) -> None:
        assert [c.short_name for c in Condition] == ["Depression", "Anxiety", "Panic"]

    def test_attributes(self) -> None:
        assert Condition.PANIC_ATTACK.attribute == "panic_attack"


class TestCategories:

    def test_default_names(self) -> None:
        assert [c.name for c in DEFAULT_CATEGORIES] == [
            "STEM",
            "Social Sciences",
            "Business",
            "Religious Studies",
            "Law & Humanities",
            "Healthcare",
        ]

    def test_find_category(self) -> None:
        assert find_category("stem").name == "STEM"

    def test_find_category_unknown(self) -> None:
        with pytest.raises(KeyError):
            find_category("Astrology")
