"""Tests for surveygraph.analysis.hierarchy: category / year tree."""

from __future__ import annotations

import logging

import pytest

from surveygraph.analysis.hierarchy import ROOT_NAME, build_category_node, build_tree, match_category
from surveygraph.analysis.models import TreeMetadata, TreeNode
from surveygraph.models import DEFAULT_CATEGORIES, CategoryDefinition, SurveyRecord, find_category


def _record(course: str, year: str = "year 1", **flags: str) -> SurveyRecord:
    return SurveyRecord(
        course=course,
        year_of_study=year,
        depression=flags.get("depression", "No"),
        anxiety=flags.get("anxiety", "No"),
        panic_attack=flags.get("panic", "No"),
        treatment=flags.get("treatment", "No"),
    )


def _assert_rolled_up(node: TreeNode) -> None:
    if not node.children:
        return
    total = TreeMetadata()
    for child in node.children:
        _assert_rolled_up(child)
        total = total + child.metadata
    assert node.metadata == total


# ---------------------------------------------------------------------------
# match_category
# ---------------------------------------------------------------------------


class TestMatchCategory:

    @pytest.mark.parametrize(
        ("course", "expected"),
        [
            ("Engineering", "STEM"),
            ("engin", None),
            ("BCS", "STEM"),
            ("Islamic Education", "Religious Studies"),
            ("pendidikan islam ", "Religious Studies"),
            ("Laws", "Law & Humanities"),
            ("Psychology", "Social Sciences"),
            ("Nursing", "Healthcare"),
            ("Accounting", "Business"),
            ("Mathemathics", None),
            ("", None),
        ],
    )
    def test_default_categories(self, course: str, expected: str | None) -> None:
        category = match_category(course)
        assert (category.name if category else None) == expected

    def test_longest_keyword_wins(self) -> None:
        categories = (
            CategoryDefinition(name="Short", keywords=("law",)),
            CategoryDefinition(name="Long", keywords=("islamic law",)),
        )
        assert match_category("Islamic Law", categories).name == "Long"  # type: ignore[union-attr]

    def test_tie_goes_to_first_definition(self) -> None:
        categories = (
            CategoryDefinition(name="First", keywords=("abc",)),
            CategoryDefinition(name="Second", keywords=("abc",)),
        )
        assert match_category("ABC", categories).name == "First"  # type: ignore[union-attr]


# ---------------------------------------------------------------------------
# build_tree
# ---------------------------------------------------------------------------


class TestBuildTree:

    def test_empty(self) -> None:
        root = build_tree([])
        assert root.name == ROOT_NAME
        assert root.children == ()
        assert root.metadata == TreeMetadata()

    def test_root_totals(self, sample_records: list[SurveyRecord]) -> None:
        root = build_tree(sample_records)
        assert root.metadata == TreeMetadata(depression=5, anxiety=4, panic=2, treatment=2, total=10)

    def test_category_order_and_omission(self, sample_records: list[SurveyRecord]) -> None:
        root = build_tree(sample_records)
        assert [c.name for c in root.children] == [
            "STEM",
            "Social Sciences",
            "Religious Studies",
            "Law & Humanities",
            "Healthcare",
        ]

    def test_stem_subtree(self, sample_records: list[SurveyRecord]) -> None:
        stem = build_tree(sample_records).child("STEM")
        assert stem is not None
        assert stem.metadata == TreeMetadata(depression=3, anxiety=1, panic=2, treatment=1, total=5)
        assert [c.name for c in stem.children] == ["Year 1", "Year 2", "Year 3"]
        year1 = stem.child("Year 1")
        assert year1 is not None
        assert year1.metadata == TreeMetadata(depression=2, anxiety=1, panic=2, treatment=0, total=3)

    def test_year_variants_merge(self, sample_records: list[SurveyRecord]) -> None:
        religious = build_tree(sample_records).child("Religious Studies")
        assert religious is not None
        assert [c.name for c in religious.children] == ["Year 1", "Year 2"]
        assert religious.metadata.total == 2
        assert religious.metadata.anxiety == 1

    def test_every_level_rolls_up(self, sample_records: list[SurveyRecord]) -> None:
        _assert_rolled_up(build_tree(sample_records))

    def test_leaves_are_years(self, sample_records: list[SurveyRecord]) -> None:
        root = build_tree(sample_records)
        leaves = [n for n in root.walk() if not n.children]
        assert all(n.name.startswith("Year ") for n in leaves)
        assert sum(n.metadata.total for n in leaves) == root.metadata.total

    def test_unmatched_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="surveygraph.analysis.hierarchy"):
            root = build_tree([_record("Astrology"), _record("Nursing")])
        assert root.metadata.total == 1
        assert "1 record(s) matched no category" in caplog.text

    def test_numeric_year_order(self) -> None:
        records = [_record("BIT", "year 10"), _record("BIT", "year 2"), _record("BIT", "Final")]
        stem = build_tree(records).child("STEM")
        assert stem is not None
        assert [c.name for c in stem.children] == ["Year 2", "Year 10", "Final"]

    def test_very_long_year_numbers(self) -> None:
        huge = "3" * 5000
        records = [_record("BIT", f"sem {huge}"), _record("BIT", "year 2"), _record("BIT", "year 0010")]
        stem = build_tree(records).child("STEM")
        assert stem is not None
        assert [c.name for c in stem.children] == ["Year 2", "Year 10", f"sem {huge}"]
        assert stem.metadata.total == 3

    def test_blank_year_not_a_leaf(self) -> None:
        root = build_tree([_record("BIT", "")])
        assert root.children == ()
        assert root.metadata.total == 0

    def test_custom_root_name(self) -> None:
        assert build_tree([], root_name="Survey").name == "Survey"

    def test_to_dict(self) -> None:
        data = build_tree([_record("Nursing", depression="Yes")]).to_dict()
        assert data["name"] == ROOT_NAME
        health = data["children"][0]  # type: ignore[index]
        assert health["name"] == "Healthcare"
        leaf = health["children"][0]
        assert leaf == {
            "name": "Year 1",
            "metadata": {"depression": 1, "anxiety": 0, "panic": 0, "treatment": 0, "total": 1},
            "value": 1,
        }


class TestBuildCategoryNode:

    def test_matches_full_tree(self, sample_records: list[SurveyRecord]) -> None:
        stem = find_category("STEM")
        node = build_category_node(sample_records, stem, DEFAULT_CATEGORIES)
        assert node == build_tree(sample_records).child("STEM")

    def test_empty_category(self, sample_records: list[SurveyRecord]) -> None:
        node = build_category_node(sample_records, find_category("Business"))
        assert node.name == "Business"
        assert node.children == ()
        assert node.metadata.total == 0

    def test_without_pool_any_keyword_counts(self) -> None:
        law = CategoryDefinition(name="Law", keywords=("law",))
        religious = CategoryDefinition(name="Religious", keywords=("islamic law",))
        records = [_record("Islamic Law")]
        assert build_category_node(records, law).metadata.total == 1
        assert build_category_node(records, law, (law, religious)).metadata.total == 0
