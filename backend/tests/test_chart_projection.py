"""
Tests for projecting table columns into chart series
"""

from datetime import datetime

import pytest

from app.core.cells import NumberCell, TextCell
from app.core.exceptions import UnknownColumnError
from app.core.table import build_chart_config
from app.services.chart_projection import coerce_number, project, project_config
from app.services.sheet_parser import parse_grid


@pytest.fixture
def scores():
    return parse_grid([
        ["Name", "Score"],
        ["Alice", "10"],
        ["Bob", "x"],
        ["Carol", None],
    ])


class TestProject:

    def test_skips_non_numeric_and_missing(self, scores):
        series = project(scores, "Name", "Score")

        assert series.to_dict() == {
            "labels": ["Alice"],
            "data": [10.0],
            "xAxisLabel": "Name",
            "yAxisLabel": "Score",
        }

    def test_unknown_x_axis(self):
        table = parse_grid([["A", "B"], [1, 2], [3, 4]])

        with pytest.raises(UnknownColumnError) as exc_info:
            project(table, "C", "B")
        assert exc_info.value.axis == "C"

    def test_unknown_y_axis(self):
        table = parse_grid([["A", "B"], [1, 2], [3, 4]])

        with pytest.raises(UnknownColumnError) as exc_info:
            project(table, "A", "C")
        assert exc_info.value.axis == "C"

    def test_header_match_is_case_sensitive(self):
        table = parse_grid([["Score"], [1]])

        with pytest.raises(UnknownColumnError):
            project(table, "score", "Score")

    def test_idempotent(self, scores):
        assert project(scores, "Name", "Score") == project(scores, "Name", "Score")

    def test_keeps_row_order_and_duplicates(self):
        table = parse_grid([
            ["Region", "Sales"],
            ["West", 5],
            ["East", 3],
            ["West", 5],
        ])

        series = project(table, "Region", "Sales")

        assert series.raw_labels() == ["West", "East", "West"]
        assert list(series.data) == [5.0, 3.0, 5.0]

    def test_duplicate_headers_use_first_match(self):
        table = parse_grid([
            ["Label", "Value", "Value"],
            ["a", 1, 100],
            ["b", 2, 200],
        ])

        series = project(table, "Label", "Value")
        assert list(series.data) == [1.0, 2.0]

    def test_missing_x_skips_row(self):
        table = parse_grid([["X", "Y"], [None, 1], ["b", 2]])

        series = project(table, "X", "Y")
        assert series.raw_labels() == ["b"]

    def test_same_column_on_both_axes(self):
        table = parse_grid([["N"], [1], [2]])

        series = project(table, "N", "N")
        assert series.raw_labels() == [1, 2]
        assert list(series.data) == [1.0, 2.0]

    def test_permissive_numeric_prefix(self):
        table = parse_grid([
            ["Item", "Weight"],
            ["a", "12.5kg"],
            ["b", "  7"],
            ["c", "kg 3"],
        ])

        series = project(table, "Item", "Weight")
        assert list(series.data) == [12.5, 7.0]

    def test_date_y_values_are_skipped(self):
        table = parse_grid([["K", "V"], ["a", datetime(2024, 1, 1)], ["b", 4]])

        assert list(project(table, "K", "V").data) == [4.0]

    def test_labels_keep_raw_values(self):
        table = parse_grid([["When", "V"], [datetime(2024, 3, 1), 1]])

        assert project(table, "When", "V").raw_labels() == ["2024-03-01T00:00:00"]


class TestCoerceNumber:

    @pytest.mark.parametrize("cell,expected", [
        (NumberCell(3), 3.0),
        (NumberCell(2.5), 2.5),
        (TextCell("42"), 42.0),
        (TextCell("-1.5e2"), -150.0),
        (TextCell(".5"), 0.5),
        (TextCell("1,234"), 1.0),
    ])
    def test_numbers(self, cell, expected):
        assert coerce_number(cell) == expected

    @pytest.mark.parametrize("cell", [
        TextCell(""),
        TextCell("abc"),
        TextCell("Infinity"),
        TextCell("nan"),
        NumberCell(float("nan")),
        NumberCell(float("inf")),
    ])
    def test_not_numbers(self, cell):
        assert coerce_number(cell) is None


class TestProjectConfig:

    def test_unknown_column_gives_empty_series(self):
        table = parse_grid([["A", "B"], [1, 2]])
        config = build_chart_config("bar", "A", "Missing")

        series = project_config(table, config)

        assert series.to_dict() == {
            "labels": [],
            "data": [],
            "xAxisLabel": "A",
            "yAxisLabel": "Missing",
        }

    def test_known_columns(self):
        table = parse_grid([["A", "B"], ["x", 2]])

        series = project_config(table, build_chart_config("line", "A", "B"))
        assert list(series.data) == [2.0]
