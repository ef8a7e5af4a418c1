"""Tests for sheetgrid cell validation and the grid options."""

from __future__ import annotations

import pytest

from sheetgrid import Cell, ColumnType, Empty, GridOptions, Invalid, Valid, validate
from sheetgrid._validation import DATE_ERROR, NUMBER_ERROR, apply_validation


class TestNumber:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("42", 42),
            ("-7", -7),
            ("+3", 3),
            ("3.25", 3.25),
            (".5", 0.5),
            ("-0.75", -0.75),
        ],
    )
    def test_valid_numbers(self, text: str, expected: float) -> None:
        result = validate(text, "number")
        assert result == Valid(expected)

    def test_integer_text_parses_to_int(self) -> None:
        result = validate("10", ColumnType.NUMBER)
        assert isinstance(result, Valid)
        assert isinstance(result.value, int)

    @pytest.mark.parametrize(
        "text",
        [
            "12a", "abc", "1e3", "1,000", "5.", "1.2.3", " 5", "5 ", "--1", "$5",
            "\u0661\u0662\u0663", "\uff15",
        ],
    )
    def test_invalid_numbers(self, text: str) -> None:
        assert validate(text, "number") == Invalid(NUMBER_ERROR)


class TestDate:
    @pytest.mark.parametrize(
        "text",
        ["2024-01-05", "01/05/2024", "2024/01/05", "Jan 5, 2024", "January 5, 2024",
         "5 Jan 2024", "2024-01-05T10:30:00"],
    )
    def test_normalized_to_iso(self, text: str) -> None:
        assert validate(text, "date") == Valid("2024-01-05")

    @pytest.mark.parametrize("text", ["not a date", "2024-13-01", "32/01/2024", "tomorrow"])
    def test_unparseable(self, text: str) -> None:
        assert validate(text, "date") == Invalid(DATE_ERROR)


class TestTextAndEmpty:
    def test_text_unchanged(self) -> None:
        assert validate("  Hello, World  ", "text") == Valid("  Hello, World  ")

    def test_formula_text_is_plain_text_to_validation(self) -> None:
        assert validate("=SUM(A1:A2)", "text") == Valid("=SUM(A1:A2)")

    @pytest.mark.parametrize("column_type", ["text", "number", "date"])
    @pytest.mark.parametrize("text", ["", "   ", "\t"])
    def test_blank_is_empty_for_every_type(self, text: str, column_type: str) -> None:
        assert validate(text, column_type) == Empty()

    def test_unknown_column_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown column type"):
            validate("1", "currency")


class TestApplyValidation:
    def test_discard_clears_content(self) -> None:
        cell = Cell(raw="5", value=5)
        apply_validation(cell, "abc", Invalid(NUMBER_ERROR), "discard")
        assert cell.raw == ""
        assert cell.value == ""
        assert cell.error == NUMBER_ERROR

    def test_retain_keeps_prior_content(self) -> None:
        cell = Cell(raw="5", value=5)
        apply_validation(cell, "abc", Invalid(NUMBER_ERROR), "retain")
        assert cell.raw == "5"
        assert cell.value == 5
        assert cell.error == NUMBER_ERROR
        assert cell.rejected == "abc"

    def test_valid_clears_previous_error(self) -> None:
        cell = Cell(error=NUMBER_ERROR, rejected="abc")
        apply_validation(cell, "7", Valid(7))
        assert (cell.raw, cell.value, cell.error, cell.rejected) == ("7", 7, None, None)

    def test_formatting_survives(self) -> None:
        cell = Cell(bold=True, color="red")
        apply_validation(cell, "", Empty())
        assert cell.bold is True
        assert cell.color == "red"


class TestGridOptions:
    def test_defaults(self) -> None:
        opts = GridOptions()
        assert (opts.rows, opts.cols) == (10, 10)
        assert opts.default_column_type is ColumnType.TEXT
        assert opts.invalid_input == "discard"
        assert opts.recompute == "snapshot"

    def test_column_type_string_is_coerced(self) -> None:
        assert GridOptions(default_column_type="number").default_column_type is ColumnType.NUMBER

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rows": 0},
            {"cols": 0},
            {"invalid_input": "ignore"},
            {"recompute": "eager"},
            {"default_column_type": "currency"},
        ],
    )
    def test_rejects_bad_values(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            GridOptions(**kwargs)
