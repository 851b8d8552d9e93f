"""Tests for infrastructure converters."""

from __future__ import annotations

from linkharvest.infrastructure.common.converters import to_int


class TestToInt:
    def test_none_returns_none(self) -> None:
        assert to_int(None) is None

    def test_int_passthrough(self) -> None:
        assert to_int(42) == 42

    def test_zero(self) -> None:
        assert to_int("0") == 0

    def test_string_digits(self) -> None:
        assert to_int(" 123 ") == 123

    def test_string_with_commas(self) -> None:
        assert to_int("1,234") == 1234

    def test_string_with_spaces(self) -> None:
        assert to_int("1 234") == 1234

    def test_empty_string_returns_none(self) -> None:
        assert to_int("") is None

    def test_non_numeric_string_returns_none(self) -> None:
        assert to_int("n/a") is None

    def test_date_cell_is_not_a_number(self) -> None:
        assert to_int("04-12 2023") is None

    def test_mixed_text_is_not_a_number(self) -> None:
        assert to_int("12 seeds") is None

    def test_bool_is_not_an_int(self) -> None:
        assert to_int(True) is None

    def test_non_ascii_digits_return_none(self) -> None:
        assert to_int("①") is None
        assert to_int("²") is None
        assert to_int("١٢") is None

    def test_grouped_non_ascii_digits_return_none(self) -> None:
        assert to_int("1,②34") is None
