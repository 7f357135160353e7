"""Tests for the shared name-shape validator and name helpers."""

from __future__ import annotations

import pytest

from contact_engine.extract.names import best_name, is_plausible_name, split_name


class TestIsPlausibleName:
    @pytest.mark.parametrize(
        "name",
        ["Christopher Needham", "Zoe Tierney", "Mary Ann Smith", "Anna Maria De Luca"],
    )
    def test_accepts_ordinary_names(self, name: str) -> None:
        assert is_plausible_name(name) is True

    @pytest.mark.parametrize(
        "name",
        [
            "Chartered Management",  # leading role word, trailing org noun
            "Meet Jane",             # sentence opener
            "Jane Doe Ltd",          # organisational suffix
            "Jane Mfds",             # qualification as surname
            "Jane Doe BDS",          # not title-case
            "Jane",                  # one word
            "Amy Lee Kate Ross Jones",
            "Jane van Dyke",
            "Christopher Needham We",
            "Brown Tax",
            "",
            None,
        ],
    )
    def test_rejects_non_names(self, name) -> None:
        assert is_plausible_name(name) is False

    def test_length_bounds(self) -> None:
        assert is_plausible_name("Al Bo") is True
        assert is_plausible_name("Al B") is False
        assert is_plausible_name("Bartholomew Maximilian Wolfeschlegels") is True
        assert is_plausible_name("Bartholomew Maximilian Wolfeschlegelsteins") is False


class TestBestName:
    def test_trims_word_after_name(self) -> None:
        assert best_name(["Christopher", "Needham", "Email"], anchor="left") == "Christopher Needham"

    def test_trims_word_before_name(self) -> None:
        assert best_name(["Meet", "Jane", "Doe"], anchor="right") == "Jane Doe"

    def test_prefers_longest_window(self) -> None:
        assert best_name(["Mary", "Ann", "Smith"], anchor="left") == "Mary Ann Smith"

    def test_no_plausible_window(self) -> None:
        assert best_name(["Chartered", "Management"], anchor="left") is None


class TestSplitName:
    def test_two_words(self) -> None:
        assert split_name("Christopher Needham") == ("Christopher", "Needham")

    def test_rest_keeps_middle_names(self) -> None:
        assert split_name("Mary Ann Smith") == ("Mary", "Ann Smith")

    def test_normalises_whitespace(self) -> None:
        assert split_name("  Zoe   Tierney ") == ("Zoe", "Tierney")

    @pytest.mark.parametrize("name", ["Chartered Management", "Jane", "", None])
    def test_invalid_name_gives_empty_parts(self, name) -> None:
        assert split_name(name) == ("", "")
