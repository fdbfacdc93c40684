"""Tests for tag matching and one-shot filtering."""

from types import SimpleNamespace

import pytest

from reflect.models import Note
from reflect.search import filter_records, matches


RECORD = {"search": ["coc", "definition", "movement"]}


class TestMatches:
    """Substring match against a record's search tags."""

    def test_substring_of_a_tag_matches(self):
        assert matches("defin", RECORD) is True

    def test_unrelated_term_does_not_match(self):
        assert matches("xyz", RECORD) is False

    def test_full_tag_matches(self):
        assert matches("movement", RECORD) is True

    def test_term_spanning_two_tags_does_not_match(self):
        assert matches("cocdefinition", RECORD) is False

    def test_case_sensitive_by_default(self):
        assert matches("COC", RECORD) is False

    def test_case_insensitive_option(self):
        assert matches("COC", RECORD, case_sensitive=False) is True
        assert matches("coc", {"search": ["CocCommand"]}, case_sensitive=False) is True

    @pytest.mark.parametrize(
        "record",
        [
            {"search": []},
            {"search": None},
            {"search": 42},
            {"search": 4.2},
            {"title": "no tags"},
            SimpleNamespace(title="no tags"),
        ],
    )
    def test_record_without_tags_never_matches(self, record):
        assert matches("a", record) is False

    def test_object_records(self):
        record = SimpleNamespace(search=["fzf", "git"])
        assert matches("gi", record) is True

    def test_pydantic_records(self):
        note = Note(title="font", content=["pair fonts"], search=["font pair"], source=["x"])
        assert matches("pair", note) is True

    def test_bare_string_tag_is_one_tag(self):
        assert matches("visual", {"search": "visual"}) is True


class TestFilterRecords:
    """filter_records keeps order and handles the empty term."""

    RECORDS = [
        {"id": 1, "search": ["a", "b"]},
        {"id": 2, "search": ["c", "d"]},
        {"id": 3, "search": ["ab"]},
    ]

    def test_empty_term_returns_everything(self):
        assert filter_records("", self.RECORDS) == self.RECORDS

    def test_empty_term_returns_a_new_list(self):
        result = filter_records("", self.RECORDS)
        assert result is not self.RECORDS

    def test_keeps_original_order(self):
        result = filter_records("b", self.RECORDS)
        assert [r["id"] for r in result] == [1, 3]

    def test_no_matches(self):
        assert filter_records("zzz", self.RECORDS) == []

    def test_whitespace_term_is_not_treated_as_empty(self):
        assert filter_records(" ", self.RECORDS) == []

    def test_empty_record_set(self):
        assert filter_records("a", []) == []

    def test_accepts_any_iterable(self):
        result = filter_records("c", iter(self.RECORDS))
        assert [r["id"] for r in result] == [2]
