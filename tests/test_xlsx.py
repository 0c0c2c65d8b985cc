"""Tests for the vocabulary workbook loader and its validator."""

from __future__ import annotations

import pytest

from legalparse.parse_xlsx import (
    load_vocabulary, read_concept_rules, read_keywords, split_terms,
)
from legalparse.tagging import CRIMINAL_VOCABULARY, GENERAL_VOCABULARY, ConceptRule
from legalparse.validate_xlsx import validate_vocabulary

pytestmark = pytest.mark.unit


class TestSplitTerms:
    def test_separators(self):
        assert split_terms("Free Speech; press\nMedia") == ["free speech", "press", "media"]

    def test_none_and_blank(self):
        assert split_terms(None) == []
        assert split_terms(" ; ") == []

    def test_non_string_cell(self):
        assert split_terms(2008) == ["2008"]


class TestLoadVocabulary:
    def test_keywords_sheet(self, make_workbook):
        path = make_workbook({"Keywords": [("keyword",), ("Oil",), ("gas; oil",), (None,)]})
        assert read_keywords(path) == ["oil", "gas"]

    def test_concepts_sheet(self, make_workbook):
        path = make_workbook({"Concepts": [
            ("triggers", "tags"),
            ("oil; petroleum", "natural resources"),
            ("only trigger", None),
        ]})
        assert read_concept_rules(path) == [
            ConceptRule(("oil", "petroleum"), ("natural resources",)),
        ]

    def test_missing_sheets_contribute_nothing(self, make_workbook):
        path = make_workbook({"Other": [("x",), ("y",)]})
        vocab = load_vocabulary(path)
        assert vocab.keywords == GENERAL_VOCABULARY.keywords
        assert vocab.rules == GENERAL_VOCABULARY.rules

    def test_extends_base(self, make_workbook):
        path = make_workbook({
            "Keywords": [("keyword",), ("cattle",)],
            "Concepts": [("triggers", "tags"), ("cattle raiding", "livestock offences")],
        })
        vocab = load_vocabulary(path, base=CRIMINAL_VOCABULARY)
        assert vocab.name == "criminal+vocabulary"
        assert "cattle" in vocab.keywords
        assert vocab.rules[-1].tags == ("livestock offences",)
        assert vocab.base_tags == CRIMINAL_VOCABULARY.base_tags

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_vocabulary(tmp_path / "nope.xlsx")


class TestValidateVocabulary:
    def test_clean_workbook(self, make_workbook):
        path = make_workbook({
            "Keywords": [("keyword",), ("oil",), ("gas",)],
            "Concepts": [("triggers", "tags"), ("oil", "natural resources")],
        })
        assert validate_vocabulary(path) == []

    def test_no_sheets(self, make_workbook):
        path = make_workbook({"Sheet9": [("x",)]})
        msgs = validate_vocabulary(path)
        assert len(msgs) == 1
        assert "error" in msgs[0]

    def test_duplicate_keyword(self, make_workbook):
        path = make_workbook({"Keywords": [("keyword",), ("oil",), ("gas",), ("oil",)]})
        msgs = validate_vocabulary(path)
        assert any("duplicate keyword 'oil' (first on row 2)" in m and "row 4" in m for m in msgs)

    def test_rule_halves(self, make_workbook):
        path = make_workbook({"Concepts": [
            ("triggers", "tags"),
            ("oil", None),
            (None, "natural resources"),
        ]})
        msgs = validate_vocabulary(path)
        assert any("row 2: triggers without tags" in m for m in msgs)
        assert any("row 3: tags without triggers" in m for m in msgs)

    def test_empty_term_and_upper_case(self, make_workbook):
        path = make_workbook({"Keywords": [("keyword",), ("oil;;Gas",)]})
        msgs = validate_vocabulary(path)
        assert any("empty term between separators" in m for m in msgs)
        assert any("'Gas' will be lower-cased" in m for m in msgs)
