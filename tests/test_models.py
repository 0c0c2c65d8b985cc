"""Unit tests for Article serialisation."""

from __future__ import annotations

import pytest

from legalparse.models import article_from_dict, articles_to_list

pytestmark = pytest.mark.unit


class TestArticleDict:
    def test_to_dict_keys(self, make_article, make_subsection):
        art = make_article(
            3, "Citizenship", text="Every person", part="ONE", chapter="II",
            subsections=[make_subsection("1", "born", {"a": "here"})],
            tags={"citizenship", "rights"},
        )
        assert art.to_dict() == {
            "article": 3,
            "title": "Citizenship",
            "chapter": "II",
            "part": "ONE",
            "text": "Every person",
            "tags": ["citizenship", "rights"],
            "subsections": [
                {"number": "1", "text": "born", "subsubsections": [{"letter": "a", "text": "here"}]},
            ],
            "lawSource": "Laws of South Sudan",
        }

    def test_from_dict_restores_article(self, make_article, make_subsection):
        art = make_article(
            3, "T", text="x", subsections=[make_subsection("2", "y", {"b": "z"})], tags={"t"},
        )
        assert article_from_dict(art.to_dict()) == art

    def test_legacy_record_gets_default_source(self):
        art = article_from_dict(
            {"article": "12", "title": "Old", "text": "body", "tags": ["a"]},
            default_source="Laws of South Sudan",
        )
        assert art.number == 12
        assert art.source == "Laws of South Sudan"
        assert art.subsections == []

    def test_existing_source_kept(self):
        art = article_from_dict({"article": 1, "lawSource": "Penal"}, default_source="Laws")
        assert art.source == "Penal"

    def test_articles_to_list(self, make_article):
        assert [d["article"] for d in articles_to_list([make_article(2), make_article(1)])] == [2, 1]


class TestBody:
    def test_body_joins_nested_text(self, make_article, make_subsection):
        art = make_article(text="intro", subsections=[make_subsection("1", "", {"a": "clause"})])
        assert art.body == "intro clause"

    def test_has_body(self, make_article, make_subsection):
        assert not make_article(text="  ").has_body
        assert make_article(subsections=[make_subsection()]).has_body
