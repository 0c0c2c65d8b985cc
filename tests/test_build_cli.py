"""Tests for the build.py and validate.py command-line entry points."""

from __future__ import annotations

import json

import pytest

import build
import validate
from tests.conftest import FIXTURES_DIR

pytestmark = pytest.mark.integration

LAWS = str(FIXTURES_DIR / "laws.md")
PENAL = str(FIXTURES_DIR / "penal_code.md")


def _run(tmp_path, *extra: str) -> tuple[int, list[dict]]:
    out = tmp_path / "dist" / "law.json"
    code = build.main(["--output", str(out), *extra])
    data = json.loads(out.read_text(encoding="utf-8")) if out.exists() else []
    return code, data


class TestBuild:
    def test_both_sources(self, tmp_path, capsys):
        code, data = _run(tmp_path, "--laws", LAWS, "--penal", PENAL)
        assert code == 0
        assert len(data) == 10
        assert data[0]["lawSource"] == "Laws of South Sudan"
        assert data[-1]["lawSource"] == "Penal Code Act South Sudan 2008"
        out = capsys.readouterr().out
        assert "[6/6] Writing output..." in out
        assert "- Articles: 10" in out
        assert "Article 1: Nature of the Republic" in out

    def test_labels(self, tmp_path):
        _, data = _run(tmp_path, "--penal", PENAL, "--penal-label", "PC 2008")
        assert {d["lawSource"] for d in data} == {"PC 2008"}
        assert {d["part"] for d in data} == {"PC 2008"}

    def test_strict_fails_on_lint_warnings(self, tmp_path):
        code, _ = _run(tmp_path, "--laws", LAWS, "--strict")
        assert code == 1

    def test_strict_passes_clean_document(self, tmp_path):
        code, _ = _run(tmp_path, "--penal", PENAL, "--strict")
        assert code == 0

    def test_missing_source_skipped(self, tmp_path, capsys):
        code, data = _run(tmp_path, "--laws", str(tmp_path / "nope.md"))
        assert code == 0
        assert data == []
        assert "not found" in capsys.readouterr().out

    def test_nothing_to_parse(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            build.main(["--output", str(tmp_path / "x.json")])
        assert exc.value.code == 2

    def test_merge_keeps_old_records(self, tmp_path):
        out = tmp_path / "dist" / "law.json"
        out.parent.mkdir(parents=True)
        out.write_text(json.dumps([
            {"article": 99, "title": "Legacy", "chapter": "", "part": "", "text": "old", "tags": []},
        ]), encoding="utf-8")
        _, data = _run(tmp_path, "--penal", PENAL, "--merge")
        assert data[0]["article"] == 99
        assert data[0]["lawSource"] == "Laws of South Sudan"
        assert len(data) == 6

    def test_merge_replaces_reparsed_source(self, tmp_path):
        _run(tmp_path, "--penal", PENAL)
        _, data = _run(tmp_path, "--penal", PENAL, "--merge")
        assert len(data) == 5

    def test_merge_with_corrupt_output(self, tmp_path, capsys):
        out = tmp_path / "dist" / "law.json"
        out.parent.mkdir(parents=True)
        out.write_text("[{not json", encoding="utf-8")
        code, data = _run(tmp_path, "--penal", PENAL, "--merge")
        assert code == 1
        assert len(data) == 5
        assert "merge skipped" in capsys.readouterr().out

    def test_missing_vocabulary_reported(self, tmp_path, capsys):
        code, data = _run(tmp_path, "--penal", PENAL, "--vocabulary", str(tmp_path / "nope.xlsx"))
        assert code == 0
        assert len(data) == 5
        assert "nope.xlsx not found" in capsys.readouterr().out

    def test_markdown_and_debug(self, tmp_path):
        md = tmp_path / "law.md"
        debug_dir = tmp_path / "intermediate"
        _run(
            tmp_path, "--laws", LAWS, "--markdown", str(md),
            "--debug", "--debug-dir", str(debug_dir),
        )
        text = md.read_text(encoding="utf-8")
        assert "#### Article 5 — Freedom of Expression" in text
        assert "# Outline" in text
        assert "# Tag Index" in text
        report = json.loads((debug_dir / "validation_report.json").read_text(encoding="utf-8"))
        assert {r["category"] for r in report} == {"laws"}
        assert (debug_dir / "outline.json").exists()
        assert (debug_dir / "tag_index.json").exists()

    def test_vocabulary_workbook(self, tmp_path, make_workbook):
        path = make_workbook({"Keywords": [("keyword",), ("republic",)]})
        _, data = _run(tmp_path, "--laws", LAWS, "--vocabulary", str(path))
        assert "republic" in data[0]["tags"]


class TestValidateCli:
    def test_reports_issues(self, capsys):
        assert validate.main([LAWS]) == 1
        out = capsys.readouterr().out
        assert "[ORPHAN_TEXT]" in out
        assert "[ARTICLE_NO_BODY]" in out

    def test_clean_penal(self):
        assert validate.main([PENAL, "--format", "penal"]) == 0

    def test_missing_file(self, tmp_path):
        assert validate.main([str(tmp_path / "nope.md")]) == 1
