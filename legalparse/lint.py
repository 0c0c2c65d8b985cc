"""Structural diagnostics for raw legal text.

Checks implemented:
  ARTICLE_NO_BODY       – article heading with no text before the next one (discarded)
  ARTICLE_UNMATCHED     – "12 Title": number and title but no period
  PART_UNMATCHED        – line starts with PART but is not a recognised part marker
  CHAPTER_UNMATCHED     – line starts with CHAPTER but is not a recognised chapter marker
  CHAPTER_NO_TITLE      – chapter heading whose title lookahead found nothing
  ORPHAN_TEXT           – lines before the first article (dropped)
  ORPHAN_SUBSUBSECTION  – lettered clause with no open subsection (kept as article text)

The parser itself never reports anything; these checks replay its
classification to explain what it silently dropped or folded.
"""

from __future__ import annotations

import re

from .parse_text import (
    LAWS_FORMAT, DocumentFormat, LineType,
    _lookahead_title, _skip_preamble, classify_line,
)

RE_ARTICLE_NO_PERIOD = re.compile(r"^\d+\s+[A-Z]")
RE_LOOSE_PART = re.compile(r"^PART\b")
RE_LOOSE_CHAPTER = re.compile(r"^CHAPTER\b")

CODES_ORDER = [
    "ARTICLE_NO_BODY",
    "ARTICLE_UNMATCHED",
    "PART_UNMATCHED",
    "CHAPTER_UNMATCHED",
    "CHAPTER_NO_TITLE",
    "ORPHAN_TEXT",
    "ORPHAN_SUBSUBSECTION",
]

CODE_LABELS = {
    "ARTICLE_NO_BODY":      "Article without body (discarded)",
    "ARTICLE_UNMATCHED":    "Numbered line not recognised as article",
    "PART_UNMATCHED":       "PART line not recognised as part marker",
    "CHAPTER_UNMATCHED":    "CHAPTER line not recognised as chapter marker",
    "CHAPTER_NO_TITLE":     "Chapter heading without title",
    "ORPHAN_TEXT":          "Text before the first article",
    "ORPHAN_SUBSUBSECTION": "Lettered clause outside a subsection",
}


def run_checks(
    lines: list[str],
    fmt: DocumentFormat = LAWS_FORMAT,
    *,
    start_marker: str | None = None,
) -> list[dict]:
    stripped = [ln.strip() for ln in lines]
    marker = start_marker if start_marker is not None else fmt.start_marker
    if marker:
        stripped = _skip_preamble(stripped, marker)
    classified = [classify_line(ln, fmt) for ln in stripped]

    issues: list[dict] = []
    consumed: set[int] = set()
    article: str = ""  # e.g. "12"
    article_line = ""
    article_has_body = False
    subsection_open = False
    orphan_run: list[str] = []

    def close_article() -> None:
        if article and not article_has_body:
            issues.append(_issue(
                "ARTICLE_NO_BODY",
                f"Article {article} has no text before the next article",
                article, article_line,
            ))

    def close_orphans() -> None:
        if orphan_run:
            issues.append(_issue(
                "ORPHAN_TEXT",
                f"{len(orphan_run)} line(s) before the first article are dropped",
                "", orphan_run[0],
            ))
            orphan_run.clear()

    for i, cl in enumerate(classified):
        if i in consumed or cl.line_type == LineType.EMPTY:
            continue

        if cl.line_type == LineType.PART:
            continue

        if cl.line_type == LineType.CHAPTER:
            if not cl.text and fmt.chapter_lookahead:
                _, j = _lookahead_title(classified, i, fmt)
                if j is None:
                    issues.append(_issue(
                        "CHAPTER_NO_TITLE",
                        f"No title within {fmt.chapter_lookahead} lines after CHAPTER {cl.identifier}",
                        article, cl.raw,
                    ))
                else:
                    consumed.add(j)
            continue

        if cl.line_type == LineType.ARTICLE:
            close_orphans()
            close_article()
            article = cl.identifier
            article_line = cl.raw
            article_has_body = False
            subsection_open = False
            continue

        if not article:
            orphan_run.append(cl.raw)
            continue

        if cl.line_type == LineType.SUBSECTION:
            subsection_open = True
            article_has_body = True
            continue

        if cl.line_type == LineType.SUBSUBSECTION:
            if subsection_open:
                continue
            issues.append(_issue(
                "ORPHAN_SUBSUBSECTION",
                f"Clause ({cl.identifier}) has no open subsection; kept as article text",
                article, cl.raw,
            ))

        # ── Continuation text ──────────────────────────────────────
        if not subsection_open:
            article_has_body = True
        bare = cl.raw.replace("*", "").strip()
        if fmt.has_parts and RE_LOOSE_PART.match(bare):
            issues.append(_issue(
                "PART_UNMATCHED",
                "Line starts with 'PART' but is not a part marker",
                article, cl.raw,
            ))
        elif RE_LOOSE_CHAPTER.match(bare):
            issues.append(_issue(
                "CHAPTER_UNMATCHED",
                "Line starts with 'CHAPTER' but is not a chapter marker",
                article, cl.raw,
            ))
        elif RE_ARTICLE_NO_PERIOD.match(cl.raw):
            issues.append(_issue(
                "ARTICLE_UNMATCHED",
                "Numbered line without period; read as continuation text",
                article, cl.raw,
            ))

    close_orphans()
    close_article()
    return issues


def _issue(code: str, desc: str, context: str, text: str) -> dict:
    return {
        "code":    code,
        "desc":    desc,
        "context": f"Article {context}" if context else "(before first article)",
        "text":    text[:100],
    }
