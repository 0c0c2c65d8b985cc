"""Line-driven parser: raw legal text → list of tagged Articles.

One engine serves every source format. A DocumentFormat carries the
marker recognisers, skip rules and tag vocabulary that differ between
the general "Laws" documents and the penal code.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional

from .models import Article, Subsection, Subsubsection
from .tagging import CRIMINAL_VOCABULARY, GENERAL_VOCABULARY, TagVocabulary, classify

logger = logging.getLogger(__name__)

DEFAULT_LAWS_LABEL = "Laws of South Sudan"
DEFAULT_PENAL_LABEL = "Penal Code Act South Sudan 2008"

# ── Classification regexes ─────────────────────────────────────────────
RE_TABLE_RULE = re.compile(r"^:?-{3,}:?$")
RE_PAGE_NUMBER = re.compile(r"^\d+$")
RE_PART_PREFIX = re.compile(r"PART\s+\w+\s*")
RE_CHAPTER_PREFIX = re.compile(r"CHAPTER\s+(\w+)\s*")
# "12. Title" and the markdown-escaped "12\. Title"
RE_ARTICLE = re.compile(r"^(\d+)\\?\.\s*(.*)$")
# "**12\. Title**." (bold article headings of the penal code export)
RE_ARTICLE_BOLD = re.compile(r"^\*\*(\d+)\\?\.\s*(.+?)\*\*\.?$")
RE_SUBSECTION = re.compile(r"^\((\d+)\)\s*(.*)$")
RE_SUBSUBSECTION = re.compile(r"^\(([a-z])\)\s*(.*)$")
RE_ROMAN_CHAPTER = re.compile(r"^(?:\*\*)?CHAPTER\s+([IVXLC]+)\s*(?:\*\*)?$")
RE_NUMBERED = re.compile(r"^\d+\\?\.")


class LineType(str, Enum):
    EMPTY = "EMPTY"
    PART = "PART"
    CHAPTER = "CHAPTER"
    ARTICLE = "ARTICLE"
    SUBSECTION = "SUBSECTION"
    SUBSUBSECTION = "SUBSUBSECTION"
    TEXT = "TEXT"


# ── Marker recognisers ─────────────────────────────────────────────────

def _is_table_line(line: str) -> bool:
    return not line or line.startswith("|") or bool(RE_TABLE_RULE.match(line))


def bold_part_title(line: str) -> Optional[str]:
    """"**PART ONE Founding Provisions**" → "Founding Provisions"."""
    if not line.startswith("**PART"):
        return None
    return RE_PART_PREFIX.sub("", line.replace("**", ""), count=1).strip()


def starred_chapter(line: str) -> Optional[tuple[str, str]]:
    """"***CHAPTER I Territory***" → ("I", "Territory")."""
    if not line.startswith("***CHAPTER"):
        return None
    bare = line.replace("*", "").strip()
    m = RE_CHAPTER_PREFIX.match(bare)
    ordinal = m.group(1) if m else ""
    return ordinal, RE_CHAPTER_PREFIX.sub("", bare, count=1).strip()


def roman_chapter(line: str) -> Optional[tuple[str, str]]:
    """"CHAPTER IV" (optionally bold) → ("IV", ""); title comes from lookahead."""
    m = RE_ROMAN_CHAPTER.match(line)
    if not m:
        return None
    return m.group(1), ""


def plausible_chapter_title(text: str) -> bool:
    return bool(text) and not RE_NUMBERED.match(text) and "**" not in text and len(text) > 3


# ── Format policy ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class DocumentFormat:
    """Recognition rules and vocabulary for one family of source documents."""
    name: str
    vocabulary: TagVocabulary
    chapter_marker: Callable[[str], Optional[tuple[str, str]]]
    part_marker: Optional[Callable[[str], Optional[str]]] = None
    article_patterns: tuple[re.Pattern[str], ...] = (RE_ARTICLE,)
    boilerplate: tuple[str, ...] = ()  # running headers/footers
    skip_page_numbers: bool = False
    chapter_lookahead: int = 0  # 0 = chapter title is on the heading line
    chapter_title_predicate: Callable[[str], bool] = plausible_chapter_title
    start_marker: Optional[str] = None

    @property
    def has_parts(self) -> bool:
        return self.part_marker is not None

    def is_skip(self, line: str) -> bool:
        if _is_table_line(line):
            return True
        if self.skip_page_numbers and RE_PAGE_NUMBER.match(line):
            return True
        return any(b in line for b in self.boilerplate)

    def with_overrides(self, **changes) -> DocumentFormat:
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


LAWS_FORMAT = DocumentFormat(
    name="laws",
    vocabulary=GENERAL_VOCABULARY,
    part_marker=bold_part_title,
    chapter_marker=starred_chapter,
)

PENAL_CODE_FORMAT = DocumentFormat(
    name="penal",
    vocabulary=CRIMINAL_VOCABULARY,
    chapter_marker=roman_chapter,
    article_patterns=(RE_ARTICLE_BOLD, RE_ARTICLE),
    boilerplate=("**Act 9**", "**LAWS OF SOUTHERN SUDAN**"),
    skip_page_numbers=True,
    chapter_lookahead=4,
)

FORMATS: dict[str, DocumentFormat] = {
    LAWS_FORMAT.name: LAWS_FORMAT,
    PENAL_CODE_FORMAT.name: PENAL_CODE_FORMAT,
}


def parse(
    raw_text: str,
    source_label: str,
    fmt: DocumentFormat = LAWS_FORMAT,
    *,
    vocabulary: TagVocabulary | None = None,
    start_marker: str | None = None,
    document_title: str | None = None,
) -> list[Article]:
    """Parses *raw_text* and returns its articles in document order.

    Args:
        source_label: stamped verbatim on every Article.
        vocabulary: overrides the format's tag vocabulary.
        start_marker: lines up to and including the first one containing
            this text are ignored (defaults to the format's marker).
        document_title: part label for formats without parts (defaults to
            *source_label*).
    """
    lines = [ln.strip() for ln in raw_text.splitlines()]

    marker = start_marker if start_marker is not None else fmt.start_marker
    if marker:
        lines = _skip_preamble(lines, marker)

    classified = [classify_line(ln, fmt) for ln in lines]
    return _build_articles(
        classified,
        fmt,
        source=source_label,
        document_title=document_title or source_label,
        vocabulary=vocabulary or fmt.vocabulary,
    )


def parse_laws(raw_text: str, source_label: str = DEFAULT_LAWS_LABEL, **kwargs) -> list[Article]:
    return parse(raw_text, source_label, LAWS_FORMAT, **kwargs)


def parse_penal_code(raw_text: str, source_label: str = DEFAULT_PENAL_LABEL, **kwargs) -> list[Article]:
    return parse(raw_text, source_label, PENAL_CODE_FORMAT, **kwargs)


def _skip_preamble(lines: list[str], marker: str) -> list[str]:
    for i, line in enumerate(lines):
        if marker in line:
            return lines[i + 1:]
    logger.warning("Start marker %r not found; nothing to parse", marker)
    return []


# ── Line classification ────────────────────────────────────────────────

@dataclass
class _ClassifiedLine:
    line_type: LineType
    identifier: str  # article number, subsection numeral, clause letter or chapter ordinal
    text: str  # title / starting text with the marker removed
    raw: str


def classify_line(line: str, fmt: DocumentFormat) -> _ClassifiedLine:
    """Classifies one stripped line; context checks happen in the builder."""
    if fmt.is_skip(line):
        return _ClassifiedLine(LineType.EMPTY, "", "", line)

    if fmt.part_marker is not None:
        part_title = fmt.part_marker(line)
        if part_title is not None:
            return _ClassifiedLine(LineType.PART, "", part_title, line)

    chapter = fmt.chapter_marker(line)
    if chapter is not None:
        ordinal, title = chapter
        return _ClassifiedLine(LineType.CHAPTER, ordinal, title, line)

    for pattern in fmt.article_patterns:
        m = pattern.match(line)
        if m:
            return _ClassifiedLine(LineType.ARTICLE, m.group(1), m.group(2).strip(), line)

    m = RE_SUBSECTION.match(line)
    if m:
        return _ClassifiedLine(LineType.SUBSECTION, m.group(1), m.group(2).strip(), line)

    m = RE_SUBSUBSECTION.match(line)
    if m:
        return _ClassifiedLine(LineType.SUBSUBSECTION, m.group(1), m.group(2).strip(), line)

    return _ClassifiedLine(LineType.TEXT, "", line, line)


# ── Article construction ───────────────────────────────────────────────

def _join(existing: str, more: str) -> str:
    if not existing:
        return more
    if not more:
        return existing
    return f"{existing} {more}"


@dataclass
class _ScanState:
    """Currently open nodes plus the ambient part/chapter markers."""
    part: str = ""
    chapter: str = ""
    article: Article | None = None
    subsection: Subsection | None = None
    subsubsection: Subsubsection | None = None
    pending_text: list[str] = field(default_factory=list)

    def close_subsubsection(self) -> None:
        if self.subsubsection is not None and self.subsection is not None:
            self.subsection.subsubsections.append(self.subsubsection)
        self.subsubsection = None

    def close_subsection(self) -> None:
        self.close_subsubsection()
        if self.subsection is not None and self.article is not None:
            self.article.subsections.append(self.subsection)
        self.subsection = None

    def close_article(self) -> Article | None:
        self.close_subsection()
        article = self.article
        if article is not None:
            article.full_text = " ".join(self.pending_text).strip()
        self.article = None
        self.pending_text = []
        return article

    def append_text(self, text: str) -> None:
        if self.subsubsection is not None:
            self.subsubsection.text = _join(self.subsubsection.text, text)
        elif self.subsection is not None:
            self.subsection.text = _join(self.subsection.text, text)
        else:
            self.pending_text.append(text)


def _build_articles(
    classified: list[_ClassifiedLine],
    fmt: DocumentFormat,
    *,
    source: str = "",
    document_title: str = "",
    vocabulary: TagVocabulary | None = None,
) -> list[Article]:
    """Single forward pass over classified lines."""
    vocabulary = vocabulary or fmt.vocabulary
    articles: list[Article] = []
    state = _ScanState(part="" if fmt.has_parts else document_title)
    consumed: set[int] = set()  # chapter title lines picked up by lookahead

    def flush() -> None:
        article = state.close_article()
        if article is None:
            return
        if not article.has_body:
            logger.debug("Discarding article %d (%r): no body", article.number, article.title)
            return
        article.tags = classify(article, vocabulary)
        articles.append(article)

    for i, cl in enumerate(classified):
        if i in consumed or cl.line_type == LineType.EMPTY:
            continue

        if cl.line_type == LineType.PART:
            state.part = cl.text
            continue

        if cl.line_type == LineType.CHAPTER:
            title = cl.text
            if not title and fmt.chapter_lookahead:
                title, j = _lookahead_title(classified, i, fmt)
                if j is not None:
                    consumed.add(j)
                else:
                    title = f"Chapter {cl.identifier}"
                    logger.debug("No title found after CHAPTER %s", cl.identifier)
            state.chapter = title
            continue

        if cl.line_type == LineType.ARTICLE:
            flush()
            state.article = Article(
                number=int(cl.identifier),
                title=cl.text,
                chapter=state.chapter,
                part=state.part,
                source=source,
            )
            continue

        if state.article is None:
            # Nothing to attach to
            continue

        if cl.line_type == LineType.SUBSECTION:
            state.close_subsection()
            state.subsection = Subsection(number=cl.identifier, text=cl.text)
            continue

        if cl.line_type == LineType.SUBSUBSECTION and state.subsection is not None:
            state.close_subsubsection()
            state.subsubsection = Subsubsection(letter=cl.identifier, text=cl.text)
            continue

        state.append_text(cl.raw)

    flush()
    return articles


_TITLE_STOPPERS = frozenset({
    LineType.PART, LineType.CHAPTER, LineType.ARTICLE,
    LineType.SUBSECTION, LineType.SUBSUBSECTION,
})


def _lookahead_title(
    classified: list[_ClassifiedLine], i: int, fmt: DocumentFormat,
) -> tuple[str, int | None]:
    """First plausible title within *fmt.chapter_lookahead* lines after *i*.

    Skip lines are passed over; the search stops at the next structural
    marker, so an article heading or its body never becomes a title.
    """
    end = min(i + 1 + fmt.chapter_lookahead, len(classified))
    for j in range(i + 1, end):
        line_type = classified[j].line_type
        if line_type == LineType.EMPTY:
            continue
        if line_type in _TITLE_STOPPERS:
            break
        text = classified[j].raw
        if fmt.chapter_title_predicate(text):
            return text.replace("**", "").strip(), j
    return "", None
