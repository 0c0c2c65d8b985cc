"""Tag vocabulary workbook (vocabulary.xlsx) → TagVocabulary."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .tagging import GENERAL_VOCABULARY, ConceptRule, TagVocabulary

logger = logging.getLogger(__name__)

KEYWORDS_SHEET = "Keywords"
CONCEPTS_SHEET = "Concepts"

RE_TERM_SEPARATOR = re.compile(r"[\n;]")


def split_terms(raw: object) -> list[str]:
    """Cell value → lower-cased terms; accepts newline or ';' separators.

    "Freedom of Speech; free speech" → ["freedom of speech", "free speech"]
    """
    if raw is None:
        return []
    return [t.strip().lower() for t in RE_TERM_SEPARATOR.split(str(raw)) if t.strip()]


def read_keywords(path: str | Path) -> list[str]:
    """Reads the 'Keywords' sheet: column A, header on row 1."""
    import openpyxl

    wb = openpyxl.load_workbook(Path(path), read_only=True, data_only=True)
    keywords: list[str] = []
    if KEYWORDS_SHEET in wb.sheetnames:
        for row in wb[KEYWORDS_SHEET].iter_rows(min_row=2, values_only=True):
            if not row:
                continue
            for term in split_terms(row[0]):
                if term not in keywords:
                    keywords.append(term)
    wb.close()
    return keywords


def read_concept_rules(path: str | Path) -> list[ConceptRule]:
    """Reads the 'Concepts' sheet: column A triggers, column B tags."""
    import openpyxl

    wb = openpyxl.load_workbook(Path(path), read_only=True, data_only=True)
    if CONCEPTS_SHEET not in wb.sheetnames:
        wb.close()
        return []

    rows = list(wb[CONCEPTS_SHEET].iter_rows(min_row=2, values_only=True))
    wb.close()

    rules: list[ConceptRule] = []
    for n, row in enumerate(rows, start=2):
        if not row or len(row) < 2:
            continue
        triggers = split_terms(row[0])
        tags = split_terms(row[1])
        if not triggers or not tags:
            if triggers or tags:
                logger.debug("Concepts row %d skipped: needs both triggers and tags", n)
            continue
        rules.append(ConceptRule(tuple(triggers), tuple(tags)))
    return rules


def load_vocabulary(
    path: str | Path, base: TagVocabulary = GENERAL_VOCABULARY,
) -> TagVocabulary:
    """Extends *base* with the keywords and concept rules of the workbook."""
    path = Path(path)
    return base.extend(
        read_keywords(path),
        read_concept_rules(path),
        name=f"{base.name}+{path.stem}",
    )
