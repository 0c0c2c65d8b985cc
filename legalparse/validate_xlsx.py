"""Checks vocabulary.xlsx before its terms are used for tagging."""

from __future__ import annotations

import re
from pathlib import Path

from .parse_xlsx import CONCEPTS_SHEET, KEYWORDS_SHEET, RE_TERM_SEPARATOR

# Terms are lower-cased on load; mixed case usually means a typo
_UPPER_RE = re.compile(r"[A-Z]")


def _validate_cell_terms(raw: object, label: str) -> list[str]:
    """Per-term problems inside one cell (empty pieces, upper case)."""
    errors: list[str] = []
    pieces = RE_TERM_SEPARATOR.split(str(raw))
    if len(pieces) > 1 and any(not p.strip() for p in pieces):
        errors.append(f"{label}: empty term between separators")
    for p in pieces:
        term = p.strip()
        if term and _UPPER_RE.search(term):
            errors.append(
                f"{label} '{term}' will be lower-cased"
            )
    return errors


def validate_vocabulary(path: str | Path) -> list[str]:
    """Validates the layout of a vocabulary workbook.

    Returns a list of warning strings for the build log; an empty list
    means the workbook is usable as is.
    """
    import openpyxl

    path = Path(path)
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    messages: list[str] = []

    has_keywords = KEYWORDS_SHEET in wb.sheetnames
    has_concepts = CONCEPTS_SHEET in wb.sheetnames
    if not has_keywords and not has_concepts:
        wb.close()
        messages.append(
            f"  error: neither '{KEYWORDS_SHEET}' nor '{CONCEPTS_SHEET}' sheet found"
        )
        return messages

    keyword_rows = (
        list(wb[KEYWORDS_SHEET].iter_rows(min_row=2, values_only=True)) if has_keywords else []
    )
    concept_rows = (
        list(wb[CONCEPTS_SHEET].iter_rows(min_row=2, values_only=True)) if has_concepts else []
    )
    wb.close()

    # ── Keywords sheet ──────────────────────────────────────────────
    seen: dict[str, int] = {}
    for i, row in enumerate(keyword_rows, start=2):  # row 1 = header
        if not row or row[0] is None or not str(row[0]).strip():
            continue
        for err in _validate_cell_terms(row[0], "keyword"):
            messages.append(f"  {KEYWORDS_SHEET} row {i}: {err}")
        for piece in RE_TERM_SEPARATOR.split(str(row[0])):
            term = piece.strip().lower()
            if not term:
                continue
            if term in seen:
                messages.append(
                    f"  {KEYWORDS_SHEET} row {i}: duplicate keyword '{term}' (first on row {seen[term]})"
                )
            else:
                seen[term] = i

    # ── Concepts sheet ──────────────────────────────────────────────
    for i, row in enumerate(concept_rows, start=2):
        if not row:
            continue
        triggers = row[0] if len(row) > 0 else None
        tags = row[1] if len(row) > 1 else None
        has_triggers = triggers is not None and bool(str(triggers).strip())
        has_tags = tags is not None and bool(str(tags).strip())

        if not has_triggers and not has_tags:
            continue
        if not has_tags:
            messages.append(f"  {CONCEPTS_SHEET} row {i}: triggers without tags")
            continue
        if not has_triggers:
            messages.append(f"  {CONCEPTS_SHEET} row {i}: tags without triggers")
            continue

        for err in _validate_cell_terms(triggers, "trigger"):
            messages.append(f"  {CONCEPTS_SHEET} row {i}: {err}")
        for err in _validate_cell_terms(tags, "tag"):
            messages.append(f"  {CONCEPTS_SHEET} row {i}: {err}")

    return messages
