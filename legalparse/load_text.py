"""Reads the raw text of a source document (Markdown, plain text or PDF)."""

from __future__ import annotations

from pathlib import Path

PDF_SUFFIXES = {".pdf"}


def read_source_text(path: str | Path) -> str:
    """Returns the document text; PDF pages are joined with newlines.

    PDF text comes from pdfplumber's plain extract_text(), one page after
    the other. No layout analysis is done.
    """
    path = Path(path)
    if path.suffix.lower() in PDF_SUFFIXES:
        return _read_pdf_text(path)
    return path.read_text(encoding="utf-8")


def _read_pdf_text(path: Path) -> str:
    import pdfplumber

    pages: list[str] = []
    with pdfplumber.open(str(path)) as pdf:
        for page in pdf.pages:
            text = page.extract_text()
            if text:
                pages.append(text)
    return "\n".join(pages)
