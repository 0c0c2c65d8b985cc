"""Shared fixtures for the legal text parser tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Make sure the project root is on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from legalparse.models import Article, Subsection, Subsubsection
from legalparse.parse_text import LAWS_FORMAT, PENAL_CODE_FORMAT, classify_line

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
SNAPSHOTS_DIR = Path(__file__).resolve().parent / "snapshots"


# ── CLI flag ────────────────────────────────────────────────────────────

def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--update-snapshots",
        action="store_true",
        default=False,
        help="Regenerates the snapshot golden files.",
    )


@pytest.fixture(scope="session")
def update_snapshots(request: pytest.FixtureRequest) -> bool:
    return bool(request.config.getoption("--update-snapshots"))


# ── Factories ───────────────────────────────────────────────────────────

@pytest.fixture
def make_article():
    """Factory for Article with sensible defaults."""

    def _factory(
        number: int = 1,
        title: str = "",
        *,
        text: str = "",
        chapter: str = "",
        part: str = "",
        source: str = "Laws of South Sudan",
        subsections: list[Subsection] | None = None,
        tags: set[str] | None = None,
    ) -> Article:
        return Article(
            number=number,
            title=title,
            chapter=chapter,
            part=part,
            full_text=text,
            tags=tags or set(),
            subsections=subsections or [],
            source=source,
        )

    return _factory


@pytest.fixture
def make_subsection():
    """Factory for Subsection; clauses given as {"a": "text", ...}."""

    def _factory(number: str = "1", text: str = "", clauses: dict[str, str] | None = None) -> Subsection:
        return Subsection(
            number=number,
            text=text,
            subsubsections=[Subsubsection(letter=k, text=v) for k, v in (clauses or {}).items()],
        )

    return _factory


@pytest.fixture
def classify_laws():
    return lambda line: classify_line(line, LAWS_FORMAT)


@pytest.fixture
def classify_penal():
    return lambda line: classify_line(line, PENAL_CODE_FORMAT)


# ── Sample documents ────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def laws_text() -> str:
    return (FIXTURES_DIR / "laws.md").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def penal_text() -> str:
    return (FIXTURES_DIR / "penal_code.md").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def laws_articles(laws_text):
    """Articles of the sample laws document (cached per session)."""
    from legalparse.parse_text import parse_laws
    return parse_laws(laws_text)


@pytest.fixture(scope="session")
def penal_articles(penal_text):
    """Articles of the sample penal code (cached per session)."""
    from legalparse.parse_text import parse_penal_code
    return parse_penal_code(penal_text)


@pytest.fixture
def make_workbook(tmp_path):
    """Writes a vocabulary workbook; sheets given as {name: [rows]} (row 1 = header)."""
    import openpyxl

    def _factory(sheets: dict[str, list[tuple]], name: str = "vocabulary.xlsx") -> Path:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        return path

    return _factory


# ── Snapshot helpers ────────────────────────────────────────────────────

def load_golden(name: str) -> dict | None:
    """Loads a golden JSON file; None if it does not exist."""
    p = SNAPSHOTS_DIR / f"{name}.json"
    if not p.exists():
        return None
    return json.loads(p.read_text(encoding="utf-8"))


def save_golden(name: str, data: dict) -> Path:
    """Saves a golden JSON file."""
    SNAPSHOTS_DIR.mkdir(parents=True, exist_ok=True)
    p = SNAPSHOTS_DIR / f"{name}.json"
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return p
