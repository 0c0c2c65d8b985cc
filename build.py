#!/usr/bin/env python3
"""Build pipeline: law.md + penal code → law.json (+ Markdown export)."""

from __future__ import annotations

import argparse
import io
import json
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

BASE_DIR = Path(__file__).parent


# ── Validation report ────────────────────────────────────────────────────

@dataclass
class ValidationIssue:
    category: str   # "vocabulary", "laws", "penal", "merge"
    severity: str   # "error", "warning"
    message: str
    context: str = ""


@dataclass
class ValidationReport:
    issues: list[ValidationIssue] = field(default_factory=list)

    def add(self, category: str, severity: str, message: str, context: str = "") -> None:
        self.issues.append(ValidationIssue(category, severity, message, context))

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def print_report(self) -> None:
        if not self.issues:
            print("\n✓ Validation: no problems found")
            return

        by_cat: dict[str, list[ValidationIssue]] = {}
        for issue in self.issues:
            by_cat.setdefault(issue.category, []).append(issue)

        cat_labels = {
            "vocabulary": "Vocabulary workbook",
            "laws": "Laws document structure",
            "penal": "Penal code document structure",
            "merge": "Merge with existing output",
        }

        print(f"\n{'─' * 60}")
        print("  Validation report")
        print(f"{'─' * 60}")

        for cat, items in by_cat.items():
            label = cat_labels.get(cat, cat)
            errs = sum(1 for i in items if i.severity == "error")
            warns = sum(1 for i in items if i.severity == "warning")
            parts = []
            if errs:
                parts.append(f"{errs} error(s)")
            if warns:
                parts.append(f"{warns} warning(s)")
            print(f"\n  [{label}] — {', '.join(parts)}")
            for item in items:
                icon = "✗" if item.severity == "error" else "·"
                line = f"    {icon} {item.message}"
                if item.context:
                    line += f"  ({item.context})"
                print(line)

        parts = []
        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warning(s)")
        print(f"\n  Total: {', '.join(parts)}")
        print(f"{'─' * 60}")

    def to_json(self) -> list[dict]:
        return [
            {
                "category": i.category,
                "severity": i.severity,
                "message": i.message,
                **({"context": i.context} if i.context else {}),
            }
            for i in self.issues
        ]


def _load_config(path: Path | None = None) -> dict:
    """Reads config.local.toml (if present) → dict."""
    config_path = path or BASE_DIR / "config.local.toml"
    if not config_path.exists():
        return {}
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]
    with open(config_path, "rb") as f:
        return tomllib.load(f)


def _formats(parser_cfg: dict):
    """LAWS/PENAL formats with the [parser] overrides applied."""
    from legalparse.parse_text import LAWS_FORMAT, PENAL_CODE_FORMAT

    boilerplate = parser_cfg.get("penal_boilerplate")
    laws_fmt = LAWS_FORMAT.with_overrides(
        start_marker=parser_cfg.get("laws_start_marker") or None,
    )
    penal_fmt = PENAL_CODE_FORMAT.with_overrides(
        chapter_lookahead=parser_cfg.get("chapter_lookahead"),
        boilerplate=tuple(boilerplate) if boilerplate is not None else None,
    )
    return laws_fmt, penal_fmt


def _parse_source(
    path: Path,
    label: str,
    fmt,
    vocabulary,
    report: ValidationReport,
    *,
    category: str,
    document_title: str | None = None,
) -> list:
    """Reads, lints and parses one source document; [] when unreadable."""
    from legalparse.lint import run_checks
    from legalparse.load_text import read_source_text
    from legalparse.parse_text import parse

    if not path.exists():
        print(f"      → {path} not found, skipped")
        return []
    try:
        raw = read_source_text(path)
    except PermissionError:
        print(f"      ⚠ Could not open {path} (file in use?)")
        report.add(category, "error", f"could not open {path}")
        return []

    for iss in run_checks(raw.splitlines(), fmt):
        report.add(category, "warning", f"[{iss['code']}] {iss['desc']}", iss["context"])

    articles = parse(raw, label, fmt, vocabulary=vocabulary, document_title=document_title)
    print(f"      → {len(articles)} articles")
    return articles


def _merge_existing(
    output_path: Path, new_articles: list, default_source: str, report: ValidationReport,
) -> list:
    """Existing JSON records + new ones; records from re-parsed sources are replaced."""
    from legalparse.models import article_from_dict

    if not output_path.exists():
        return new_articles
    try:
        existing_raw = json.loads(output_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"      ⚠ {output_path} is not valid JSON, merge skipped")
        report.add("merge", "error", f"could not read {output_path}: {exc}")
        return new_articles
    existing = [article_from_dict(d, default_source=default_source) for d in existing_raw]
    print(f"      → {len(existing)} existing articles")
    reparsed = {a.source for a in new_articles}
    kept = [a for a in existing if a.source not in reparsed]
    return kept + new_articles


def _print_statistics(articles: list) -> None:
    parts = {a.part for a in articles}
    chapters = {a.chapter for a in articles}
    tags = {t for a in articles for t in a.tags}
    by_source: dict[str, int] = {}
    for a in articles:
        by_source[a.source] = by_source.get(a.source, 0) + 1

    print("\nStatistics:")
    print(f"- Parts: {len(parts)}")
    print(f"- Chapters: {len(chapters)}")
    print(f"- Articles: {len(articles)}")
    print(f"- Unique tags: {len(tags)}")
    for source, count in by_source.items():
        print(f"- {source}: {count} articles")

    if articles:
        print("\nFirst 5 articles:")
    for a in articles[:5]:
        print(f"Article {a.number}: {a.title}")
        print(f"  Part: {a.part}")
        print(f"  Chapter: {a.chapter}")
        print(f"  Text preview: {a.body[:100]}...")
        print(f"  Tags: {', '.join(sorted(a.tags)[:5])}")
        print("")


def _build_once(*, args: argparse.Namespace, parser_cfg: dict) -> ValidationReport:
    """Runs the whole pipeline once and writes args.output."""
    from legalparse.parse_text import DEFAULT_LAWS_LABEL
    from legalparse.tagging import CRIMINAL_VOCABULARY, GENERAL_VOCABULARY

    t0 = time.time()
    report = ValidationReport()
    laws_fmt, penal_fmt = _formats(parser_cfg)
    laws_vocab, penal_vocab = GENERAL_VOCABULARY, CRIMINAL_VOCABULARY

    # ── 1. Vocabulary ──────────────────────────────────────────────────
    print("[1/6] Loading tag vocabulary...")
    if args.vocabulary and not Path(args.vocabulary).exists():
        print(f"      → {args.vocabulary} not found, using built-in vocabularies")
    elif args.vocabulary:
        from legalparse.parse_xlsx import load_vocabulary
        from legalparse.validate_xlsx import validate_vocabulary

        try:
            for msg in validate_vocabulary(args.vocabulary):
                severity = "error" if msg.strip().startswith("error:") else "warning"
                report.add("vocabulary", severity, msg.strip())
            laws_vocab = load_vocabulary(args.vocabulary, base=GENERAL_VOCABULARY)
            penal_vocab = load_vocabulary(args.vocabulary, base=CRIMINAL_VOCABULARY)
            extra = len(laws_vocab.keywords) - len(GENERAL_VOCABULARY.keywords)
            print(f"      → {extra} extra keywords, "
                  f"{len(laws_vocab.rules) - len(GENERAL_VOCABULARY.rules)} extra rules")
        except PermissionError:
            print("      ⚠ Could not open the vocabulary workbook (open in Excel?)")
            print("        Continuing with the built-in vocabularies...")
    else:
        print("      → built-in vocabularies")

    # ── 2. Laws ────────────────────────────────────────────────────────
    articles: list = []
    print("[2/6] Parsing laws...")
    if args.laws:
        articles += _parse_source(
            Path(args.laws), args.laws_label, laws_fmt, laws_vocab, report,
            category="laws",
        )
    else:
        print("      → no laws document configured")

    # ── 3. Penal code ──────────────────────────────────────────────────
    print("[3/6] Parsing penal code...")
    if args.penal:
        articles += _parse_source(
            Path(args.penal), args.penal_label, penal_fmt, penal_vocab, report,
            category="penal", document_title=parser_cfg.get("penal_title"),
        )
    else:
        print("      → no penal code document configured")

    # ── 4. Merge ───────────────────────────────────────────────────────
    output_path = Path(args.output)
    print("[4/6] Merging...")
    if args.merge:
        articles = _merge_existing(output_path, articles, DEFAULT_LAWS_LABEL, report)
        print(f"      → {len(articles)} articles after merge")
    else:
        print("      → merge disabled, output is overwritten")

    # ── 5. Indexes ─────────────────────────────────────────────────────
    print("[5/6] Building outline and tag index...")
    from legalparse.build_index import build_outline, build_tag_index

    outline = build_outline(articles)
    tag_index = build_tag_index(articles)
    print(f"      → {len(outline)} parts, {len(tag_index)} tags")

    # ── 6. Write ───────────────────────────────────────────────────────
    print("[6/6] Writing output...")
    from legalparse.models import articles_to_list

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(articles_to_list(articles), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    print(f"      → {output_path}")

    if args.markdown:
        from legalparse.render_markdown import MarkdownRenderer

        renderer = MarkdownRenderer()
        md_path = Path(args.markdown)
        md_path.parent.mkdir(parents=True, exist_ok=True)
        md_path.write_text(
            renderer.render_articles(articles)
            + "\n" + renderer.render_outline(outline)
            + "\n" + renderer.render_tag_index(tag_index),
            encoding="utf-8",
        )
        print(f"      → {md_path} ({md_path.stat().st_size / 1024:.0f} KB)")

    elapsed = time.time() - t0
    print(f"\n✓ Done in {elapsed:.1f}s → {output_path}")

    _print_statistics(articles)
    report.print_report()

    # ── Debug output ───────────────────────────────────────────────────
    if args.debug:
        print("\nSaving debug JSONs...")
        debug_dir = Path(args.debug_dir)
        debug_dir.mkdir(parents=True, exist_ok=True)
        for name, data in (
            ("outline", outline),
            ("tag_index", tag_index),
            ("validation_report", report.to_json()),
        ):
            p = debug_dir / f"{name}.json"
            p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            print(f"  → {p}")

    return report


def main(argv: list[str] | None = None) -> int:
    from legalparse.parse_text import DEFAULT_LAWS_LABEL, DEFAULT_PENAL_LABEL

    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre_args, _ = pre.parse_known_args(argv)
    config = _load_config(Path(pre_args.config) if pre_args.config else None)
    sources = config.get("sources", {})
    output_cfg = config.get("output", {})
    parser_cfg = config.get("parser", {})

    parser = argparse.ArgumentParser(
        description="Generates law.json from the laws and penal code documents",
        parents=[pre],
    )
    parser.add_argument("--laws", default=sources.get("laws", ""),
                        help="Laws document (.md, .txt or .pdf)")
    parser.add_argument("--penal", default=sources.get("penal", ""),
                        help="Penal code document (.md, .txt or .pdf)")
    parser.add_argument("--laws-label", default=DEFAULT_LAWS_LABEL,
                        help="Source label stamped on laws articles")
    parser.add_argument("--penal-label", default=DEFAULT_PENAL_LABEL,
                        help="Source label stamped on penal code articles")
    parser.add_argument("--vocabulary", default=sources.get("vocabulary", ""),
                        help="XLSX with extra keywords and concept rules")
    parser.add_argument("--output", default=output_cfg.get("json", str(BASE_DIR / "dist" / "law.json")),
                        help="Output JSON (default: dist/law.json)")
    parser.add_argument("--markdown", default=output_cfg.get("markdown", ""),
                        help="Optional Markdown export")
    parser.add_argument("--merge", action="store_true",
                        help="Merge into the existing output JSON instead of overwriting it")
    parser.add_argument("--debug", action="store_true",
                        help="Saves intermediate JSONs")
    parser.add_argument("--debug-dir", default=str(BASE_DIR / "intermediate"),
                        help="Directory for --debug output (default: intermediate/)")
    parser.add_argument("--strict", action="store_true",
                        help="Treat warnings as errors (exit code 1 on any problem)")
    parser.add_argument("--verbose", action="store_true",
                        help="Debug logging from the parser modules")
    args = parser.parse_args(argv)

    if not args.laws and not args.penal:
        parser.error("nothing to parse: pass --laws and/or --penal, or configure [sources]")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    report = _build_once(args=args, parser_cfg=parser_cfg)

    if report.errors or (args.strict and report.warnings):
        return 1
    return 0


if __name__ == "__main__":
    # Fix Windows console encoding
    if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
        sys.stdout = io.TextIOWrapper(
            sys.stdout.buffer, encoding="utf-8", errors="replace"
        )
    sys.exit(main())
