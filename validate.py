"""validate.py — Reports structural deviations in a laws / penal code document.

The checks themselves live in legalparse.lint; this script reads the
document, runs them and prints the issues grouped by code, with the
article each one was found in.
"""

from __future__ import annotations

import argparse
import sys
from collections import defaultdict
from pathlib import Path

from legalparse.lint import CODE_LABELS, CODES_ORDER, run_checks
from legalparse.load_text import read_source_text
from legalparse.parse_text import FORMATS


# ── Configuration ──────────────────────────────────────────────────────────────
def _find_source(fmt_name: str) -> Path | None:
    config = Path(__file__).parent / "config.local.toml"
    if not config.exists():
        return None
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore
    with open(config, "rb") as f:
        data = tomllib.load(f)
    p = data.get("sources", {}).get(fmt_name, "")
    return Path(p) if p else None


# ── Report ─────────────────────────────────────────────────────────────────────

def report(issues: list[dict], path: Path, total_lines: int) -> None:
    by_code: dict[str, list[dict]] = defaultdict(list)
    for iss in issues:
        by_code[iss["code"]].append(iss)

    print(f"=== Validation of {path.name} ===")
    print(f"Lines read: {total_lines} | Problems found: {len(issues)}\n")

    codes = CODES_ORDER + sorted(c for c in by_code if c not in CODES_ORDER)
    for code in codes:
        items = by_code.get(code)
        if not items:
            continue
        label = CODE_LABELS.get(code, code)
        print(f"{'─'*70}")
        print(f"[{code}] {label}  ({len(items)} occurrence{'s' if len(items) != 1 else ''})")
        print(f"{'─'*70}")
        for it in items:
            print(f"  Context : {it['context']}")
            print(f"  Problem : {it['desc']}")
            print(f"  Text    : {it['text']!r}")
            print()


# ── Entry point ────────────────────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Lists structural problems in a legal document")
    parser.add_argument("path", nargs="?", default=None,
                        help="Document to check (default: [sources] entry in config.local.toml)")
    parser.add_argument("--format", choices=sorted(FORMATS), default="laws",
                        help="Document format (default: laws)")
    parser.add_argument("--start-marker", default=None,
                        help="Skip everything before the first line containing this text")
    args = parser.parse_args(argv)

    path = Path(args.path) if args.path else _find_source(args.format)
    if path is None or not path.exists():
        print(f"ERROR: {path or 'no document given'} not found.", file=sys.stderr)
        return 1

    lines = read_source_text(path).splitlines()
    issues = run_checks(lines, FORMATS[args.format], start_marker=args.start_marker)
    report(issues, path, len(lines))
    return 1 if issues else 0


if __name__ == "__main__":
    if sys.stdout.encoding and sys.stdout.encoding.lower() != "utf-8":
        sys.stdout.reconfigure(encoding="utf-8")
    sys.exit(main())
