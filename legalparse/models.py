"""In-memory representation of a parsed legal document."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Subsubsection:
    """Lettered clause inside a subsection, e.g. "(a)"."""
    letter: str
    text: str = ""


@dataclass
class Subsection:
    """Numbered subsection of an article, e.g. "(1)"."""
    number: str  # kept as text: sources repeat or skip numerals
    text: str = ""
    subsubsections: list[Subsubsection] = field(default_factory=list)


@dataclass
class Article:
    """Numbered legal provision with its ambient part/chapter context."""
    number: int
    title: str = ""
    chapter: str = ""
    part: str = ""
    full_text: str = ""
    tags: set[str] = field(default_factory=set)
    subsections: list[Subsection] = field(default_factory=list)
    source: str = ""  # ex: "Laws of South Sudan"

    @property
    def body(self) -> str:
        """Article prose followed by every subsection and clause text."""
        pieces = [self.full_text]
        for sub in self.subsections:
            pieces.append(sub.text)
            pieces.extend(ss.text for ss in sub.subsubsections)
        return " ".join(p for p in pieces if p)

    @property
    def has_body(self) -> bool:
        return bool(self.full_text.strip()) or bool(self.subsections)

    def to_dict(self) -> dict:
        """Serialises to a JSON-friendly dict."""
        return {
            "article": self.number,
            "title": self.title,
            "chapter": self.chapter,
            "part": self.part,
            "text": self.full_text,
            "tags": sorted(self.tags),
            "subsections": [_subsection_to_dict(s) for s in self.subsections],
            "lawSource": self.source,
        }


def _subsection_to_dict(s: Subsection) -> dict:
    return {
        "number": s.number,
        "text": s.text,
        "subsubsections": [
            {"letter": ss.letter, "text": ss.text} for ss in s.subsubsections
        ],
    }


def articles_to_list(articles: list[Article]) -> list[dict]:
    return [a.to_dict() for a in articles]


def article_from_dict(d: dict, default_source: str = "") -> Article:
    """Rebuilds an Article from its dict form.

    Older exports lack "lawSource" and "subsections"; *default_source*
    fills the former.
    """
    subsections = []
    for s in d.get("subsections") or []:
        subsections.append(Subsection(
            number=str(s.get("number", "")),
            text=s.get("text", ""),
            subsubsections=[
                Subsubsection(letter=ss.get("letter", ""), text=ss.get("text", ""))
                for ss in s.get("subsubsections") or []
            ],
        ))
    return Article(
        number=int(d.get("article", 0)),
        title=d.get("title", ""),
        chapter=d.get("chapter", ""),
        part=d.get("part", ""),
        full_text=d.get("text", ""),
        tags=set(d.get("tags") or []),
        subsections=subsections,
        source=d.get("lawSource") or default_source,
    )


@dataclass
class OutlineNode:
    """Node of the Part > Chapter outline."""
    title: str
    kind: str  # "part" | "chapter"
    source: str = ""
    art_range: str = ""
    articles: list[int] = field(default_factory=list)
    children: list[OutlineNode] = field(default_factory=list)


def outline_to_list(nodes: list[OutlineNode]) -> list[dict]:
    result = []
    for n in nodes:
        d: dict = {"title": n.title, "kind": n.kind}
        if n.source:
            d["source"] = n.source
        if n.art_range:
            d["art_range"] = n.art_range
        if n.children:
            d["children"] = outline_to_list(n.children)
        result.append(d)
    return result
