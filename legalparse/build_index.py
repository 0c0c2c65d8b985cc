"""Outline (Part > Chapter) and tag index built from parsed articles."""

from __future__ import annotations

from collections import defaultdict

from .models import Article, OutlineNode, outline_to_list


def build_outline(articles: list[Article]) -> list[dict]:
    """Generates the outline as a JSON-friendly list.

    Structure: PART > CHAPTER, in order of first appearance. Each node
    holding articles directly gets an article range, e.g. "(arts. 1–12)".
    Articles without a part are grouped under their source label.
    """
    nodes = _build_tree(articles)
    _annotate_ranges(nodes)
    return outline_to_list(nodes)


def _build_tree(articles: list[Article]) -> list[OutlineNode]:
    root: list[OutlineNode] = []
    parts: dict[tuple[str, str], OutlineNode] = {}
    chapters: dict[tuple[str, str, str], OutlineNode] = {}

    for art in articles:
        part_title = art.part or art.source
        part_key = (art.source, part_title)
        part = parts.get(part_key)
        if part is None:
            part = OutlineNode(title=part_title, kind="part", source=art.source)
            parts[part_key] = part
            root.append(part)

        if not art.chapter:
            part.articles.append(art.number)
            continue

        chapter_key = (art.source, part_title, art.chapter)
        chapter = chapters.get(chapter_key)
        if chapter is None:
            chapter = OutlineNode(title=art.chapter, kind="chapter", source=art.source)
            chapters[chapter_key] = chapter
            part.children.append(chapter)
        chapter.articles.append(art.number)

    return root


def _annotate_ranges(nodes: list[OutlineNode]) -> None:
    for node in nodes:
        if node.children:
            _annotate_ranges(node.children)
        if node.articles:
            node.art_range = format_art_range(node.articles)


def format_art_range(numbers: list[int]) -> str:
    """Format: '(art. 5)' for a single article, '(arts. 1–12)' otherwise."""
    if not numbers:
        return ""
    first, last = min(numbers), max(numbers)
    if first == last:
        return f"(art. {first})"
    return f"(arts. {first}–{last})"


# ---- Tag index ----

def build_tag_index(articles: list[Article]) -> list[dict]:
    """One entry per tag with the articles carrying it, in document order."""
    refs: dict[str, list[dict]] = defaultdict(list)
    for art in articles:
        for tag in art.tags:
            refs[tag].append({
                "source": art.source,
                "article": art.number,
                "title": art.title,
            })
    return [
        {"tag": tag, "refs": refs[tag]}
        for tag in sorted(refs, key=str.lower)
    ]
