"""Markdown rendering of parsed articles and their indexes."""

from __future__ import annotations

from .models import Article, Subsection


class MarkdownRenderer:
    """Renders articles back into reviewable Markdown."""

    # ── Articles ──────────────────────────────────────────────────────

    def render_articles(self, articles: list[Article]) -> str:
        """Renders the articles, emitting part/chapter headings on change."""
        parts: list[str] = []
        current_source = current_part = current_chapter = None
        for art in articles:
            if art.source != current_source:
                current_source = art.source
                current_part = current_chapter = None
            if art.part != current_part:
                current_part = art.part
                current_chapter = None
                if art.part:
                    parts.append(f"# {art.part}")
            if art.chapter != current_chapter:
                current_chapter = art.chapter
                if art.chapter:
                    parts.append(f"## {art.chapter}")
            parts.append(self._render_article(art))
        if not parts:
            return ""
        return "\n\n".join(parts) + "\n"

    def _render_article(self, art: Article) -> str:
        heading = f"#### Article {art.number}"
        if art.title:
            heading += f" — {art.title}"
        parts: list[str] = [heading]

        if art.full_text:
            parts.append(art.full_text)
        for sub in art.subsections:
            parts.append(self._render_subsection(sub))
        if art.tags:
            parts.append(f"*Tags: {', '.join(sorted(art.tags))}*")
        return "\n\n".join(parts)

    @staticmethod
    def _render_subsection(sub: Subsection) -> str:
        lines = [f"**({sub.number})** {sub.text}".rstrip()]
        for ss in sub.subsubsections:
            lines.append(f"  **({ss.letter})** {ss.text}".rstrip())
        return "\n".join(lines)

    # ── Outline ───────────────────────────────────────────────────────

    def render_outline(self, outline: list[dict]) -> str:
        lines: list[str] = ["# Outline", ""]
        for node in outline:
            lines.extend(self._render_outline_node(node, depth=0))
        return "\n".join(lines) + "\n"

    def _render_outline_node(self, node: dict, depth: int) -> list[str]:
        label = node["title"]
        if node.get("art_range"):
            label += f" {node['art_range']}"
        lines = [f"{'  ' * depth}- {label}"]
        for child in node.get("children", []):
            lines.extend(self._render_outline_node(child, depth + 1))
        return lines

    # ── Tag index ─────────────────────────────────────────────────────

    def render_tag_index(self, tag_index: list[dict]) -> str:
        lines: list[str] = ["# Tag Index"]
        for entry in tag_index:
            lines.append(f"\n## {entry['tag']}")
            for ref in entry["refs"]:
                lines.append(self._format_ref(ref))
        return "\n".join(lines) + "\n"

    @staticmethod
    def _format_ref(ref: dict) -> str:
        line = f"- Article {ref['article']}"
        if ref.get("title"):
            line += f" — {ref['title']}"
        if ref.get("source"):
            line += f" *({ref['source']})*"
        return line
