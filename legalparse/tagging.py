"""Topical tagging of articles: keyword list plus ordered concept rules.

Two vocabularies ship with the package: GENERAL_VOCABULARY for
constitutional and rights texts, CRIMINAL_VOCABULARY for penal codes.
Which one applies is decided by the document format, never by content.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Article


@dataclass(frozen=True)
class ConceptRule:
    """Maps any of *triggers* onto the canonical *tags*."""
    triggers: tuple[str, ...]
    tags: tuple[str, ...]

    def matches(self, *haystacks: str) -> bool:
        return any(t in h for t in self.triggers for h in haystacks)


@dataclass(frozen=True)
class TagVocabulary:
    name: str
    keywords: tuple[str, ...] = ()
    rules: tuple[ConceptRule, ...] = ()
    base_tags: tuple[str, ...] = ()  # added to every article

    def extend(
        self,
        keywords: list[str] | tuple[str, ...] = (),
        rules: list[ConceptRule] | tuple[ConceptRule, ...] = (),
        *,
        name: str | None = None,
    ) -> TagVocabulary:
        """Returns a new vocabulary with extra keywords and rules appended."""
        merged = list(self.keywords)
        for kw in keywords:
            if kw not in merged:
                merged.append(kw)
        return TagVocabulary(
            name=name or self.name,
            keywords=tuple(merged),
            rules=self.rules + tuple(rules),
            base_tags=self.base_tags,
        )


def _rule(triggers: str, tags: str) -> ConceptRule:
    """Shorthand: "a|b|c" → ("a", "b", "c")."""
    return ConceptRule(tuple(triggers.split("|")), tuple(tags.split("|")))


# ── General law (constitution, bill of rights) ─────────────────────────

GENERAL_KEYWORDS: tuple[str, ...] = (
    "constitution", "law", "rights", "freedom", "citizenship", "government",
    "president", "assembly", "judiciary", "executive", "legislature",
    "justice", "equality", "education", "health", "property", "privacy",
    "religion", "expression", "association", "movement",
    "election", "vote", "democracy", "security", "defense", "police",
    "court", "trial", "appeal", "supreme", "minister", "governor",
    "state", "local", "federal", "national", "territory", "boundary",
)

GENERAL_RULES: tuple[ConceptRule, ...] = (
    _rule("bill of rights|human rights|fundamental rights", "bill of rights|human rights"),
    _rule("executive|president|minister", "executive"),
    _rule("legislature|assembly|parliament", "legislature"),
    _rule("judiciary|court|judge", "judiciary"),
    _rule("freedom of expression|freedom of speech", "freedom of expression"),
    _rule("freedom of assembly|right to assemble", "freedom of assembly"),
    _rule("freedom of religion|religious rights", "freedom of religion"),
    _rule("right to education|educational rights", "right to education"),
    _rule("right to health|health care", "right to health"),
    _rule("right to property|property rights", "property rights"),
    _rule("right to privacy|privacy rights", "privacy rights"),
    _rule("fair trial|due process", "fair trial"),
    _rule("arrest|detention", "arrest and detention"),
    _rule("search|seizure", "search and seizure"),
    _rule("citizenship|nationality", "citizenship"),
    _rule("election|vote|democracy", "elections|democracy"),
    _rule("security|defense|armed forces", "security|defense"),
    _rule("economy|finance|revenue", "economy|finance"),
    _rule("land|natural resources|petroleum", "land|natural resources"),
)

GENERAL_VOCABULARY = TagVocabulary(
    name="general",
    keywords=GENERAL_KEYWORDS,
    rules=GENERAL_RULES,
)


# ── Criminal law (penal code) ──────────────────────────────────────────

CRIMINAL_KEYWORDS: tuple[str, ...] = (
    "offence", "crime", "criminal", "penalty", "punishment", "sentence",
    "imprisonment", "fine", "death", "murder", "theft", "robbery", "fraud",
    "assault", "rape", "kidnapping", "treason", "terrorism", "insurgency",
    "banditry", "sabotage", "conspiracy", "abetment", "attempt", "defence",
    "public servant", "corruption", "bribery", "forgery", "counterfeiting",
    "drugs", "weapons", "violence", "property", "damage", "injury", "hurt",
    "grievous", "culpable", "homicide", "suicide", "miscarriage", "abortion",
    "marriage", "incest", "adultery", "prostitution", "obscenity", "religion",
    "contempt", "evidence", "witness", "perjury", "escape", "arrest", "custody",
)

CRIMINAL_RULES: tuple[ConceptRule, ...] = (
    _rule("treason|insurgency|terrorism", "offences against state"),
    _rule("murder|homicide|assault|rape", "offences against persons"),
    _rule("theft|robbery|fraud|mischief", "offences against property"),
    _rule("public violence|disorderly conduct|riot", "public order offences"),
    _rule("corruption|bribery|public servant", "corruption offences"),
    _rule("rape|sexual|prostitution|incest", "sexual offences"),
    _rule("drug|narcotic", "drug offences"),
    _rule("computer|electronic|cyber", "computer offences"),
)

CRIMINAL_VOCABULARY = TagVocabulary(
    name="criminal",
    keywords=CRIMINAL_KEYWORDS,
    rules=CRIMINAL_RULES,
    base_tags=("penal code", "criminal law"),
)


# ── Evaluator ──────────────────────────────────────────────────────────

def keyword_hits(text: str, keywords: tuple[str, ...]) -> list[str]:
    """Keywords found as substrings of *text* (case-insensitive)."""
    lower = text.lower()
    return [kw for kw in keywords if kw in lower]


def classify(article: Article, vocabulary: TagVocabulary = GENERAL_VOCABULARY) -> set[str]:
    """Returns the tag set for *article* under *vocabulary*."""
    tags: set[str] = set(vocabulary.base_tags)

    # Each field is scanned on its own so a keyword in the chapter name
    # still tags articles whose body never repeats it.
    for value in (article.part, article.chapter, article.title, article.body):
        if value:
            tags.update(keyword_hits(value, vocabulary.keywords))

    title = article.title.lower()
    body = article.body.lower()
    for rule in vocabulary.rules:
        if rule.matches(title, body):
            tags.update(rule.tags)

    return tags
