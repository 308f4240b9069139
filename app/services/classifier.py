"""
Keyword classifier: maps a free-text question to a topic category.

Patterns are tested in a fixed priority order against the lower-cased
question with plain substring semantics ("art" matches "start"). The first
category whose pattern matches wins; no match falls back to "general".

Pure and total: never raises, same input always yields the same category.
"""
from __future__ import annotations

import enum
import re


class Category(str, enum.Enum):
    science = "science"
    math = "math"
    reading = "reading"
    history = "history"
    geography = "geography"
    art = "art"
    music = "music"
    sports = "sports"
    general = "general"


# Priority order matters: "earth" is both science and geography, "country"
# both history and geography. Earlier entries win.
_KEYWORDS: list[tuple[Category, str]] = [
    (Category.science,
     r"science|scientist|experiment|chemistry|chemical|physics|biology|nature|"
     r"animal|plant|space|planet|star|solar|universe|atom|molecule|element|"
     r"energy|force|gravity|magnet|light|sound|weather|climate|earth|"
     r"environment|ecosystem"),
    (Category.math,
     r"math|mathematics|number|add|subtract|multiply|divide|equation|geometry|"
     r"algebra|calculation|count|shape|triangle|circle|square|rectangle|"
     r"fraction|decimal|percent|statistics|probability|graph|chart|"
     r"measurement|unit|meter|gram|liter|time|clock|hour|minute|second|money|"
     r"dollar|cent|\d+\s*[-+*/x×÷]\s*\d+"),
    (Category.reading,
     r"read|book|story|tale|fairy|fable|author|character|word|sentence|"
     r"paragraph|chapter|novel|poem|poetry|write|writing|alphabet|letter|"
     r"vowel|consonant|spelling|grammar|punctuation|dictionary|library"),
    (Category.history,
     r"history|historical|past|ancient|old|civilization|country|nation|war|"
     r"battle|king|queen|emperor|president|leader|government|artifact|museum|"
     r"archaeology|timeline|date|century|decade|year"),
    (Category.geography,
     r"geography|map|world|country|city|state|province|continent|ocean|sea|"
     r"river|lake|mountain|valley|desert|forest|jungle|island|location|"
     r"direction|north|south|east|west|travel|explore|earth|planet"),
    (Category.art,
     r"art|draw|paint|color|artist|picture|sculpture|design|create"),
    (Category.music,
     r"music|song|sing|instrument|note|rhythm|melody|piano|guitar|drum|musician"),
    (Category.sports,
     r"sport|game|play|ball|team|win|athlete|exercise|run|jump|swim|race"),
]

_COMPILED: list[tuple[Category, re.Pattern[str]]] = [
    (category, re.compile(pattern)) for category, pattern in _KEYWORDS
]


def classify(question: str) -> Category:
    """Return the first category whose keywords occur in `question`."""
    lowered = question.lower()
    for category, pattern in _COMPILED:
        if pattern.search(lowered):
            return category
    return Category.general


def distinct_categories(questions: list[str]) -> set[Category]:
    return {classify(q) for q in questions}
