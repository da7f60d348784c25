"""
Free-text keyword parsing for listing search.

A keyword such as "2 bedroom duplex in lekki" carries structure: a bedroom
count and an apartment type. parse_search_terms pulls out at most one of
each (first matching pattern wins), removes the matched tokens, and hands
back whatever is left as free text for substring matching.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_BED_UNIT = r"(?:bedrooms?|beds?|br)"

# Order matters: the first pattern that matches anywhere in the text wins.
BEDROOM_PATTERNS: list[re.Pattern[str]] = [
    re.compile(rf"\b(\d{{1,3}})\s*-?\s*{_BED_UNIT}\b", re.IGNORECASE),
    re.compile(rf"\b({'|'.join(NUMBER_WORDS)})\s*-?\s*{_BED_UNIT}\b", re.IGNORECASE),
    re.compile(r"\b(studio)s?\b", re.IGNORECASE),
]

# (canonical type, pattern); specific forms precede generic ones ("mini flat" before "flat")
APARTMENT_TYPE_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("mini-flat", re.compile(r"\bmini[\s-]?flats?\b", re.IGNORECASE)),
    ("self-contained", re.compile(r"\bself[\s-]?contain(?:ed)?\b", re.IGNORECASE)),
    ("studio", re.compile(r"\bstudios?\b", re.IGNORECASE)),
    ("duplex", re.compile(r"\bduplex(?:es)?\b", re.IGNORECASE)),
    ("penthouse", re.compile(r"\bpenthouses?\b", re.IGNORECASE)),
    ("bungalow", re.compile(r"\bbungalows?\b", re.IGNORECASE)),
    ("flat", re.compile(r"\bflats?\b", re.IGNORECASE)),
    ("apartment", re.compile(r"\bapartments?\b", re.IGNORECASE)),
]

MIN_WORD_LENGTH = 3

_WS = re.compile(r"\s+")
_EDGE_PUNCT = " ,.;:-/"


@dataclass(frozen=True)
class ParsedTerms:
    bedrooms: int | None = None
    apartment_type: str | None = None
    # remaining free text, whitespace-normalized ("" when nothing is left)
    text: str = ""
    # individual words of a multi-word remainder, each longer than two characters
    words: list[str] = field(default_factory=list)


def _cut(text: str, match: re.Match[str]) -> str:
    return f"{text[: match.start()]} {text[match.end():]}"


def _bedrooms_from(match: re.Match[str]) -> int:
    token = match.group(1).lower()
    if token == "studio":
        return 0
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS[token]


def _normalize(text: str) -> str:
    return _WS.sub(" ", text).strip(_EDGE_PUNCT)


def parse_search_terms(raw: str) -> ParsedTerms:
    text = raw or ""
    bedrooms: int | None = None
    apartment_type: str | None = None
    studio_hit = False

    for pattern in BEDROOM_PATTERNS:
        match = pattern.search(text)
        if match:
            bedrooms = _bedrooms_from(match)
            studio_hit = match.group(1).lower() == "studio"
            text = _cut(text, match)
            break

    for canonical, pattern in APARTMENT_TYPE_PATTERNS:
        match = pattern.search(text)
        if match:
            apartment_type = canonical
            text = _cut(text, match)
            break

    # "studio" is both a bedroom count and a type; the bedroom pass consumed the token
    if studio_hit and apartment_type is None:
        apartment_type = "studio"

    remainder = _normalize(text)
    words: list[str] = []
    if " " in remainder:
        for word in remainder.split(" "):
            word = word.strip(_EDGE_PUNCT)
            if len(word) >= MIN_WORD_LENGTH and word not in words:
                words.append(word)

    return ParsedTerms(bedrooms=bedrooms, apartment_type=apartment_type, text=remainder, words=words)
