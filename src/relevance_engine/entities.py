"""Pattern-based entity extraction.

Two extractors live here. :func:`extract_simple_entities` scans raw text for
proper-noun phrases, calendar dates, percentages and money amounts.
:func:`extract_named_entities` sorts capitalised phrases into people,
organisations and places with suffix and gazetteer heuristics and attaches
the text's top TF-IDF terms as topics. Neither uses a trained NER model.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Final, Iterable, List

from .text import tokenize
from .topics import rank_topics

_PROPER_NOUN_RE = re.compile(r"\b[A-Z][a-z]+ (?:[A-Z][a-z]+ )*[A-Z][a-z]+\b", re.ASCII)
_DATE_RE = re.compile(
    r"\b(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?"
    r"|Aug(?:ust)?|Sep(?:tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
    r"\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}\b"
    r"|\b\d{1,2}/\d{1,2}/\d{2,4}\b",
    re.ASCII | re.IGNORECASE,
)
_STATS_RE = re.compile(r"\b\d+(?:\.\d+)?%|\b\d+(?:\.\d+)? percent\b", re.ASCII | re.IGNORECASE)
_MONEY_RE = re.compile(
    r"\$\d+(?:,\d{3})*(?:\.\d{2})?|\b\d+(?:,\d{3})*(?:\.\d{2})? dollars\b",
    re.ASCII | re.IGNORECASE,
)

_CAPITALISED_PHRASE_RE = re.compile(r"\b[A-Z][a-z]+(?: [A-Z][a-z]+)*\b", re.ASCII)
_ACRONYM_RE = re.compile(r"\b[A-Z]{2,6}\b", re.ASCII)
_HONORIFIC_RE = re.compile(
    r"\b(?:Mr|Mrs|Ms|Dr|Prof)\.? ([A-Z][a-z]+(?: [A-Z][a-z]+){0,2})\b", re.ASCII
)
_LOCATIVE_RE = re.compile(
    r"\b(?:in|near|across|throughout) (?:the )?([A-Z][a-z]+(?: [A-Z][a-z]+){0,2})\b", re.ASCII
)

TOPIC_LIMIT: Final[int] = 10

_LEADING_WORDS: Final[frozenset[str]] = frozenset(
    {
        "The", "A", "An", "This", "That", "These", "Those", "Our", "Their", "We", "Also",
        "Both", "In", "At", "On", "For", "From", "With", "After", "Before", "During", "By",
        "To", "Of", "If", "When", "While", "Then", "Since", "Need", "Mr", "Mrs", "Ms",
        "Dr", "Prof",
    }
)
_ORGANIZATION_SUFFIXES: Final[frozenset[str]] = frozenset(
    {
        "Inc", "Corp", "Corporation", "Company", "Co", "Llc", "Ltd", "Group", "Bank",
        "University", "Institute", "Foundation", "Agency", "Association", "Partners",
        "Labs", "Technologies", "Systems", "Holdings", "Council", "Committee",
    }
)
_KNOWN_ORGANIZATIONS: Final[frozenset[str]] = frozenset(
    {
        "Microsoft", "Google", "Amazon", "Apple", "Meta", "Netflix", "Oracle", "Salesforce",
        "Intel", "Nvidia", "Adobe", "Tesla", "Uber", "Airbnb", "Spotify", "Twitter", "Redis",
    }
)
_PLACE_SUFFIXES: Final[frozenset[str]] = frozenset(
    {"City", "County", "State", "Street", "Avenue", "Valley", "River", "Island", "Bay", "Park"}
)
_KNOWN_PLACES: Final[frozenset[str]] = frozenset(
    {
        "America", "Europe", "Asia", "Africa", "Australia", "Canada", "Mexico", "Brazil",
        "China", "Japan", "India", "Germany", "France", "Spain", "Italy", "Ireland",
        "London", "Paris", "Berlin", "Tokyo", "Seattle", "Boston", "Chicago", "Texas",
        "California", "New York", "San Francisco", "Los Angeles", "United States",
        "United Kingdom", "Silicon Valley",
    }
)
_CALENDAR_WORDS: Final[frozenset[str]] = frozenset(
    {
        "January", "February", "March", "April", "May", "June", "July", "August",
        "September", "October", "November", "December", "Monday", "Tuesday",
        "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
    }
)


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def extract_simple_entities(text: str) -> List[str]:
    """Return proper nouns, dates, statistics and money amounts found in ``text``.

    Categories are concatenated in that order; exact duplicates are dropped
    keeping the first occurrence. Case is preserved.
    """

    if not text:
        return []
    proper_nouns = _PROPER_NOUN_RE.findall(text)
    dates = _DATE_RE.findall(text)
    stats = _STATS_RE.findall(text)
    money = _MONEY_RE.findall(text)
    return _unique([*proper_nouns, *dates, *stats, *money])


@dataclass(slots=True)
class EntityProfile:
    """Entities of one text grouped by category."""

    people: List[str] = field(default_factory=list)
    places: List[str] = field(default_factory=list)
    organizations: List[str] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)

    def all_terms(self) -> List[str]:
        return [*self.people, *self.places, *self.organizations, *self.topics]

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "people": list(self.people),
            "places": list(self.places),
            "organizations": list(self.organizations),
            "topics": list(self.topics),
        }


def _strip_leading_words(phrase: str) -> str:
    words = phrase.split(" ")
    while words and words[0] in _LEADING_WORDS:
        words.pop(0)
    return " ".join(words)


def _is_place(phrase: str) -> bool:
    return phrase in _KNOWN_PLACES or phrase.rsplit(" ", 1)[-1] in _PLACE_SUFFIXES


def _is_organization(phrase: str) -> bool:
    return phrase in _KNOWN_ORGANIZATIONS or phrase.rsplit(" ", 1)[-1] in _ORGANIZATION_SUFFIXES


def _looks_like_person(phrase: str) -> bool:
    words = phrase.split(" ")
    if not 2 <= len(words) <= 3:
        return False
    return not any(word in _CALENDAR_WORDS for word in words)


def extract_named_entities(text: str) -> EntityProfile:
    """Classify capitalised phrases of ``text`` into people, places and organisations."""

    profile = EntityProfile()
    if not text:
        return profile

    # (position, category, value) so each category keeps text order.
    found: list[tuple[int, str, str]] = []

    for match in _LOCATIVE_RE.finditer(text):
        phrase = match.group(1)
        if not _is_organization(phrase):
            found.append((match.start(1), "places", phrase))
    locative_spans = {position for position, _category, _value in found}

    for match in _HONORIFIC_RE.finditer(text):
        found.append((match.start(1), "people", match.group(1)))
    honorific_spans = {position for position, category, _value in found if category == "people"}

    for match in _CAPITALISED_PHRASE_RE.finditer(text):
        phrase = _strip_leading_words(match.group())
        if not phrase:
            continue
        start = match.start() + (len(match.group()) - len(phrase))
        if start in locative_spans or start in honorific_spans:
            continue
        if _is_organization(phrase):
            found.append((start, "organizations", phrase))
        elif _is_place(phrase):
            found.append((start, "places", phrase))
        elif _looks_like_person(phrase):
            found.append((start, "people", phrase))

    for match in _ACRONYM_RE.finditer(text):
        found.append((match.start(), "organizations", match.group()))

    found.sort(key=lambda item: item[0])
    buckets: dict[str, list[str]] = {"people": [], "places": [], "organizations": []}
    for _position, category, value in found:
        buckets[category].append(value)

    profile.people = _unique(buckets["people"])
    profile.places = _unique(buckets["places"])
    profile.organizations = _unique(buckets["organizations"])
    (topics,) = rank_topics([tokenize(text)], limit=TOPIC_LIMIT)
    profile.topics = [item.term for item in topics]
    return profile
