"""Response normalizer: reshapes lookup entries into renderable groups.

Pure functions, no I/O. Meanings are grouped by definition language, then
by part of speech, both in order of first occurrence (the service already
orders meanings by relevance, so no sorting is applied). One pronunciation
is promoted to primary; the rest stay secondary in source order.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from domain.model.lookup import (
    Found,
    GroupedEntry,
    LookupOutcome,
    RawMeaning,
    RawPronunciation,
    RawResultEntry,
)

OTHER_LABEL = "Khác"

LANGUAGE_LABELS = {
    "vi": "Tiếng Việt",
    "en": "Tiếng Anh",
}

# Region markers, highest priority first.
PRIMARY_REGIONS = ("Hà-Nội", "UK")


def language_label(code: str | None) -> str:
    """Display label for a definition language code."""
    if not code:
        return OTHER_LABEL
    return LANGUAGE_LABELS.get(code, code)


def pos_label(pos: str | None) -> str:
    return pos or OTHER_LABEL


def flatten_meanings(meanings: Any) -> list[RawMeaning]:
    """Flatten a meaning list or an already-grouped mapping into a list.

    Grouped input may be one level (label -> list) or two levels
    (language -> pos -> list). Order is kept.
    """
    if meanings is None:
        return []
    if isinstance(meanings, RawMeaning):
        return [meanings]
    if isinstance(meanings, Mapping):
        flat: list[RawMeaning] = []
        for inner in meanings.values():
            flat.extend(flatten_meanings(inner))
        return flat
    if isinstance(meanings, Iterable) and not isinstance(meanings, (str, bytes)):
        flat = []
        for item in meanings:
            if isinstance(item, RawMeaning):
                flat.append(item)
            elif isinstance(item, Mapping):
                flat.append(RawMeaning.from_dict(dict(item)))
        return flat
    return []


def group_meanings(meanings: Iterable[RawMeaning]) -> dict[str, dict[str, list[RawMeaning]]]:
    """Group meanings by language label, then by pos label."""
    grouped: dict[str, dict[str, list[RawMeaning]]] = {}
    for meaning in meanings:
        by_pos = grouped.setdefault(language_label(meaning.definition_lang), {})
        by_pos.setdefault(pos_label(meaning.pos), []).append(meaning)
    return grouped


def select_primary_pronunciation(
    pronunciations: Iterable[RawPronunciation],
) -> tuple[RawPronunciation | None, tuple[RawPronunciation, ...]]:
    """Pick the primary pronunciation.

    The first entry whose region mentions "Hà-Nội" wins, then the first
    mentioning "UK", otherwise the first entry. The primary is removed from
    the secondaries by identity, so an entry with the same IPA but another
    region is kept.

    Returns:
        Tuple of (primary or None, secondaries in source order).
    """
    candidates = list(pronunciations)
    if not candidates:
        return None, ()

    primary = candidates[0]
    for marker in PRIMARY_REGIONS:
        match = next((p for p in candidates if p.region and marker in p.region), None)
        if match is not None:
            primary = match
            break

    secondaries = tuple(p for p in candidates if p is not primary)
    return primary, secondaries


def normalize(entry: RawResultEntry | GroupedEntry) -> GroupedEntry:
    """Build the GroupedEntry for one result entry.

    Accepts a previous GroupedEntry too; it is re-flattened and regrouped,
    so normalize(normalize(x)) == normalize(x).
    """
    if isinstance(entry, GroupedEntry):
        source = entry.entry
        meanings = flatten_meanings(entry.meanings_by_language)
    else:
        source = entry
        meanings = flatten_meanings(entry.meanings)

    primary, secondaries = select_primary_pronunciation(source.pronunciations)
    return GroupedEntry(
        entry=source,
        meanings_by_language=group_meanings(meanings),
        primary_pronunciation=primary,
        secondary_pronunciations=secondaries,
    )


def normalize_outcome(outcome: LookupOutcome | None) -> list[GroupedEntry]:
    """One GroupedEntry per entry of a Found outcome; [] otherwise."""
    if not isinstance(outcome, Found):
        return []
    return [normalize(entry) for entry in outcome.entries]
