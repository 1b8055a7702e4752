"""Lookup domain models.

Raw* value objects mirror the remote dictionary payload, parsed once at the
gateway boundary. LookupOutcome is the tagged union every lookup resolves to.
GroupedEntry is the renderable shape produced by the normalizer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


@dataclass(frozen=True)
class RawMeaning:
    """A single definition of a word."""
    definition: str
    pos: str | None = None
    example: str | None = None
    sub_pos: str | None = None
    definition_lang: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawMeaning":
        return cls(
            definition=str(data.get("definition") or ""),
            pos=_opt_str(data.get("pos")),
            example=_opt_str(data.get("example")),
            sub_pos=_opt_str(data.get("sub_pos")),
            definition_lang=_opt_str(data.get("definition_lang")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"definition": self.definition}
        for key in ("pos", "example", "sub_pos", "definition_lang"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class RawPronunciation:
    """IPA transcription, optionally tagged with a region (e.g. "Hà-Nội", "UK")."""
    ipa: str
    region: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawPronunciation":
        return cls(ipa=str(data.get("ipa") or ""), region=_opt_str(data.get("region")))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ipa": self.ipa}
        if self.region is not None:
            data["region"] = self.region
        return data


@dataclass(frozen=True)
class RawTranslation:
    lang_code: str
    lang_name: str
    translation: str
    definition_lang: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawTranslation":
        return cls(
            lang_code=str(data.get("lang_code") or ""),
            lang_name=str(data.get("lang_name") or ""),
            translation=str(data.get("translation") or ""),
            definition_lang=_opt_str(data.get("definition_lang")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "lang_code": self.lang_code,
            "lang_name": self.lang_name,
            "translation": self.translation,
        }
        if self.definition_lang is not None:
            data["definition_lang"] = self.definition_lang
        return data


@dataclass(frozen=True)
class RawRelation:
    related_word: str
    relation_type: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawRelation":
        return cls(
            related_word=str(data.get("related_word") or ""),
            relation_type=str(data.get("relation_type") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"related_word": self.related_word, "relation_type": self.relation_type}


@dataclass(frozen=True)
class RawResultEntry:
    """One matched language variant of a word.

    `meanings` is kept as received: usually a tuple of RawMeaning, but the
    remote service may also send them pre-grouped (mapping of label to list).
    The normalizer flattens either shape.
    """
    lang_code: str
    lang_name: str
    meanings: Any = ()
    audio: str | None = None
    pronunciations: tuple[RawPronunciation, ...] = ()
    translations: tuple[RawTranslation, ...] = ()
    relations: tuple[RawRelation, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawResultEntry":
        return cls(
            lang_code=str(data.get("lang_code") or ""),
            lang_name=str(data.get("lang_name") or ""),
            meanings=_parse_meanings(data.get("meanings")),
            audio=_opt_str(data.get("audio")),
            pronunciations=tuple(
                RawPronunciation.from_dict(p) for p in data.get("pronunciations") or ()
                if isinstance(p, dict)
            ),
            translations=tuple(
                RawTranslation.from_dict(t) for t in data.get("translations") or ()
                if isinstance(t, dict)
            ),
            relations=tuple(
                RawRelation.from_dict(r) for r in data.get("relations") or ()
                if isinstance(r, dict)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "lang_code": self.lang_code,
            "lang_name": self.lang_name,
            "audio": self.audio,
            "meanings": _dump_meanings(self.meanings),
            "pronunciations": [p.to_dict() for p in self.pronunciations],
            "translations": [t.to_dict() for t in self.translations],
            "relations": [r.to_dict() for r in self.relations],
        }


def _parse_meanings(raw: Any) -> Any:
    """Parse list or (nested) mapping of meaning dicts, keeping the shape."""
    if isinstance(raw, dict):
        return {str(label): _parse_meanings(inner) for label, inner in raw.items()}
    if isinstance(raw, (list, tuple)):
        return tuple(
            m if isinstance(m, RawMeaning) else RawMeaning.from_dict(m)
            for m in raw
            if isinstance(m, (dict, RawMeaning))
        )
    return ()


def _dump_meanings(meanings: Any) -> Any:
    if isinstance(meanings, dict):
        return {label: _dump_meanings(inner) for label, inner in meanings.items()}
    return [m.to_dict() for m in meanings]


# ── Outcomes ─────────────────────────────────────────────────


class FailureReason(Enum):
    """Why a remote call failed."""
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"

    @property
    def status_code(self) -> int:
        """HTTP status reported to callers of the proxy service."""
        return 408 if self is FailureReason.TIMEOUT else 500


@dataclass(frozen=True)
class NotFound:
    """A well-formed "no such word" answer. Not an error."""


@dataclass(frozen=True)
class Found:
    word: str
    entries: tuple[RawResultEntry, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "exists": True,
            "word": self.word,
            "results": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class Failed:
    reason: FailureReason

    @property
    def status_code(self) -> int:
        return self.reason.status_code


LookupOutcome = NotFound | Found | Failed


# ── Normalized shape ─────────────────────────────────────────


@dataclass(frozen=True)
class GroupedEntry:
    """Renderable view of one RawResultEntry.

    meanings_by_language: language label -> pos label -> meanings, in order of
    first occurrence in the source.
    """
    entry: RawResultEntry
    meanings_by_language: dict[str, dict[str, list[RawMeaning]]] = field(default_factory=dict)
    primary_pronunciation: RawPronunciation | None = None
    secondary_pronunciations: tuple[RawPronunciation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "lang_code": self.entry.lang_code,
            "lang_name": self.entry.lang_name,
            "audio": self.entry.audio,
            "meanings_by_language": {
                lang: {pos: [m.to_dict() for m in items] for pos, items in by_pos.items()}
                for lang, by_pos in self.meanings_by_language.items()
            },
            "primary_pronunciation": (
                self.primary_pronunciation.to_dict() if self.primary_pronunciation else None
            ),
            "secondary_pronunciations": [p.to_dict() for p in self.secondary_pronunciations],
            "translations": [t.to_dict() for t in self.entry.translations],
            "relations": [r.to_dict() for r in self.entry.relations],
        }
