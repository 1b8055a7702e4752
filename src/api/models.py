"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, Field


class MeaningModel(BaseModel):
    """A single definition of a word."""
    definition: str
    pos: Optional[str] = Field(None, description="Part of speech, e.g. 'Danh từ'")
    example: Optional[str] = None
    sub_pos: Optional[str] = Field(None, description="Finer part-of-speech class")
    definition_lang: Optional[str] = Field(None, description="Language code of the definition text")


class PronunciationModel(BaseModel):
    ipa: str
    region: Optional[str] = Field(None, description="Region label, e.g. 'Hà-Nội', 'UK'")


class TranslationModel(BaseModel):
    lang_code: str
    lang_name: str
    translation: str
    definition_lang: Optional[str] = None


class RelationModel(BaseModel):
    related_word: str
    relation_type: str


class ResultEntryModel(BaseModel):
    """One language variant of the looked-up word."""
    lang_code: str
    lang_name: str
    audio: Optional[str] = Field(None, description="Absolute audio URL")
    meanings: list[MeaningModel] = Field(default_factory=list)
    pronunciations: list[PronunciationModel] = Field(default_factory=list)
    translations: list[TranslationModel] = Field(default_factory=list)
    relations: list[RelationModel] = Field(default_factory=list)


class LookupData(BaseModel):
    exists: bool
    word: Optional[str] = None
    results: Optional[list[ResultEntryModel]] = None


class LookupResponse(BaseModel):
    """Response model for word lookup ({"data": {...}})."""
    data: LookupData


class GroupedEntryModel(BaseModel):
    """Result entry with meanings grouped by language, then part of speech."""
    lang_code: str
    lang_name: str
    audio: Optional[str] = None
    meanings_by_language: dict[str, dict[str, list[MeaningModel]]] = Field(default_factory=dict)
    primary_pronunciation: Optional[PronunciationModel] = None
    secondary_pronunciations: list[PronunciationModel] = Field(default_factory=list)
    translations: list[TranslationModel] = Field(default_factory=list)
    relations: list[RelationModel] = Field(default_factory=list)


class GroupedData(BaseModel):
    exists: bool
    word: Optional[str] = None
    entries: list[GroupedEntryModel] = Field(default_factory=list)


class GroupedResponse(BaseModel):
    data: GroupedData


class SuggestData(BaseModel):
    suggestions: list[str] = Field(default_factory=list, max_length=10)


class SuggestResponse(BaseModel):
    data: SuggestData


class ErrorResponse(BaseModel):
    error: str
