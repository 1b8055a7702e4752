"""Dictionary API routes.

Thin proxy in front of the remote dictionary service. Lookup failures are
reported with HTTP status codes; suggestions never fail visibly.

Endpoints:
- GET /api/dictionary/search?word=: Look up a word (optional `lang` for the language-pair variant)
- GET /api/dictionary/suggest?q=: Related-word suggestions (max 10)
- GET /api/dictionary/grouped?word=: Lookup result grouped by language and part of speech
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_dictionary_port
from api.models import (
    ErrorResponse,
    GroupedData,
    GroupedEntryModel,
    GroupedResponse,
    LookupData,
    LookupResponse,
    MeaningModel,
    ResultEntryModel,
    SuggestData,
    SuggestResponse,
)
from domain.model.errors import ValidationError
from domain.model.lookup import Failed, FailureReason, Found, LookupOutcome, RawResultEntry
from domain.model.query import clean_query
from port.dictionary import SUGGESTION_LIMIT, DictionaryPort
from services.normalizer import flatten_meanings, normalize_outcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dictionary", tags=["dictionary"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Word is required"},
    408: {"model": ErrorResponse, "description": "Request timeout"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _failure_response(outcome: Failed) -> JSONResponse:
    if outcome.reason is FailureReason.TIMEOUT:
        return _error(status.HTTP_408_REQUEST_TIMEOUT, "Request timeout")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def _lookup(
    dictionary: DictionaryPort, word: str, lang: Optional[str] = None,
) -> LookupOutcome | JSONResponse:
    """Run a lookup, mapping bad input and unexpected errors to responses."""
    try:
        return await dictionary.lookup(word, lang=lang)
    except ValidationError:
        return _error(status.HTTP_400_BAD_REQUEST, "Word is required")
    except Exception as e:
        logger.error(
            "Error fetching dictionary",
            extra={"word": word, "error": str(e)},
            exc_info=True,
        )
        return _failure_response(Failed(FailureReason.SERVER_ERROR))


def _entry_model(entry: RawResultEntry) -> ResultEntryModel:
    data = entry.to_dict()
    data["meanings"] = [m.to_dict() for m in flatten_meanings(entry.meanings)]
    return ResultEntryModel(**data)


@router.get(
    "/search",
    response_model=LookupResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def search_word(
    word: Optional[str] = None,
    lang: Optional[str] = None,
    dictionary: DictionaryPort = Depends(get_dictionary_port),
):
    """Look up a word.

    Returns {"data": {"exists": false}} when the word has no entry; that
    is a normal 200 answer, not an error.
    """
    word = clean_query(word)
    if not word:
        return _error(status.HTTP_400_BAD_REQUEST, "Word is required")

    outcome = await _lookup(dictionary, word, lang)
    if isinstance(outcome, JSONResponse):
        return outcome
    if isinstance(outcome, Failed):
        return _failure_response(outcome)
    if not isinstance(outcome, Found):
        logger.info("Word not found", extra={"word": word})
        return LookupResponse(data=LookupData(exists=False))

    logger.info("Word found", extra={"word": word, "entry_count": len(outcome.entries)})
    return LookupResponse(data=LookupData(
        exists=True,
        word=outcome.word,
        results=[_entry_model(e) for e in outcome.entries],
    ))


@router.get(
    "/grouped",
    response_model=GroupedResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def grouped_word(
    word: Optional[str] = None,
    lang: Optional[str] = None,
    dictionary: DictionaryPort = Depends(get_dictionary_port),
):
    """Look up a word and return its entries grouped for display."""
    word = clean_query(word)
    if not word:
        return _error(status.HTTP_400_BAD_REQUEST, "Word is required")

    outcome = await _lookup(dictionary, word, lang)
    if isinstance(outcome, JSONResponse):
        return outcome
    if isinstance(outcome, Failed):
        return _failure_response(outcome)
    if not isinstance(outcome, Found):
        return GroupedResponse(data=GroupedData(exists=False))

    entries = [GroupedEntryModel(**g.to_dict()) for g in normalize_outcome(outcome)]
    return GroupedResponse(data=GroupedData(exists=True, word=outcome.word, entries=entries))


@router.get("/suggest", response_model=SuggestResponse, responses={400: _ERROR_RESPONSES[400]})
async def suggest_words(
    q: Optional[str] = None,
    dictionary: DictionaryPort = Depends(get_dictionary_port),
):
    """Suggest related words for a prefix. Failures yield an empty list."""
    q = clean_query(q)
    if not q:
        return _error(status.HTTP_400_BAD_REQUEST, "Word is required")

    try:
        suggestions = await dictionary.suggest(q, SUGGESTION_LIMIT)
    except Exception as e:
        logger.warning("Suggestion lookup failed", extra={"query": q, "error": str(e)})
        suggestions = []

    return SuggestResponse(data=SuggestData(suggestions=suggestions[:SUGGESTION_LIMIT]))
