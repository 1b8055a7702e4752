"""Tests for the remote dictionary adapter and its payload parsing.

HTTP is faked with httpx.MockTransport; no network access.
"""

import asyncio
import unittest

import httpx

from adapter.external.remote_dictionary import (
    LOOKUP_PATH,
    SUGGEST_PATH,
    RemoteDictionaryAdapter,
    absolutize_audio,
    parse_lookup_payload,
    parse_suggestions,
)
from domain.model.errors import ValidationError
from domain.model.lookup import Failed, FailureReason, Found, NotFound, RawMeaning

ORIGIN = "https://dict.example.com"

HOC_SINH_PAYLOAD = {
    "exists": True,
    "word": "học sinh",
    "meanings": [
        {
            "definition": "người học ở bậc phổ thông",
            "example": "học sinh tiểu học ~ thời học sinh",
            "pos": "Danh từ",
            "sub_pos": "Danh từ chỉ vật, hiện tượng",
        }
    ],
}

TAU_PAYLOAD = {
    "exists": True,
    "word": "tau",
    "results": [
        {
            "lang_code": code,
            "lang_name": name,
            "audio": f"/api/dictionary/audio/tau-{code}.mp3",
            "meanings": [{"definition": f"tau ({code})", "pos": "Danh từ", "definition_lang": "vi"}],
            "pronunciations": [{"ipa": "taw˧˧", "region": "Hà-Nội"}],
            "translations": [{"lang_code": "en", "lang_name": "Tiếng Anh", "translation": "ship"}],
            "relations": [{"related_word": "tàu", "relation_type": "synonym"}],
        }
        for code, name in [
            ("vi", "Tiếng Việt"), ("en", "Tiếng Anh"), ("fr", "Tiếng Pháp"),
            ("zh", "Tiếng Trung"), ("ja", "Tiếng Nhật"),
        ]
    ],
}


def _adapter(handler, timeout: float = 5.0) -> RemoteDictionaryAdapter:
    return RemoteDictionaryAdapter(
        base_url=ORIGIN,
        timeout=timeout,
        transport=httpx.MockTransport(handler),
    )


class TestParseLookupPayload(unittest.TestCase):
    """Test payload shape handling."""

    def test_legacy_flat_shape_becomes_single_entry(self):
        outcome = parse_lookup_payload(HOC_SINH_PAYLOAD, ORIGIN)

        self.assertIsInstance(outcome, Found)
        self.assertEqual(outcome.word, "học sinh")
        self.assertEqual(len(outcome.entries), 1)
        entry = outcome.entries[0]
        self.assertEqual(entry.lang_code, "vi")
        self.assertEqual(entry.meanings[0], RawMeaning(
            definition="người học ở bậc phổ thông",
            example="học sinh tiểu học ~ thời học sinh",
            pos="Danh từ",
            sub_pos="Danh từ chỉ vật, hiện tượng",
        ))
        self.assertIsNone(entry.meanings[0].definition_lang)

    def test_results_shape(self):
        outcome = parse_lookup_payload(TAU_PAYLOAD, ORIGIN)

        self.assertEqual(len(outcome.entries), 5)
        first = outcome.entries[0]
        self.assertEqual(first.pronunciations[0].region, "Hà-Nội")
        self.assertEqual(first.translations[0].translation, "ship")
        self.assertEqual(first.relations[0].related_word, "tàu")

    def test_relative_audio_made_absolute(self):
        outcome = parse_lookup_payload(TAU_PAYLOAD, ORIGIN)
        self.assertEqual(
            outcome.entries[0].audio,
            f"{ORIGIN}/api/dictionary/audio/tau-vi.mp3",
        )

    def test_exists_false(self):
        self.assertIsInstance(parse_lookup_payload({"exists": False}, ORIGIN), NotFound)

    def test_no_entries_is_not_found(self):
        self.assertIsInstance(parse_lookup_payload({"exists": True, "results": []}, ORIGIN), NotFound)
        self.assertIsInstance(parse_lookup_payload({}, ORIGIN), NotFound)

    def test_legacy_shape_with_empty_meanings_is_found(self):
        outcome = parse_lookup_payload({"exists": True, "word": "xa", "meanings": []}, ORIGIN)

        self.assertIsInstance(outcome, Found)
        self.assertEqual(outcome.word, "xa")
        self.assertEqual(len(outcome.entries), 1)
        self.assertEqual(outcome.entries[0].meanings, ())

    def test_missing_word_falls_back_to_request(self):
        payload = {"exists": True, "meanings": [{"definition": "x"}]}
        self.assertEqual(parse_lookup_payload(payload, ORIGIN, requested_word="nhà").word, "nhà")


class TestAbsolutizeAudio(unittest.TestCase):

    def test_absolute_unchanged(self):
        url = "https://cdn.example.com/a.mp3"
        self.assertEqual(absolutize_audio(url, ORIGIN), url)

    def test_root_relative(self):
        self.assertEqual(absolutize_audio("/audio/a.mp3", ORIGIN), f"{ORIGIN}/audio/a.mp3")

    def test_path_relative(self):
        self.assertEqual(absolutize_audio("audio/a.mp3", ORIGIN), f"{ORIGIN}/audio/a.mp3")

    def test_empty(self):
        self.assertIsNone(absolutize_audio("", ORIGIN))
        self.assertIsNone(absolutize_audio(None, ORIGIN))


class TestParseSuggestions(unittest.TestCase):

    def test_wrapped(self):
        self.assertEqual(parse_suggestions({"suggestions": ["học", "học bạ"]}), ["học", "học bạ"])

    def test_bare_list_capped(self):
        self.assertEqual(len(parse_suggestions([str(i) for i in range(15)])), 10)

    def test_garbage(self):
        self.assertEqual(parse_suggestions({"suggestions": [1, None, "a"]}), ["a"])
        self.assertEqual(parse_suggestions("nope"), [])


class TestLookup(unittest.IsolatedAsyncioTestCase):
    """Test RemoteDictionaryAdapter.lookup() against a mock transport."""

    async def test_success_sends_word_and_parses(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=HOC_SINH_PAYLOAD)

        outcome = await _adapter(handler).lookup("  học sinh ")

        self.assertIsInstance(outcome, Found)
        self.assertEqual(seen[0].url.path, LOOKUP_PATH)
        self.assertEqual(seen[0].url.params["word"], "học sinh")
        self.assertNotIn("lang", seen[0].url.params)

    async def test_language_pair_variant(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"exists": False})

        await _adapter(handler).lookup("tau", lang="en")
        self.assertEqual(seen[0].url.params["lang"], "en")

    async def test_not_found(self):
        outcome = await _adapter(lambda r: httpx.Response(200, json={"exists": False})).lookup("xyz")
        self.assertIsInstance(outcome, NotFound)

    async def test_server_error(self):
        outcome = await _adapter(lambda r: httpx.Response(502, text="bad gateway")).lookup("a")
        self.assertEqual(outcome, Failed(FailureReason.SERVER_ERROR))
        self.assertEqual(outcome.status_code, 500)

    async def test_invalid_json_is_server_error(self):
        outcome = await _adapter(lambda r: httpx.Response(200, text="<html>")).lookup("a")
        self.assertEqual(outcome, Failed(FailureReason.SERVER_ERROR))

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        outcome = await _adapter(handler).lookup("a")
        self.assertEqual(outcome, Failed(FailureReason.NETWORK_ERROR))

    async def test_transport_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        outcome = await _adapter(handler).lookup("a")
        self.assertEqual(outcome, Failed(FailureReason.TIMEOUT))
        self.assertEqual(outcome.status_code, 408)

    async def test_deadline_cancels_request(self):
        cancelled = asyncio.Event()

        async def handler(request):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return httpx.Response(200, json=HOC_SINH_PAYLOAD)

        outcome = await _adapter(handler, timeout=0.05).lookup("a")

        self.assertEqual(outcome, Failed(FailureReason.TIMEOUT))
        self.assertTrue(cancelled.is_set())

    async def test_blank_word_rejected_before_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        with self.assertRaises(ValidationError):
            await _adapter(handler).lookup("   ")
        self.assertEqual(calls, [])


class TestSuggest(unittest.IsolatedAsyncioTestCase):
    """Test RemoteDictionaryAdapter.suggest() soft-fail behaviour."""

    async def test_requests_limit(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"suggestions": ["học", "học bạ"]})

        result = await _adapter(handler).suggest("học")

        self.assertEqual(result, ["học", "học bạ"])
        self.assertEqual(seen[0].url.path, SUGGEST_PATH)
        self.assertEqual(seen[0].url.params["q"], "học")
        self.assertEqual(seen[0].url.params["limit"], "10")

    async def test_http_error_empty(self):
        self.assertEqual(await _adapter(lambda r: httpx.Response(500)).suggest("a"), [])

    async def test_network_error_empty(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        self.assertEqual(await _adapter(handler).suggest("a"), [])

    async def test_timeout_empty(self):
        async def handler(request):
            await asyncio.sleep(10)
            return httpx.Response(200, json={"suggestions": ["x"]})

        self.assertEqual(await _adapter(handler, timeout=0.05).suggest("a"), [])

    async def test_invalid_json_empty(self):
        self.assertEqual(await _adapter(lambda r: httpx.Response(200, text="oops")).suggest("a"), [])

    async def test_blank_query_skips_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=[])

        self.assertEqual(await _adapter(handler).suggest(" "), [])
        self.assertEqual(calls, [])


if __name__ == "__main__":
    unittest.main()
