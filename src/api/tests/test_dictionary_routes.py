"""Unit tests for dictionary proxy routes."""

import unittest

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_dictionary_port
from adapter.fake.dictionary import FakeDictionaryAdapter
from domain.model.lookup import (
    Failed,
    FailureReason,
    Found,
    RawMeaning,
    RawPronunciation,
    RawResultEntry,
)


def _found_hoc_sinh() -> Found:
    return Found(word="học sinh", entries=(
        RawResultEntry(
            lang_code="vi",
            lang_name="Tiếng Việt",
            meanings=(RawMeaning(
                definition="người học ở bậc phổ thông",
                example="học sinh tiểu học ~ thời học sinh",
                pos="Danh từ",
                sub_pos="Danh từ chỉ vật, hiện tượng",
            ),),
            pronunciations=(
                RawPronunciation("hɔk˧˨ʔ siŋ˧˧", "Sài-Gòn"),
                RawPronunciation("hawk͡p˧˨ʔ sïŋ˧˧", "Hà-Nội"),
            ),
        ),
    ))


class DictionaryRouteTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.dictionary = FakeDictionaryAdapter(
            outcomes={
                "học sinh": _found_hoc_sinh(),
                "chậm": Failed(FailureReason.TIMEOUT),
                "hỏng": Failed(FailureReason.SERVER_ERROR),
                "mạng": Failed(FailureReason.NETWORK_ERROR),
            },
            suggestions={"học": ["học", "học bạ", "học bổng"]},
        )
        app.dependency_overrides[get_dictionary_port] = lambda: self.dictionary

    def tearDown(self):
        app.dependency_overrides.clear()


class TestSearchRoute(DictionaryRouteTestCase):
    """Test GET /api/dictionary/search."""

    def test_found(self):
        response = self.client.get("/api/dictionary/search", params={"word": "học sinh"})

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertTrue(data["exists"])
        self.assertEqual(data["word"], "học sinh")
        meaning = data["results"][0]["meanings"][0]
        self.assertEqual(meaning["pos"], "Danh từ")
        self.assertEqual(meaning["sub_pos"], "Danh từ chỉ vật, hiện tượng")
        self.assertNotIn("definition_lang", meaning)

    def test_not_found(self):
        response = self.client.get("/api/dictionary/search", params={"word": "xyzzy"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"data": {"exists": False}})

    def test_missing_word(self):
        response = self.client.get("/api/dictionary/search")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Word is required"})
        self.assertEqual(self.dictionary.lookup_calls, [])

    def test_blank_word(self):
        response = self.client.get("/api/dictionary/search", params={"word": "   "})
        self.assertEqual(response.status_code, 400)

    def test_timeout(self):
        response = self.client.get("/api/dictionary/search", params={"word": "chậm"})
        self.assertEqual(response.status_code, 408)
        self.assertEqual(response.json(), {"error": "Request timeout"})

    def test_server_and_network_errors(self):
        for word in ("hỏng", "mạng"):
            response = self.client.get("/api/dictionary/search", params={"word": word})
            self.assertEqual(response.status_code, 500)
            self.assertEqual(response.json(), {"error": "Internal server error"})

    def test_unexpected_exception_is_500(self):
        class Broken(FakeDictionaryAdapter):
            async def lookup(self, word, lang=None):
                raise RuntimeError("boom")

        app.dependency_overrides[get_dictionary_port] = lambda: Broken()
        response = self.client.get("/api/dictionary/search", params={"word": "a"})
        self.assertEqual(response.status_code, 500)

    def test_lang_passed_through(self):
        self.client.get("/api/dictionary/search", params={"word": "tau", "lang": "en"})
        self.assertEqual(self.dictionary.last_lang, "en")


class TestGroupedRoute(DictionaryRouteTestCase):
    """Test GET /api/dictionary/grouped."""

    def test_grouped(self):
        response = self.client.get("/api/dictionary/grouped", params={"word": "học sinh"})

        self.assertEqual(response.status_code, 200)
        entry = response.json()["data"]["entries"][0]
        self.assertEqual(list(entry["meanings_by_language"]), ["Khác"])
        self.assertEqual(list(entry["meanings_by_language"]["Khác"]), ["Danh từ"])
        self.assertEqual(entry["primary_pronunciation"]["region"], "Hà-Nội")
        self.assertEqual([p["region"] for p in entry["secondary_pronunciations"]], ["Sài-Gòn"])

    def test_grouped_not_found(self):
        response = self.client.get("/api/dictionary/grouped", params={"word": "xyzzy"})
        self.assertEqual(response.json()["data"]["exists"], False)

    def test_grouped_timeout(self):
        response = self.client.get("/api/dictionary/grouped", params={"word": "chậm"})
        self.assertEqual(response.status_code, 408)


class TestSuggestRoute(DictionaryRouteTestCase):
    """Test GET /api/dictionary/suggest."""

    def test_suggest(self):
        response = self.client.get("/api/dictionary/suggest", params={"q": "học"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"data": {"suggestions": ["học", "học bạ", "học bổng"]}})

    def test_missing_query(self):
        response = self.client.get("/api/dictionary/suggest")
        self.assertEqual(response.status_code, 400)

    def test_failure_is_empty_list(self):
        class Broken(FakeDictionaryAdapter):
            async def suggest(self, query, limit=10):
                raise RuntimeError("boom")

        app.dependency_overrides[get_dictionary_port] = lambda: Broken()
        response = self.client.get("/api/dictionary/suggest", params={"q": "học"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["suggestions"], [])


class TestServiceEndpoints(unittest.TestCase):

    def test_root_and_health(self):
        client = TestClient(app)
        self.assertEqual(client.get("/").json()["status"], "running")
        health = client.get("/health").json()
        self.assertEqual(health["status"], "healthy")
        self.assertIn("dictionary_api", health["services"])


if __name__ == "__main__":
    unittest.main()
