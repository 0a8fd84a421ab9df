import asyncio

import pytest
import requests

from wordquiz.config import Settings
from wordquiz.exceptions import FetchError
from wordquiz.fetcher import TranslationFetcher

SYNONYM_URL = Settings.SYNONYM_URL
TRANSLATE_URL = Settings.TRANSLATE_URL


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def translation(text, status=200):
    return {"responseData": {"translatedText": text}, "responseStatus": status}


class FakeSession:
    """Answers Datamuse and MyMemory requests from dictionaries."""

    def __init__(self, synonyms=None, translations=None, broken=()):
        self.synonyms = synonyms or {}
        self.translations = translations or {}
        self.broken = set(broken)
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, dict(params)))
        if url == SYNONYM_URL:
            return FakeResponse(self.synonyms.get(params["rel_syn"], []))
        text = params["q"]
        if text in self.broken:
            raise requests.ConnectionError("connection reset")
        return FakeResponse(translation(self.translations.get(text, f"{text}-hy")))

    def close(self):
        pass


def make_fetcher(session):
    return TranslationFetcher(Settings(), session=session)


def test_fetch_orders_authoritative_then_synonyms():
    session = FakeSession(
        synonyms={"scapegoat": [{"word": "patsy", "score": 10}, {"word": "fall guy"}]},
        translations={"scapegoat": "kerpar", "patsy": "zoh", "fall guy": "meghavor"},
    )
    result = asyncio.run(make_fetcher(session).fetch("scapegoat", round_id=4))

    assert result.round_id == 4
    assert result.word == "scapegoat"
    assert result.authoritative == "kerpar"
    assert result.synonyms == ["patsy", "fall guy"]
    assert result.synonym_translations == ["zoh", "meghavor"]


def test_request_parameters():
    session = FakeSession(synonyms={"dog": [{"word": "hound"}]})
    asyncio.run(make_fetcher(session).fetch("dog", round_id=1))

    assert session.requests[0] == (SYNONYM_URL, {"rel_syn": "dog", "max": 5})
    translate_params = sorted(p["q"] for url, p in session.requests[1:])
    assert translate_params == ["dog", "hound"]
    assert all(
        p["langpair"] == "en|hy" for url, p in session.requests[1:] if url == TRANSLATE_URL
    )


def test_no_synonyms_means_single_translation():
    session = FakeSession()
    result = asyncio.run(make_fetcher(session).fetch("zyzzyva", round_id=2))
    assert result.synonym_translations == []
    assert len(session.requests) == 2


def test_synonym_count_is_capped():
    session = FakeSession(synonyms={"big": [{"word": f"w{i}"} for i in range(8)]})
    result = asyncio.run(make_fetcher(session).fetch("big", round_id=1))
    assert len(result.synonyms) == 5
    assert len(result.synonym_translations) == 5


def test_one_failed_translation_fails_the_whole_fetch():
    session = FakeSession(
        synonyms={"dog": [{"word": "hound"}, {"word": "canine"}]}, broken={"canine"}
    )
    with pytest.raises(FetchError):
        asyncio.run(make_fetcher(session).fetch("dog", round_id=1))


def test_synonym_service_http_error():
    fetcher = make_fetcher(FakeSession())
    fetcher.session.get = lambda url, params=None, timeout=None: FakeResponse([], 503)
    with pytest.raises(FetchError):
        fetcher.get_synonyms("dog")


@pytest.mark.parametrize(
    "payload",
    [
        {"unexpected": True},
        [{"score": 3}],
        ValueError("not json"),
    ],
)
def test_malformed_synonym_payloads(payload):
    fetcher = make_fetcher(FakeSession())
    fetcher.session.get = lambda url, params=None, timeout=None: FakeResponse(payload)
    with pytest.raises(FetchError):
        fetcher.get_synonyms("dog")


@pytest.mark.parametrize(
    "payload",
    [
        {"responseStatus": 200},
        {"responseData": None},
        translation("", 200),
        translation("QUOTA EXCEEDED", 429),
        [],
    ],
)
def test_malformed_translation_payloads(payload):
    fetcher = make_fetcher(FakeSession())
    fetcher.session.get = lambda url, params=None, timeout=None: FakeResponse(payload)
    with pytest.raises(FetchError):
        fetcher.translate("dog")
