import asyncio
from typing import Dict, List, Tuple

import pytest

from wordquiz.config import Settings
from wordquiz.exceptions import FetchError
from wordquiz.models import TranslationSet


class FakeFetcher:
    """Stands in for TranslationFetcher without touching the network.

    ``table`` maps a word to (authoritative, synonym translations). Words in
    ``failing`` raise FetchError. Words in ``held`` block until ``release``.
    """

    def __init__(self, table=None, failing=()):
        self.table: Dict[str, Tuple[str, List[str]]] = dict(table or {})
        self.failing = set(failing)
        self.held = set()
        self.calls: List[str] = []
        self._gates: Dict[str, asyncio.Event] = {}

    def hold(self, word):
        self.held.add(word)

    def release(self, word):
        self.held.discard(word)
        if word in self._gates:
            self._gates[word].set()

    async def fetch(self, word, round_id):
        self.calls.append(word)
        if word in self.held:
            gate = self._gates.setdefault(word, asyncio.Event())
            await gate.wait()
        if word in self.failing:
            raise FetchError(f"upstream failure for {word}")
        authoritative, translations = self.table.get(word, (f"{word}-hy", []))
        return TranslationSet(
            round_id=round_id,
            word=word,
            authoritative=authoritative,
            synonyms=[f"syn{i}" for i in range(len(translations))],
            synonym_translations=translations,
        )


@pytest.fixture
def fake_fetcher():
    return FakeFetcher(
        {
            "scapegoat": ("scapegoat", ["patsy", "fallguy"]),
            "hello": ("barev", ["voghjuyn"]),
        }
    )


@pytest.fixture
def test_settings(tmp_path):
    config = Settings()
    config.LOG_DIR = str(tmp_path / "log")
    config.DB_DIR = str(tmp_path / "db")
    config.DATA_DIR = str(tmp_path / "data")
    config.LOG_TO_DB = False
    config.STORE_BACKEND = "memory"
    config.ADVANCE_DELAY_SECONDS = 2.0
    return config
