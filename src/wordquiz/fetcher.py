import asyncio
import logging
from typing import Any, List, Optional

import requests

from .config import Settings, settings as default_settings
from .exceptions import FetchError
from .models import TranslationSet

logger = logging.getLogger(__name__)


# --- Service Layer: Upstream Lookups ---
class TranslationFetcher:
    """Looks up synonyms (Datamuse) and translations (MyMemory) for a word.

    Each lookup is a blocking ``requests`` call; ``fetch`` runs them on worker
    threads and joins the translations with ``asyncio.gather``.
    """

    def __init__(
        self,
        config: Settings = default_settings,
        session: Optional[requests.Session] = None,
    ):
        self.synonym_url = config.SYNONYM_URL
        self.translate_url = config.TRANSLATE_URL
        self.language_pair = config.LANGUAGE_PAIR
        self.max_synonyms = config.MAX_SYNONYMS
        self.timeout = config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _get_json(self, url: str, params: dict) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}") from e

    def get_synonyms(self, word: str) -> List[str]:
        data = self._get_json(
            self.synonym_url, {"rel_syn": word, "max": self.max_synonyms}
        )
        if not isinstance(data, list):
            raise FetchError(f"Unexpected synonym payload for {word!r}")

        synonyms = []
        for entry in data:
            if not isinstance(entry, dict) or not isinstance(entry.get("word"), str):
                raise FetchError(f"Malformed synonym entry for {word!r}: {entry!r}")
            synonyms.append(entry["word"])
        return synonyms[: self.max_synonyms]

    def translate(self, text: str) -> str:
        data = self._get_json(
            self.translate_url, {"q": text, "langpair": self.language_pair}
        )
        try:
            status = int(data.get("responseStatus", 200))
            translated = data["responseData"]["translatedText"]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise FetchError(f"Malformed translation payload for {text!r}") from e

        if status != 200:
            raise FetchError(f"Translation service returned status {status} for {text!r}")
        if not isinstance(translated, str) or not translated.strip():
            raise FetchError(f"Empty translation for {text!r}")
        return translated

    async def fetch(self, word: str, round_id: int) -> TranslationSet:
        """Fetches the translation set for ``word``; any single failure fails it all."""
        synonyms = await asyncio.to_thread(self.get_synonyms, word)
        translations = await asyncio.gather(
            *(asyncio.to_thread(self.translate, text) for text in [word, *synonyms])
        )
        logger.info(
            f"Round {round_id}: fetched '{word}' with {len(synonyms)} synonym(s)"
        )
        return TranslationSet(
            round_id=round_id,
            word=word,
            authoritative=translations[0],
            synonyms=synonyms,
            synonym_translations=list(translations[1:]),
        )

    def close(self):
        self.session.close()
