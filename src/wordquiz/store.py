import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional

import pandas as pd
import redis
from pydantic import ValidationError

from .config import Settings, settings as default_settings
from .models import IterationMode, WordListRecord

logger = logging.getLogger(__name__)


def parse_mode(value: Optional[str]) -> IterationMode:
    """Maps a stored mode string to an IterationMode, defaulting to random."""
    if not value:
        return IterationMode.RANDOM
    try:
        return IterationMode(value.strip())
    except ValueError:
        logger.warning(f"Unknown stored mode {value!r}, falling back to random.")
        return IterationMode.RANDOM


# --- Storage Layer: Word Stores ---
class WordStore(ABC):
    """Durable home of the word list and the selected iteration mode."""

    @abstractmethod
    def load(self) -> List[str]:
        pass

    @abstractmethod
    def save(self, words: List[str]) -> None:
        pass

    @abstractmethod
    def load_mode(self) -> IterationMode:
        pass

    @abstractmethod
    def save_mode(self, mode: IterationMode) -> None:
        pass


class MemoryWordStore(WordStore):
    """Keeps everything in process memory. Nothing survives a restart."""

    def __init__(
        self,
        words: Optional[List[str]] = None,
        mode: IterationMode = IterationMode.RANDOM,
    ):
        self.words: List[str] = list(words or [])
        self.mode = mode

    def load(self) -> List[str]:
        return list(self.words)

    def save(self, words: List[str]) -> None:
        self.words = list(words)

    def load_mode(self) -> IterationMode:
        return self.mode

    def save_mode(self, mode: IterationMode) -> None:
        self.mode = IterationMode(mode)


class CsvWordStore(WordStore):
    """Stores words in a one-column CSV file and the mode in a text file."""

    def __init__(self, directory: str, words_file: str, mode_file: str):
        self.directory = directory
        self.words_path = os.path.join(directory, words_file)
        self.mode_path = os.path.join(directory, mode_file)

    def _ensure_directory(self):
        if not os.path.exists(self.directory):
            os.makedirs(self.directory, exist_ok=True)
            logger.info(f"Created directory {self.directory}.")

    def load(self) -> List[str]:
        if not os.path.exists(self.words_path):
            logger.info(f"No word file at {self.words_path}, starting empty.")
            return []
        try:
            # dtype=str keeps words such as "null" or "NA" as text
            df = pd.read_csv(
                self.words_path, encoding="utf-8", dtype=str, keep_default_na=False
            )
        except pd.errors.EmptyDataError:
            logger.warning(f"{self.words_path} is empty, starting with no words.")
            return []
        except Exception as e:
            logger.error(f"Failed to load {self.words_path}: {e}")
            return []
        if "word" not in df.columns:
            logger.error(f"Skipping {self.words_path}: Missing 'word' column.")
            return []
        words = [w.strip() for w in df["word"].tolist() if w.strip()]
        logger.info(f"Loaded {len(words)} words from {self.words_path}")
        return words

    def save(self, words: List[str]) -> None:
        self._ensure_directory()
        pd.DataFrame({"word": list(words)}).to_csv(
            self.words_path, index=False, encoding="utf-8"
        )
        logger.debug(f"Saved {len(words)} words to {self.words_path}")

    def load_mode(self) -> IterationMode:
        if not os.path.exists(self.mode_path):
            return IterationMode.RANDOM
        try:
            with open(self.mode_path, encoding="utf-8") as f:
                return parse_mode(f.read())
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load {self.mode_path}: {e}")
            return IterationMode.RANDOM

    def save_mode(self, mode: IterationMode) -> None:
        self._ensure_directory()
        with open(self.mode_path, "w", encoding="utf-8") as f:
            f.write(IterationMode(mode).value)


class RedisWordStore(WordStore):
    """Stores the word list as a JSON document and the mode as a plain key."""

    def __init__(self, client: redis.Redis, prefix: str = "wordquiz"):
        self.client = client
        self.words_key = f"{prefix}:words"
        self.mode_key = f"{prefix}:mode"

    def load(self) -> List[str]:
        raw = self.client.get(self.words_key)
        if not raw:
            return []
        try:
            record = WordListRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Discarding unreadable word list in {self.words_key}: {e}")
            return []
        logger.info(f"Loaded {len(record.words)} words from redis")
        return record.words

    def save(self, words: List[str]) -> None:
        self.client.set(
            self.words_key, WordListRecord(words=list(words)).model_dump_json()
        )

    def load_mode(self) -> IterationMode:
        return parse_mode(self.client.get(self.mode_key))

    def save_mode(self, mode: IterationMode) -> None:
        self.client.set(self.mode_key, IterationMode(mode).value)


class WordStoreFactory:
    """Factory to build the configured storage backend."""

    @staticmethod
    def create(backend: str, config: Settings = default_settings) -> WordStore:
        if backend == "memory":
            return MemoryWordStore()
        elif backend == "redis":
            client = redis.from_url(config.REDIS_URL, decode_responses=True)
            return RedisWordStore(client, prefix=config.REDIS_PREFIX)
        elif backend == "csv":
            return CsvWordStore(config.DATA_DIR, config.WORDS_FILE, config.MODE_FILE)
        else:
            raise ValueError(f"Unknown store backend: {backend}")
