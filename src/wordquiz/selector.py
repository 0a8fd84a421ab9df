import random
from abc import ABC, abstractmethod
from typing import List, Tuple

from .exceptions import EmptyWordListError
from .models import IterationMode


# --- Strategy Pattern: Word Selectors ---
class WordSelector(ABC):
    """Abstract Base Class for the word selection policies."""

    @abstractmethod
    def pick(self, words: List[str], cursor: int) -> Tuple[str, int]:
        """Returns the next word and the cursor to use for the following pick."""
        pass

    @staticmethod
    def _require_words(words: List[str]) -> None:
        if not words:
            raise EmptyWordListError("Cannot pick a word from an empty list")


class RandomSelector(WordSelector):
    """Uniform random pick. Duplicated words are proportionally more likely."""

    def pick(self, words: List[str], cursor: int) -> Tuple[str, int]:
        self._require_words(words)
        return random.choice(words), cursor


class SequentialSelector(WordSelector):
    """Walks the list in insertion order and wraps around at the end."""

    def pick(self, words: List[str], cursor: int) -> Tuple[str, int]:
        self._require_words(words)
        # The list may have shrunk since the cursor was last advanced.
        if not 0 <= cursor < len(words):
            cursor = 0
        word = words[cursor]
        next_cursor = cursor + 1 if cursor + 1 < len(words) else 0
        return word, next_cursor


class AlphabeticalSelector(WordSelector):
    """Always returns the lexicographically smallest word.

    With ``sort_in_place`` (the default) the caller's list is sorted in place,
    so the stored insertion order is lost after the first alphabetical pick.
    """

    def __init__(self, sort_in_place: bool = True):
        self.sort_in_place = sort_in_place

    def pick(self, words: List[str], cursor: int) -> Tuple[str, int]:
        self._require_words(words)
        if self.sort_in_place:
            words.sort()
            return words[0], cursor
        return min(words), cursor


class SelectorFactory:
    """Factory to select the strategy for an iteration mode."""

    @staticmethod
    def create(mode: IterationMode, sort_in_place: bool = True) -> WordSelector:
        if mode == IterationMode.SEQUENTIAL:
            return SequentialSelector()
        elif mode == IterationMode.ALPHABETICAL:
            return AlphabeticalSelector(sort_in_place=sort_in_place)
        else:
            return RandomSelector()
