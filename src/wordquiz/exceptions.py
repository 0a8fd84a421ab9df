class WordQuizError(Exception):
    """Base class for errors raised inside the quiz core."""


class FetchError(WordQuizError):
    """An upstream service failed or returned data we cannot use."""


class EmptyWordListError(WordQuizError):
    """A selector was asked to pick from an empty word list."""
