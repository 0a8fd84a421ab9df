from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


# --- Enums ---
class IterationMode(str, Enum):
    RANDOM = "random"
    SEQUENTIAL = "sequential"
    ALPHABETICAL = "alphabetical"


class QuizState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    AWAITING_ANSWER = "awaiting_answer"
    JUDGED = "judged"


class Outcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


class FeedbackKind(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    ERROR = "error"


# --- Models ---
class TranslationSet(BaseModel):
    round_id: int
    word: str
    authoritative: str
    synonyms: List[str] = []
    synonym_translations: List[str] = []


class QuizRound(BaseModel):
    round_id: int
    word: str
    authoritative: Optional[str] = None
    synonyms: List[str] = []
    synonym_translations: List[str] = []
    revealed: bool = False
    fetch_failed: bool = False
    user_answer: Optional[str] = None
    outcome: Optional[Outcome] = None


class Verdict(BaseModel):
    accepted: bool
    outcome: Outcome
    message: str


class Feedback(BaseModel):
    kind: FeedbackKind
    message: str


class AnswerRecord(BaseModel):
    word: str
    user_answer: str
    correct_answer: Optional[str]
    is_correct: bool
    attempted: bool


class WordListRecord(BaseModel):
    words: List[str]


class SessionSnapshot(BaseModel):
    state: QuizState
    mode: IterationMode
    word: Optional[str] = None
    translation: Optional[str] = None
    revealed: bool = False
    feedback: Optional[Feedback] = None
    notice: Optional[str] = None
    words: List[str]
    word_count: int
    correct_count: int
    answered_count: int
    answers: List[AnswerRecord]
