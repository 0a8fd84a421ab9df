import asyncio
import logging
from typing import List, Optional, Protocol

from .exceptions import FetchError
from .judge import AnswerJudge
from .models import (
    AnswerRecord,
    Feedback,
    FeedbackKind,
    IterationMode,
    Outcome,
    QuizRound,
    QuizState,
    SessionSnapshot,
    TranslationSet,
    Verdict,
)
from .selector import SelectorFactory
from .store import WordStore

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Error while fetching translation or synonyms."


class Fetcher(Protocol):
    async def fetch(self, word: str, round_id: int) -> TranslationSet: ...


class QuizSession:
    """Owns the word list, mode, cursor and the single open quiz round.

    Must be driven from one asyncio event loop. Every pick gets a new round id;
    fetch results for any other round id are dropped.
    """

    def __init__(
        self,
        store: WordStore,
        fetcher: Fetcher,
        judge: Optional[AnswerJudge] = None,
        advance_delay: float = 2.0,
        sort_in_place: bool = True,
        history_size: int = 50,
    ):
        self.store = store
        self.fetcher = fetcher
        self.judge = judge or AnswerJudge()
        self.advance_delay = advance_delay
        self.sort_in_place = sort_in_place
        self.history_size = history_size

        self.words: List[str] = []
        self.mode = IterationMode.RANDOM
        self.cursor = 0
        self.state = QuizState.IDLE
        self.round: Optional[QuizRound] = None
        self.feedback: Optional[Feedback] = None
        self.notice: Optional[str] = None
        self.correct_count = 0
        self.answered_count = 0
        self.answers: List[AnswerRecord] = []

        self._round_seq = 0
        self._fetch_task: Optional[asyncio.Task] = None
        self._advance_task: Optional[asyncio.Task] = None

    # --- Lifecycle ---
    def load(self):
        self.words = self.store.load()
        self.mode = self.store.load_mode()
        logger.info(f"Session loaded {len(self.words)} words, mode={self.mode.value}")

    async def start(self):
        self.load()
        self._next_round()

    async def settle(self):
        """Waits for the current fetch, if any, without propagating its cancellation."""
        task = self._fetch_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def close(self):
        tasks = [t for t in (self._fetch_task, self._advance_task) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._fetch_task = None
        self._advance_task = None

    # --- Round handling ---
    def _cancel_pending(self):
        for task in (self._fetch_task, self._advance_task):
            if task is not None and not task.done():
                task.cancel()
        self._fetch_task = None
        self._advance_task = None

    def _next_round(self):
        self._cancel_pending()
        self._round_seq += 1
        self.feedback = None
        self.notice = None

        if not self.words:
            self.round = None
            self.state = QuizState.IDLE
            logger.info("Word list is empty, session is idle.")
            return

        selector = SelectorFactory.create(self.mode, sort_in_place=self.sort_in_place)
        word, self.cursor = selector.pick(self.words, self.cursor)
        if self.mode == IterationMode.ALPHABETICAL and self.sort_in_place:
            self.store.save(self.words)

        self.round = QuizRound(round_id=self._round_seq, word=word)
        self.state = QuizState.FETCHING
        logger.info(f"Round {self._round_seq}: picked '{word}' ({self.mode.value})")
        self._fetch_task = asyncio.create_task(self._fetch(self._round_seq, word))

    def _is_current(self, round_id: int) -> bool:
        return (
            self.round is not None
            and self.round.round_id == round_id
            and self.state == QuizState.FETCHING
        )

    async def _fetch(self, round_id: int, word: str):
        try:
            result = await self.fetcher.fetch(word, round_id=round_id)
        except FetchError as e:
            logger.warning(f"Round {round_id}: fetch for '{word}' failed: {e}")
            self._apply_fetch_failure(round_id)
            return
        except Exception:
            logger.exception(f"Round {round_id}: unexpected error fetching '{word}'")
            self._apply_fetch_failure(round_id)
            return
        self._apply_fetch_result(result)

    def _apply_fetch_result(self, result: TranslationSet):
        if not self._is_current(result.round_id):
            logger.info(f"Discarding stale translation for round {result.round_id}")
            return
        self.round.authoritative = result.authoritative
        self.round.synonyms = list(result.synonyms)
        self.round.synonym_translations = list(result.synonym_translations)
        self.state = QuizState.AWAITING_ANSWER

    def _apply_fetch_failure(self, round_id: int):
        if not self._is_current(round_id):
            logger.info(f"Discarding stale fetch failure for round {round_id}")
            return
        self.round.fetch_failed = True
        self.feedback = Feedback(kind=FeedbackKind.ERROR, message=FETCH_ERROR_MESSAGE)
        self.state = QuizState.AWAITING_ANSWER

    async def _advance_after(self, round_id: int):
        await asyncio.sleep(self.advance_delay)
        if self.round is None or self.round.round_id != round_id:
            return
        # Detach first so the new pick does not cancel the running task.
        self._advance_task = None
        self._next_round()

    # --- User actions ---
    def add_word(self, text: str) -> bool:
        word = text.strip()
        if not word:
            logger.debug("Ignoring blank word.")
            return False

        self.words.append(word)
        self.store.save(self.words)
        logger.info(f"Added '{word}' ({len(self.words)} words)")
        if self.state == QuizState.IDLE:
            self._next_round()
        self.notice = f'The word "{word}" has been added to the list.'
        return True

    def delete_word(self, word: str) -> bool:
        if word not in self.words:
            return False

        self.words[:] = [w for w in self.words if w != word]
        self.store.save(self.words)
        logger.info(f"Deleted '{word}' ({len(self.words)} words left)")
        if self.round is not None and self.round.word == word:
            self._next_round()
        self.notice = f'The word "{word}" has been removed from the list.'
        return True

    def change_mode(self, mode: IterationMode):
        self.mode = IterationMode(mode)
        self.store.save_mode(self.mode)
        logger.info(f"Iteration mode set to {self.mode.value}")
        self._next_round()

    def reveal(self) -> bool:
        if self.state != QuizState.AWAITING_ANSWER:
            return False
        self.round.revealed = True
        return True

    def submit(self, answer: str) -> Optional[Verdict]:
        if self.state != QuizState.AWAITING_ANSWER:
            logger.info(f"Ignoring answer while {self.state.value}")
            return None

        current = self.round
        verdict = self.judge.judge(
            answer, current.authoritative, current.synonym_translations
        )
        current.user_answer = answer
        current.outcome = verdict.outcome
        self.feedback = Feedback(
            kind=FeedbackKind(verdict.outcome.value), message=verdict.message
        )

        self.answered_count += 1
        if verdict.outcome == Outcome.CORRECT:
            self.correct_count += 1
        self.answers.append(
            AnswerRecord(
                word=current.word,
                user_answer=answer,
                correct_answer=current.authoritative,
                is_correct=verdict.accepted,
                attempted=True,
            )
        )
        if self.history_size > 0:
            del self.answers[: -self.history_size]
        else:
            self.answers.clear()

        logger.info(
            f"Round {current.round_id}: '{current.word}' answered '{answer}' "
            f"-> {verdict.outcome.value.upper()}"
        )
        self.state = QuizState.JUDGED
        self._advance_task = asyncio.create_task(self._advance_after(current.round_id))
        return verdict

    # --- Views ---
    def snapshot(self) -> SessionSnapshot:
        current = self.round
        show_translation = current is not None and (
            current.revealed or self.state == QuizState.JUDGED
        )
        return SessionSnapshot(
            state=self.state,
            mode=self.mode,
            word=current.word if current else None,
            translation=current.authoritative if show_translation else None,
            revealed=current.revealed if current else False,
            feedback=self.feedback,
            notice=self.notice,
            words=list(self.words),
            word_count=len(self.words),
            correct_count=self.correct_count,
            answered_count=self.answered_count,
            answers=list(self.answers),
        )
