from typing import Iterable, Optional

from .models import Outcome, Verdict

CORRECT_MESSAGE = "Your translation is correct!"
INCORRECT_MESSAGE = "Incorrect. The correct translation is: {translation}"
UNAVAILABLE_MESSAGE = "Incorrect. No translation is available for this word."


def normalize(text: str) -> str:
    """Trims surrounding whitespace and lowercases. Nothing else is folded."""
    return text.strip().lower()


class AnswerJudge:
    """Decides whether a typed answer matches the accepted translations."""

    def accepted_answers(
        self, authoritative: Optional[str], synonym_translations: Iterable[str]
    ) -> set:
        candidates = set()
        if authoritative is not None:
            candidates.add(normalize(authoritative))
        candidates.update(normalize(t) for t in synonym_translations)
        candidates.discard("")
        return candidates

    def judge(
        self,
        raw_input: str,
        authoritative: Optional[str],
        synonym_translations: Iterable[str] = (),
    ) -> Verdict:
        # A failed fetch leaves nothing to compare against.
        if authoritative is None:
            return Verdict(
                accepted=False, outcome=Outcome.INCORRECT, message=UNAVAILABLE_MESSAGE
            )

        answer = normalize(raw_input)
        if answer and answer in self.accepted_answers(
            authoritative, synonym_translations
        ):
            return Verdict(
                accepted=True, outcome=Outcome.CORRECT, message=CORRECT_MESSAGE
            )

        return Verdict(
            accepted=False,
            outcome=Outcome.INCORRECT,
            message=INCORRECT_MESSAGE.format(translation=authoritative),
        )
