from wordquiz.judge import AnswerJudge, normalize
from wordquiz.models import Outcome

judge = AnswerJudge()
SYNONYMS = ["patsy", "fallguy"]


def test_normalize_trims_and_lowercases():
    assert normalize("  Scapegoat \n") == "scapegoat"
    assert normalize("fall guy") == "fall guy"


def test_accepts_authoritative_ignoring_case_and_whitespace():
    verdict = judge.judge("Scapegoat ", "scapegoat", SYNONYMS)
    assert verdict.accepted
    assert verdict.outcome == Outcome.CORRECT
    assert verdict.message == "Your translation is correct!"


def test_accepts_synonym_translation():
    assert judge.judge("patsy", "scapegoat", SYNONYMS).accepted
    assert judge.judge(" FALLGUY", "scapegoat", SYNONYMS).accepted


def test_candidates_are_normalized_too():
    assert judge.judge("patsy", "Scapegoat", ["  Patsy "]).accepted
    assert judge.judge("scapegoat", " SCAPEGOAT ", []).accepted


def test_rejection_discloses_only_authoritative():
    verdict = judge.judge("nonsense", "scapegoat", SYNONYMS)
    assert not verdict.accepted
    assert verdict.outcome == Outcome.INCORRECT
    assert "scapegoat" in verdict.message
    assert "patsy" not in verdict.message
    assert "fallguy" not in verdict.message


def test_no_partial_or_punctuation_matching():
    assert not judge.judge("scape", "scapegoat", SYNONYMS).accepted
    assert not judge.judge("scapegoat!", "scapegoat", SYNONYMS).accepted
    assert not judge.judge("fall guy", "scapegoat", SYNONYMS).accepted


def test_blank_answer_never_accepted():
    assert not judge.judge("   ", "scapegoat", ["", " "]).accepted


def test_degraded_round_is_always_incorrect():
    verdict = judge.judge("anything", None, [])
    assert not verdict.accepted
    assert verdict.outcome == Outcome.INCORRECT


def test_judging_is_idempotent():
    first = judge.judge("Patsy", "scapegoat", SYNONYMS)
    second = judge.judge("Patsy", "scapegoat", SYNONYMS)
    assert first == second
