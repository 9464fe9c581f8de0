from interview_coach.config import FALLBACK_SCORES, FALLBACK_SUMMARY, SCORE_LABELS
from interview_coach.interview import ResultsRenderer, ScoreService, parse_score_text
from interview_coach.interview.testing import MockCoachProxy, SAMPLE_EVALUATION, create_test_answers


def test_parses_all_labels_and_summary():
    card = parse_score_text(SAMPLE_EVALUATION)

    assert card.as_tuple() == (77, 80, 70, 60, 75)
    assert card.summary == "Good structure, work on closing."
    assert not card.is_fallback


def test_missing_label_scores_zero():
    card = parse_score_text("Overall: 90\nProfessionalism: 85\nSummary: Fine.")

    assert card.as_tuple() == (90, 85, 0, 0, 0)


def test_missing_summary_is_empty():
    card = parse_score_text("Overall: 50")

    assert card.summary == ""


def test_first_number_after_label_is_used():
    card = parse_score_text("Overall: about 64 out of 100\nClosing Technique: 3/10")

    assert card.overall == 64
    assert card.closing_technique == 3


def test_unparseable_reply_is_all_zero_not_fallback():
    card = ResultsRenderer().render("I cannot grade this.")

    assert card.as_tuple() == (0, 0, 0, 0, 0)
    assert not card.is_fallback


def test_absent_payload_gives_fallback_card():
    card = ResultsRenderer().render(None)

    assert card.as_tuple() == FALLBACK_SCORES == (85, 80, 90, 65, 85)
    assert card.summary == FALLBACK_SUMMARY
    assert card.is_fallback


def test_score_service_falls_back_on_network_failure():
    card = ScoreService(MockCoachProxy(fail=True)).score(create_test_answers())

    assert card.as_tuple() == (85, 80, 90, 65, 85)
    assert card.is_fallback


def test_score_service_sends_answers_in_prompt():
    coach = MockCoachProxy(replies=[SAMPLE_EVALUATION])
    answers = create_test_answers()

    card = ScoreService(coach).score(answers)

    assert card.overall == 77
    prompt = coach.calls[0]["prompt"]
    assert answers[0].question in prompt
    assert answers[1].answer in prompt
    for label in SCORE_LABELS:
        assert f"{label}:" in prompt
    assert coach.calls[0]["history"] == []


def test_as_dict_uses_display_labels():
    card = parse_score_text(SAMPLE_EVALUATION)

    assert card.as_dict() == {
        "Overall": 77,
        "Professionalism": 80,
        "Business Acumen": 70,
        "Opportunistic": 60,
        "Closing Technique": 75,
    }
