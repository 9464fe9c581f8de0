import pytest

from interview_coach.interview import AnswerAggregator, EventType, QuestionNavigator


def test_requires_questions():
    with pytest.raises(ValueError):
        QuestionNavigator([])


def test_next_advances_then_shows_results(questions):
    nav = QuestionNavigator(questions)
    nav.start()

    nav.next()
    nav.next()
    assert nav.current_index == 2
    assert not nav.show_results

    nav.next()
    assert nav.show_results
    assert not nav.interview_active
    assert nav.current_index == 2


def test_results_are_terminal(questions):
    nav = QuestionNavigator(questions)
    nav.start()
    for _ in range(10):
        nav.next()

    assert nav.show_results
    assert nav.current_index == len(questions) - 1


def test_end_shows_results_early(questions):
    nav = QuestionNavigator(questions)
    nav.start()

    nav.end()

    assert nav.show_results
    assert nav.current_index == 0


def test_reset_returns_to_start_and_clears_answers(questions):
    agg = AnswerAggregator(questions)
    nav = QuestionNavigator(questions, agg)
    nav.start()
    agg.update("answer", 0)
    nav.next()
    nav.end()

    nav.reset()

    assert nav.current_index == 0
    assert not nav.show_results
    assert agg.answers == []
    assert agg.answered == [False] * len(questions)


def test_progress(questions):
    nav = QuestionNavigator(questions)
    nav.start()
    nav.next()

    assert nav.question_number == 2
    assert nav.current_question == questions[1]
    assert nav.progress_percentage == pytest.approx(2 / 3 * 100)


def test_events(questions, event_bus, recorded_events):
    nav = QuestionNavigator(questions, event_bus=event_bus)
    nav.start()
    nav.next()
    nav.end()
    nav.end()

    types = [e.event_type for e in recorded_events]
    assert types == [
        EventType.INTERVIEW_STARTED,
        EventType.QUESTION_ADVANCED,
        EventType.RESULTS_SHOWN,
    ]
    assert recorded_events[-1].data["reason"] == "ended"
