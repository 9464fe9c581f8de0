from interview_coach.interview import AnswerAggregator, EventType


def test_first_update_appends_and_flags(questions):
    agg = AnswerAggregator(questions)

    agg.update("I sell software", 0)

    assert [(a.question, a.answer) for a in agg.answers] == [(questions[0], "I sell software")]
    assert agg.answered == [True, False, False]


def test_last_write_wins(questions):
    agg = AnswerAggregator(questions)

    agg.update("I sell", 0)
    agg.update("I sell software", 0)

    assert len(agg.answers) == 1
    assert agg.answer_for(0) == "I sell software"


def test_blank_text_is_a_no_op(questions):
    agg = AnswerAggregator(questions)

    agg.update("   ", 1)
    agg.update("", 1)

    assert agg.answers == []
    assert agg.answered == [False, False, False]


def test_answers_keep_first_answered_order(questions):
    agg = AnswerAggregator(questions)

    agg.update("third", 2)
    agg.update("first", 0)
    agg.update("third again", 2)

    assert [a.answer for a in agg.answers] == ["third again", "first"]
    assert agg.answered_count == 2


def test_out_of_range_index_is_ignored(questions):
    agg = AnswerAggregator(questions)

    agg.update("hello", 7)

    assert agg.answers == []


def test_duplicate_question_texts_share_one_answer():
    agg = AnswerAggregator(["Same?", "Same?"])

    agg.update("one", 0)
    agg.update("two", 1)

    assert [(a.question, a.answer) for a in agg.answers] == [("Same?", "two")]
    assert agg.answered == [True, True]


def test_reset_clears_answers_and_flags(questions):
    agg = AnswerAggregator(questions)
    agg.update("x", 0)

    agg.reset()

    assert agg.answers == []
    assert agg.answered == [False, False, False]


def test_answers_view_is_a_copy(questions):
    agg = AnswerAggregator(questions)
    agg.update("x", 0)

    agg.answers[0].answer = "tampered"

    assert agg.answer_for(0) == "x"


def test_emits_answer_recorded(questions, event_bus, recorded_events):
    agg = AnswerAggregator(questions, event_bus)

    agg.update("a", 1)
    agg.update("ab", 1)

    recorded = [e for e in recorded_events if e.event_type == EventType.ANSWER_RECORDED]
    assert [e.data["first_answer"] for e in recorded] == [True, False]
    assert recorded[-1].data["answer"] == "ab"
