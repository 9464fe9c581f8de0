import asyncio

from interview_coach.infrastructure.audio.speech import NO_SPEECH
from interview_coach.infrastructure.media import SourceKind
from interview_coach.interview import InterviewSession, format_elapsed
from interview_coach.interview.testing import (
    MockCoachProxy, MockMediaDevices, MockRecognitionEngine, SAMPLE_EVALUATION
)


def speak(engine, text):
    engine.emit_result(finals=[text])


def test_start_opens_camera_and_listens(session, engines):
    assert session.start()

    assert session.navigator.interview_active
    assert session.media.source == SourceKind.CAMERA
    assert session.transcriber.listening
    assert len(engines) == 1 and engines[0].running


def test_answer_is_attributed_after_quiet_period(session, engines, scheduler, questions):
    session.start()

    engines[0].emit_result(interim="I love")
    scheduler.advance(0.5)
    speak(engines[0], "I love talking to customers")
    scheduler.advance(0.5)
    assert session.aggregator.answers == []

    scheduler.advance(0.6)
    snapshot = session.snapshot()
    assert [(a.question, a.answer) for a in snapshot.answers] == [
        (questions[0], "I love talking to customers")
    ]
    assert snapshot.answered == [True, False, False]


def test_pending_answer_keeps_its_question_after_advancing(session, engines, scheduler, questions):
    session.start()
    speak(engines[0], "About me")

    session.next_question()
    assert session.transcript == ""
    speak(engines[0], "Because I listen")
    scheduler.advance(1.1)

    assert session.aggregator.answer_for(0) == "About me"
    assert session.aggregator.answer_for(1) == "Because I listen"
    assert session.snapshot().answered == [True, True, False]


def test_next_question_restarts_the_utterance(session, engines):
    session.start()
    speak(engines[0], "first")

    session.next_question()

    assert engines[0].start_count == 2
    assert session.transcriber.listening


def test_results_after_last_question_stop_listening(session, engines, scheduler, questions):
    session.start()
    for _ in questions:
        session.next_question()

    assert session.navigator.show_results
    assert not session.transcriber.listening

    speak(engines[0], "too late")
    scheduler.advance(2)
    assert session.aggregator.answers == []


def test_end_interview(session):
    session.start()

    session.end_interview()

    snapshot = session.snapshot()
    assert snapshot.show_results
    assert not snapshot.interview_active


def test_restart_discards_answers_and_scores(session, engines, scheduler):
    session.start()
    speak(engines[0], "an answer")
    scheduler.advance(1.1)
    session.next_question()
    speak(engines[0], "pending answer")
    session.end_interview()
    session.scores = object()

    session.restart()
    scheduler.advance(2)

    snapshot = session.snapshot()
    assert snapshot.current_index == 0
    assert not snapshot.show_results
    assert snapshot.interview_active
    assert snapshot.answers == []
    assert snapshot.answered == [False, False, False]
    assert snapshot.scores is None
    assert session.transcriber.listening


def test_camera_failure_still_allows_video_upload(config, scheduler):
    engines = []

    def factory():
        engines.append(MockRecognitionEngine())
        return engines[-1]

    with InterviewSession(config, devices=MockMediaDevices(fail_camera=True),
                          engine_factory=factory, coach=MockCoachProxy(),
                          scheduler=scheduler) as session:
        assert not session.start()
        assert session.media.error == "Permission denied"
        assert not session.transcriber.listening

        assert session.upload_video("answer.mp4")
        assert session.media.source == SourceKind.FILE
        assert session.transcriber.listening


def test_non_video_upload_changes_nothing(session):
    session.start()

    assert not session.upload_video("notes.txt")

    assert session.media.source == SourceKind.CAMERA
    assert session.media.uploaded_video is None


def test_toggle_mic_stops_and_resumes_listening(session, engines):
    session.start()

    assert session.toggle_mic() is False
    assert not session.transcriber.listening

    assert session.toggle_mic() is True
    assert session.transcriber.listening


def test_request_scores(session):
    session.start()
    session.coach.replies.append(SAMPLE_EVALUATION)

    card = asyncio.run(session.request_scores())

    assert card.as_tuple() == (77, 80, 70, 60, 75)
    assert session.snapshot().scores is card


def test_request_scores_falls_back_when_coach_is_down(session):
    session.start()
    session.coach.fail = True

    card = asyncio.run(session.request_scores())

    assert card.is_fallback
    assert card.as_tuple() == (85, 80, 90, 65, 85)
    assert session.metrics.get_metrics()["fallback_scores"] == 1


def test_scores_are_discarded_after_close(session):
    session.start()
    session.close()

    assert asyncio.run(session.request_scores()) is None
    assert session.scores is None


def test_send_chat(session):
    session.coach.replies.append("Smile and breathe.")

    reply = asyncio.run(session.send_chat("Any advice?"))

    assert reply.content == "Smile and breathe."
    assert session.chat.messages[0].content == "Hello, Dana!"


def test_close_releases_everything(session, engines, scheduler):
    session.start()
    stream = session.media.stream
    speak(engines[0], "unfinished")

    session.close()
    session.close()
    scheduler.advance(2)

    assert not stream.active
    assert session.aggregator.answers == []
    assert not session.transcriber.listening
    assert engines[0].listener is None


def test_elapsed_counts_while_media_plays(config, scheduler):
    now = [100.0]
    with InterviewSession(config, devices=MockMediaDevices(),
                          engine_factory=MockRecognitionEngine, coach=MockCoachProxy(),
                          scheduler=scheduler, clock=lambda: now[0]) as session:
        assert session.elapsed == "00:00:00"
        session.start()
        now[0] += 75
        assert session.elapsed == "01:15:00"

        session.stop_media()
        now[0] += 30
        assert session.elapsed == "01:15:00"


def test_format_elapsed():
    assert format_elapsed(0) == "00:00:00"
    assert format_elapsed(59.9) == "00:59:00"
    assert format_elapsed(600) == "10:00:00"


def test_recognition_is_not_restarted_after_file_audio_ends(session, engines):
    session.start()
    session.upload_video("answer.mp4")
    engine = engines[-1]
    starts = engine.start_count
    session.media.stream.get_audio_tracks()[0].stop()

    for _ in range(5):
        engine.emit_error(NO_SPEECH)
        engine.emit_end()

    assert engine.start_count == starts
    assert not session.transcriber.listening
    assert not session.media.is_playing


def test_failed_video_upload_keeps_camera_and_listening(config, scheduler):
    engines = []

    def factory():
        engines.append(MockRecognitionEngine())
        return engines[-1]

    with InterviewSession(config, devices=MockMediaDevices(fail_file=True),
                          engine_factory=factory, coach=MockCoachProxy(),
                          scheduler=scheduler) as session:
        session.start()

        assert not session.upload_video("broken.mp4")

        assert session.media.source == SourceKind.CAMERA
        assert session.media.is_playing
        assert session.transcriber.listening
        assert session.timer.running
        assert session.media.error == "Could not open video file broken.mp4"


def test_overlapping_chats_append_user_turns_in_order(session):
    async def chat_twice():
        return await asyncio.gather(session.send_chat("one"), session.send_chat("two"))

    asyncio.run(chat_twice())

    roles = [m.role for m in session.chat.messages]
    assert roles == ["assistant", "user", "user", "assistant", "assistant"]
    assert [m.content for m in session.chat.messages if m.role == "user"] == ["one", "two"]
    second = next(c for c in session.coach.calls if c["prompt"] == "two")
    assert second["history"][-1] == {"role": "user", "content": "one"}
