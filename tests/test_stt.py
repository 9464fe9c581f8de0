import asyncio
import threading
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions

from interview_coach.infrastructure.audio.speech.engine import (
    NETWORK, NO_SPEECH, NOT_ALLOWED, SERVICE_NOT_ALLOWED, RecognitionListener
)
from interview_coach.infrastructure.audio.speech.stt import GoogleStreamingEngine


def response(finals=(), interim=None):
    results = [SimpleNamespace(is_final=True, alternatives=[SimpleNamespace(transcript=t)])
               for t in finals]
    if interim is not None:
        results.append(SimpleNamespace(is_final=False, alternatives=[SimpleNamespace(transcript=interim)]))
    return SimpleNamespace(results=results)


class ScriptedSpeechClient:
    """Replays canned streaming responses, or raises once the audio is consumed."""

    def __init__(self, responses=(), error=None):
        self.responses = list(responses)
        self.error = error
        self.audio_requests = 0

    def streaming_recognize(self, config, requests):
        self.audio_requests = len(list(requests))
        if self.error is not None:
            raise self.error
        yield from self.responses


class RecordingListener(RecognitionListener):
    def __init__(self):
        self.calls = []
        self.end_thread = None
        self.ended = threading.Event()

    def on_result(self, results):
        self.calls.append(("result", [(r.transcript, r.is_final) for r in results]))

    def on_error(self, code, message=""):
        self.calls.append(("error", code))

    def on_end(self):
        self.calls.append(("end",))
        self.end_thread = threading.get_ident()
        self.ended.set()


def run_engine(client, chunks=(b"\x00\x00" * 160,)):
    listener = RecordingListener()
    engine = GoogleStreamingEngine(audio_source=lambda: iter(chunks), client=client)
    engine.listener = listener
    engine.start()
    assert listener.ended.wait(5)
    engine._thread.join(5)
    return listener


def test_results_carry_all_finals_then_interim():
    client = ScriptedSpeechClient([
        response(interim="I have"),
        response(finals=["I have five years"], interim="in sales"),
        response(finals=["in sales."]),
    ])

    listener = run_engine(client, chunks=[b"a", b"b"])

    assert client.audio_requests == 2
    assert listener.calls == [
        ("result", [("I have", False)]),
        ("result", [("I have five years", True), ("in sales", False)]),
        ("result", [("I have five years", True), ("in sales.", True)]),
        ("end",),
    ]


def test_empty_responses_are_skipped():
    client = ScriptedSpeechClient([response(), response(finals=["Hello"])])

    listener = run_engine(client)

    assert listener.calls == [("result", [("Hello", True)]), ("end",)]


def test_stream_without_results_reports_no_speech():
    listener = run_engine(ScriptedSpeechClient([]))

    assert listener.calls == [("error", NO_SPEECH), ("end",)]


@pytest.mark.parametrize("error, code", [
    (api_exceptions.OutOfRange("Audio timeout"), NO_SPEECH),
    (api_exceptions.DeadlineExceeded("Deadline exceeded"), NO_SPEECH),
    (api_exceptions.PermissionDenied("Forbidden"), NOT_ALLOWED),
    (api_exceptions.Unauthenticated("Bad token"), NOT_ALLOWED),
    (auth_exceptions.DefaultCredentialsError("No credentials"), NOT_ALLOWED),
    (api_exceptions.ServiceUnavailable("Connection reset"), NETWORK),
    (api_exceptions.InvalidArgument("Bad config"), SERVICE_NOT_ALLOWED),
])
def test_errors_are_mapped_and_end_always_follows(error, code):
    listener = run_engine(ScriptedSpeechClient(error=error))

    assert listener.calls == [("error", code), ("end",)]


def test_callbacks_run_on_the_starting_event_loop():
    client = ScriptedSpeechClient([response(finals=["Hello"])])
    listener = RecordingListener()

    async def run():
        engine = GoogleStreamingEngine(audio_source=lambda: iter([b"a"]), client=client)
        engine.listener = listener
        engine.start()
        await asyncio.get_running_loop().run_in_executor(None, listener.ended.wait, 5)
        engine._thread.join(5)
        return threading.get_ident()

    loop_thread = asyncio.run(run())

    assert listener.calls == [("result", [("Hello", True)]), ("end",)]
    assert listener.end_thread == loop_thread
