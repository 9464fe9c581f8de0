"""
Testing infrastructure with mock collaborators for the interview coach.
"""
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..infrastructure.audio.speech.engine import RecognitionEngine, RecognitionResult
from ..infrastructure.llm import LLMError
from ..infrastructure.media.devices import (
    AudioTrack, VideoTrack, MediaAccessError, MediaStream
)
from .coach import CoachUnavailableError
from .models import Answer


class ManualScheduler:
    """
    Stand-in for the event loop's ``call_later``; time only moves when
    ``advance()`` is called.
    """

    class Handle:
        def __init__(self, when: float, callback: Callable, args: Tuple):
            self.when = when
            self.callback = callback
            self.args = args
            self.cancelled = False

        def cancel(self) -> None:
            self.cancelled = True

    def __init__(self):
        self.now = 0.0
        self.handles: List['ManualScheduler.Handle'] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable, *args) -> 'ManualScheduler.Handle':
        handle = ManualScheduler.Handle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List['ManualScheduler.Handle']:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Move time forward, running due callbacks in time order."""
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target


class MockRecognitionEngine(RecognitionEngine):
    """Engine driven by the test: results, errors and ends are emitted by hand."""

    def __init__(self, end_on_stop: bool = True, fail_on_start: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.end_on_stop = end_on_stop
        self.fail_on_start = fail_on_start
        self.running = False
        self.start_count = 0
        self.stop_count = 0

    def start(self) -> None:
        if self.fail_on_start:
            raise RuntimeError("Recognition engine unavailable")
        self.running = True
        self.start_count += 1

    def stop(self) -> None:
        self.stop_count += 1
        if self.running and self.end_on_stop:
            self.emit_end()

    def emit_result(self, finals: Sequence[str] = (), interim: Optional[str] = None) -> None:
        results = [RecognitionResult(t, True) for t in finals]
        if interim is not None:
            results.append(RecognitionResult(interim, False))
        self.listener.on_result(results)

    def emit_error(self, code: str, message: str = "") -> None:
        self.listener.on_error(code, message)

    def emit_end(self) -> None:
        self.running = False
        if self.listener is not None:
            self.listener.on_end()


class MockAudioTrack(AudioTrack):
    """Audio track yielding scripted chunks."""

    def __init__(self, label: str = "mock-audio", chunks: Sequence[bytes] = ()):
        super().__init__(label)
        self._chunks = list(chunks)
        self.released = False

    def chunks(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            if not self.live:
                return
            yield chunk

    def _release(self) -> None:
        self.released = True


class MockVideoTrack(VideoTrack):
    """Video track that never produces frames."""

    def __init__(self, label: str = "mock-video"):
        super().__init__(label)
        self.released = False

    def read_frame(self):
        return None

    def _release(self) -> None:
        self.released = True


class MockMediaDevices:
    """Drop-in for DeviceMediaFactory that records every stream it opens."""

    def __init__(self,
                 fail_camera: bool = False,
                 fail_file: bool = False,
                 audio_chunks: Sequence[bytes] = (b"\x00\x00" * 160,)):
        self.fail_camera = fail_camera
        self.fail_file = fail_file
        self.audio_chunks = list(audio_chunks)
        self.opened: List[MediaStream] = []
        self.user_media_requests: List[Dict[str, bool]] = []

    def open_user_media(self, video: bool = True, audio: bool = True) -> MediaStream:
        self.user_media_requests.append({"video": video, "audio": audio})
        if self.fail_camera:
            raise MediaAccessError("Permission denied")
        tracks = []
        if video:
            tracks.append(MockVideoTrack("camera"))
        if audio:
            tracks.append(MockAudioTrack("microphone", self.audio_chunks))
        stream = MediaStream(tracks, source="camera")
        self.opened.append(stream)
        return stream

    def open_file(self, path: str) -> MediaStream:
        if self.fail_file:
            raise MediaAccessError(f"Could not open video file {path}")
        stream = MediaStream(
            [MockVideoTrack(f"file:{path}"), MockAudioTrack(f"file-audio:{path}", self.audio_chunks)],
            source="file",
        )
        self.opened.append(stream)
        return stream


class MockLLMClient:
    """Mock Gemini client for testing."""

    def __init__(self, mock_responses: Optional[List[str]] = None, error: Optional[Exception] = None,
                 configured: bool = True):
        self.mock_responses = list(mock_responses or [])
        self.error = error
        self.configured = configured
        self.current_response_idx = 0
        self.request_history: List[Dict[str, Any]] = []

    def generate_content(self, contents: List[Dict[str, Any]], temperature: float = 0.0, **kwargs) -> str:
        """Return the next scripted response."""
        self.request_history.append({
            "contents": contents,
            "temperature": temperature,
            "kwargs": kwargs
        })

        if self.error is not None:
            raise self.error
        if not self.configured:
            raise LLMError("Gemini API key not configured")

        if self.current_response_idx < len(self.mock_responses):
            response = self.mock_responses[self.current_response_idx]
            self.current_response_idx += 1
            return response
        return "Mock coach response"


class MockCoachProxy:
    """Stands in for RemoteCoachProxy; answers from a script or fails."""

    def __init__(self, replies: Optional[List[str]] = None, fail: bool = False):
        self.replies = list(replies or [])
        self.fail = fail
        self.calls: List[Dict[str, Any]] = []

    def ask(self, prompt: str, history: Sequence[Dict[str, str]] = ()) -> str:
        self.calls.append({"prompt": prompt, "history": list(history)})
        if self.fail:
            raise CoachUnavailableError("Coach endpoint unreachable")
        if self.replies:
            return self.replies.pop(0)
        return "Mock coach reply"


def create_test_answers() -> List[Answer]:
    """A short answered interview."""
    return [
        Answer(
            question="Tell me about yourself and your sales experience.",
            answer="I have five years of B2B sales experience in logistics software."
        ),
        Answer(
            question="How do you handle objections from a client?",
            answer="I listen first, restate the concern, and tie it back to the value for them."
        ),
    ]


SAMPLE_EVALUATION = (
    "Overall: 77\n"
    "Professionalism: 80\n"
    "Business Acumen: 70\n"
    "Opportunistic: 60\n"
    "Closing Technique: 75\n"
    "Summary: Good structure, work on closing."
)
