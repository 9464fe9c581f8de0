"""
Continuous speech-to-text using Google Cloud Speech streaming recognition.
"""
import asyncio
import logging
import threading
from typing import Callable, Iterable, List, Optional

from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import speech

from ....config import LANGUAGE_CODE, SAMPLE_RATE_TARGET
from .engine import (
    RecognitionEngine, RecognitionResult, NO_SPEECH, NOT_ALLOWED, NETWORK, SERVICE_NOT_ALLOWED
)

logger = logging.getLogger("speech_stt")


def _call_directly(callback, *args):
    callback(*args)


class GoogleStreamingEngine(RecognitionEngine):
    """
    Streams audio chunks to Google Cloud Speech.

    The gRPC stream blocks, so it runs on a worker thread; every listener
    call is handed back to the event loop that called ``start()``.
    """

    def __init__(self,
                 audio_source: Callable[[], Iterable[bytes]],
                 language_code: str = LANGUAGE_CODE,
                 interim_results: bool = True,
                 continuous: bool = True,
                 sample_rate: int = SAMPLE_RATE_TARGET,
                 client: Optional[speech.SpeechClient] = None):
        super().__init__(language_code, interim_results, continuous)
        self.audio_source = audio_source
        self.sample_rate = sample_rate
        self._client = client
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._dispatch = _call_directly

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        try:
            self._dispatch = asyncio.get_running_loop().call_soon_threadsafe
        except RuntimeError:
            self._dispatch = _call_directly

        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name="speech-recognition", daemon=True)
        self._thread.start()
        logger.debug("Recognition stream started")

    def stop(self) -> None:
        self._stop_event.set()

    def _emit(self, method: str, *args) -> None:
        listener = self.listener
        if listener is not None:
            self._dispatch(getattr(listener, method), *args)

    def _requests(self):
        for chunk in self.audio_source():
            if self._stop_event.is_set():
                return
            yield speech.StreamingRecognizeRequest(audio_content=chunk)

    def _run(self) -> None:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self.sample_rate,
            language_code=self.language_code,
            enable_automatic_punctuation=True,
        )
        streaming_config = speech.StreamingRecognitionConfig(
            config=config,
            interim_results=self.interim_results,
            single_utterance=not self.continuous,
        )

        finals: List[str] = []
        heard_anything = False
        try:
            client = self._client or speech.SpeechClient()
            responses = client.streaming_recognize(config=streaming_config, requests=self._requests())
            for response in responses:
                if self._stop_event.is_set():
                    break
                interim: List[str] = []
                for result in response.results:
                    if not result.alternatives:
                        continue
                    text = result.alternatives[0].transcript
                    if result.is_final:
                        finals.append(text)
                    else:
                        interim.append(text)
                if not finals and not interim:
                    continue
                heard_anything = True
                batch = [RecognitionResult(t, True) for t in finals]
                batch.extend(RecognitionResult(t, False) for t in interim)
                self._emit("on_result", batch)

            if not heard_anything and not self._stop_event.is_set():
                self._emit("on_error", NO_SPEECH, "No speech detected")
        except (api_exceptions.OutOfRange, api_exceptions.DeadlineExceeded) as e:
            # Audio timeout: the stream closed while nobody was talking
            logger.info("Recognition stream timed out: %s", e)
            self._emit("on_error", NO_SPEECH, str(e))
        except (api_exceptions.PermissionDenied, api_exceptions.Unauthenticated,
                auth_exceptions.DefaultCredentialsError) as e:
            logger.error("Speech recognition not permitted: %s", e)
            self._emit("on_error", NOT_ALLOWED, str(e))
        except api_exceptions.ServiceUnavailable as e:
            logger.error("Speech recognition service unreachable: %s", e)
            self._emit("on_error", NETWORK, str(e))
        except api_exceptions.GoogleAPICallError as e:
            logger.error("Speech recognition failed: %s", e)
            self._emit("on_error", SERVICE_NOT_ALLOWED, str(e))
        finally:
            logger.debug("Recognition stream ended")
            self._emit("on_end")
