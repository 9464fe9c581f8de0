"""
Camera, microphone and video-file sources.

Device libraries (OpenCV, PyAudio) are imported lazily so the rest of the
package works on machines without capture hardware.
"""
import logging
import subprocess
import threading
import time
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from ...config import (
    CAMERA_INDEX, SAMPLE_RATE_CAPTURE, SAMPLE_RATE_TARGET, CHANNELS,
    CHUNK_MS, FFMPEG_BINARY
)
from ...utils import import_device_library, with_suppressed_audio_warnings
from ..audio.processing import to_recognition_chunk

logger = logging.getLogger("media_devices")

LIVE = "live"
ENDED = "ended"


class MediaAccessError(RuntimeError):
    """A capture device or media file could not be opened."""


class MediaTrack(ABC):
    """One audio or video track; stopping it releases the underlying resource."""

    kind = ""

    def __init__(self, label: str):
        self.label = label
        self.ready_state = LIVE
        self._lock = threading.Lock()

    @property
    def live(self) -> bool:
        return self.ready_state == LIVE

    def stop(self) -> None:
        """Release the resource. Safe to call more than once."""
        with self._lock:
            if self.ready_state == ENDED:
                return
            self.ready_state = ENDED
            try:
                self._release()
            except Exception as e:
                logger.warning(f"Error releasing {self.kind} track '{self.label}': {e}")
        logger.debug(f"Stopped {self.kind} track '{self.label}'")

    @abstractmethod
    def _release(self) -> None:
        ...


class AudioTrack(MediaTrack):
    kind = "audio"

    @abstractmethod
    def chunks(self) -> Iterator[bytes]:
        """16 kHz mono PCM16 chunks until the track stops or runs out."""


class VideoTrack(MediaTrack):
    kind = "video"

    @abstractmethod
    def read_frame(self):
        """Next frame as a numpy array, or None when no frame is available."""


class MicrophoneTrack(AudioTrack):
    """Microphone capture through PyAudio."""

    def __init__(self,
                 device_index: Optional[int] = None,
                 sample_rate: int = SAMPLE_RATE_CAPTURE,
                 channels: int = CHANNELS,
                 chunk_ms: int = CHUNK_MS):
        super().__init__(label=f"microphone:{device_index if device_index is not None else 'default'}")
        self.sample_rate = sample_rate
        self.channels = channels
        self.frames_per_chunk = int(sample_rate * chunk_ms / 1000)
        self._pa = None
        self._stream = None
        self._open(device_index)

    @with_suppressed_audio_warnings
    def _open(self, device_index: Optional[int]) -> None:
        try:
            pyaudio = import_device_library("pyaudio")
        except ImportError as e:
            raise MediaAccessError(f"Microphone support unavailable: {e}") from e

        self._pa = pyaudio.PyAudio()
        try:
            self._stream = self._pa.open(
                format=pyaudio.paInt16,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                input_device_index=device_index,
                frames_per_buffer=self.frames_per_chunk,
            )
        except (OSError, ValueError) as e:
            self._pa.terminate()
            self._pa = None
            raise MediaAccessError(f"Could not access microphone: {e}") from e
        logger.info(f"Microphone opened at {self.sample_rate} Hz, {self.channels} channel(s)")

    def chunks(self) -> Iterator[bytes]:
        while self.live:
            with self._lock:
                if not self.live:
                    return
                try:
                    raw = self._stream.read(self.frames_per_chunk, exception_on_overflow=False)
                except OSError as e:
                    logger.warning(f"Microphone read failed: {e}")
                    return
            yield to_recognition_chunk(raw, self.channels, self.sample_rate)

    def _release(self) -> None:
        if self._stream is not None:
            self._stream.stop_stream()
            self._stream.close()
            self._stream = None
        if self._pa is not None:
            self._pa.terminate()
            self._pa = None


class CameraTrack(VideoTrack):
    """Webcam capture through OpenCV."""

    def __init__(self, camera_index: int = CAMERA_INDEX):
        super().__init__(label=f"camera:{camera_index}")
        try:
            cv2 = import_device_library("cv2")
        except ImportError as e:
            raise MediaAccessError(f"Camera support unavailable: {e}") from e

        self._capture = cv2.VideoCapture(camera_index)
        if not self._capture.isOpened():
            self._capture.release()
            raise MediaAccessError(f"Could not access camera {camera_index}: device not found or permission denied")
        logger.info(f"Camera {camera_index} opened")

    def read_frame(self):
        if not self.live:
            return None
        with self._lock:
            ok, frame = self._capture.read()
        return frame if ok else None

    def _release(self) -> None:
        self._capture.release()


class VideoFileTrack(VideoTrack):
    """Frames decoded from an uploaded video file."""

    def __init__(self, path: str):
        super().__init__(label=f"file:{path}")
        try:
            cv2 = import_device_library("cv2")
        except ImportError as e:
            raise MediaAccessError(f"Video file support unavailable: {e}") from e

        self._capture = cv2.VideoCapture(path)
        if not self._capture.isOpened():
            self._capture.release()
            raise MediaAccessError(f"Could not open video file {path}")

    def read_frame(self):
        if not self.live:
            return None
        with self._lock:
            ok, frame = self._capture.read()
        return frame if ok else None

    def _release(self) -> None:
        self._capture.release()


class FileAudioTrack(AudioTrack):
    """Audio track of an uploaded video, decoded by ffmpeg and paced in real time."""

    def __init__(self, path: str, chunk_ms: int = CHUNK_MS, realtime: bool = True):
        super().__init__(label=f"file-audio:{path}")
        self.chunk_ms = chunk_ms
        self.realtime = realtime
        self.bytes_per_chunk = int(SAMPLE_RATE_TARGET * chunk_ms / 1000) * 2
        cmd = [
            FFMPEG_BINARY, "-nostdin", "-loglevel", "error",
            "-i", path, "-vn",
            "-f", "s16le", "-ac", "1", "-ar", str(SAMPLE_RATE_TARGET), "-",
        ]
        try:
            self._proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
        except FileNotFoundError as e:
            raise MediaAccessError(f"{FFMPEG_BINARY} is required to read audio from video files") from e

    def chunks(self) -> Iterator[bytes]:
        while self.live:
            data = self._proc.stdout.read(self.bytes_per_chunk)
            if not data:
                # End of file: the track is done playing
                self.stop()
                return
            yield data
            if self.realtime:
                time.sleep(self.chunk_ms / 1000)

    def _release(self) -> None:
        if self._proc.poll() is None:
            self._proc.terminate()
            try:
                self._proc.wait(timeout=2)
            except subprocess.TimeoutExpired:
                self._proc.kill()


class MediaStream:
    """A set of tracks acquired together; the single handle the acquisition layer owns."""

    def __init__(self, tracks: List[MediaTrack], source: str):
        self.tracks = list(tracks)
        self.source = source

    def get_tracks(self) -> List[MediaTrack]:
        return list(self.tracks)

    def get_audio_tracks(self) -> List[AudioTrack]:
        return [t for t in self.tracks if t.kind == "audio"]

    def get_video_tracks(self) -> List[VideoTrack]:
        return [t for t in self.tracks if t.kind == "video"]

    @property
    def active(self) -> bool:
        # A file has finished playing once its audio runs out
        if self.source == "file" and self.get_audio_tracks():
            return any(t.live for t in self.get_audio_tracks())
        return any(t.live for t in self.tracks)

    def stop(self) -> None:
        for track in self.tracks:
            track.stop()


class DeviceMediaFactory:
    """Opens real capture devices and files."""

    def __init__(self, camera_index: int = CAMERA_INDEX, mic_device: Optional[int] = None):
        self.camera_index = camera_index
        self.mic_device = mic_device

    def open_user_media(self, video: bool = True, audio: bool = True) -> MediaStream:
        """
        Open camera and/or microphone. If any device fails, the ones already
        opened are released before the error propagates.
        """
        tracks: List[MediaTrack] = []
        try:
            if video:
                tracks.append(CameraTrack(self.camera_index))
            if audio:
                tracks.append(MicrophoneTrack(self.mic_device))
        except MediaAccessError:
            for track in tracks:
                track.stop()
            raise
        return MediaStream(tracks, source="camera")

    def open_file(self, path: str) -> MediaStream:
        video = VideoFileTrack(path)
        try:
            audio = FileAudioTrack(path)
        except MediaAccessError:
            video.stop()
            raise
        return MediaStream([video, audio], source="file")
