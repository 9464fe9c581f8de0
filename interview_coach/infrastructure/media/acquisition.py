"""
Media acquisition: owns the single active camera/microphone or file source.
"""
import logging
import mimetypes
from enum import Enum
from typing import Iterator, Optional

from ...config import MIC_ENABLED, PLAYBACK_VOLUME, VIDEO_MIME_PREFIX
from ...interview.events import (
    InterviewEventBus, MediaStartedEvent, MediaStoppedEvent, MediaErrorEvent
)
from ...interview.models import UploadedVideo
from .devices import DeviceMediaFactory, MediaAccessError, MediaStream

logger = logging.getLogger("media_acquisition")


class SourceKind(str, Enum):
    NONE = "none"
    CAMERA = "camera"
    FILE = "file"


class PlaybackSink:
    """Where the active stream is rendered; holds the playback volume."""

    def __init__(self, volume: float = PLAYBACK_VOLUME / 100):
        self.stream: Optional[MediaStream] = None
        self.volume = volume

    def attach(self, stream: MediaStream) -> None:
        self.stream = stream

    def detach(self) -> None:
        self.stream = None

    @property
    def is_playing(self) -> bool:
        return self.stream is not None and self.stream.active


class MediaAcquisition:
    """
    Starts, stops and swaps the media source.

    Only one source is active at a time. The camera is released before a new
    one is acquired; an uploaded file is opened first and replaces the
    current source only once it is ready.
    """

    def __init__(self,
                 devices: Optional[DeviceMediaFactory] = None,
                 event_bus: Optional[InterviewEventBus] = None,
                 mic_enabled: bool = MIC_ENABLED,
                 volume: int = PLAYBACK_VOLUME):
        self.devices = devices or DeviceMediaFactory()
        self.event_bus = event_bus
        self.sink = PlaybackSink(volume / 100)
        self.stream: Optional[MediaStream] = None
        self.source = SourceKind.NONE
        self.camera_enabled = False
        self.mic_enabled = mic_enabled
        self.volume = volume
        self.error: Optional[str] = None
        self.uploaded_video: Optional[UploadedVideo] = None

    @property
    def is_playing(self) -> bool:
        return self.sink.is_playing

    @property
    def has_audio(self) -> bool:
        return self.stream is not None and any(t.live for t in self.stream.get_audio_tracks())

    def start_camera(self) -> bool:
        """
        Acquire camera (and microphone, when enabled).

        Returns False and records ``error`` when the device is missing or
        access is denied. No retry is attempted.
        """
        self._release()

        try:
            stream = self.devices.open_user_media(video=True, audio=self.mic_enabled)
        except MediaAccessError as e:
            self.error = str(e)
            self.camera_enabled = False
            logger.error(f"Error accessing camera: {e}")
            if self.event_bus:
                self.event_bus.emit(MediaErrorEvent(self.error))
            return False

        self._take(stream, SourceKind.CAMERA)
        self.camera_enabled = True
        return True

    def upload_file(self, path: str, mime_type: Optional[str] = None) -> bool:
        """
        Switch to a user-supplied video file.

        Non-video files are ignored (returns False, nothing changes).
        """
        mime_type = mime_type or mimetypes.guess_type(path)[0]
        if not mime_type or not mime_type.startswith(VIDEO_MIME_PREFIX):
            logger.debug(f"Ignoring non-video upload {path} ({mime_type})")
            return False

        # Open first so a failed upload leaves the current source running
        try:
            stream = self.devices.open_file(path)
        except MediaAccessError as e:
            self.error = str(e)
            logger.error(f"Error opening uploaded video: {e}")
            if self.event_bus:
                self.event_bus.emit(MediaErrorEvent(self.error))
            return False

        self._release()
        self.camera_enabled = False
        self._take(stream, SourceKind.FILE)
        self.uploaded_video = UploadedVideo(path=path, mime_type=mime_type)
        return True

    def stop(self) -> None:
        """Release all tracks and detach playback. Idempotent."""
        source = self.source
        released = self._release()
        self.camera_enabled = False
        if released:
            logger.info(f"Stopped {source.value} source")
            if self.event_bus:
                self.event_bus.emit(MediaStoppedEvent(source.value))

    def toggle_camera(self) -> bool:
        """Stop the camera when it is on, start it when it is off."""
        if self.camera_enabled:
            self.stop()
            return True
        return self.start_camera()

    def toggle_mic(self) -> bool:
        """
        Flip the microphone setting; a live camera stream is re-acquired so
        the new audio setting takes effect.
        """
        self.mic_enabled = not self.mic_enabled
        logger.info(f"Microphone {'enabled' if self.mic_enabled else 'disabled'}")
        if self.source == SourceKind.CAMERA:
            self.stop()
            self.start_camera()
        return self.mic_enabled

    def set_volume(self, value: int) -> None:
        """Playback volume, 0-100."""
        self.volume = max(0, min(100, int(value)))
        self.sink.volume = self.volume / 100

    def audio_chunks(self) -> Iterator[bytes]:
        """Recognition-ready audio from the active source (empty when there is none)."""
        stream = self.stream
        if stream is None:
            return iter(())
        audio_tracks = stream.get_audio_tracks()
        if not audio_tracks:
            return iter(())
        return audio_tracks[0].chunks()

    def close(self) -> None:
        """Teardown hook; hardware must never outlive the owner."""
        self.stop()

    def __enter__(self) -> 'MediaAcquisition':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _take(self, stream: MediaStream, source: SourceKind) -> None:
        self.stream = stream
        self.sink.attach(stream)
        self.source = source
        self.error = None
        logger.info(f"Started {source.value} source with {len(stream.get_tracks())} track(s)")
        if self.event_bus:
            self.event_bus.emit(MediaStartedEvent(source.value, self.has_audio))

    def _release(self) -> bool:
        if self.stream is None:
            return False
        self.stream.stop()
        self.sink.detach()
        if self.source == SourceKind.FILE:
            self.uploaded_video = None
        self.stream = None
        self.source = SourceKind.NONE
        return True
