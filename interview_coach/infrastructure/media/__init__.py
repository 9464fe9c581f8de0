"""Media sources: live camera/microphone capture and uploaded video files."""

from .devices import (
    MediaAccessError, MediaTrack, AudioTrack, VideoTrack, MediaStream, DeviceMediaFactory
)
from .acquisition import MediaAcquisition, PlaybackSink, SourceKind

__all__ = [
    "MediaAccessError",
    "MediaTrack",
    "AudioTrack",
    "VideoTrack",
    "MediaStream",
    "DeviceMediaFactory",
    "MediaAcquisition",
    "PlaybackSink",
    "SourceKind",
]
