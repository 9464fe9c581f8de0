"""
Local profile persistence.

The store is a small JSON key/value file; the profile lives under a single
fixed key. It is read once when the store is opened and written on every save.
"""
import base64
import json
import logging
import mimetypes
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from ...config import PROFILE_STORE_PATH, PROFILE_KEY

logger = logging.getLogger("profile_store")


@dataclass
class UserProfile:
    """The candidate's display name and optional avatar (a data URL)."""
    name: str
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserProfile':
        return cls(name=str(data.get("name", "")), image=data.get("image"))


def image_to_data_url(path: str) -> str:
    """Read an image file and encode it as ``data:<mime>;base64,...``."""
    mime_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    with open(path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class ProfileStore:
    """Reads and writes the single user profile record."""

    def __init__(self, path: str = PROFILE_STORE_PATH, key: str = PROFILE_KEY):
        self.path = path
        self.key = key
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read profile store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed profile store {self.path}")
            return {}
        return data

    def load(self) -> Optional[UserProfile]:
        """The stored profile, or None when nobody has signed in yet."""
        raw = self._data.get(self.key)
        if isinstance(raw, str):
            # Values are stored as JSON strings, like browser local storage
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning(f"Stored '{self.key}' value is not valid JSON")
                return None
        if not isinstance(raw, dict):
            return None
        profile = UserProfile.from_dict(raw)
        return profile if profile.name.strip() else None

    def save(self, name: str, image_path: Optional[str] = None) -> UserProfile:
        """
        Persist a new profile.

        Raises:
            ValueError: if ``name`` is blank.
            OSError: if the avatar image cannot be read.
        """
        if not name or not name.strip():
            raise ValueError("Name is required")

        image = image_to_data_url(image_path) if image_path else None
        profile = UserProfile(name=name.strip(), image=image)
        self._data[self.key] = json.dumps(profile.to_dict())

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)

        logger.info(f"Saved profile for {profile.name}")
        return profile

    def clear(self) -> None:
        """Forget the stored profile."""
        if self._data.pop(self.key, None) is None:
            return
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
