"""
Local data persistence.
"""

from .profile_store import ProfileStore, UserProfile, image_to_data_url

__all__ = [
    'ProfileStore',
    'UserProfile',
    'image_to_data_url'
]
