"""
Album Service Events

Membership notifications published by album_service
"""

from .publishers import AlbumEventPublishers
from . import models

__all__ = [
    'AlbumEventPublishers',
    'models'
]
