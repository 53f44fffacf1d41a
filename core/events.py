"""
Event Envelope for Event-Driven Notifications

The album service publishes events through an injected event bus
(anything with an async publish_event(event) method). The transport
behind the bus is owned by the host environment.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class EventType(Enum):
    """Event types published by the album service"""

    ALBUM_INVITE = "album.invite"
    ALBUM_UPDATE = "album.update"


class ServiceSource(Enum):
    """Service sources"""

    ALBUM_SERVICE = "album_service"


class Event:
    """Event model"""

    def __init__(
        self,
        event_type: EventType,
        source: ServiceSource,
        data: Dict[str, Any],
        subject: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = str(uuid.uuid4())
        self.type = event_type.value
        self.source = source.value
        self.data = data
        self.subject = subject or self.type
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.metadata = metadata or {}
        self.version = "1.0.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "source": self.source,
            "subject": self.subject,
            "timestamp": self.timestamp,
            "data": self.data,
            "metadata": self.metadata,
            "version": self.version,
        }


__all__ = ["Event", "EventType", "ServiceSource"]
