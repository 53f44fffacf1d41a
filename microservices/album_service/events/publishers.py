"""
Event Publishers for Album Service

Centralized notification logic for album_service.
Publishes membership events to the injected event bus; publishing failures
are logged and never propagate to the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import ValidationError

from core.events import Event, EventType, ServiceSource
from .models import AlbumEventType, AlbumInviteEventData, AlbumUpdateEventData

logger = logging.getLogger(__name__)

_EVENT_MODELS = {
    AlbumEventType.ALBUM_INVITE: (EventType.ALBUM_INVITE, AlbumInviteEventData),
    AlbumEventType.ALBUM_UPDATE: (EventType.ALBUM_UPDATE, AlbumUpdateEventData),
}


class AlbumEventPublishers:
    """Publishers for album service events"""

    def __init__(self, event_bus):
        """
        Initialize event publishers

        Args:
            event_bus: Event bus instance (publish_event)
        """
        self.event_bus = event_bus

    async def emit(self, kind: str, payload: Dict[str, Any]) -> None:
        """
        Emit a notification of the given kind

        Args:
            kind: Notification kind (album.invite, album.update)
            payload: Event data without timestamp
        """
        if not self.event_bus:
            logger.warning(f"Event bus not available, skipping {kind} event")
            return

        try:
            event_type, data_model = _EVENT_MODELS[AlbumEventType(kind)]
            event_data = data_model(
                **payload,
                timestamp=datetime.now(timezone.utc).isoformat()
            )
        except (KeyError, ValueError, ValidationError) as e:
            logger.error(f"Invalid {kind} event payload {payload}: {e}")
            return

        try:
            event = Event(
                event_type=event_type,
                source=ServiceSource.ALBUM_SERVICE,
                data=event_data.model_dump()
            )
            await self.event_bus.publish_event(event)
            logger.info(f"Published {kind} event for album {event_data.album_id}")

        except Exception as e:
            logger.error(f"Failed to publish {kind} event: {e}")
