"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (event bus, HTTP).
"""

from .nats_mock import MockEventBus
from .http_mock import MockHttpClient, MockHttpResponse

# Service-specific mocks should be in tests/component/{golden,tdd}/{service}/mocks.py

__all__ = [
    'MockEventBus',
    'MockHttpClient',
    'MockHttpResponse',
]
