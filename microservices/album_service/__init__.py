"""
Album Service

Album membership management microservice for the shared-photo system.
Handles asset membership, collaborator sharing through the external
sharing authority, and membership notifications.

Port: 8219
"""

__version__ = "1.0.0"
__service_name__ = "album_service"
__service_port__ = 8219
