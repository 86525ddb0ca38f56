"""
External integrations for coursequiz.

Modules:
- platform_client: httpx client for the course platform REST API
- session: login session storage and identity provider
"""
from .platform_client import PlatformClient
from .session import PlatformIdentity, SessionData, SessionStore

__all__ = ["PlatformClient", "PlatformIdentity", "SessionData", "SessionStore"]
