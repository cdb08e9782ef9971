"""
Headless client for the marketplace API.

Views are built from these pieces: a SessionStore that owns the credential,
an ApiClient whose BearerAuth reads it per request, the flows (auth,
submission, review, catalog, organizer) and the Router that gates pages by
role.
"""

from marketplace.client.config import get_client_settings
from marketplace.client.session import Session, SessionStore, SessionUser
from marketplace.client.storage import FileStorage, MemoryStorage
from marketplace.client.transport import ApiClient


def create_session_store() -> SessionStore:
    """Durable tier on disk, session tier in memory; hydrated from disk."""
    settings = get_client_settings()
    store = SessionStore(durable=FileStorage(settings.SESSION_FILE), ephemeral=MemoryStorage())
    store.hydrate()
    return store


__all__ = [
    "ApiClient",
    "FileStorage",
    "MemoryStorage",
    "Session",
    "SessionStore",
    "SessionUser",
    "create_session_store",
]
