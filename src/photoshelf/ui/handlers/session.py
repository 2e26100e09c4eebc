"""Per-session backend services for the Streamlit app."""

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any

from photoshelf.config import get_display_timezone, get_metadata_table, get_storage_bucket
from photoshelf.services.auth import AuthService
from photoshelf.services.backend import create_backend_client
from photoshelf.services.metadata import MetadataService
from photoshelf.services.storage import StorageService

SESSION_KEY = "session_services"


@dataclass
class SessionServices:
    """Services sharing one Supabase client, and with it the signed-in session."""

    auth: AuthService
    storage: StorageService
    metadata: MetadataService
    tz: tzinfo

    @classmethod
    def from_client(cls, client: Any, tz: tzinfo | None = None) -> "SessionServices":
        return cls(
            auth=AuthService(client),
            storage=StorageService(client, get_storage_bucket()),
            metadata=MetadataService(client, get_metadata_table()),
            tz=tz or get_display_timezone(),
        )


def get_session_services(session_state: Any) -> SessionServices:
    """
    Get or create the services of one browser session.

    Each session gets its own client because the client holds the auth
    session of whoever signed in through it.
    """
    if SESSION_KEY not in session_state:
        session_state[SESSION_KEY] = SessionServices.from_client(create_backend_client())
    return session_state[SESSION_KEY]
