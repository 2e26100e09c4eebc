"""Supabase client construction."""

from supabase import Client, create_client

from ..config import get_supabase_anon_key, get_supabase_url
from ..error_handling import ConfigurationError
from ..logging_config import get_logger

logger = get_logger(__name__)


def create_backend_client(url: str | None = None, key: str | None = None) -> Client:
    """
    Create a new Supabase client.

    Args:
        url: Project URL (defaults to SUPABASE_URL)
        key: Anonymous API key (defaults to SUPABASE_ANON_KEY)

    Returns:
        Client: Supabase client

    Raises:
        ConfigurationError: If credentials are missing or rejected by the client
    """
    url = url or get_supabase_url()
    key = key or get_supabase_anon_key()

    try:
        client = create_client(url, key)
    except Exception as e:
        raise ConfigurationError(f"Failed to create Supabase client: {e}", details={"url": url}) from e

    logger.info("backend_client_created", url=url)
    return client


# Global client instance for the export job
_backend_client: Client | None = None


def get_backend_client() -> Client:
    """
    Get the process-wide Supabase client.

    The Streamlit app keeps one client per browser session instead, because
    the client also carries the signed-in user's session.
    """
    global _backend_client

    if _backend_client is None:
        _backend_client = create_backend_client()

    return _backend_client


def reset_backend_client() -> None:
    """Forget the process-wide client."""
    global _backend_client
    _backend_client = None
