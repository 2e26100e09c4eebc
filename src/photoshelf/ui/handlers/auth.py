"""Authentication handlers for photoshelf."""

from typing import Any

import structlog

from photoshelf.error_handling import AuthenticationError
from photoshelf.services.auth import AuthService, UserInfo
from photoshelf.ui.state import GalleryViewState

logger = structlog.get_logger(__name__)

SUBSCRIBED_KEY = "auth_subscription"


def restore_session(view_state: GalleryViewState, auth_service: AuthService) -> bool:
    """
    Pick up an existing session, e.g. after a page reload.

    Returns:
        bool: True if a user is signed in
    """
    try:
        user = auth_service.get_current_user()
    except AuthenticationError as e:
        logger.warning("session_restore_failed", error=str(e))
        user = None

    if user is None:
        if view_state.is_authenticated:
            view_state.sign_out()
        return False

    if view_state.user != user:
        view_state.sign_in(user)
    return True


def subscribe_to_auth_changes(session_state: Any, view_state: GalleryViewState, auth_service: AuthService) -> None:
    """Keep the view state in step with provider session changes. Subscribes once per session."""
    if session_state.get(SUBSCRIBED_KEY):
        return

    def on_change(event: Any, session: Any) -> None:
        user = getattr(session, "user", None) if session is not None else None
        logger.info("auth_state_changed", auth_event=str(event), signed_in=user is not None)
        if user is not None:
            view_state.sign_in(UserInfo.from_user(user))
        else:
            view_state.sign_out()

    session_state[SUBSCRIBED_KEY] = auth_service.on_auth_state_change(on_change)


def handle_login(view_state: GalleryViewState, auth_service: AuthService, email: str, password: str) -> str | None:
    """
    Sign in from the login form.

    Returns:
        str | None: Error message for the form, or None on success
    """
    if not email or not password:
        return "Email and password are required."

    try:
        user = auth_service.sign_in_with_password(email, password)
    except AuthenticationError as e:
        return e.user_message

    view_state.sign_in(user)
    return None


def handle_logout(view_state: GalleryViewState, auth_service: AuthService) -> str | None:
    """
    Sign out.

    Returns:
        str | None: Error message, or None on success
    """
    try:
        auth_service.sign_out()
    except AuthenticationError as e:
        return e.user_message
    finally:
        view_state.sign_out()

    return None
