"""Authentication service for photoshelf."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..error_handling import AuthenticationError
from ..logging_config import get_logger, log_security_event, log_user_action

logger = get_logger(__name__)


@dataclass
class UserInfo:
    """Represents the signed-in Supabase user."""

    user_id: str
    email: str | None = None

    @classmethod
    def from_user(cls, user: Any) -> "UserInfo":
        return cls(user_id=str(user.id), email=getattr(user, "email", None))


class AuthService:
    """Service wrapping Supabase Auth password sign-in."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def get_session(self) -> Any | None:
        """
        Current session, or None when signed out.

        Raises:
            AuthenticationError: If the session lookup fails
        """
        try:
            return self.client.auth.get_session()
        except Exception as e:
            raise AuthenticationError(f"Session lookup failed: {e}", original_exception=e) from e

    def get_current_user(self) -> UserInfo | None:
        """User of the current session, or None when signed out."""
        session = self.get_session()
        if session is None or getattr(session, "user", None) is None:
            return None
        return UserInfo.from_user(session.user)

    def sign_in_with_password(self, email: str, password: str) -> UserInfo:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: If the provider rejects the credentials. The
                provider's message is kept as the user message so it can be
                shown under the login form.
        """
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            log_security_event("sign_in_failed", email=email)
            raise AuthenticationError(
                f"Sign-in failed for {email}: {e}",
                user_message=str(e) or None,
                details={"email": email},
                original_exception=e,
            ) from e

        if response is None or getattr(response, "user", None) is None:
            raise AuthenticationError(f"Sign-in returned no user for {email}", details={"email": email})

        user_info = UserInfo.from_user(response.user)
        log_user_action(user_info.user_id, "sign_in", email=email)
        return user_info

    def sign_out(self) -> None:
        """
        Sign out the current session.

        Raises:
            AuthenticationError: If sign-out fails
        """
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise AuthenticationError(f"Sign-out failed: {e}", original_exception=e) from e

        logger.info("signed_out")

    def on_auth_state_change(self, callback: Callable[[str, Any], None]) -> Any:
        """
        Register a callback receiving ``(event, session)`` on every session change.

        Returns:
            The provider's subscription handle
        """
        return self.client.auth.on_auth_state_change(callback)
