"""
Unit tests for authentication handlers.
"""

from datetime import datetime

import pytest

from photoshelf.models.month import Month
from photoshelf.services.auth import UserInfo
from photoshelf.ui.handlers.auth import (
    SUBSCRIBED_KEY,
    handle_login,
    handle_logout,
    restore_session,
    subscribe_to_auth_changes,
)
from photoshelf.ui.state import GalleryViewState


@pytest.fixture
def view_state(tz):
    return GalleryViewState.starting_at(datetime(2025, 3, 10, tzinfo=tz), tz)


@pytest.fixture
def registered(backend):
    backend.auth.add_user("a@example.com", "secret")
    return backend


class TestHandleLogin:
    def test_requires_both_fields(self, view_state, auth_service):
        assert handle_login(view_state, auth_service, "", "secret") == "Email and password are required."
        assert handle_login(view_state, auth_service, "a@example.com", "") == "Email and password are required."
        assert not view_state.is_authenticated

    def test_wrong_password_shows_provider_message(self, view_state, auth_service, registered):
        message = handle_login(view_state, auth_service, "a@example.com", "wrong")

        assert message == "Invalid login credentials"
        assert not view_state.is_authenticated

    def test_success(self, view_state, auth_service, registered):
        view_state.needs_reload = False

        assert handle_login(view_state, auth_service, "a@example.com", "secret") is None
        assert view_state.user.email == "a@example.com"
        assert view_state.needs_reload


class TestHandleLogout:
    def test_signs_out(self, view_state, auth_service, registered):
        handle_login(view_state, auth_service, "a@example.com", "secret")
        view_state.set_available_months([Month(2025, 3)])

        assert handle_logout(view_state, auth_service) is None
        assert not view_state.is_authenticated
        assert view_state.available_months == []

    def test_local_state_cleared_even_when_provider_fails(self, view_state, auth_service, registered):
        handle_login(view_state, auth_service, "a@example.com", "secret")
        registered.auth.fail_sign_out = True

        message = handle_logout(view_state, auth_service)

        assert message is not None
        assert not view_state.is_authenticated


class TestSessionTracking:
    def test_restore_existing_session(self, view_state, auth_service, registered):
        auth_service.sign_in_with_password("a@example.com", "secret")

        assert restore_session(view_state, auth_service)
        assert view_state.user == UserInfo("user-a@example.com", "a@example.com")

    def test_restore_without_session_signs_out(self, view_state, auth_service):
        view_state.sign_in(UserInfo("stale", "old@example.com"))

        assert not restore_session(view_state, auth_service)
        assert view_state.user is None

    def test_subscription_follows_provider_events(self, view_state, auth_service, registered):
        session_state = {}
        subscribe_to_auth_changes(session_state, view_state, auth_service)

        auth_service.sign_in_with_password("a@example.com", "secret")
        assert view_state.user.email == "a@example.com"

        auth_service.sign_out()
        assert view_state.user is None
        assert SUBSCRIBED_KEY in session_state

    def test_subscribes_once_per_session(self, view_state, auth_service, backend):
        session_state = {}

        subscribe_to_auth_changes(session_state, view_state, auth_service)
        subscribe_to_auth_changes(session_state, view_state, auth_service)

        assert len(backend.auth.callbacks) == 1
