"""Tests for the OTP session cache and its JSON store."""

from unittest import mock

import pytest
import requests

from health_analyzer.auth import (
    SESSION_MARKER_KEY,
    STORE_KEY,
    AuthBackendClient,
    AuthError,
    AuthSession,
    LocalStore,
    user_from_payload,
)

CODE = "123456"


class TestLocalStore:
    def test_missing_file_reads_empty(self, tmp_path):
        assert LocalStore(tmp_path / "nope.json").get("anything") is None

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        assert LocalStore(path).get("anything", "default") == "default"

    def test_set_get_remove(self, store):
        store.set("key", {"a": 1})
        assert store.get("key") == {"a": 1}
        store.remove("key")
        assert store.get("key") is None


class TestLogin:
    def test_success_persists_user_and_marker(self, auth_session, store):
        user = auth_session.login("asha@example.com", CODE)
        assert user.uid == "u-1"
        assert user.project_id == "proj-1"
        assert user.last_login_time == 1700000500
        assert auth_session.is_authenticated
        assert auth_session.is_loading is False
        assert store.get(SESSION_MARKER_KEY) == "sid-1"
        assert store.get(STORE_KEY)["is_authenticated"] is True

    def test_failure_leaves_state_untouched(self, auth_session, store):
        with pytest.raises(AuthError):
            auth_session.login("asha@example.com", "000000")
        assert auth_session.user is None
        assert not auth_session.is_authenticated
        assert auth_session.is_loading is False
        assert store.get(SESSION_MARKER_KEY) is None

    def test_session_rehydrates_from_store(self, backend, store):
        AuthSession(backend, store).login("asha@example.com", CODE)
        restored = AuthSession(backend, store)
        assert restored.is_authenticated
        assert restored.user.email == "asha@example.com"

    def test_null_profile_rejected(self, make_backend, store):
        session = AuthSession(make_backend(null_user=True), store)
        with pytest.raises(AuthError):
            session.login("asha@example.com", CODE)
        assert session.user is None
        assert not session.is_authenticated
        assert session.sid is None


class TestSendOtp:
    def test_delegates_to_backend(self, auth_session, backend):
        auth_session.send_otp("asha@example.com")
        assert backend.sent == ["asha@example.com"]
        assert auth_session.is_loading is False

    def test_failure_reraised(self, make_backend, store):
        session = AuthSession(make_backend(fail_send=True), store)
        with pytest.raises(AuthError):
            session.send_otp("asha@example.com")
        assert session.is_loading is False


class TestLogout:
    def test_clears_local_state(self, auth_session, backend, store):
        auth_session.login("asha@example.com", CODE)
        auth_session.logout()
        assert backend.logged_out == ["sid-1"]
        assert auth_session.user is None
        assert not auth_session.is_authenticated
        assert store.get(SESSION_MARKER_KEY) is None

    def test_clears_even_when_backend_fails(self, make_backend, store):
        session = AuthSession(make_backend(fail_logout=True), store)
        session.login("asha@example.com", CODE)
        session.logout()
        assert session.user is None
        assert not session.is_authenticated
        assert store.get(SESSION_MARKER_KEY) is None


class TestCheckAuthStatus:
    def test_authenticated_with_marker_and_user(self, auth_session):
        auth_session.login("asha@example.com", CODE)
        assert auth_session.check_auth_status() is True

    def test_missing_marker_clears_user(self, auth_session, store):
        auth_session.login("asha@example.com", CODE)
        store.remove(SESSION_MARKER_KEY)
        assert auth_session.check_auth_status() is False
        assert auth_session.user is None

    def test_marker_without_user(self, auth_session, store):
        store.set(SESSION_MARKER_KEY, "stale")
        assert auth_session.check_auth_status() is False


class TestScopedSessions:
    def test_scopes_share_a_store_without_leaking(self, backend, store):
        AuthSession(backend, store, scope="client-a").login("asha@example.com", CODE)
        other = AuthSession(backend, store, scope="client-b")
        assert other.check_auth_status() is False
        assert other.user is None
        assert AuthSession(backend, store, scope="client-a").check_auth_status() is True

    def test_logout_only_clears_own_scope(self, backend, store):
        first = AuthSession(backend, store, scope="client-a")
        second = AuthSession(backend, store, scope="client-b")
        first.login("asha@example.com", CODE)
        second.login("ravi@example.com", CODE)
        first.logout()
        assert AuthSession(backend, store, scope="client-b").check_auth_status() is True
        assert AuthSession(backend, store, scope="client-a").check_auth_status() is False

    def test_status_check_does_not_write_for_anonymous_clients(self, backend, store):
        AuthSession(backend, store, scope="visitor").check_auth_status()
        assert store.get("visitor:auth-storage") is None


class TestBackendClient:
    def test_transport_error_becomes_auth_error(self):
        client = AuthBackendClient("http://auth.local", timeout=1)
        with mock.patch("health_analyzer.auth.requests.post", side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(AuthError):
                client.send_otp("asha@example.com")

    def test_http_error_becomes_auth_error(self):
        response = mock.Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("401")
        client = AuthBackendClient("http://auth.local", timeout=1)
        with mock.patch("health_analyzer.auth.requests.post", return_value=response):
            with pytest.raises(AuthError):
                client.verify_otp("asha@example.com", CODE)

    def test_verify_returns_user_and_sid(self):
        response = mock.Mock()
        response.content = b"{}"
        response.json.return_value = {"user": {"uid": "u-1", "email": "a@b.c"}, "sid": "sid-9"}
        client = AuthBackendClient("http://auth.local/", timeout=1)
        with mock.patch("health_analyzer.auth.requests.post", return_value=response) as post:
            data = client.verify_otp("a@b.c", CODE)
        assert data["sid"] == "sid-9"
        assert post.call_args.args[0] == "http://auth.local/api/v1/auth/verify-otp"

    def test_null_user_in_reply_becomes_auth_error(self):
        response = mock.Mock()
        response.content = b"{}"
        response.json.return_value = {"user": None, "sid": "sid-9"}
        client = AuthBackendClient("http://auth.local", timeout=1)
        with mock.patch("health_analyzer.auth.requests.post", return_value=response):
            with pytest.raises(AuthError):
                client.verify_otp("a@b.c", CODE)


class TestUserFromPayload:
    def test_camel_case_keys_mapped(self):
        user = user_from_payload({"uid": "1", "email": "a@b.c", "createdTime": 5, "extra": "ignored"})
        assert user.created_time == 5
        assert user.name == ""

    def test_non_object_rejected(self):
        with pytest.raises(TypeError):
            user_from_payload(None)
