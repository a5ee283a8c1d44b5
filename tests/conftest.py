"""Shared fixtures: fake LLM, fake OTP backend and an API client wired to both."""

import asyncio
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from health_analyzer import chat
from health_analyzer.auth import AuthError, AuthSession, LocalStore
from health_analyzer.main import app, get_auth_backend, get_chat_llm, get_local_store

VALID_CODE = "123456"


class FakeLLM:
    def __init__(self, chunks=("Hello", "", " there"), error: Exception | None = None, hang: bool = False):
        self.chunks = chunks
        self.error = error
        self.hang = hang
        self.prompts = []

    async def astream(self, prompt):
        self.prompts.append(prompt)
        for text in self.chunks:
            yield SimpleNamespace(content=text)
        if self.hang:
            await asyncio.sleep(60)
        if self.error:
            raise self.error


class FakeBackend:
    def __init__(self, fail_logout: bool = False, fail_send: bool = False, null_user: bool = False):
        self.fail_logout = fail_logout
        self.fail_send = fail_send
        self.null_user = null_user
        self.sent = []
        self.logged_out = []

    def send_otp(self, email):
        if self.fail_send:
            raise AuthError("backend unavailable")
        self.sent.append(email)

    def verify_otp(self, email, code):
        if code != VALID_CODE:
            raise AuthError("invalid code")
        if self.null_user:
            return {"user": None, "sid": "sid-1"}
        return {
            "user": {
                "uid": "u-1",
                "name": "Asha",
                "email": email,
                "projectId": "proj-1",
                "createdTime": 1700000000,
                "lastLoginTime": 1700000500,
            },
            "sid": "sid-1",
        }

    def logout(self, sid):
        if self.fail_logout:
            raise AuthError("network down")
        self.logged_out.append(sid)


@pytest.fixture(autouse=True)
def clear_chat_sessions():
    chat._sessions.clear()
    yield
    chat._sessions.clear()


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "local_store.json")


@pytest.fixture
def make_backend():
    return FakeBackend


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def auth_session(backend, store):
    return AuthSession(backend, store)


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(backend, store, fake_llm):
    app.dependency_overrides[get_auth_backend] = lambda: backend
    app.dependency_overrides[get_local_store] = lambda: store
    app.dependency_overrides[get_chat_llm] = lambda: fake_llm
    yield TestClient(app)
    app.dependency_overrides.clear()
