"""FastAPI service for the AI Health Analyzer."""

import logging
import os
import uuid

from dotenv import load_dotenv

load_dotenv()

from fastapi import Body, Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from health_analyzer.auth import AuthBackendClient, AuthError, AuthSession, LocalStore
from health_analyzer.chat import clear_session, get_history, get_session
from health_analyzer.models import AuthStatus, ChatRequest, LoginRequest, OTPRequest
from health_analyzer.registry import assess, describe, list_domains

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AI Health Analyzer",
    description="Rule-based health risk analyzers with a Gemini-backed health assistant",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

CLIENT_ID_HEADER = "X-Client-Id"
CLIENT_ID_COOKIE = "health_analyzer_client"


def get_auth_backend() -> AuthBackendClient:
    return AuthBackendClient()


def get_local_store() -> LocalStore:
    return LocalStore()


def get_client_id(request: Request, response: Response) -> str:
    """Caller identity for auth state, from the header, then the cookie, else a fresh id."""
    client_id = request.headers.get(CLIENT_ID_HEADER) or request.cookies.get(CLIENT_ID_COOKIE)
    if not client_id:
        client_id = uuid.uuid4().hex
        response.set_cookie(CLIENT_ID_COOKIE, client_id, httponly=True, samesite="lax")
    response.headers[CLIENT_ID_HEADER] = client_id
    return client_id


def get_auth_session(
    client_id: str = Depends(get_client_id),
    backend: AuthBackendClient = Depends(get_auth_backend),
    store: LocalStore = Depends(get_local_store),
) -> AuthSession:
    return AuthSession(backend, store, scope=client_id)


def get_chat_llm():
    """LLM handed to new chat sessions; None builds the default Gemini client."""
    return None


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "health-analyzer"}


@app.get("/analyzers")
def get_analyzers():
    return {"domains": list_domains()}


@app.get("/analyzers/{domain}")
def get_analyzer_detail(domain: str):
    try:
        return describe(domain).model_dump()
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Analyzer {domain} not found")


@app.post("/assess/{domain}")
def run_assessment(domain: str, data: dict | None = Body(default=None)):
    try:
        result = assess(domain, data)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Analyzer {domain} not found")
    logger.info("Assessed %s: %s (score %d)", domain, result.risk_level, result.score)
    return result.model_dump()


@app.post("/auth/otp")
def send_otp(request: OTPRequest, auth: AuthSession = Depends(get_auth_session)):
    try:
        auth.send_otp(request.email)
    except AuthError as e:
        raise HTTPException(status_code=502, detail=f"Failed to send OTP: {e}")
    return {"status": "sent", "email": request.email}


@app.post("/auth/login", response_model=AuthStatus)
def login(request: LoginRequest, auth: AuthSession = Depends(get_auth_session)):
    try:
        user = auth.login(request.email, request.code)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=f"Login failed: {e}")
    return AuthStatus(is_authenticated=True, user=user)


@app.post("/auth/logout", response_model=AuthStatus)
def logout(auth: AuthSession = Depends(get_auth_session)):
    auth.logout()
    return AuthStatus(is_authenticated=False)


@app.get("/auth/status", response_model=AuthStatus)
def auth_status(auth: AuthSession = Depends(get_auth_session)):
    authenticated = auth.check_auth_status()
    return AuthStatus(is_authenticated=authenticated, user=auth.user)


@app.post("/chat")
async def chat(
    request: ChatRequest,
    auth: AuthSession = Depends(get_auth_session),
    llm=Depends(get_chat_llm),
):
    if not auth.check_auth_status():
        raise HTTPException(status_code=401, detail="Sign in to use the health assistant")
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message must not be empty")

    session = get_session(request.session_id, llm=llm)
    if session.busy:
        raise HTTPException(status_code=409, detail=f"Session {request.session_id} is already responding")
    return StreamingResponse(session.stream_reply(request.message), media_type="text/plain")


@app.get("/chat/{session_id}/history")
def chat_history(session_id: str):
    history = get_history(session_id)
    if not history:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"session_id": session_id, "messages": [m.model_dump(mode="json") for m in history]}


@app.delete("/chat/{session_id}")
def delete_chat(session_id: str):
    deleted = clear_session(session_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"status": "deleted", "session_id": session_id}
