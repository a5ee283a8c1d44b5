"""Streaming health-assistant chat backed by Gemini."""

import asyncio
import logging
import os
import uuid
from datetime import datetime
from typing import AsyncIterator

from langchain_google_genai import ChatGoogleGenerativeAI

from health_analyzer.models import ChatMessage

logger = logging.getLogger(__name__)

GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1000
MAX_SESSIONS = int(os.environ.get("CHAT_MAX_SESSIONS", "500"))

SYSTEM_PROMPT = """You are a helpful AI health assistant for the AI Health Analyzer app. Provide
informative, supportive responses about health topics while following these guidelines:

1. Always remind users to consult healthcare professionals for medical advice
2. Provide general health information, not specific medical diagnoses
3. Be supportive and understanding about health concerns
4. Respond in the language the user uses (English, Hindi, or Hinglish)
5. Keep responses concise but informative
6. Focus on prevention, lifestyle, and general wellness

Sample responses:
- For "I have headache" -> Suggest rest, hydration, and consulting a doctor if persistent
- For "मुझे बुखार है" -> Recommend rest, fluids, and medical consultation if fever persists
- For "Diabetes symptoms" -> List common symptoms and emphasize professional diagnosis

Remember: You're an assistant, not a replacement for medical professionals.
"""

FALLBACK_REPLY = (
    "I apologize, but I'm having trouble responding right now. "
    "Please try again later or consult a healthcare professional for urgent concerns."
)


def _build_llm():
    return ChatGoogleGenerativeAI(
        model=GEMINI_MODEL,
        google_api_key=os.environ.get("GOOGLE_API_KEY"),
        temperature=TEMPERATURE,
        max_output_tokens=MAX_OUTPUT_TOKENS,
    )


def _chunk_text(chunk) -> str:
    """Text of a streamed message chunk; Gemini may send content as a list of parts."""
    content = getattr(chunk, "content", chunk)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class ChatSession:
    def __init__(self, session_id: str, llm=None):
        self.session_id = session_id
        self.messages: list[ChatMessage] = []
        self.is_streaming = False
        self.current_streaming_message = ""
        self._llm = llm
        self._task: asyncio.Task | None = None

    @property
    def llm(self):
        if self._llm is None:
            self._llm = _build_llm()
        return self._llm

    def add_message(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(
            id=uuid.uuid4().hex,
            role=role,
            content=content,
            timestamp=datetime.now(),
        )
        self.messages.append(message)
        return message

    def clear_messages(self) -> None:
        self.messages = []
        self.current_streaming_message = ""

    def _prompt(self, content: str) -> list[tuple[str, str]]:
        prompt = [("system", SYSTEM_PROMPT)]
        for msg in self.messages:
            prompt.append((msg.role, msg.content))
        prompt.append(("user", content))
        return prompt

    async def stream_reply(self, content: str) -> AsyncIterator[str]:
        """Yield reply fragments as they arrive, then commit the full reply.

        Blank input, or a call while another reply is streaming, yields nothing.
        """
        if not content or not content.strip() or self.is_streaming:
            return

        prompt = self._prompt(content)
        self.add_message("user", content)
        self.is_streaming = True
        self.current_streaming_message = ""
        try:
            async for chunk in self.llm.astream(prompt):
                text = _chunk_text(chunk)
                if not text:
                    continue
                self.current_streaming_message += text
                yield text
            self.add_message("assistant", self.current_streaming_message)
        except Exception:
            logger.exception("Chat stream failed for session %s", self.session_id)
            self.add_message("assistant", FALLBACK_REPLY)
        finally:
            self.is_streaming = False
            self.current_streaming_message = ""

    async def send_message(self, content: str) -> ChatMessage | None:
        before = len(self.messages)
        async for _ in self.stream_reply(content):
            pass
        if len(self.messages) == before:
            return None
        return self.messages[-1]

    def start(self, content: str) -> asyncio.Task | None:
        """Run send_message in the background. Only one reply runs at a time."""
        if self.busy or not content or not content.strip():
            return None
        self._task = asyncio.create_task(self.send_message(content))
        return self._task

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        return True

    @property
    def busy(self) -> bool:
        return self.is_streaming or (self._task is not None and not self._task.done())


_sessions: dict[str, ChatSession] = {}


def _evict_idle_sessions() -> None:
    """Drop the oldest idle sessions until there is room for one more."""
    for session_id, session in list(_sessions.items()):
        if len(_sessions) < MAX_SESSIONS:
            return
        if not session.busy:
            del _sessions[session_id]
            logger.info("Evicted idle chat session %s", session_id)


def get_session(session_id: str, llm=None) -> ChatSession:
    if session_id not in _sessions:
        _evict_idle_sessions()
        _sessions[session_id] = ChatSession(session_id, llm=llm)
    return _sessions[session_id]


def get_history(session_id: str) -> list[ChatMessage]:
    session = _sessions.get(session_id)
    return list(session.messages) if session else []


def clear_session(session_id: str) -> bool:
    if session_id in _sessions:
        _sessions.pop(session_id).cancel()
        return True
    return False
