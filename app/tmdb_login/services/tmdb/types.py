"""Handshake data model

Credentials come from user input, SessionState holds what a single
handshake produces, and HandshakeResult is what the caller receives.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from tmdb_login.config.constants import LOGIN_MESSAGES


class HandshakeState(Enum):
    """Sequencer states, strictly forward"""
    IDLE = "idle"
    AWAITING_TOKEN = "awaiting_token"
    AWAITING_VALIDATION = "awaiting_validation"
    AWAITING_SESSION = "awaiting_session"
    AWAITING_USER_ID = "awaiting_user_id"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (HandshakeState.DONE, HandshakeState.FAILED)


@dataclass(frozen=True)
class Credentials:
    """Username and password for a single login attempt"""
    username: str
    password: str

    def is_complete(self) -> bool:
        return bool(self.username) and bool(self.password)

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass
class SessionState:
    """Artifacts owned by one handshake"""
    request_token: Optional[str] = None
    session_id: Optional[str] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class HandshakeSuccess:
    session_id: str
    user_id: int

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class HandshakeFailure:
    """Terminal failure

    Attributes:
        reason: Diagnostic description of what went wrong
        step: Handshake step that failed
        code: Error category (transport, http_status, decode, ...)
        message: Short user-facing message
        details: Error-specific context
    """
    reason: str
    step: str
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return False

    @classmethod
    def from_error(cls, error_response: Dict[str, Any]) -> "HandshakeFailure":
        """Build a failure from an ErrorHandler error response"""
        error = error_response["error"]
        message_key = "cancelled" if error["code"] == "cancelled" else error["step"]
        return cls(
            reason=error["message"],
            step=error["step"],
            code=error["code"],
            message=LOGIN_MESSAGES.get(message_key, "Login Failed."),
            details=error.get("details") or {}
        )


HandshakeResult = Union[HandshakeSuccess, HandshakeFailure]


class CancellationToken:
    """Cooperative cancellation checked between handshake steps"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
