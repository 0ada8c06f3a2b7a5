"""TheMovieDB constants

Parameter and response keys used by the authentication endpoints, plus the
user-facing messages shown when a login attempt fails.
"""
from typing import Dict

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"
API_TIMEOUT = 30  # seconds


class TMDBParameterKeys:
    API_KEY = "api_key"
    REQUEST_TOKEN = "request_token"
    SESSION_ID = "session_id"
    USERNAME = "username"
    PASSWORD = "password"


class TMDBResponseKeys:
    STATUS_CODE = "status_code"
    STATUS_MESSAGE = "status_message"
    SUCCESS = "success"
    REQUEST_TOKEN = "request_token"
    SESSION_ID = "session_id"
    USER_ID = "id"


# Query parameters never written to logs
SENSITIVE_PARAMETERS = (
    TMDBParameterKeys.API_KEY,
    TMDBParameterKeys.REQUEST_TOKEN,
    TMDBParameterKeys.SESSION_ID,
    TMDBParameterKeys.PASSWORD,
)

# Handshake step names
STEP_CREDENTIALS = "credentials"
STEP_REQUEST_TOKEN = "request_token"
STEP_VALIDATE_LOGIN = "validate_login"
STEP_CREATE_SESSION = "create_session"
STEP_USER_ID = "user_id"

LOGIN_MESSAGES: Dict[str, str] = {
    STEP_CREDENTIALS: "Username or Password Empty.",
    STEP_REQUEST_TOKEN: "Login Failed (Request Token).",
    STEP_VALIDATE_LOGIN: "Login Failed (Invalid Credentials).",
    STEP_CREATE_SESSION: "Login Failed (Session ID).",
    STEP_USER_ID: "Login Failed (User ID).",
    "cancelled": "Login Cancelled.",
}

__all__ = [
    'DEFAULT_BASE_URL',
    'API_TIMEOUT',
    'TMDBParameterKeys',
    'TMDBResponseKeys',
    'SENSITIVE_PARAMETERS',
    'STEP_CREDENTIALS',
    'STEP_REQUEST_TOKEN',
    'STEP_VALIDATE_LOGIN',
    'STEP_CREATE_SESSION',
    'STEP_USER_ID',
    'LOGIN_MESSAGES',
]
