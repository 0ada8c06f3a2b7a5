"""Core exceptions with clear error boundaries

This module defines the exceptions used throughout the system. API errors
are raised inside a handshake step and stop at the step boundary, where
core.error.handler turns them into a failure outcome.
"""

from typing import Any, Dict, Optional


class BaseException(Exception):
    """Base exception with error details"""
    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationException(BaseException):
    """Exception raised for configuration-related errors"""
    def __init__(self, message: str, subtype: str = None):
        self.subtype = subtype
        super().__init__(message, {"subtype": subtype})


class APIException(BaseException):
    """Base exception for remote API errors"""
    pass


class TransportError(APIException):
    """Raised when network communication fails"""
    def __init__(self, message: str, url: str = None):
        super().__init__(message, {"url": url})


class HttpStatusError(APIException):
    """Raised when the API answers with a non-2xx status"""
    def __init__(self, message: str, status_code: int, body: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        super().__init__(message, {"status_code": status_code, "response": body})


class DecodeError(APIException):
    """Raised when a response body is not a JSON object"""
    pass


class ServiceError(APIException):
    """Raised when a well-formed response reports an application error"""
    def __init__(self, message: str, status_code: int = None, status_message: str = None):
        self.status_code = status_code
        self.status_message = status_message
        super().__init__(message, {
            "status_code": status_code,
            "status_message": status_message
        })


class MissingFieldError(APIException):
    """Raised when an expected response field is absent"""
    def __init__(self, message: str, field: str):
        self.field = field
        super().__init__(message, {"field": field})


class CancelledError(APIException):
    """Raised when a sequence of calls is cancelled between steps"""
    pass


class HandshakeStateError(BaseException):
    """Raised when a handshake step runs out of order"""
    pass
