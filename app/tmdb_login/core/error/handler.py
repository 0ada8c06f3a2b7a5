"""Centralized error handling for API call sequences

Every exception raised inside a step stops at the step boundary and is
converted here into a standardized error structure. Nothing is retried and
nothing propagates to the caller.

Error codes:
- transport: network/connectivity failures
- http_status: non-2xx responses
- decode: malformed JSON bodies
- service: well-formed responses reporting an application error
- missing_field: expected response field absent
- cancelled: cancellation requested between steps
- unexpected: anything else
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from .exceptions import (APIException, CancelledError, DecodeError,
                         HttpStatusError, MissingFieldError, ServiceError,
                         TransportError)

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Central error handling with clear boundaries"""

    ERROR_CODES = (
        (TransportError, "transport"),
        (HttpStatusError, "http_status"),
        (DecodeError, "decode"),
        (ServiceError, "service"),
        (MissingFieldError, "missing_field"),
        (CancelledError, "cancelled"),
    )

    @classmethod
    def error_code(cls, error: Exception) -> str:
        """Map an exception to its error code"""
        for error_type, code in cls.ERROR_CODES:
            if isinstance(error, error_type):
                return code
        return "unexpected"

    @classmethod
    def _create_error_response(
        cls,
        code: str,
        step: str,
        message: str,
        details: Dict,
        context: Optional[Dict] = None
    ) -> Dict:
        """Create standardized error response with context

        Args:
            code: Error code
            step: Step that failed
            message: Diagnostic message
            details: Error details
            context: Optional execution context

        Returns:
            Dict with standardized error structure
        """
        error = {
            "code": code,
            "step": step,
            "message": message,
            "details": details,
            "context": context or {},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        # Log error with context
        logger.error(
            f"Error handled: {code} at {step}: {message}",
            extra={"error": error}
        )

        return {"error": error}

    @classmethod
    def handle_step_error(cls, step: str, error: Exception) -> Dict:
        """Handle an exception raised by one step of a call sequence

        Args:
            step: Step that raised
            error: The exception

        Returns:
            Dict with standardized error structure
        """
        code = cls.error_code(error)

        if isinstance(error, APIException):
            message = error.message
            details = dict(error.details)
        else:
            # Unknown failures keep their traceback in the log
            logger.exception(f"Unexpected error during {step}")
            message = f"Unexpected error: {error}"
            details = {
                "error_type": error.__class__.__name__,
                "error_message": str(error)
            }

        return cls._create_error_response(
            code=code,
            step=step,
            message=message,
            details=details,
            context={"exception": repr(error)}
        )

    @classmethod
    def handle_input_error(cls, step: str, message: str) -> Dict:
        """Handle input rejected before any request is issued"""
        return cls._create_error_response(
            code="invalid_input",
            step=step,
            message=message,
            details={}
        )
