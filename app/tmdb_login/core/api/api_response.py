"""API response decoding

Response bodies arrive as raw bytes and are decoded into a mapping in one
pass. A body is either decoded completely or rejected with DecodeError.
"""

import json
import logging
from typing import Any, Dict

from tmdb_login.core.error.exceptions import DecodeError

logger = logging.getLogger(__name__)


def decode_response(body: bytes) -> Dict[str, Any]:
    """Decode a JSON object response body

    Args:
        body: Raw response bytes

    Returns:
        Dict[str, Any]: The decoded top-level object

    Raises:
        DecodeError: Body is empty, not JSON, or not a JSON object
    """
    if not body:
        raise DecodeError("Response did not include any data")

    try:
        data = json.loads(body)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(
            f"Could not parse the data as JSON: {body[:200]!r}",
            {"error": str(e)}
        )

    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(data).__name__}",
            {"response": data}
        )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Decoded response keys: {sorted(data)}")
    return data


def service_status(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pull the service-reported status_code/status_message, if any"""
    return {
        "status_code": data.get("status_code"),
        "status_message": data.get("status_message"),
    }
