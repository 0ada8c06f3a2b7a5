import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import requests
from tmdb_login.config.constants import (API_TIMEOUT, SENSITIVE_PARAMETERS,
                                         TMDBParameterKeys)
from tmdb_login.core.error.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass
class ApiResult:
    """Raw outcome of a single request"""
    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299


def mask_url(url: str) -> str:
    """Hide sensitive query parameter values before logging a URL"""
    base, sep, query = url.partition("?")
    if not sep:
        return url
    masked = []
    for pair in query.split("&"):
        key, eq, _ = pair.partition("=")
        masked.append(f"{key}=***" if eq and key in SENSITIVE_PARAMETERS else pair)
    return f"{base}?{'&'.join(masked)}"


class BaseAPIClient:
    """Base class for API client operations"""

    def __init__(self, base_url: str, api_key: str, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout or API_TIMEOUT
        logger.info(f"Base URL: {self.base_url}")

    @classmethod
    def from_config(cls, config: Any) -> "BaseAPIClient":
        """Create a client from any config exposing base_url, api_key and timeout"""
        return cls(config.base_url, config.api_key, config.timeout)

    def build_url(self, path: str, params: Mapping[str, Any]) -> str:
        """Build a full URL with URL-encoded query parameters

        The API key is always included.
        """
        query = {TMDBParameterKeys.API_KEY: self.api_key}
        query.update(params)
        return f"{self.base_url}/{path.lstrip('/')}?{urlencode(query)}"

    def send(self, method: str, url: str) -> ApiResult:
        """Issue one request and return its raw result

        Raises:
            TransportError: the request never produced a response
        """
        logger.info(f"Sending API request: {method} {mask_url(url)}")

        try:
            response = requests.request(method, url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Connection error: {e.__class__.__name__}")
            # The query carries credentials and tokens; only the path is kept
            raise TransportError(
                f"There was an error with the request: {e.__class__.__name__}",
                url=url.partition("?")[0]
            ) from e

        body = response.content or b""
        logger.info(f"API Response Status Code: {response.status_code}")
        logger.debug(f"API Response Content Length: {len(body)}")

        return ApiResult(status_code=response.status_code, body=body)

    def get(self, path: str, params: Mapping[str, Any]) -> ApiResult:
        """GET an endpoint path with the given query parameters"""
        return self.send("GET", self.build_url(path, params))
