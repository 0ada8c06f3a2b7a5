"""TheMovieDB configuration using environment variables"""
from dataclasses import dataclass

from tmdb_login.config.constants import API_TIMEOUT, DEFAULT_BASE_URL
from tmdb_login.core.error.exceptions import ConfigurationException
from decouple import config


@dataclass
class TMDBConfig:
    """Configuration for TheMovieDB API access"""
    base_url: str
    api_key: str
    timeout: float = API_TIMEOUT

    @classmethod
    def from_env(cls) -> "TMDBConfig":
        """Create configuration from environment variables"""
        api_key = config("TMDB_API_KEY", default="")
        if not api_key:
            raise ConfigurationException(
                "TMDB_API_KEY environment variable is not set",
                "missing"
            )

        base_url = config("TMDB_BASE_URL", default=DEFAULT_BASE_URL)
        if not base_url.startswith(("http://", "https://")):
            raise ConfigurationException(
                f"TMDB_BASE_URL must be an http(s) URL, got {base_url!r}",
                "validation"
            )

        raw_timeout = config("TMDB_TIMEOUT", default=API_TIMEOUT)
        try:
            timeout = float(raw_timeout)
        except (TypeError, ValueError):
            raise ConfigurationException(
                f"TMDB_TIMEOUT must be a number of seconds, got {raw_timeout!r}",
                "validation"
            ) from None
        if not 0 < timeout < float("inf"):
            raise ConfigurationException(
                "TMDB_TIMEOUT must be a positive, finite number of seconds",
                "validation"
            )

        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            timeout=timeout
        )


class TMDBEndpoints:
    """TheMovieDB API endpoint definitions"""

    ENDPOINTS = {
        'authentication': {
            'new_token': {'path': '/authentication/token/new'},
            'validate_with_login': {'path': '/authentication/token/validate_with_login'},
            'new_session': {'path': '/authentication/session/new'},
        },
        'account': {
            'details': {'path': '/account'},
        },
    }

    @classmethod
    def get_path(cls, group: str, action: str) -> str:
        """Get endpoint path"""
        if not group or not action:
            raise ConfigurationException(
                "Group and action are required",
                "validation"
            )

        if group not in cls.ENDPOINTS:
            raise ConfigurationException(
                f"Invalid endpoint group: {group}",
                "validation"
            )
        if action not in cls.ENDPOINTS[group]:
            raise ConfigurationException(
                f"Invalid action '{action}' for group '{group}'",
                "validation"
            )

        return cls.ENDPOINTS[group][action]['path']
