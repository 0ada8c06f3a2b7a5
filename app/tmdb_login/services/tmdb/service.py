"""TheMovieDB login service

Entry points used by a front end (a CLI, a web view, a bot handler) to run
the authentication handshake and receive exactly one result.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from tmdb_login.config.constants import STEP_CREDENTIALS
from tmdb_login.core.api.base_client import BaseAPIClient
from tmdb_login.core.error.handler import ErrorHandler

from .auth import AuthenticationSequencer
from .config import TMDBConfig
from .types import (CancellationToken, Credentials, HandshakeFailure,
                    HandshakeResult)

logger = logging.getLogger(__name__)

OnComplete = Callable[[HandshakeResult], None]


class TMDBAuthService:
    """Runs handshakes against one configured API client"""

    def __init__(
        self,
        config: Optional[TMDBConfig] = None,
        client: Optional[BaseAPIClient] = None,
        max_workers: int = 1
    ):
        self.client = client or BaseAPIClient.from_config(config or TMDBConfig.from_env())
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="tmdb-login"
        )

    def login(
        self,
        username: str,
        password: str,
        on_complete: Optional[OnComplete] = None,
        cancellation: Optional[CancellationToken] = None
    ) -> HandshakeResult:
        """Authenticate and report the result to on_complete exactly once"""
        credentials = Credentials(username=username or "", password=password or "")

        if not credentials.is_complete():
            result = HandshakeFailure.from_error(ErrorHandler.handle_input_error(
                STEP_CREDENTIALS, "Username or Password Empty."
            ))
        else:
            sequencer = AuthenticationSequencer(self.client, credentials, cancellation)
            result = sequencer.run()

        logger.info(f"Login finished: {'success' if result.success else result.code}")
        if on_complete is not None:
            on_complete(result)
        return result

    def login_in_background(
        self,
        username: str,
        password: str,
        on_complete: Optional[OnComplete] = None,
        cancellation: Optional[CancellationToken] = None
    ) -> "Future[HandshakeResult]":
        """Run login on a worker thread; on_complete is called on that thread"""
        return self._executor.submit(self.login, username, password, on_complete, cancellation)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting background logins and release the worker threads"""
        self._executor.shutdown(wait=wait)


def get_tmdb_service(config: Optional[TMDBConfig] = None) -> TMDBAuthService:
    """Get a login service configured from the environment unless given a config"""
    return TMDBAuthService(config=config)


def login(
    username: str,
    password: str,
    on_complete: Optional[OnComplete] = None,
    *,
    config: Optional[TMDBConfig] = None,
    client: Optional[BaseAPIClient] = None,
    cancellation: Optional[CancellationToken] = None
) -> HandshakeResult:
    """Run one handshake; on_complete receives the HandshakeResult once"""
    service = TMDBAuthService(config=config, client=client)
    return service.login(username, password, on_complete, cancellation)
